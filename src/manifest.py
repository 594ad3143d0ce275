"""Read and update package.json manifests."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Tuple

from constants import Constants
from errors import ManifestError

logger = logging.getLogger(__name__)


def manifest_path(directory: str) -> str:
    return os.path.join(directory, Constants.PACKAGE_JSON_FILE)


def read_manifest(directory: str) -> Dict[str, Any]:
    """Load the package.json found in ``directory``.

    Raises:
        ManifestError: If the file is missing, unreadable or not a JSON object.
    """
    path = manifest_path(directory)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as e:
        raise ManifestError(f"Error reading {path}: file not found") from e
    except (OSError, ValueError) as e:
        raise ManifestError(f"Error reading {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"Error reading {path}: expected a JSON object")
    return data


def producer_identity(directory: str) -> Tuple[str, str]:
    """Return the (name, version) a producer manifest declares.

    Raises:
        ManifestError: If either field is missing or not a non-empty string.
    """
    data = read_manifest(directory)
    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not name or not isinstance(version, str) or not version:
        raise ManifestError(f"{Constants.PACKAGE_JSON_FILE} must have both a 'name' and a 'version'")
    return name, version


def declares_dependency(directory: str, package_name: str) -> bool:
    deps = read_manifest(directory).get("dependencies") or {}
    return isinstance(deps, dict) and package_name in deps


def remove_dependency(directory: str, package_name: str) -> bool:
    """Drop ``package_name`` from the consumer's dependencies.

    The file is rewritten with two-space indentation only when the entry
    existed.

    Returns:
        True if an entry was removed.
    """
    data = read_manifest(directory)
    deps = data.get("dependencies")
    if not isinstance(deps, dict) or package_name not in deps:
        return False
    del deps[package_name]

    path = manifest_path(directory)
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
            fh.write("\n")
    except OSError as e:
        raise ManifestError(f"Error writing {path}: {e}") from e
    logger.debug("Removed stale dependency %s from %s", package_name, path)
    return True
