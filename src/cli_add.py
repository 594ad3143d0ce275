"""Add: install the newest cached tarball of a package into this project."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from common.logging_utils import log_failure
from config import PacklinkConfig
from constants import Constants
from errors import PacklinkError, UsageError
from manifest import declares_dependency, read_manifest, remove_dependency
from package_manager import install_locator
from store import naming
from store.cache_store import CacheStore
from versioning.models import ResolvedArtifact
from versioning.resolver import Resolver
from watch.observer import DirectoryWatcher

logger = logging.getLogger(__name__)

_LOCATOR_SCHEME = "file:"


@dataclass
class AddResult:
    """Outcome of a successful add."""

    package_name: str
    version_text: str
    timestamp: int
    filename: str
    locator: str
    updated: bool


def make_locator(artifact_path: str, cwd: str, home: Optional[str] = None,
                 platform: Optional[str] = None) -> str:
    """Build the ``file:`` locator handed to the installer.

    On Windows the path is relative to the consumer directory. Elsewhere it is
    home-relative (``file:~/...``) when the artifact lives under the home
    directory, and absolute otherwise.
    """
    platform = platform or sys.platform
    artifact_path = os.path.abspath(artifact_path)
    if platform == "win32":
        try:
            return _LOCATOR_SCHEME + os.path.relpath(artifact_path, cwd)
        except ValueError:
            # Different drive; no relative form exists.
            return _LOCATOR_SCHEME + artifact_path

    home = os.path.abspath(home or os.path.expanduser("~"))
    if os.path.commonpath([home, artifact_path]) == home and artifact_path != home:
        rel = os.path.relpath(artifact_path, home).replace(os.sep, "/")
        return f"{_LOCATOR_SCHEME}~/{rel}"
    return _LOCATOR_SCHEME + artifact_path


def resolve_locator(locator: str, cwd: str, home: Optional[str] = None) -> str:
    """Map a locator from make_locator() back to an absolute path."""
    path = locator[len(_LOCATOR_SCHEME):] if locator.startswith(_LOCATOR_SCHEME) else locator
    if path == "~" or path.startswith("~/"):
        home = os.path.abspath(home or os.path.expanduser("~"))
        return os.path.normpath(os.path.join(home, path[2:]))
    return os.path.normpath(os.path.join(cwd, path))


def _install(config: PacklinkConfig, cwd: str, latest: ResolvedArtifact) -> AddResult:
    locator = make_locator(latest.path, cwd)
    if resolve_locator(locator, cwd) != os.path.normpath(latest.path):
        locator = _LOCATOR_SCHEME + latest.path

    # Fails early with ManifestError when there is no consumer manifest.
    read_manifest(cwd)
    updated = declares_dependency(cwd, latest.package_name)
    if updated:
        remove_dependency(cwd, latest.package_name)

    install_locator(config.installer_command, locator, cwd)

    logger.info(
        "%s %s@%s (published %s) as %s.",
        "Updated" if updated else "Added",
        latest.package_name,
        latest.version_text,
        latest.timestamp,
        locator,
    )
    return AddResult(
        package_name=latest.package_name,
        version_text=latest.version_text,
        timestamp=latest.timestamp,
        filename=latest.filename,
        locator=locator,
        updated=updated,
    )


def add(config: PacklinkConfig, cwd: str, package_name: Optional[str],
        resolver: Optional[Resolver] = None) -> AddResult:
    """Resolve the newest cached tarball and install it in ``cwd``.

    Raises:
        UsageError: If no package name was given.
        NotFound: If nothing usable is cached for the package.
        ManifestError: If the consumer package.json cannot be read or written.
        InstallError: If the installer fails.
    """
    if not package_name:
        raise UsageError(f"Usage: {Constants.PROG} add <package-name>")
    resolver = resolver or Resolver(CacheStore(config.cache_dir))
    latest = resolver.resolve_latest(package_name)
    return _install(config, cwd, latest)


def run_add(config: PacklinkConfig, cwd: str, package_name: Optional[str],
            watch: bool = False) -> AddResult:
    """Add once, then optionally re-add whenever a newer tarball lands."""
    store = CacheStore(config.cache_dir)
    resolver = Resolver(store)
    result = add(config, cwd, package_name, resolver)
    if not watch:
        return result

    sanitized = naming.sanitize(package_name)
    last_filename = [result.filename]

    def _readd() -> None:
        try:
            latest = resolver.resolve_latest(package_name)
            if latest.filename == last_filename[0]:
                logger.debug("%s is already current (%s)", package_name, latest.filename)
                return
            last_filename[0] = _install(config, cwd, latest).filename
        except PacklinkError as e:
            log_failure(logger, e)

    DirectoryWatcher(
        store.root,
        _readd,
        predicate=lambda name: naming.matches(name, sanitized),
        quiet_period=config.quiet_period,
        recursive=False,
    ).run_forever()
    return result
