"""Artifact naming scheme for the cache directory.

A stored artifact is named ``<sanitized>-<version>-<timestampMillis>.tgz``.
The package name is known up front, so decoding strips that prefix first and
then splits the remainder on its rightmost hyphen; this keeps hyphens inside
the name or the prerelease part from being mistaken for the separator.
"""

from typing import Optional

from constants import Constants
from versioning.models import DecodedArtifact

SUFFIX = Constants.ARTIFACT_SUFFIX


def sanitize(raw_name: str) -> str:
    """Map a package name to a filename-safe identifier.

    "@scope/pkg" becomes "scope-pkg"; unscoped names pass through unchanged.
    """
    if raw_name.startswith("@"):
        return raw_name[1:].replace("/", "-")
    return raw_name


def artifact_prefix(sanitized_name: str) -> str:
    return f"{sanitized_name}-"


def built_filename(sanitized_name: str, version_text: str) -> str:
    """Name the builder gives a fresh tarball before it is stamped."""
    return f"{sanitized_name}-{version_text}{SUFFIX}"


def encode(sanitized_name: str, version_text: str, timestamp: int) -> str:
    """Build the stored filename for an artifact."""
    return f"{sanitized_name}-{version_text}-{int(timestamp)}{SUFFIX}"


def matches(filename: str, sanitized_name: str) -> bool:
    """True if ``filename`` has this package's prefix and the tarball suffix."""
    return filename.startswith(artifact_prefix(sanitized_name)) and filename.endswith(SUFFIX)


def decode(filename: str, sanitized_name: str) -> Optional[DecodedArtifact]:
    """Recover (version text, timestamp) from a stored filename.

    Returns:
        DecodedArtifact, or None when the name does not follow the scheme.
    """
    if not matches(filename, sanitized_name):
        return None
    inner = filename[len(artifact_prefix(sanitized_name)):-len(SUFFIX)]
    version_text, sep, stamp = inner.rpartition("-")
    if not sep or not version_text or not (stamp.isascii() and stamp.isdigit()):
        return None
    return DecodedArtifact(version_text=version_text, timestamp=int(stamp))
