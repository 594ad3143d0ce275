"""Error taxonomy for packlink.

Core components raise these; only the CLI entry point turns them into a
diagnostic line and a process exit status.
"""

from __future__ import annotations

from typing import Optional

from constants import ExitCodes


class PacklinkError(Exception):
    """Base class for every fatal packlink condition."""

    exit_code: int = ExitCodes.FAILURE.value


class ManifestError(PacklinkError):
    """Producer or consumer manifest is unreadable, unparsable or incomplete."""


class CollaboratorError(PacklinkError):
    """An external package manager command exited non-zero."""

    def __init__(self, message: str, output: Optional[str] = None, returncode: Optional[int] = None):
        super().__init__(message)
        self.output = output or ""
        self.returncode = returncode

    @property
    def detail(self) -> str:
        """The collaborator's own diagnostic output, stripped."""
        return self.output.strip()


class BuildError(CollaboratorError):
    """The builder collaborator failed."""


class InstallError(CollaboratorError):
    """The installer collaborator failed."""


class ArtifactMissing(PacklinkError):
    """The builder exited zero but the expected tarball is absent."""


class NotFound(PacklinkError):
    """No decodable cached artifact exists for the requested package."""


class UsageError(PacklinkError):
    """A required command-line argument was not supplied."""


class WatchError(PacklinkError):
    """A directory watch could not be established."""


class ConfigError(PacklinkError):
    """A configuration file exists but cannot be loaded."""


class CacheError(PacklinkError):
    """The cache directory cannot be created, listed or written."""
