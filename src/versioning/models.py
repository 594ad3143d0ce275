"""Data models for versioning and artifact resolution."""

from dataclasses import dataclass, field
from typing import Tuple, Union

import semantic_version

PrereleaseIdentifier = Union[int, str]


@dataclass(frozen=True)
class SemanticVersion:
    """Parsed semantic version; missing minor/patch are stored as 0."""
    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[PrereleaseIdentifier, ...] = ()
    build: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def triple(self) -> Tuple[int, int, int]:
        """Return the numeric (major, minor, patch) triple."""
        return self.major, self.minor, self.patch

    def to_semantic_version(self) -> semantic_version.Version:
        """Project onto semantic_version.Version for precedence ordering."""
        return semantic_version.Version(
            major=self.major,
            minor=self.minor,
            patch=self.patch,
            prerelease=tuple(str(ident) for ident in self.prerelease),
            build=self.build,
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(ident) for ident in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


@dataclass(frozen=True)
class DecodedArtifact:
    """Fields recovered from a cache filename."""
    version_text: str
    timestamp: int


@dataclass(frozen=True)
class ResolvedArtifact:
    """The single "current" artifact selected for a package."""
    package_name: str
    filename: str
    path: str
    version_text: str
    version: SemanticVersion
    timestamp: int
