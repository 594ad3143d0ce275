"""Semantic version model and precedence rules."""

from .models import SemanticVersion, ResolvedArtifact
from .parser import parse_version, compare_versions

__all__ = [
    "SemanticVersion",
    "ResolvedArtifact",
    "parse_version",
    "compare_versions",
]
