"""Semantic version parsing and precedence.

Parsing is lenient in the way cached artifact names need: an optional leading
"v", and missing minor/patch components default to 0. Anything outside the
grammar yields None so callers can skip the input instead of failing.
"""

import re
from typing import Optional, Tuple

from .models import PrereleaseIdentifier, SemanticVersion

_IDENT = r"[0-9A-Za-z-]+"
_VERSION_RE = re.compile(
    r"^v?(?P<major>[0-9]+)"
    r"(?:\.(?P<minor>[0-9]+))?"
    r"(?:\.(?P<patch>[0-9]+))?"
    rf"(?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?$"
)


def _parse_identifier(ident: str) -> PrereleaseIdentifier:
    """Numeric identifiers become ints; everything else stays a string."""
    if ident.isdigit():
        return int(ident)
    return ident


def parse_version(text: Optional[str]) -> Optional[SemanticVersion]:
    """Parse version text into a SemanticVersion.

    Args:
        text: Version text such as "1.2.3", "v2" or "1.0.0-beta.2".

    Returns:
        The parsed SemanticVersion, or None when the text does not match.
    """
    if not isinstance(text, str):
        return None
    m = _VERSION_RE.match(text.strip())
    if not m:
        return None

    prerelease: Tuple[PrereleaseIdentifier, ...] = ()
    if m.group("prerelease"):
        prerelease = tuple(_parse_identifier(p) for p in m.group("prerelease").split("."))
    build: Tuple[str, ...] = ()
    if m.group("build"):
        build = tuple(m.group("build").split("."))

    return SemanticVersion(
        major=int(m.group("major")),
        minor=int(m.group("minor") or 0),
        patch=int(m.group("patch") or 0),
        prerelease=prerelease,
        build=build,
    )


def compare_versions(a: SemanticVersion, b: SemanticVersion) -> int:
    """Compare two versions by semantic-versioning precedence.

    Releases rank above prereleases of the same triple; prerelease
    identifiers compare numerically when numeric, numeric below alphanumeric,
    and a strict prefix ranks lower. Build metadata is ignored.

    Returns:
        Negative if a < b, zero if equal in precedence, positive if a > b.
    """
    left = a.to_semantic_version()
    right = b.to_semantic_version()
    if left < right:
        return -1
    if left > right:
        return 1
    return 0
