"""Select the current cached artifact for a package."""

from __future__ import annotations

import functools
import logging
import os
from typing import List

from common.logging_utils import extra_context, is_debug_enabled
from errors import NotFound
from store import naming
from store.cache_store import CacheStore

from .models import ResolvedArtifact
from .parser import compare_versions, parse_version

logger = logging.getLogger(__name__)


def _precedence(a: ResolvedArtifact, b: ResolvedArtifact) -> int:
    order = compare_versions(a.version, b.version)
    if order:
        return order
    return (a.timestamp > b.timestamp) - (a.timestamp < b.timestamp)


class Resolver:
    """Reduces all cached artifacts of a package to the single newest one."""

    def __init__(self, store: CacheStore):
        self.store = store

    def candidates(self, package_name: str) -> List[ResolvedArtifact]:
        """Decode every usable cached artifact for a package.

        Names that do not decode, or whose version text is not a semantic
        version, are skipped silently.
        """
        sanitized = naming.sanitize(package_name)
        found = []
        for filename in self.store.list(sanitized):
            decoded = naming.decode(filename, sanitized)
            if decoded is None:
                continue
            version = parse_version(decoded.version_text)
            if version is None:
                continue
            found.append(
                ResolvedArtifact(
                    package_name=package_name,
                    filename=filename,
                    path=self.store.path_for(filename),
                    version_text=decoded.version_text,
                    version=version,
                    timestamp=decoded.timestamp,
                )
            )
        return found

    def resolve_latest(self, package_name: str) -> ResolvedArtifact:
        """Return the highest version, newest stamp first on ties.

        Raises:
            NotFound: If no decodable artifact exists for the package.
        """
        found = self.candidates(package_name)
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved candidates",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve_latest",
                    target=package_name,
                    count=len(found),
                ),
            )
        if not found:
            raise NotFound(f"No published tarball found for package {package_name}.")

        found.sort(key=functools.cmp_to_key(_precedence))
        latest = found[-1]
        if not os.path.isfile(latest.path):
            raise NotFound(f"Tarball not found at {latest.path}")
        return latest
