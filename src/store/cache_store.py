"""On-disk store of cached package tarballs.

One flat directory holds every artifact. Same-version artifacts are never
accumulated: ingesting a build supersedes all earlier stamps of that exact
(name, version) pair, because installers cache by filename.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
import time
from typing import Callable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from errors import ArtifactMissing, CacheError

from . import naming

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheStore:
    """Flat directory of ``<name>-<version>-<stamp>.tgz`` artifacts."""

    def __init__(self, root: str, clock: Optional[Callable[[], int]] = None):
        """Initialize the store.

        Args:
            root: Cache directory; created lazily by ensure_ready().
            clock: Millisecond clock used to stamp artifacts.
        """
        self.root = os.path.abspath(os.path.expanduser(root))
        self._clock = clock or _now_ms
        self._ingest_lock = threading.Lock()

    def path_for(self, filename: str) -> str:
        return os.path.join(self.root, filename)

    def ensure_ready(self) -> str:
        """Create the cache root if it is missing. Safe to call repeatedly.

        Raises:
            CacheError: If the root exists but is not a directory, or cannot
                be created.
        """
        try:
            os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Error preparing cache directory {self.root}: {e}") from e
        return self.root

    def list(self, sanitized_name: str) -> List[str]:
        """Return filenames carrying this package's prefix and suffix.

        Order is not meaningful. A missing root yields an empty list.
        """
        try:
            entries = os.listdir(self.root)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise CacheError(f"Error reading cache directory {self.root}: {e}") from e
        return [
            entry for entry in entries
            if naming.matches(entry, sanitized_name) and os.path.isfile(self.path_for(entry))
        ]

    def stamps_for(self, sanitized_name: str, version_text: str) -> List[str]:
        """Return the stored filenames for one exact (name, version) pair."""
        found = []
        for filename in self.list(sanitized_name):
            decoded = naming.decode(filename, sanitized_name)
            if decoded is not None and decoded.version_text == version_text:
                found.append(filename)
        return found

    def ingest(self, built_path: str, sanitized_name: str, version_text: str) -> str:
        """Stamp a freshly built tarball and move it into the store.

        The new artifact is renamed into its final name first and superseded
        same-version artifacts are removed afterwards, so a concurrent reader
        always sees at least one artifact for the version.

        Args:
            built_path: Path of the builder's unstamped tarball.
            sanitized_name: Sanitized package name.
            version_text: Version text exactly as declared in the manifest.

        Returns:
            Absolute path of the stored artifact.

        Raises:
            ArtifactMissing: If ``built_path`` does not exist.
            CacheError: If the artifact cannot be moved into the store or a
                superseded artifact cannot be removed.
        """
        self.ensure_ready()
        if not os.path.isfile(built_path):
            raise ArtifactMissing(f"Tarball not found at destination: {built_path}")

        with self._ingest_lock:
            superseded = self.stamps_for(sanitized_name, version_text)
            timestamp = self._next_timestamp(sanitized_name, superseded)
            filename = naming.encode(sanitized_name, version_text, timestamp)
            destination = self.path_for(filename)

            source = built_path
            try:
                if os.path.dirname(os.path.abspath(built_path)) != self.root:
                    # Stage on the cache filesystem so the final rename is atomic.
                    source = self.path_for(f".{filename}.partial")
                    shutil.move(built_path, source)
                os.replace(source, destination)
            except OSError as e:
                raise CacheError(f"Error storing {filename} in {self.root}: {e}") from e

            for old in superseded:
                if old == filename:
                    continue
                try:
                    os.remove(self.path_for(old))
                except FileNotFoundError:
                    logger.debug("Superseded artifact already gone: %s", old)
                except OSError as e:
                    raise CacheError(f"Error removing superseded artifact {old}: {e}") from e

        if is_debug_enabled(logger):
            logger.debug(
                "Ingested artifact",
                extra=extra_context(
                    event="ingest",
                    component="cache_store",
                    action="ingest",
                    outcome="success",
                    target=filename,
                    superseded=len(superseded),
                ),
            )
        return destination

    def _next_timestamp(self, sanitized_name: str, existing: List[str]) -> int:
        """Current time, bumped past any existing stamp for the same version."""
        timestamp = self._clock()
        for filename in existing:
            decoded = naming.decode(filename, sanitized_name)
            if decoded is not None and decoded.timestamp >= timestamp:
                timestamp = decoded.timestamp + 1
        return timestamp
