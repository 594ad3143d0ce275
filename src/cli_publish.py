"""Publish: pack the current project into the tarball cache.

The builder drops ``<name>-<version>.tgz`` into the cache root; the store then
stamps it and supersedes earlier builds of the same version.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from common.logging_utils import log_failure
from config import PacklinkConfig
from constants import Constants
from errors import ArtifactMissing, PacklinkError
from manifest import producer_identity
from package_manager import build_tarball
from store import naming
from store.cache_store import CacheStore
from watch.observer import DirectoryWatcher

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Outcome of a successful publish."""

    package_name: str
    version_text: str
    timestamp: int
    path: str


def publish(config: PacklinkConfig, cwd: str, store: Optional[CacheStore] = None,
            show_hint: bool = True) -> PublishResult:
    """Build the project in ``cwd`` and ingest the tarball into the cache.

    Raises:
        ManifestError: If package.json lacks a name or version.
        BuildError: If the builder fails.
        ArtifactMissing: If the builder did not produce the expected tarball.
    """
    store = store or CacheStore(config.cache_dir)
    package_name, version_text = producer_identity(cwd)
    sanitized = naming.sanitize(package_name)

    store.ensure_ready()
    build_tarball(config.builder_command, store.root, cwd)

    built_name = naming.built_filename(sanitized, version_text)
    built_path = store.path_for(built_name)
    if not os.path.isfile(built_path):
        raise ArtifactMissing(f"Tarball not found at destination: {built_name}")

    stored_path = store.ingest(built_path, sanitized, version_text)
    decoded = naming.decode(os.path.basename(stored_path), sanitized)
    result = PublishResult(
        package_name=package_name,
        version_text=version_text,
        timestamp=decoded.timestamp,
        path=stored_path,
    )

    logger.info("Published %s@%s to %s.", package_name, version_text, stored_path)
    if show_hint:
        logger.info(
            "You can now run '%s add %s' in another project to add this tarball as a dependency.",
            Constants.PROG,
            package_name,
        )
    return result


def run_publish(config: PacklinkConfig, cwd: str, watch: Union[None, bool, str] = None) -> PublishResult:
    """Publish once, then optionally republish on every settled change.

    Args:
        watch: None for a one-shot publish; True to watch the configured
            build output directory; a path to watch that directory instead.
    """
    store = CacheStore(config.cache_dir)
    result = publish(config, cwd, store)
    if not watch:
        return result

    watch_dir = config.publish_watch_dir if watch is True else watch
    watch_dir = os.path.join(cwd, os.path.expanduser(watch_dir))

    def _republish() -> None:
        try:
            publish(config, cwd, store, show_hint=False)
        except PacklinkError as e:
            log_failure(logger, e)

    DirectoryWatcher(watch_dir, _republish, quiet_period=config.quiet_period).run_forever()
    return result
