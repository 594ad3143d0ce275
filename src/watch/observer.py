"""Filesystem watch that feeds a Debouncer."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from constants import Constants
from errors import WatchError

from .debounce import Debouncer, TimerFactory

logger = logging.getLogger(__name__)

# Reads of watched files (e.g. an installer opening a cached tarball) are not changes.
_IGNORED_EVENT_TYPES = {"opened", "closed_no_write"}


class _FilteredEventHandler(FileSystemEventHandler):
    def __init__(self, callback: Callable[[FileSystemEvent], None],
                 predicate: Optional[Callable[[str], bool]] = None):
        super().__init__()
        self._callback = callback
        self._predicate = predicate

    def _should_ignore(self, event: FileSystemEvent) -> bool:
        if event.event_type in _IGNORED_EVENT_TYPES:
            return True
        if self._predicate is None:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        names = [os.path.basename(os.fsdecode(p)) for p in paths if p]
        return not any(self._predicate(name) for name in names)

    def on_any_event(self, event: FileSystemEvent):
        if self._should_ignore(event):
            return
        logger.debug("Change detected: %s %s", event.event_type, event.src_path)
        self._callback(event)


class DirectoryWatcher:
    """Watches one directory and debounces its change events into ``on_settle``."""

    def __init__(
        self,
        path: str,
        on_settle: Callable[[], None],
        predicate: Optional[Callable[[str], bool]] = None,
        quiet_period: float = Constants.DEBOUNCE_QUIET_PERIOD_SEC,
        recursive: bool = True,
        observer_factory: Callable[[], Any] = Observer,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.path = os.path.abspath(path)
        self.recursive = recursive
        self.debouncer = Debouncer(on_settle, quiet_period=quiet_period, timer_factory=timer_factory)
        self.handler = _FilteredEventHandler(self.debouncer.notify, predicate)
        self._observer_factory = observer_factory
        self._observer: Any = None

    def start(self) -> None:
        """Begin watching.

        Raises:
            WatchError: If the directory is missing or cannot be watched.
        """
        if not os.path.isdir(self.path):
            raise WatchError(f"Cannot watch {self.path}: directory does not exist")
        observer = self._observer_factory()
        try:
            observer.schedule(self.handler, self.path, recursive=self.recursive)
            observer.daemon = True
            observer.start()
        except OSError as e:
            raise WatchError(f"Cannot watch {self.path}: {e}") from e
        self._observer = observer
        logger.info("Watching %s for changes", self.path)

    def stop(self) -> None:
        self.debouncer.cancel()
        if self._observer is not None and self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5)
        self._observer = None

    def run_forever(self, poll_interval: float = 0.5) -> None:
        """Start watching and block until interrupted or the observer dies."""
        self.start()
        try:
            while self._observer is not None and self._observer.is_alive():
                self._observer.join(poll_interval)
        finally:
            self.stop()
