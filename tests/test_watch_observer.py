"""Tests for the debounced directory watcher."""

from unittest.mock import MagicMock

import pytest
from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from errors import WatchError
from watch.debounce import DebounceState
from watch.observer import DirectoryWatcher, _FilteredEventHandler


class TestFilteredEventHandler:
    """Tests for event filtering."""

    def test_no_predicate_forwards_everything(self):
        seen = []
        handler = _FilteredEventHandler(seen.append)
        event = FileModifiedEvent("/w/dist/index.js")
        handler.dispatch(event)
        assert seen == [event]

    def test_predicate_filters_by_basename(self):
        seen = []
        handler = _FilteredEventHandler(seen.append, lambda name: name.startswith("foo-"))
        handler.dispatch(FileCreatedEvent("/cache/bar-1.0.0-1.tgz"))
        handler.dispatch(FileCreatedEvent("/cache/foo-1.0.0-1.tgz"))
        assert [e.src_path for e in seen] == ["/cache/foo-1.0.0-1.tgz"]

    def test_move_matches_on_destination(self):
        seen = []
        handler = _FilteredEventHandler(seen.append, lambda name: name == "foo-1.0.0-9.tgz")
        handler.dispatch(FileMovedEvent("/cache/foo-1.0.0.tgz", "/cache/foo-1.0.0-9.tgz"))
        assert len(seen) == 1

    def test_open_events_ignored(self):
        seen = []
        handler = _FilteredEventHandler(seen.append)
        event = MagicMock(event_type="opened", src_path="/cache/foo-1.0.0-1.tgz", dest_path="")
        handler.on_any_event(event)
        assert seen == []


class TestDirectoryWatcher:
    """Tests for DirectoryWatcher setup and teardown."""

    def test_missing_directory_raises(self, tmp_path):
        watcher = DirectoryWatcher(str(tmp_path / "missing"), lambda: None)
        with pytest.raises(WatchError):
            watcher.start()

    def test_schedules_observer(self, tmp_path):
        observer = MagicMock()
        watcher = DirectoryWatcher(str(tmp_path), lambda: None, recursive=False,
                                   observer_factory=lambda: observer)
        watcher.start()
        observer.schedule.assert_called_once_with(watcher.handler, str(tmp_path), recursive=False)
        observer.start.assert_called_once()

    def test_observer_failure_is_watch_error(self, tmp_path):
        observer = MagicMock()
        observer.start.side_effect = OSError("inotify watch limit reached")
        watcher = DirectoryWatcher(str(tmp_path), lambda: None, observer_factory=lambda: observer)
        with pytest.raises(WatchError):
            watcher.start()

    def test_events_arm_debouncer(self, tmp_path):
        timers = []

        def timer_factory(interval, function, args):
            timer = MagicMock()
            timers.append((timer, function, args))
            return timer

        calls = []
        watcher = DirectoryWatcher(str(tmp_path), lambda: calls.append(1),
                                   observer_factory=MagicMock, timer_factory=timer_factory)
        for _ in range(3):
            watcher.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.js")))
        assert watcher.debouncer.state is DebounceState.PENDING

        _, function, args = timers[-1]
        function(*args)
        assert calls == [1]

    def test_stop_stops_observer(self, tmp_path):
        observer = MagicMock()
        observer.is_alive.return_value = True
        watcher = DirectoryWatcher(str(tmp_path), lambda: None, observer_factory=lambda: observer)
        watcher.start()
        watcher.stop()
        observer.stop.assert_called_once()
        observer.join.assert_called_once()

    def test_run_forever_returns_when_observer_exits(self, tmp_path):
        observer = MagicMock()
        observer.is_alive.side_effect = [True, False, False]
        watcher = DirectoryWatcher(str(tmp_path), lambda: None, observer_factory=lambda: observer)
        watcher.run_forever(poll_interval=0)
        observer.join.assert_called_once_with(0)

