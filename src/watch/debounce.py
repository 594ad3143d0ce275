"""Debounce bursts of change notifications into single actions.

State machine:

    IDLE    --notify-->   PENDING   (timer armed)
    PENDING --notify-->   PENDING   (timer re-armed)
    PENDING --elapsed-->  RUNNING   (action starts)
    RUNNING --notify-->   RUNNING   (timer re-armed, action keeps running)
    RUNNING --elapsed-->  RUNNING   (trigger dropped)
    RUNNING --completed-> PENDING if a timer is armed, else IDLE

At most one action runs at a time. A trigger that settles while an action is
still running is dropped; the next burst of changes arms a fresh timer.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

from constants import Constants

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[..., None], tuple], Any]


class DebounceState(Enum):
    """States of the debouncer."""
    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"


def _daemon_timer(interval: float, function: Callable[..., None], args: tuple) -> threading.Timer:
    timer = threading.Timer(interval, function, args)
    timer.daemon = True
    return timer


class Debouncer:
    """Run ``action`` once per burst of notify() calls."""

    def __init__(
        self,
        action: Callable[[], None],
        quiet_period: float = Constants.DEBOUNCE_QUIET_PERIOD_SEC,
        timer_factory: Optional[TimerFactory] = None,
    ):
        """Initialize the debouncer.

        Args:
            action: Callable run after each quiet period.
            quiet_period: Seconds without notifications before acting.
            timer_factory: Builds a startable/cancellable timer; defaults to
                daemon ``threading.Timer`` instances.
        """
        self._action = action
        self._quiet_period = quiet_period
        self._timer_factory = timer_factory or _daemon_timer
        self._lock = threading.Lock()
        self._state = DebounceState.IDLE
        self._timer: Any = None
        self._generation = 0
        self.runs = 0
        self.dropped = 0

    @property
    def state(self) -> DebounceState:
        with self._lock:
            return self._state

    def notify(self, _event: Any = None) -> None:
        """Record a change; (re)arm the quiet-period timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = self._timer_factory(self._quiet_period, self._elapsed, (self._generation,))
            if self._state is DebounceState.IDLE:
                self._state = DebounceState.PENDING
            self._timer.start()

    def cancel(self) -> None:
        """Disarm any pending timer. A running action is left to finish."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
            if self._state is DebounceState.PENDING:
                self._state = DebounceState.IDLE

    def _elapsed(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                # Re-armed after this timer fired but before it got the lock.
                return
            self._timer = None
            if self._state is DebounceState.RUNNING:
                self.dropped += 1
                logger.debug("Change settled while an action is running; trigger dropped")
                return
            self._state = DebounceState.RUNNING
            self.runs += 1

        try:
            self._action()
        finally:
            with self._lock:
                if self._timer is not None:
                    self._state = DebounceState.PENDING
                else:
                    self._state = DebounceState.IDLE
