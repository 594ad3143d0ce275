"""Debounced filesystem watching.

This package turns bursts of filesystem change events into a single
downstream action per burst.
"""

from .debounce import Debouncer, DebounceState
from .observer import DirectoryWatcher

__all__ = [
    "Debouncer",
    "DebounceState",
    "DirectoryWatcher",
]
