"""
Per-rule request counters over fixed time windows.
"""
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple


@dataclass
class WindowState:
    """Live count for one throttle rule. Timestamps are in milliseconds."""
    rule_key: str
    window_start: float
    count: int = 0


class WindowCounter:
    """
    Tracks how many requests each rule admitted in its current window.

    A window restarts (count=0, start=now) once ``now - start`` reaches the
    rule's window duration. Each rule key gets its own re-entrant lock, exposed
    through guard() so a caller can make peek-then-increment a single step.
    State is in-process only and lives as long as the counter.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Time source returning seconds; injectable for tests
        """
        self._clock = clock
        self._states: Dict[str, WindowState] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def guard(self, rule_key: str) -> threading.RLock:
        """Return the lock serialising access to one rule's window."""
        lock = self._locks.get(rule_key)
        if lock is None:
            with self._locks_guard:
                lock = self._locks.setdefault(rule_key, threading.RLock())
        return lock

    def increment(self, rule_key: str, window_duration_ms: int) -> int:
        """
        Count one request against a rule, restarting an elapsed window first.

        Returns:
            The count after this request
        """
        with self.guard(rule_key):
            now = self._now_ms()
            state = self._states.get(rule_key)
            if state is None:
                state = self._states[rule_key] = WindowState(rule_key=rule_key, window_start=now)
            elif now - state.window_start >= window_duration_ms:
                state.window_start = now
                state.count = 0
            state.count += 1
            return state.count

    def peek(self, rule_key: str, window_duration_ms: int) -> Tuple[int, int]:
        """
        Read a rule's window without changing it.

        Returns:
            (count, remaining_ms); an elapsed or unseen window reads as
            (0, window_duration_ms)
        """
        with self.guard(rule_key):
            now = self._now_ms()
            state = self._states.get(rule_key)
            if state is None or now - state.window_start >= window_duration_ms:
                return 0, window_duration_ms
            remaining = window_duration_ms - (now - state.window_start)
            return state.count, max(1, math.ceil(remaining))

    def __len__(self) -> int:
        return len(self._states)
