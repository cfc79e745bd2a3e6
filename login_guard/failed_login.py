"""In-memory tracker for failed logins with a temporary lockout per account."""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable


logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 5
DEFAULT_LOCKOUT_DURATION = timedelta(minutes=15)


@dataclass
class AttemptState:
    """Consecutive failures for one identifier and when its lockout lifts."""

    failure_count: int = 0
    locked_until: float | None = None


class LoginAttemptTracker:
    """Track consecutive login failures per identifier (email).

    Entries are created on the first failure and removed on a successful login
    or when an expired lockout is observed by ``is_locked_out``. There is no
    background sweep. Every access to the table happens under one lock.
    """

    def __init__(
        self,
        threshold: int = DEFAULT_THRESHOLD,
        lockout_duration: int | float | timedelta = DEFAULT_LOCKOUT_DURATION,
        clock: Callable[[], float] = time.monotonic,
        extend_while_locked: bool = True,
    ) -> None:
        if isinstance(lockout_duration, timedelta):
            lockout_duration = lockout_duration.total_seconds()
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        if lockout_duration <= 0:
            raise ValueError("lockout_duration must be positive")

        self.threshold = int(threshold)
        self.lockout_duration = float(lockout_duration)
        self.extend_while_locked = extend_while_locked
        self._clock = clock
        self._data: dict[str, AttemptState] = {}
        self._lock = threading.Lock()

    @staticmethod
    def normalize(identifier: str) -> str:
        return identifier.casefold()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def record_failure(self, identifier: str) -> None:
        key = self.normalize(identifier)
        with self._lock:
            now = self._clock()
            state = self._data.get(key) or AttemptState()
            already_locked = state.locked_until is not None and now < state.locked_until
            state.failure_count += 1

            if state.failure_count >= self.threshold:
                if not already_locked:
                    logger.warning(
                        "Locking %s for %ds after %d failed logins",
                        key,
                        self.lockout_duration,
                        state.failure_count,
                    )
                    state.locked_until = now + self.lockout_duration
                elif self.extend_while_locked:
                    state.locked_until = now + self.lockout_duration

            self._data[key] = state

    def reset_attempts(self, identifier: str) -> None:
        key = self.normalize(identifier)
        with self._lock:
            if self._data.pop(key, None) is not None:
                logger.debug("Cleared failed logins for %s", key)

    def is_locked_out(self, identifier: str) -> bool:
        key = self.normalize(identifier)
        with self._lock:
            return self._is_locked(key)

    def _is_locked(self, key: str) -> bool:
        # Caller must hold self._lock.
        state = self._data.get(key)
        if state is None or state.locked_until is None:
            return False

        if self._clock() >= state.locked_until:
            # Expiry drops the whole entry, failure count included.
            del self._data[key]
            logger.info("Lockout expired for %s", key)
            return False

        return True

    def get_remaining_lockout_time(self, identifier: str) -> int:
        """Seconds until the lockout lifts, rounded up; 0 if not locked."""
        key = self.normalize(identifier)
        with self._lock:
            state = self._data.get(key)
            if state is None or state.locked_until is None:
                return 0
            remaining = math.ceil(state.locked_until - self._clock())
        return max(remaining, 0)

    def get_remaining_attempts(self, identifier: str) -> int:
        """Failures left before lockout.

        Returns 0 while locked. An identifier without an entry, including one
        whose expired lockout is cleaned up by this call, has the full
        threshold left.
        """
        key = self.normalize(identifier)
        with self._lock:
            if self._is_locked(key):
                return 0
            state = self._data.get(key)
            if state is None:
                return self.threshold
            return max(0, self.threshold - state.failure_count)

    def get_failure_count(self, identifier: str) -> int:
        key = self.normalize(identifier)
        with self._lock:
            state = self._data.get(key)
            return state.failure_count if state else 0

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
