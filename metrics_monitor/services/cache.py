import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class CachedReading(Generic[T]):
    """
    Hold the last value of an expensive reading together with its age.

    `fresh()` only returns the value while it is younger than the staleness
    window; `last()` returns it regardless of age so callers can fall back to
    a stale value when a refresh fails.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[T] = None
        self._stored_at: Optional[float] = None

    def fresh(self) -> Optional[T]:
        if self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            return None
        return self._value

    def last(self) -> Optional[T]:
        return self._value

    def store(self, value: T) -> None:
        self._value = value
        self._stored_at = self._clock()
