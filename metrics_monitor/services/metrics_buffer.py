import threading
from collections import deque
from typing import Deque, List, Optional

from metrics_monitor.models.metrics import Sample


class MetricsBuffer:
    """
    Fixed-capacity sliding window of samples, oldest first.

    Appending to a full buffer evicts the oldest sample. Readers always get a
    copy taken under the lock, so they see the buffer either before or after
    an append, never in between.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._samples: Deque[Sample] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(self, sample: Sample) -> None:
        with self._lock:
            self._samples.append(sample)

    def extend(self, samples: List[Sample]) -> None:
        with self._lock:
            self._samples.extend(samples)

    def snapshot(self) -> List[Sample]:
        with self._lock:
            return list(self._samples)

    def latest(self) -> Optional[Sample]:
        with self._lock:
            return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
