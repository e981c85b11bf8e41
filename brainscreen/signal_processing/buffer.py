"""
Bounded burst queue between the acquisition thread and the consumer.
"""

import threading
from collections import deque
from typing import Deque, List, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from brainscreen.core.config import settings
from brainscreen.core.logging import get_logger

logger = get_logger(__name__)


class BurstQueue:
    """
    Thread-safe FIFO of sample bursts with drop-oldest eviction.

    The acquisition collaborator delivers variable-length bursts at
    irregular times. ``put`` never blocks the producer: once ``capacity``
    bursts are queued, the oldest burst is discarded to make room.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        """
        Initialize burst queue.

        Args:
            capacity: Maximum bursts held, defaults to ``settings.queue_capacity``
        """
        self.capacity = settings.queue_capacity if capacity is None else capacity
        if self.capacity < 1:
            raise ValueError(f"Queue capacity must be positive, got {self.capacity}")

        self._bursts: Deque[NDArray[np.float64]] = deque()
        self._lock = threading.Lock()
        self.dropped_bursts = 0
        self.dropped_samples = 0

        logger.debug("burst_queue_initialized", capacity=self.capacity)

    def put(self, burst: ArrayLike) -> None:
        """
        Enqueue one burst of samples.

        Args:
            burst: 1-D sequence of samples; empty bursts are ignored
        """
        data = np.array(burst, dtype=np.float64).ravel()
        if data.size == 0:
            return

        with self._lock:
            self._bursts.append(data)
            while len(self._bursts) > self.capacity:
                evicted = self._bursts.popleft()
                self.dropped_bursts += 1
                self.dropped_samples += evicted.size
                if self.dropped_bursts == 1:
                    logger.warning("burst_queue_overflow", capacity=self.capacity)

    def drain(self, max_bursts: Optional[int] = None) -> List[NDArray[np.float64]]:
        """
        Remove and return queued bursts, oldest first.

        Args:
            max_bursts: Upper bound on bursts returned (None for all)
        """
        with self._lock:
            if max_bursts is None:
                n = len(self._bursts)
            else:
                n = min(max_bursts, len(self._bursts))
            return [self._bursts.popleft() for _ in range(n)]

    def clear(self) -> None:
        with self._lock:
            self._bursts.clear()
        logger.debug("burst_queue_cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._bursts)

    @property
    def queued_samples(self) -> int:
        """Total samples currently queued."""
        with self._lock:
            return sum(burst.size for burst in self._bursts)
