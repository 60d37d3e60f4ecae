"""
Speed History Ring Buffer

Fixed-capacity FIFO of the most recent scalar speeds for one player.
The regularity tracker reads it every step to derive the echo meter drift.
"""

from collections import deque

import numpy as np


class SpeedHistory:
    """
    Circular buffer holding the last N speed samples.

    Pushing onto a full buffer evicts the oldest sample in O(1).

    Usage:
        history = SpeedHistory(capacity=10)
        history.push(212.0)

        mean = history.mean()
        spread = history.mean_abs_deviation()
    """

    def __init__(self, capacity: int = 10):
        """
        Initialize the speed history.

        Args:
            capacity: Maximum number of samples kept
        """
        if capacity < 1:
            raise ValueError("SpeedHistory capacity must be at least 1")
        self.capacity = capacity
        self._buffer: deque[float] = deque(maxlen=capacity)

    def push(self, speed: float) -> None:
        """Append a sample, dropping the oldest one when full."""
        self._buffer.append(float(speed))

    def as_array(self) -> np.ndarray:
        """Samples as a float array, oldest first."""
        return np.fromiter(self._buffer, dtype=float, count=len(self._buffer))

    def mean(self) -> float:
        """Mean of the buffered speeds (0.0 when empty)."""
        if not self._buffer:
            return 0.0
        return float(np.mean(self.as_array()))

    def mean_abs_deviation(self) -> float:
        """Mean absolute deviation from the buffer mean (0.0 when empty)."""
        if not self._buffer:
            return 0.0
        samples = self.as_array()
        return float(np.mean(np.abs(samples - samples.mean())))

    def clear(self) -> None:
        """Drop all samples."""
        self._buffer.clear()

    @property
    def size(self) -> int:
        """Number of samples currently in the buffer."""
        return len(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)
