"""Rolling history of one rate series (receive or transmit)."""

from __future__ import annotations

from collections import deque


class BoundedSeries:
    """Fixed-capacity window of samples plus lifetime statistics.

    The window keeps the last ``window_size`` samples for charting. The
    lifetime fields (``total``, ``count``, ``minimum``, ``maximum``) cover
    every sample ever appended, including evicted ones.
    """

    def __init__(self, window_size: int) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self._window: deque[float] = deque(maxlen=window_size)
        self.total: float = 0.0
        self.count: int = 0
        self.minimum: float | None = None  # None until the first sample
        self.maximum: float | None = None

    def __len__(self) -> int:
        return len(self._window)

    @property
    def window_size(self) -> int:
        return self._window.maxlen or 0

    @property
    def latest(self) -> float:
        """Most recent sample, 0.0 before the first append."""
        return self._window[-1] if self._window else 0.0

    def append(self, sample: float) -> None:
        self._window.append(sample)
        self.total += sample
        self.count += 1
        if self.minimum is None or sample < self.minimum:
            self.minimum = sample
        if self.maximum is None or sample > self.maximum:
            self.maximum = sample

    def windowed_view(self) -> tuple[float, ...]:
        """Current window, oldest first."""
        return tuple(self._window)

    def running_average(self) -> float:
        """Mean over all samples ever appended; 0.0 with no samples."""
        if self.count == 0:
            return 0.0
        return self.total / self.count

    def windowed_sum(self) -> float:
        return sum(self._window)

    def windowed_max(self) -> float:
        return max(self._window, default=0.0)

    def windowed_average(self) -> float:
        if not self._window:
            return 0.0
        return sum(self._window) / len(self._window)
