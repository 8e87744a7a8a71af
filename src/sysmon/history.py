"""Bounded CPU usage history for sparkline rendering."""

from collections import deque
from collections.abc import Iterator


class HistoryBuffer:
    """Fixed-capacity FIFO of percentages; the oldest value is evicted first."""

    def __init__(self, capacity: int = 20) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._values: deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._values.maxlen or 0

    @property
    def latest(self) -> float | None:
        return self._values[-1] if self._values else None

    def append(self, value: float) -> None:
        self._values.append(value)

    def values(self) -> list[float]:
        """Values in chronological order, oldest first."""
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)
