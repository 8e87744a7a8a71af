"""Turn successive counter samples into usage percentages."""

import logging
import time
from collections.abc import Callable

from sysmon.models import CpuCounterSample, ProcessTicks

logger = logging.getLogger(__name__)


def clamp_percent(value: float) -> float:
    """Clamp a ratio-derived value into [0, 100]."""
    return max(0.0, min(100.0, value))


class UsageDeriver:
    """
    Derive system-wide CPU usage from two consecutive /proc/stat samples.

    The deriver holds the previous sample as its baseline. It is owned by
    a single caller and is not safe for concurrent use.
    """

    def __init__(self) -> None:
        self._baseline: CpuCounterSample | None = None

    @property
    def baseline(self) -> CpuCounterSample | None:
        """The sample the next call will be compared against."""
        return self._baseline

    def reset(self) -> None:
        """Forget the baseline so the next call starts over."""
        self._baseline = None

    def derive(self, sample: CpuCounterSample) -> float | None:
        """
        Compute the usage percentage since the previous sample.

        Args:
            sample: Counters read this tick.

        Returns:
            A percentage in [0, 100], or None when there is no baseline yet,
            the counters did not advance, or they went backwards (reset).
            The new sample becomes the baseline in every case.
        """
        previous = self._baseline
        self._baseline = sample
        if previous is None:
            return None

        if _counters_reset(previous, sample):
            logger.debug("CPU counters went backwards, treating as reset")
            return None

        active_delta = sample.active - previous.active
        total_delta = active_delta + (sample.idle - previous.idle)
        if total_delta <= 0:
            return None

        return clamp_percent(active_delta / total_delta * 100.0)


def _counters_reset(previous: CpuCounterSample, current: CpuCounterSample) -> bool:
    return (
        current.user < previous.user
        or current.nice < previous.nice
        or current.system < previous.system
        or current.idle < previous.idle
    )


class ProcessUsageDeriver:
    """
    Approximate CPU usage from one process's own tick counters.

    Used when /proc/stat is not readable. The tick delta is converted to CPU
    seconds with a fixed tick rate and divided by elapsed wall-clock time, so
    the result describes this process only, not the whole system.
    """

    def __init__(
        self,
        ticks_per_second: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be positive")
        self._ticks_per_second = ticks_per_second
        self._clock = clock
        self._baseline: tuple[ProcessTicks, float] | None = None

    @property
    def ticks_per_second(self) -> int:
        return self._ticks_per_second

    def reset(self) -> None:
        self._baseline = None

    def derive(self, ticks: ProcessTicks) -> float | None:
        """Return the process CPU percentage since the previous call, or None."""
        now = self._clock()
        previous = self._baseline
        self._baseline = (ticks, now)
        if previous is None:
            return None

        previous_ticks, previous_time = previous
        elapsed = now - previous_time
        tick_delta = ticks.total - previous_ticks.total
        if elapsed <= 0 or tick_delta < 0:
            return None

        cpu_seconds = tick_delta / self._ticks_per_second
        return clamp_percent(cpu_seconds / elapsed * 100.0)
