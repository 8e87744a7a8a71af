"""Data models for sysmon."""

from dataclasses import dataclass, field
from enum import Enum


class CpuUsageSource(Enum):
    """Which path produced a CPU usage value."""

    SYSTEM = "system"  # /proc/stat delta
    PROCESS = "process"  # /proc/<pid>/stat delta, approximation
    UNAVAILABLE = "unavailable"


class TemperatureLevel(Enum):
    """Coarse temperature bands used for colouring."""

    UNKNOWN = "unknown"
    NORMAL = "normal"
    WARM = "warm"
    HOT = "hot"


WARM_THRESHOLD_C = 50.0
HOT_THRESHOLD_C = 70.0


@dataclass(slots=True, frozen=True)
class CpuCounterSample:
    """Cumulative CPU ticks since boot, as read from the first line of /proc/stat."""

    user: int
    nice: int
    system: int
    idle: int

    @property
    def active(self) -> int:
        return self.user + self.nice + self.system

    @property
    def total(self) -> int:
        return self.active + self.idle


@dataclass(slots=True, frozen=True)
class ProcessTicks:
    """User and kernel ticks consumed by a single process."""

    utime: int
    stime: int

    @property
    def total(self) -> int:
        return self.utime + self.stime


@dataclass(slots=True, frozen=True)
class CpuUsage:
    """A CPU percentage tagged with the path that produced it."""

    percent: float
    source: CpuUsageSource

    @property
    def available(self) -> bool:
        return self.source is not CpuUsageSource.UNAVAILABLE


UNAVAILABLE_USAGE = CpuUsage(percent=0.0, source=CpuUsageSource.UNAVAILABLE)


@dataclass(slots=True, frozen=True)
class MemoryInfo:
    """Used and total memory in megabytes."""

    used_mb: int
    total_mb: int

    @property
    def free_mb(self) -> int:
        return max(0, self.total_mb - self.used_mb)


@dataclass(slots=True, frozen=True)
class SystemStats:
    """
    Immutable snapshot produced by one sampling tick.

    Every field always carries a value. Sources that could not be read
    this tick hold their sentinel: 0 for usage, memory and frequencies,
    0.0 or less for temperature, an empty tuple for core frequencies.
    """

    cpu_usage_percent: float = 0.0
    cpu_usage_source: CpuUsageSource = CpuUsageSource.UNAVAILABLE
    memory_used_mb: int = 0
    memory_total_mb: int = 0
    gpu_frequency_mhz: int = 0
    cpu_temperature_c: float = 0.0
    cpu_frequencies_mhz: tuple[int, ...] = field(default_factory=tuple)
    process_count: int = 0
    timestamp: float = 0.0

    @property
    def memory_percent(self) -> float:
        """Memory usage as a percentage, 0.0 when the total is unknown."""
        if self.memory_total_mb <= 0:
            return 0.0
        return min(100.0, self.memory_used_mb / self.memory_total_mb * 100.0)

    @property
    def memory_free_mb(self) -> int:
        return max(0, self.memory_total_mb - self.memory_used_mb)

    @property
    def has_temperature(self) -> bool:
        return self.cpu_temperature_c > 0

    @property
    def temperature_level(self) -> TemperatureLevel:
        if not self.has_temperature:
            return TemperatureLevel.UNKNOWN
        if self.cpu_temperature_c > HOT_THRESHOLD_C:
            return TemperatureLevel.HOT
        if self.cpu_temperature_c > WARM_THRESHOLD_C:
            return TemperatureLevel.WARM
        return TemperatureLevel.NORMAL
