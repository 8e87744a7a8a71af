"""Configuration values for sysmon."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class SensorPaths:
    """Candidate sysfs nodes, tried in order, and their unit divisors."""

    temperature: tuple[str, ...] = (
        "/sys/class/thermal/thermal_zone0/temp",
        "/sys/class/thermal/thermal_zone1/temp",
        "/sys/devices/virtual/thermal/thermal_zone0/temp",
    )
    temperature_divisor: float = 1000  # millidegrees -> degrees
    gpu_frequency: tuple[str, ...] = (
        "/sys/class/kgsl/kgsl-3d0/gpuclk",
        "/sys/class/misc/mali0/device/clock",
    )
    gpu_frequency_divisor: float = 1_000_000  # Hz -> MHz
    cpu_root: str = "/sys/devices/system/cpu"
    cpu_frequency_divisor: float = 1000  # kHz -> MHz


@dataclass(frozen=True)
class MonitorConfig:
    """Sampling settings for one monitor."""

    interval: float = 1.0  # seconds between ticks
    history_capacity: int = 20
    proc_stat: str = "/proc/stat"
    process_stat: str = "/proc/self/stat"
    ticks_per_second: int = 100  # USER_HZ
    sensors: SensorPaths = field(default_factory=SensorPaths)

    def with_overrides(self, **changes: object) -> MonitorConfig:
        """Return a copy with the non-None values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


APP_NAME = "sysmon"
MIN_INTERVAL = 0.1
DEFAULT_CONFIG = MonitorConfig()
