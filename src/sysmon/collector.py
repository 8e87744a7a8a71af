"""Assemble one SystemStats snapshot per tick."""

import logging
import time
from collections.abc import Callable

import psutil

from sysmon.config import DEFAULT_CONFIG, MonitorConfig
from sysmon.deriver import ProcessUsageDeriver, UsageDeriver
from sysmon.models import (
    UNAVAILABLE_USAGE,
    CpuUsage,
    CpuUsageSource,
    MemoryInfo,
    SystemStats,
)
from sysmon.sampler import read_cpu_counters, read_process_ticks
from sysmon.sensors import SensorReader

logger = logging.getLogger(__name__)

MemorySource = Callable[[], MemoryInfo | None]

_MB = 1024 * 1024


def psutil_memory() -> MemoryInfo | None:
    """Default memory source backed by psutil.virtual_memory()."""
    mem = psutil.virtual_memory()
    return MemoryInfo(used_mb=int(mem.used // _MB), total_mb=int(mem.total // _MB))


def psutil_process_count() -> int:
    return len(psutil.pids())


class StatsCollector:
    """
    Produce a SystemStats snapshot on demand.

    The collector owns its usage derivers, so one instance must be driven by
    one thread at a time. Any scheduler (timer thread, UI interval, test)
    can call :meth:`sample_once` directly.
    """

    def __init__(
        self,
        config: MonitorConfig = DEFAULT_CONFIG,
        memory_source: MemorySource | None = psutil_memory,
        process_counter: Callable[[], int] | None = psutil_process_count,
        sensor_reader: SensorReader | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._memory_source = memory_source
        self._process_counter = process_counter
        self._sensors = sensor_reader or SensorReader()
        self._usage = UsageDeriver()
        self._process_usage = ProcessUsageDeriver(
            ticks_per_second=config.ticks_per_second, clock=clock
        )
        self._using_fallback = False

    @property
    def config(self) -> MonitorConfig:
        return self._config

    def sample_once(self) -> SystemStats:
        """Run one sampling tick. Never raises for unreadable sources."""
        usage = self._sample_cpu()
        memory = self._sample_memory()
        sensors = self._config.sensors

        temperature = self._sensors.read_first_available(
            sensors.temperature, sensors.temperature_divisor
        )
        gpu_frequency = self._sensors.read_first_available(
            sensors.gpu_frequency, sensors.gpu_frequency_divisor
        )
        core_frequencies = self._sensors.read_core_frequencies(
            sensors.cpu_root, sensors.cpu_frequency_divisor
        )

        return SystemStats(
            cpu_usage_percent=usage.percent,
            cpu_usage_source=usage.source,
            memory_used_mb=memory.used_mb if memory else 0,
            memory_total_mb=memory.total_mb if memory else 0,
            gpu_frequency_mhz=int(gpu_frequency) if gpu_frequency else 0,
            cpu_temperature_c=temperature if temperature else 0.0,
            cpu_frequencies_mhz=core_frequencies,
            process_count=self._sample_process_count(),
            timestamp=time.time(),
        )

    def _sample_cpu(self) -> CpuUsage:
        """Prefer /proc/stat; fall back to this process's own ticks."""
        sample = read_cpu_counters(self._config.proc_stat)
        if sample is not None:
            if self._using_fallback:
                logger.info("%s readable again, leaving fallback", self._config.proc_stat)
                self._using_fallback = False
                self._process_usage.reset()
            percent = self._usage.derive(sample)
            if percent is None:
                return UNAVAILABLE_USAGE
            return CpuUsage(percent=percent, source=CpuUsageSource.SYSTEM)

        if not self._using_fallback:
            logger.info(
                "%s unreadable, using per-process CPU time from %s",
                self._config.proc_stat,
                self._config.process_stat,
            )
            self._using_fallback = True
            self._usage.reset()

        ticks = read_process_ticks(self._config.process_stat)
        if ticks is None:
            return UNAVAILABLE_USAGE
        percent = self._process_usage.derive(ticks)
        if percent is None:
            return UNAVAILABLE_USAGE
        return CpuUsage(percent=percent, source=CpuUsageSource.PROCESS)

    def _sample_memory(self) -> MemoryInfo | None:
        if self._memory_source is None:
            return None
        try:
            return self._memory_source()
        except Exception:
            logger.warning("Memory source failed", exc_info=True)
            return None

    def _sample_process_count(self) -> int:
        if self._process_counter is None:
            return 0
        try:
            return max(0, self._process_counter())
        except Exception:
            logger.warning("Process counter failed", exc_info=True)
            return 0
