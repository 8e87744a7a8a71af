"""Shared fixtures: a fake /proc and /sys tree under tmp_path."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from sysmon.config import MonitorConfig, SensorPaths
from sysmon.models import MemoryInfo


@dataclass
class FakeSystem:
    """Writable stand-ins for the pseudo-files a collector reads."""

    root: Path
    config: MonitorConfig

    @property
    def proc_stat(self) -> Path:
        return Path(self.config.proc_stat)

    @property
    def process_stat(self) -> Path:
        return Path(self.config.process_stat)

    def set_counters(self, user: int, nice: int, system: int, idle: int) -> None:
        self.proc_stat.write_text(f"cpu  {user} {nice} {system} {idle} 0 0 0 0 0 0\n")

    def remove_counters(self) -> None:
        self.proc_stat.unlink(missing_ok=True)

    def set_process_ticks(self, utime: int, stime: int) -> None:
        self.process_stat.write_text(
            f"42 (sysmon) R 1 42 42 0 -1 0 0 0 0 0 {utime} {stime} 0 0 20 0 1 0\n"
        )

    def set_temperature(self, zone: int, millidegrees: int) -> None:
        self._write(self.config.sensors.temperature[zone], millidegrees)

    def set_gpu_clock(self, index: int, hertz: int) -> None:
        self._write(self.config.sensors.gpu_frequency[index], hertz)

    def set_core_frequency(self, core: int, khz: int | None) -> None:
        cpufreq = Path(self.config.sensors.cpu_root) / f"cpu{core}" / "cpufreq"
        cpufreq.mkdir(parents=True, exist_ok=True)
        if khz is not None:
            (cpufreq / "scaling_cur_freq").write_text(f"{khz}\n")

    def write_node(self, path: str, text: str) -> None:
        """Write raw text to a sysfs node, creating its directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"{text}\n")

    def _write(self, path: str, value: int) -> None:
        self.write_node(path, str(value))


@pytest.fixture
def fake_system(tmp_path) -> FakeSystem:
    sensors = SensorPaths(
        temperature=(
            str(tmp_path / "thermal" / "thermal_zone0" / "temp"),
            str(tmp_path / "thermal" / "thermal_zone1" / "temp"),
        ),
        gpu_frequency=(
            str(tmp_path / "kgsl" / "gpuclk"),
            str(tmp_path / "mali0" / "clock"),
        ),
        cpu_root=str(tmp_path / "cpu"),
    )
    config = MonitorConfig(
        proc_stat=str(tmp_path / "stat"),
        process_stat=str(tmp_path / "self_stat"),
        sensors=sensors,
    )
    return FakeSystem(root=tmp_path, config=config)


@pytest.fixture
def fixed_memory():
    return lambda: MemoryInfo(used_mb=3072, total_mb=8192)
