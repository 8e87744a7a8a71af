"""Single-shot sysfs sensor readers."""

import logging
import math
import os
import re
from collections.abc import Iterable

from sysmon.sampler import read_first_line

logger = logging.getLogger(__name__)

_CPU_DIR = re.compile(r"^cpu(\d+)$")


def _parse_number(text: str | None) -> float | None:
    if not text:
        return None
    try:
        value = float(text.split()[0])
    except ValueError:
        return None
    # float() accepts "inf", "nan" and overflowing exponents
    return value if math.isfinite(value) else None


class SensorReader:
    """
    Read absolute values (temperature, clock frequency) from sysfs.

    Stateless: every call scans its candidates afresh.
    """

    def read_first_available(
        self, paths: Iterable[str], divisor: float = 1.0
    ) -> float | None:
        """
        Return the first candidate that reads, parses and is greater than zero.

        Some nodes report 0 while the sensor or rail is powered off, so a zero
        reading moves on to the next candidate instead of being returned.

        Args:
            paths: Candidate files in priority order.
            divisor: Scale applied to the raw reading (e.g. 1000 for
                millidegrees).

        Returns:
            The scaled value, or None if no candidate produced one.
        """
        if divisor <= 0:
            raise ValueError("divisor must be positive")

        for path in paths:
            raw = _parse_number(read_first_line(path))
            if raw is None:
                continue
            value = raw / divisor
            if value > 0:
                return value
            logger.debug("Sensor %s reported %s, trying next candidate", path, raw)

        return None

    def read_core_frequencies(
        self, cpu_root: str = "/sys/devices/system/cpu", divisor: float = 1000
    ) -> tuple[int, ...]:
        """
        Read the current frequency of every CPU core in MHz.

        Cores are ordered by number. A core whose cpufreq node is missing or
        unreadable (typically offline) reports 0.
        """
        if divisor <= 0:
            raise ValueError("divisor must be positive")

        try:
            entries = os.listdir(cpu_root)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", cpu_root, exc)
            return ()

        cores = sorted(
            int(match.group(1))
            for match in map(_CPU_DIR.match, entries)
            if match is not None
        )

        frequencies = []
        for core in cores:
            path = os.path.join(cpu_root, f"cpu{core}", "cpufreq", "scaling_cur_freq")
            raw = _parse_number(read_first_line(path))
            frequencies.append(int(raw / divisor) if raw and raw > 0 else 0)
        return tuple(frequencies)
