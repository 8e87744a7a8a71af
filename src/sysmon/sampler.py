"""Raw counter readers for kernel pseudo-files."""

import logging

from sysmon.models import CpuCounterSample, ProcessTicks

logger = logging.getLogger(__name__)

# Zero-based positions of utime/stime in /proc/<pid>/stat
UTIME_FIELD = 13
STIME_FIELD = 14


def read_first_line(path: str) -> str | None:
    """Return the stripped first line of ``path``, or None if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            line = handle.readline()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return None
    return line.strip()


def _parse_counters(tokens: list[str]) -> list[int] | None:
    try:
        values = [int(token) for token in tokens]
    except ValueError:
        return None
    if any(value < 0 for value in values):
        return None
    return values


def read_cpu_counters(path: str = "/proc/stat") -> CpuCounterSample | None:
    """
    Read the aggregate CPU line of /proc/stat.

    The line looks like ``cpu  <user> <nice> <system> <idle> [<iowait> ...]``.
    The label and any fields after idle are ignored.

    Returns:
        The four counters, or None when the file is missing or malformed.
    """
    line = read_first_line(path)
    if not line:
        return None

    tokens = line.split()
    if len(tokens) < 5:
        logger.debug("Too few fields in %s: %r", path, line)
        return None

    values = _parse_counters(tokens[1:5])
    if values is None:
        logger.debug("Non-numeric counters in %s: %r", path, line)
        return None

    user, nice, system, idle = values
    return CpuCounterSample(user=user, nice=nice, system=system, idle=idle)


def read_process_ticks(path: str = "/proc/self/stat") -> ProcessTicks | None:
    """
    Read utime and stime from a /proc/<pid>/stat file.

    The second field is the command name in parentheses and may itself
    contain spaces, so fields are counted from the last closing parenthesis.
    """
    line = read_first_line(path)
    if not line:
        return None

    _, sep, tail = line.rpartition(")")
    if not sep:
        logger.debug("Unexpected format in %s: %r", path, line)
        return None

    # tail starts at field 2 (state)
    fields = tail.split()
    offset = 2
    if len(fields) <= STIME_FIELD - offset:
        logger.debug("Too few fields in %s", path)
        return None

    values = _parse_counters(
        [fields[UTIME_FIELD - offset], fields[STIME_FIELD - offset]]
    )
    if values is None:
        return None
    return ProcessTicks(utime=values[0], stime=values[1])
