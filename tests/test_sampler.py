"""Tests for the raw counter readers."""

from sysmon.models import CpuCounterSample, ProcessTicks
from sysmon.sampler import read_cpu_counters, read_first_line, read_process_ticks

PROC_STAT = (
    "cpu  100 0 50 850 12 0 3 0 0 0\n"
    "cpu0 50 0 25 425 6 0 1 0 0 0\n"
    "intr 12345\n"
)


class TestReadFirstLine:
    """Tests for read_first_line."""

    def test_reads_only_first_line(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("first line  \nsecond line\n")
        assert read_first_line(str(path)) == "first line"

    def test_missing_file(self, tmp_path):
        assert read_first_line(str(tmp_path / "missing")) is None

    def test_directory_is_unreadable(self, tmp_path):
        assert read_first_line(str(tmp_path)) is None


class TestReadCpuCounters:
    """Tests for read_cpu_counters."""

    def test_parses_aggregate_line(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text(PROC_STAT)

        sample = read_cpu_counters(str(path))

        assert sample == CpuCounterSample(user=100, nice=0, system=50, idle=850)

    def test_trailing_fields_ignored(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 2 3 4 5 6 7 8 9 10\n")
        assert read_cpu_counters(str(path)) == CpuCounterSample(1, 2, 3, 4)

    def test_exactly_four_counters(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 2 3 4")
        assert read_cpu_counters(str(path)) == CpuCounterSample(1, 2, 3, 4)

    def test_missing_file_is_unavailable(self, tmp_path):
        assert read_cpu_counters(str(tmp_path / "nope")) is None

    def test_too_few_fields(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 2 3\n")
        assert read_cpu_counters(str(path)) is None

    def test_non_numeric_field(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 two 3 4\n")
        assert read_cpu_counters(str(path)) is None

    def test_negative_field(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 2 -3 4\n")
        assert read_cpu_counters(str(path)) is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("")
        assert read_cpu_counters(str(path)) is None


class TestReadProcessTicks:
    """Tests for read_process_ticks."""

    @staticmethod
    def _stat_line(comm: str, utime: int, stime: int) -> str:
        # pid (comm) state ppid pgrp session tty tpgid flags minflt cminflt
        # majflt cmajflt utime stime ...
        return f"1234 ({comm}) S 1 1234 1234 0 -1 4194560 500 0 0 0 {utime} {stime} 0 0 20 0 1\n"

    def test_parses_utime_and_stime(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text(self._stat_line("python", 42, 7))
        assert read_process_ticks(str(path)) == ProcessTicks(utime=42, stime=7)

    def test_command_with_spaces_and_parens(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text(self._stat_line("my (odd) proc", 10, 20))
        assert read_process_ticks(str(path)) == ProcessTicks(utime=10, stime=20)

    def test_truncated_line(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("1234 (python) S 1 1234\n")
        assert read_process_ticks(str(path)) is None

    def test_no_command_field(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("1 2 3 4 5 6 7 8 9 10 11 12 13 14 15 16\n")
        assert read_process_ticks(str(path)) is None

    def test_missing_file(self, tmp_path):
        assert read_process_ticks(str(tmp_path / "nope")) is None

    def test_reads_own_process(self):
        ticks = read_process_ticks("/proc/self/stat")
        if ticks is not None:  # not every platform has /proc
            assert ticks.utime >= 0
            assert ticks.stime >= 0


class TestNonFiniteCounters:
    """Counter files containing float-only spellings are unavailable."""

    def test_infinite_counter(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 inf 3 4\n")
        assert read_cpu_counters(str(path)) is None

    def test_overflowing_exponent(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("cpu 1 2 1e999 4\n")
        assert read_cpu_counters(str(path)) is None

    def test_nan_process_ticks(self, tmp_path):
        path = tmp_path / "stat"
        path.write_text("42 (x) R 1 42 42 0 -1 0 0 0 0 0 nan 5 0 0 20 0 1 0\n")
        assert read_process_ticks(str(path)) is None
