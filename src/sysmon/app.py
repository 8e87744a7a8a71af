"""sysmon - Main Textual application."""

import argparse
import logging
from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Sparkline, Static

from sysmon.collector import StatsCollector
from sysmon.config import APP_NAME, DEFAULT_CONFIG, MonitorConfig
from sysmon.history import HistoryBuffer
from sysmon.models import CpuUsageSource, SystemStats, TemperatureLevel
from sysmon.monitor import SystemMonitor

logger = logging.getLogger(__name__)

_LEVEL_COLORS = {
    TemperatureLevel.UNKNOWN: "dim",
    TemperatureLevel.NORMAL: "green",
    TemperatureLevel.WARM: "yellow",
    TemperatureLevel.HOT: "red",
}

BAR_WIDTH = 20


def format_bar(percent: float, color: str) -> str:
    """Render a percentage as a fixed-width markup bar."""
    filled = min(BAR_WIDTH, max(0, int(percent / (100 / BAR_WIDTH))))
    return f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (BAR_WIDTH - filled)


def format_cpu(stats: SystemStats) -> str:
    if stats.cpu_usage_source is CpuUsageSource.UNAVAILABLE:
        usage = "N/A"
    else:
        usage = f"{stats.cpu_usage_percent:5.1f}%"
        if stats.cpu_usage_source is CpuUsageSource.PROCESS:
            usage += " (process)"
    return (
        f"CPU \\[{format_bar(stats.cpu_usage_percent, 'blue')}] {usage}\n"
        f"Processes: {stats.process_count}"
    )


def format_memory(stats: SystemStats) -> str:
    if stats.memory_total_mb <= 0:
        return "Mem N/A"
    return (
        f"Mem \\[{format_bar(stats.memory_percent, 'magenta')}] "
        f"{stats.memory_percent:5.1f}%\n"
        f"Used {stats.memory_used_mb} MB  Total {stats.memory_total_mb} MB  "
        f"Free {stats.memory_free_mb} MB"
    )


def format_gpu(stats: SystemStats) -> str:
    if stats.gpu_frequency_mhz <= 0:
        return "GPU N/A"
    return f"GPU {stats.gpu_frequency_mhz} MHz"


def format_temperature(stats: SystemStats) -> str:
    if not stats.has_temperature:
        return "Temp N/A"
    color = _LEVEL_COLORS[stats.temperature_level]
    return f"Temp [{color}]{stats.cpu_temperature_c:.1f}°C[/{color}]"


def format_core_frequencies(frequencies: tuple[int, ...]) -> str:
    """Two cores per line; 0 MHz is shown as Offline."""
    if not frequencies:
        return ""
    cells = [
        f"Core {core:<2} {f'{freq} MHz' if freq > 0 else 'Offline':>9}"
        for core, freq in enumerate(frequencies)
    ]
    rows = ["   ".join(cells[i : i + 2]) for i in range(0, len(cells), 2)]
    return "\n".join(rows)


class StatsPanel(Vertical):
    """Panel showing the latest snapshot and the CPU sparkline."""

    DEFAULT_CSS = """
    StatsPanel {
        height: auto;
        padding: 1;
        background: $surface;
    }

    StatsPanel Static {
        margin-bottom: 1;
    }

    #cpu-sparkline {
        height: 2;
        margin-bottom: 1;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._stats = SystemStats()

    @property
    def stats(self) -> SystemStats:
        return self._stats

    def compose(self) -> ComposeResult:
        yield Static("Loading CPU info...", id="cpu-info")
        yield Sparkline([], id="cpu-sparkline")
        yield Static("Loading memory info...", id="mem-info")
        yield Static("", id="gpu-info")
        yield Static("", id="temp-info")
        yield Static("", id="core-info")

    def update_stats(self, stats: SystemStats, history: list[float]) -> None:
        """Update the panel from a snapshot and the current CPU history."""
        self._stats = stats
        try:
            self.query_one("#cpu-info", Static).update(format_cpu(stats))
            self.query_one("#cpu-sparkline", Sparkline).data = history
            self.query_one("#mem-info", Static).update(format_memory(stats))
            self.query_one("#gpu-info", Static).update(format_gpu(stats))
            self.query_one("#temp-info", Static).update(format_temperature(stats))
            self.query_one("#core-info", Static).update(
                format_core_frequencies(stats.cpu_frequencies_mhz)
            )
        except Exception:
            pass  # Widget not mounted yet


class SysmonApp(App):
    """Main sysmon application."""

    TITLE = APP_NAME
    SUB_TITLE = "System Monitor"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("c", "clear_history", "Clear history"),
    ]

    def __init__(
        self,
        config: MonitorConfig = DEFAULT_CONFIG,
        collector: StatsCollector | None = None,
    ) -> None:
        """Initialize the SysmonApp."""
        super().__init__()
        self._config = config
        self._update_queue: Queue[SystemStats] = Queue()
        self._monitor = SystemMonitor(
            self._update_queue,
            interval=config.interval,
            collector=collector or StatsCollector(config),
        )
        self._history = HistoryBuffer(config.history_capacity)

    @property
    def history(self) -> HistoryBuffer:
        return self._history

    @property
    def update_queue(self) -> Queue[SystemStats]:
        return self._update_queue

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield StatsPanel(id="stats-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Start the system monitor when the app is mounted."""
        self._monitor.start()
        self.set_interval(0.5, self._check_for_updates)

    def on_unmount(self) -> None:
        self._monitor.stop()

    def _check_for_updates(self) -> None:
        """Drain the queue, record every CPU value, and show the newest snapshot."""
        latest = None
        while True:
            try:
                stats = self._update_queue.get_nowait()
            except Empty:
                break
            if stats.cpu_usage_source is not CpuUsageSource.UNAVAILABLE:
                self._history.append(stats.cpu_usage_percent)
            latest = stats

        if latest is not None:
            self._update_ui(latest)

    def _update_ui(self, stats: SystemStats) -> None:
        try:
            panel = self.query_one("#stats-panel", StatsPanel)
            panel.update_stats(stats, self._history.values())
        except Exception:
            # The screen may be gone during shutdown
            logger.debug("Stats panel not available", exc_info=True)

    def action_clear_history(self) -> None:
        self._history.clear()
        self.notify("History cleared")

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="System Monitor")
    parser.add_argument("--interval", type=float, default=None, help="seconds per tick")
    parser.add_argument("--history", type=int, default=None, help="sparkline samples")
    parser.add_argument("--log-file", default=None, help="write logs to this file")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for sysmon application."""
    args = build_parser().parse_args(argv)
    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=args.log_level.upper())
    if args.history is not None and args.history < 1:
        raise SystemExit("--history must be at least 1")

    config = DEFAULT_CONFIG.with_overrides(
        interval=args.interval, history_capacity=args.history
    )
    app = SysmonApp(config)
    app.run()


if __name__ == "__main__":
    main()
