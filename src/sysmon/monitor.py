"""Periodic sampling driver for sysmon."""

import logging
import threading
from queue import Queue

from sysmon.collector import StatsCollector
from sysmon.config import MIN_INTERVAL
from sysmon.models import SystemStats

logger = logging.getLogger(__name__)


class SystemMonitor:
    """
    Drive a StatsCollector at a fixed interval.

    Runs in a separate daemon thread and pushes each snapshot to a
    thread-safe Queue. The collector is only ever touched from that thread.
    """

    def __init__(
        self,
        update_queue: Queue[SystemStats],
        interval: float = 1.0,
        collector: StatsCollector | None = None,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            update_queue: Thread-safe queue to push snapshots to.
            interval: Seconds between ticks. Default 1.0s.
            collector: Collector to drive. A default one is created if omitted.
        """
        self._queue = update_queue
        self._interval = max(MIN_INTERVAL, interval)
        self._collector = collector or StatsCollector()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        """Get the current tick interval."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        """Set the tick interval."""
        self._interval = max(MIN_INTERVAL, value)

    @property
    def is_running(self) -> bool:
        """True while the tick thread is alive and driving the collector."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start issuing ticks to the collector. A running monitor is left as is."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="SystemMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop issuing ticks and wait for the tick in progress to finish.

        No tick is interrupted; each one is a handful of short file reads.

        Args:
            timeout: Seconds to wait for the tick thread to exit.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _poll_loop(self) -> None:
        """Sample once per interval until stopped; a failed tick is logged and skipped."""
        while not self._stop_event.is_set():
            try:
                self._queue.put(self._collector.sample_once())
            except Exception:
                # Keep ticking; the next sample starts from fresh reads
                logger.warning("Sampling tick failed", exc_info=True)

            self._stop_event.wait(timeout=self._interval)
