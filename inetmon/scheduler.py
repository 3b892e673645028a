"""Connectivity monitor: periodic probing, path tracking and report fan-out."""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime

from inetmon.broker import Subscription, SubscriptionBroker
from inetmon.collector import PathObserver, Prober
from inetmon.config import MonitorConfig
from inetmon.models import PathStatus, ProbeCycleResult
from inetmon.probe import run_probe_cycle
from inetmon.report import Report, build_report
from inetmon.window import SlidingWindow

logger = logging.getLogger(__name__)


class AlreadyRunningError(RuntimeError):
    """Raised when starting a monitor that is already running."""

    def __init__(self):
        super().__init__("monitor is already running")


@dataclass(frozen=True)
class PathUpdate:
    status: PathStatus


@dataclass(frozen=True)
class ProbeUpdate:
    result: ProbeCycleResult


class UpdateQueue:
    """Merged update channel that keeps only the newest pending items.

    Producers never block: when ``maxsize`` items are already pending, the
    oldest pending item is dropped. Single consumer. ``get`` returns None
    once the queue is closed and drained.
    """

    def __init__(self, maxsize: int = 1):
        self._items = deque(maxlen=maxsize)
        self._ready = asyncio.Event()
        self._closed = False
        self.dropped = 0

    def put(self, update) -> None:
        if self._closed:
            return
        if len(self._items) == self._items.maxlen:
            self.dropped += 1
            logger.debug("Pending update dropped: %s", type(self._items[0]).__name__)
        self._items.append(update)
        self._ready.set()

    def close(self) -> None:
        self._closed = True
        self._ready.set()

    async def get(self):
        while not self._items:
            if self._closed:
                return None
            self._ready.clear()
            await self._ready.wait()
        return self._items.popleft()


class InternetMonitor:
    """Tracks internet connectivity quality and publishes reports.

    Key features:
    - Path observer and periodic prober feed one merged update queue
    - Single consumption loop owns the sliding window and current report
    - Every new report is broadcast to all subscribers in order
    - Stops on cancellation of the task awaiting ``start()`` or on ``stop()``

    Not thread-safe: use from the event loop running ``start()``.
    """

    def __init__(
        self,
        prober: Prober,
        path_observer: PathObserver,
        config: MonitorConfig | None = None,
    ):
        """Initialize the monitor.

        Args:
            prober: Probe primitives used for each probe cycle
            path_observer: Source of path status transitions
            config: Session configuration (defaults to MonitorConfig())
        """
        self.prober = prober
        self.path_observer = path_observer
        self.config = config if config is not None else MonitorConfig()

        self._broker = SubscriptionBroker()
        self._window = SlidingWindow(self.config.window)
        self._report: Report | None = None
        self._updates: UpdateQueue | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def report(self) -> Report | None:
        """Most recent report, None until the first update."""
        return self._report

    def subscribe(self) -> Subscription:
        """Subscribe to reports published from now on."""
        return self._broker.subscribe()

    async def start(self) -> None:
        """Run the monitor until stopped.

        Returns normally after ``stop()``; propagates CancelledError when the
        awaiting task is cancelled. Subscriptions are finished either way.

        Raises:
            AlreadyRunningError: If the monitor is already running
        """
        if self._running:
            raise AlreadyRunningError()

        self._running = True
        self._broker.open()
        self._window = SlidingWindow(self.config.window)
        self._report = None
        self._updates = updates = UpdateQueue()

        producers = [
            asyncio.create_task(self._watch_path(updates), name="inetmon-path"),
            asyncio.create_task(self._tick(updates), name="inetmon-ticker"),
        ]
        logger.info(
            "Monitoring started: udp=%d, http=%d, interval=%.1fs, window=%d",
            len(self.config.udp_targets),
            len(self.config.http_targets),
            self.config.interval,
            self.config.window,
        )

        try:
            while True:
                update = await updates.get()
                if update is None:
                    break
                self._apply(update)
        finally:
            updates.close()
            for task in producers:
                task.cancel()
            try:
                await asyncio.gather(*producers, return_exceptions=True)
            finally:
                # A repeated cancellation can interrupt the gather
                self._broker.close()
                self._updates = None
                self._running = False
                logger.info("Monitoring stopped (dropped updates: %d)", updates.dropped)

    def stop(self) -> None:
        """Ask a running monitor to stop; no-op when idle."""
        if self._updates is not None:
            logger.debug("Stop requested")
            self._updates.close()

    def _apply(self, update) -> None:
        if isinstance(update, PathUpdate):
            self._publish(self._on_path_status(update.status))
        elif isinstance(update, ProbeUpdate):
            self._publish(self._on_probe_result(update.result))

    def _on_path_status(self, status: PathStatus) -> Report:
        now = datetime.now()
        if self._report is None:
            return Report.empty(status, now)
        return self._report.with_path_status(status, now)

    def _on_probe_result(self, result: ProbeCycleResult) -> Report:
        self._window.append(result)

        previous = self._report
        timestamp = result.timestamp
        path_status = PathStatus.REQUIRES_CONNECTION
        if previous is not None:
            timestamp = max(timestamp, previous.timestamp)
            path_status = previous.path_status

        return build_report(
            timestamp=timestamp,
            path_status=path_status,
            latest_dns=result.udp_samples,
            latest_http=result.http_samples,
            window_dns=self._window.udp_samples(),
            window_http=self._window.http_samples(),
        )

    def _publish(self, report: Report) -> None:
        self._report = report
        logger.debug(
            "Report published: path=%s, quality=%s, rate=%.3f",
            report.path_status.value,
            report.quality.value,
            report.rate,
        )
        self._broker.publish(report)

    async def _watch_path(self, updates: UpdateQueue) -> None:
        try:
            async for status in self.path_observer.watch():
                logger.debug("Path status: %s", status.value)
                updates.put(PathUpdate(status))
        except Exception as e:
            logger.exception("Path observer failed: error=%s", str(e))

    async def _tick(self, updates: UpdateQueue) -> None:
        """Run a probe cycle immediately, then once per interval.

        Deadlines advance by a fixed interval. A tick that fires later than
        the tolerance is logged but never skipped.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while True:
            lateness = loop.time() - deadline
            if lateness > self.config.tolerance:
                logger.warning("Probe tick late by %.1fs", lateness)

            result = await run_probe_cycle(self.prober, self.config)
            updates.put(ProbeUpdate(result))

            deadline += self.config.interval
            await asyncio.sleep(max(deadline - loop.time(), 0))
