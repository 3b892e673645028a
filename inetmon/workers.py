"""Worker that runs the asyncio monitor off the Qt main thread."""

import asyncio
import logging
import threading

from PySide6.QtCore import QObject, QRunnable, Signal

from inetmon.scheduler import InternetMonitor

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """Signals for communicating between the monitor thread and main thread."""

    report_ready = Signal(object)  # Emits Report
    error = Signal(str)  # Emits error message
    finished = Signal()  # Emits when the monitor has stopped


class MonitorWorker(QRunnable):
    """Runs an InternetMonitor on a private event loop in a pool thread.

    Each report published by the monitor is forwarded through
    ``signals.report_ready``. ``stop()`` may be called from any thread.
    """

    def __init__(self, monitor: InternetMonitor):
        super().__init__()
        self.monitor = monitor
        self.signals = WorkerSignals()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_requested = threading.Event()
        self.setAutoDelete(False)

    def run(self):
        """Execute the monitor until stopped."""
        try:
            logger.debug("Monitor worker starting")
            asyncio.run(self._run_monitor())
            logger.debug("Monitor worker completed")
        except Exception as e:
            logger.exception("Monitor worker exception: error=%s", str(e))
            self.signals.error.emit(str(e))
        finally:
            self._loop = None
            self.signals.finished.emit()

    async def _run_monitor(self):
        self._loop = asyncio.get_running_loop()
        subscription = self.monitor.subscribe()
        monitor_task = asyncio.create_task(self.monitor.start())
        # Let start() set up its queue so an early stop request is honored
        await asyncio.sleep(0)
        if self._stop_requested.is_set():
            self.monitor.stop()

        try:
            async for report in subscription:
                self.signals.report_ready.emit(report)

            # Subscriptions end when the monitor stops; surface any failure
            await monitor_task
        finally:
            aclose = getattr(self.monitor.prober, "aclose", None)
            if aclose is not None:
                await aclose()

    def stop(self):
        """Request the monitor to stop (thread-safe)."""
        self._stop_requested.set()
        loop = self._loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self.monitor.stop)
