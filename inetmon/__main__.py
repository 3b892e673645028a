"""Entry point for InetMon application."""

import asyncio
import logging
import os
import sys

from inetmon.config import MonitorConfig
from inetmon.fake_collector import FakeProber, StaticPathObserver
from inetmon.logging_config import configure_logging
from inetmon.scheduler import InternetMonitor

logger = logging.getLogger(__name__)


def build_monitor_factory(config: MonitorConfig, force_fake: bool):
    """Return a callable creating a monitor wired to the selected collectors.

    Falls back to the fake collectors when the network collectors cannot be
    imported (e.g. psutil missing) or when INETMON_COLLECTOR=fake.
    """
    if not force_fake:
        try:
            from inetmon.collector_net import NetworkProber, SystemPathObserver

            logger.info("Network collectors imported successfully")
        except ImportError as e:
            logger.warning("Network collectors unavailable, using simulated data: %s", e)
        else:

            def create_network_monitor() -> InternetMonitor:
                prober = NetworkProber(
                    http_timeout=config.http_timeout, udp_timeout=config.udp_timeout
                )
                return InternetMonitor(prober, SystemPathObserver(), config)

            return create_network_monitor

    logger.info("Using FakeProber")

    def create_fake_monitor() -> InternetMonitor:
        return InternetMonitor(FakeProber(), StaticPathObserver(), config)

    return create_fake_monitor


async def run_headless(monitor: InternetMonitor) -> None:
    """Log every report until the monitor stops or the task is cancelled."""
    subscription = monitor.subscribe()
    task = asyncio.create_task(monitor.start())
    try:
        async for report in subscription:
            all_stats = report.all
            logger.info(
                "path=%s quality=%s rate=%.0f%% mean=%s http_jitter=%.1fms",
                report.path_status.value,
                report.quality.value,
                report.rate * 100,
                f"{all_stats.mean.total_seconds() * 1000:.1f}ms" if all_stats else "-",
                report.http_jitter.total_seconds() * 1000,
            )
        await task
    finally:
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        aclose = getattr(monitor.prober, "aclose", None)
        if aclose is not None:
            await aclose()


def main():
    """Main entry point for the InetMon application."""
    configure_logging()

    try:
        config = MonitorConfig.from_env()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    force_fake = os.environ.get("INETMON_COLLECTOR", "").lower() == "fake"
    monitor_factory = build_monitor_factory(config, force_fake)

    if os.environ.get("INETMON_HEADLESS", "").lower() in ("1", "true", "yes"):
        try:
            asyncio.run(run_headless(monitor_factory()))
        except KeyboardInterrupt:
            logger.info("Interrupted")
        return

    from PySide6.QtWidgets import QApplication

    from inetmon.ui.main_window import MainWindow

    app = QApplication(sys.argv)
    window = MainWindow(monitor_factory)
    window.show()
    window.start_monitoring()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
