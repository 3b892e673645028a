"""Main window for InetMon application."""

import logging
from typing import Callable

from PySide6.QtCore import Qt, QThreadPool
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMainWindow,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from inetmon.models import Quality
from inetmon.report import Report
from inetmon.scheduler import InternetMonitor
from inetmon.ui.sample_model import SampleModel, format_duration
from inetmon.workers import MonitorWorker

logger = logging.getLogger(__name__)

QUALITY_COLORS = {
    Quality.EXCELLENT: "#2f6fdf",
    Quality.GOOD: "#2e9e44",
    Quality.FAIR: "#d8b400",
    Quality.POOR: "#e07b00",
    Quality.DISCONNECTED: "#d03030",
}
UNKNOWN_COLOR = "#888888"


def status_text(report: Report | None) -> str:
    """Connection summary such as ``satisfied / good``."""
    if report is None:
        return "unknown / ?"
    return f"{report.path_status.value} / {report.quality.value}"


class MainWindow(QMainWindow):
    """Main application window showing the live connectivity report."""

    def __init__(self, monitor_factory: Callable[[], InternetMonitor]):
        """Create the window.

        Args:
            monitor_factory: Builds a fresh monitor for every start
        """
        super().__init__()
        self.setWindowTitle("InetMon")
        self.setGeometry(100, 100, 900, 600)

        self.monitor_factory = monitor_factory
        self.thread_pool = QThreadPool.globalInstance()
        self._worker: MonitorWorker | None = None
        self.report: Report | None = None

        self.sample_model = SampleModel(self)

        self.setup_ui()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle application close event - stop the monitor thread."""
        self.stop_monitoring()
        self.thread_pool.waitForDone(2000)
        super().closeEvent(event)

    def setup_ui(self):
        """Set up the main user interface."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)
        main_layout.addWidget(self.create_control_panel(), 0)
        main_layout.addWidget(self.create_sample_area(), 1)

    def create_control_panel(self):
        """Create the left control panel with the report summary."""
        panel = QFrame()
        panel.setFrameStyle(QFrame.Box)
        panel.setFixedWidth(280)

        layout = QVBoxLayout(panel)

        controls_group = QGroupBox("Controls")
        controls_layout = QVBoxLayout(controls_group)

        self.start_button = QPushButton("Start Monitoring")
        self.start_button.clicked.connect(self.start_monitoring)
        controls_layout.addWidget(self.start_button)

        self.stop_button = QPushButton("Stop Monitoring")
        self.stop_button.clicked.connect(self.stop_monitoring)
        self.stop_button.setEnabled(False)
        controls_layout.addWidget(self.stop_button)

        layout.addWidget(controls_group)

        self.connection_label = QLabel(status_text(None))
        self.connection_label.setAlignment(Qt.AlignCenter)
        self._set_connection_color(UNKNOWN_COLOR)
        layout.addWidget(self.connection_label)

        stats_group = QGroupBox("Report")
        stats_layout = QVBoxLayout(stats_group)

        self.rate_label = QLabel("Rate: --")
        self.dns_label = QLabel("DNS: avg - / stddev -")
        self.http_label = QLabel("HTTP: avg - / stddev -")
        self.jitter_label = QLabel("Jitter: dns - / http -")

        for label in [self.rate_label, self.dns_label, self.http_label, self.jitter_label]:
            label.setStyleSheet("padding: 5px; font-family: monospace;")
            stats_layout.addWidget(label)

        layout.addWidget(stats_group)
        layout.addStretch()

        self.status_label = QLabel("Status: Ready")
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.status_label)

        return panel

    def create_sample_area(self):
        """Create the right area with the latest samples table."""
        area = QFrame()
        area.setFrameStyle(QFrame.Box)

        layout = QVBoxLayout(area)

        title = QLabel("Latest Probe Cycle")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-weight: bold; font-size: 14px; margin: 10px;")
        layout.addWidget(title)

        self.placeholder_label = QLabel("Waiting for initial report")
        self.placeholder_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.placeholder_label)

        self.table = QTableView()
        self.table.setModel(self.sample_model)
        self.table.setAlternatingRowColors(True)
        self.table.setSelectionBehavior(QTableView.SelectRows)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.Stretch)
        for col in (1, 2, 3):
            header.setSectionResizeMode(col, QHeaderView.ResizeToContents)
        layout.addWidget(self.table)

        return area

    def _set_connection_color(self, color: str):
        self.connection_label.setStyleSheet(
            f"font-weight: bold; padding: 6px; border-radius: 10px; background: {color};"
        )

    def start_monitoring(self):
        """Handle start button click."""
        if self._worker is not None:
            return

        worker = MonitorWorker(self.monitor_factory())
        worker.signals.report_ready.connect(self.on_report)
        worker.signals.error.connect(self.on_worker_error)
        worker.signals.finished.connect(self.on_worker_finished)
        self._worker = worker

        self.start_button.setEnabled(False)
        self.stop_button.setEnabled(True)
        self.status_label.setText("Status: Monitoring")
        self.thread_pool.start(worker)

    def stop_monitoring(self):
        """Handle stop button click."""
        if self._worker is None:
            return
        self._worker.stop()
        self.stop_button.setEnabled(False)
        self.status_label.setText("Status: Stopping")

    def on_report(self, report: Report):
        """Render a report published by the monitor."""
        self.report = report
        self.placeholder_label.setVisible(False)

        self.connection_label.setText(status_text(report))
        self._set_connection_color(QUALITY_COLORS.get(report.quality, UNKNOWN_COLOR))

        self.rate_label.setText(f"Rate: {report.rate:.0%}")
        dns, http = report.dns, report.http
        self.dns_label.setText(
            f"DNS: avg {format_duration(dns.mean if dns else None)}"
            f" / stddev {format_duration(dns.stddev if dns else None)}"
        )
        self.http_label.setText(
            f"HTTP: avg {format_duration(http.mean if http else None)}"
            f" / stddev {format_duration(http.stddev if http else None)}"
        )
        self.jitter_label.setText(
            f"Jitter: dns {format_duration(report.dns_jitter)}"
            f" / http {format_duration(report.http_jitter)}"
        )
        self.sample_model.set_report(report)

    def on_worker_error(self, error_msg: str):
        logger.error("Monitor error: %s", error_msg)
        self.status_label.setText(f"Status: Error - {error_msg}")

    def on_worker_finished(self):
        self._worker = None
        self.start_button.setEnabled(True)
        self.stop_button.setEnabled(False)
        if not self.status_label.text().startswith("Status: Error"):
            self.status_label.setText("Status: Stopped")
