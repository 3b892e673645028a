"""Qt model for the latest probe samples using model/view pattern."""

from datetime import timedelta

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QFont

from inetmon.models import Sample
from inetmon.report import Report


def format_duration(duration: timedelta | None) -> str:
    """Render a duration as whole milliseconds, or seconds above one second."""
    if duration is None:
        return "-"
    ms = duration / timedelta(milliseconds=1)
    if ms >= 1000:
        return f"{ms / 1000:.2f}s"
    return f"{ms:.0f}ms"


class SampleModel(QAbstractTableModel):
    """Table model listing the samples of the most recent probe cycle.

    Rows are replaced wholesale on every report; UDP rows come first, each
    protocol sorted by target.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._samples: list[Sample] = []

        # Column definitions
        self._columns = ["Target", "Protocol", "Latency", "OK"]

    def rowCount(self, parent=QModelIndex()):
        """Return the number of rows (samples)."""
        if parent.isValid():
            return 0
        return len(self._samples)

    def columnCount(self, parent=QModelIndex()):
        """Return the number of columns."""
        if parent.isValid():
            return 0
        return len(self._columns)

    def data(self, index, role=Qt.DisplayRole):
        """Return data for a given cell."""
        if not index.isValid():
            return None

        if index.row() >= len(self._samples) or index.row() < 0:
            return None

        sample = self._samples[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == 0:
                return sample.target
            elif col == 1:
                return sample.protocol.value.upper()
            elif col == 2:
                return format_duration(sample.latency)
            elif col == 3:
                return "Yes" if sample.success else "No"

        elif role == Qt.FontRole:
            if not sample.success:
                font = QFont()
                font.setStrikeOut(True)
                return font

        elif role == Qt.TextAlignmentRole:
            if col == 2:
                return Qt.AlignRight | Qt.AlignVCenter
            elif col == 3:
                return Qt.AlignCenter
            return Qt.AlignLeft | Qt.AlignVCenter

        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        """Return header data."""
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            if 0 <= section < len(self._columns):
                return self._columns[section]
        return None

    def flags(self, index):
        if not index.isValid():
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    def set_report(self, report: Report | None):
        """Show the latest samples of the given report (None clears)."""
        self.beginResetModel()
        if report is None:
            self._samples = []
        else:
            self._samples = sorted(report.dns_samples, key=lambda s: s.target) + sorted(
                report.http_samples, key=lambda s: s.target
            )
        self.endResetModel()

    def get_samples(self):
        return list(self._samples)
