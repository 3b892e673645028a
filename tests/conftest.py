"""Shared fixtures for InetMon tests."""

import os

import pytest

# Qt widgets need a platform plugin; tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
