"""Pytest configuration.

State objects are QObjects and the theme preference styles the running
QApplication, so a single application is created for the whole session on
the offscreen platform and shut down at the end.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import pytest

from code_chrono.local_storage import LocalStorage

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QApplication exists before collecting/running tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from PySide6.QtWidgets import QApplication

    global _APP

    app = QApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QApplication([])


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Attempt a clean Qt shutdown to avoid lingering threads at interpreter exit."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        return
    app.quit()
    app.processEvents()


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture()
def chrono_logs():
    """Records emitted under the project logger (which does not propagate to caplog)."""
    logger = logging.getLogger("code_chrono")
    handler = _ListHandler()
    old_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        logger.setLevel(old_level)


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "local_storage.json"


@pytest.fixture()
def storage(storage_path: Path) -> LocalStorage:
    return LocalStorage(str(storage_path))
