"""Проверки подсистемы логирования."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from src.utils.logger import LOG_FILE_NAME, configure_logging, resolve_log_level


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_configure_logging_creates_file(tmp_path: Path) -> None:
    """После конфигурации должен появиться monitor.log с записью."""

    log_dir = tmp_path / "logs"
    configure_logging(log_dir, level_name="INFO", max_bytes=1024, backup_count=1)

    logging.getLogger("src.monitor.test").info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = log_dir / LOG_FILE_NAME
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_console_handler_writes_to_stderr(tmp_path: Path) -> None:
    configure_logging(tmp_path, level_name="warning")

    root = logging.getLogger()
    assert root.level == logging.WARNING
    rotating = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
    streams = [
        h
        for h in root.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler)
    ]
    assert len(rotating) == 1
    assert rotating[0].backupCount == 5
    assert [h.stream for h in streams] == [sys.stderr]


def test_resolve_log_level() -> None:
    assert resolve_log_level("debug") == logging.DEBUG
    with pytest.raises(ValueError):
        resolve_log_level("INVALID")
