"""Настройка логирования: monitor.log с ротацией и копия в stderr."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME: Final[str] = "monitor.log"


def resolve_log_level(level_name: str) -> int:
    """'info' -> logging.INFO; ValueError для неизвестного имени."""

    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


def build_handlers(log_path: Path, *, max_bytes: int, backup_count: int) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        ),
        # stdout занят сводкой по окружениям
        logging.StreamHandler(sys.stderr),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    log_dir: Path,
    *,
    log_file_name: str = LOG_FILE_NAME,
    level_name: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Заменяет обработчики корневого логгера."""

    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=resolve_log_level(level_name),
        handlers=build_handlers(
            log_dir / log_file_name, max_bytes=max_bytes, backup_count=backup_count
        ),
        force=True,
    )
