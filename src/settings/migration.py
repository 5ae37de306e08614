"""Миграции config.json между версиями.

Миграция регистрируется декоратором ``migration(version)`` и применяется,
если версия файла ниже ``version``. Перед первой миграцией файл
копируется в ``config.bak``; при сбое копия возвращается на место.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from src.settings.exceptions import SettingsMigrationError

LOGGER = logging.getLogger(__name__)

VersionTuple = Tuple[int, int, int]
MigrationFunc = Callable[[Dict[str, Any]], Dict[str, Any]]

MIGRATIONS: Dict[VersionTuple, MigrationFunc] = {}


def parse_version(version: str) -> VersionTuple:
    """'1.1' -> (1, 1, 0); ValueError для нечисловых частей."""

    parts = [int(part) for part in str(version).split(".")[:3]]
    parts.extend([0] * (3 - len(parts)))
    return parts[0], parts[1], parts[2]


def format_version(version: VersionTuple) -> str:
    return ".".join(str(part) for part in version)


def migration(version: VersionTuple) -> Callable[[MigrationFunc], MigrationFunc]:
    def register(func: MigrationFunc) -> MigrationFunc:
        MIGRATIONS[version] = func
        return func

    return register


def migrate(config: Dict[str, Any], current: VersionTuple, *, config_path: Path) -> Dict[str, Any]:
    """Последовательно применяет все миграции новее ``current``."""

    pending = sorted(version for version in MIGRATIONS if version > current)
    if not pending:
        return config

    backup_path = config_path.with_suffix(".bak")
    if config_path.exists():
        shutil.copy2(config_path, backup_path)

    for version in pending:
        try:
            config = MIGRATIONS[version](config)
        except Exception as exc:
            if backup_path.exists():
                shutil.copy2(backup_path, config_path)
            raise SettingsMigrationError(
                format_version(current), format_version(version), str(exc)
            ) from exc
        LOGGER.info("Config %s migrated to %s", config_path, format_version(version))
    return config


@migration((1, 1, 0))
def migrate_to_1_1_0(config: Dict[str, Any]) -> Dict[str, Any]:
    """docker_binary из корня файла переезжает в monitor, маркеры становятся списком."""

    monitor = config.setdefault("monitor", {})
    legacy_binary = config.pop("docker_binary", None)
    if isinstance(legacy_binary, str) and legacy_binary.strip():
        monitor["docker_binary"] = legacy_binary.strip()
    markers = monitor.get("system_image_markers")
    if isinstance(markers, str):
        monitor["system_image_markers"] = [
            item.strip() for item in markers.split(",") if item.strip()
        ]
    config["version"] = "1.1.0"
    config["schema_version"] = 2
    return config
