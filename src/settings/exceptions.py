"""Ошибки чтения и проверки config.json."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from src.monitor.exceptions import MonitorError


class SettingsError(MonitorError):
    """Любая ошибка настроек приводит к коду возврата 1."""


class SettingsNotFoundError(SettingsError):
    def __init__(self, group: str, key: Optional[str] = None) -> None:
        self.group = group
        self.key = key
        super().__init__(
            f"Unknown setting '{self.qualified_key}'",
            context={"group": group, "key": key},
        )

    @property
    def qualified_key(self) -> str:
        return f"{self.group}.{self.key}" if self.key else self.group


class SettingsValidationError(SettingsError):
    """Значение отвергнуто валидатором группы."""

    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value for '{key}': {reason} (got {value!r})",
            context={"key": key, "value": value},
        )


class SettingsMigrationError(SettingsError):
    """Миграция не удалась; исходный файл восстановлен из .bak."""

    def __init__(self, from_version: str, to_version: str, reason: str) -> None:
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(
            f"Cannot migrate config from {from_version} to {to_version}: {reason}",
            context={"from_version": from_version, "to_version": to_version, "reason": reason},
        )


class SettingsIOError(SettingsError):
    """Файл настроек не читается, не пишется или не является JSON-объектом."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(
            f"Cannot use settings file '{path}': {reason}",
            context={"path": str(path), "reason": reason},
        )
