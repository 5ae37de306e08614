"""Группы настроек: значения по умолчанию и валидаторы по ключам."""

from __future__ import annotations

import copy
from typing import Any, ClassVar, Dict, Mapping, Tuple, Type

from src.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from src.settings.validators import (
    CompositeValidator,
    EnumValidator,
    ListOfValidator,
    RangeValidator,
    RegexValidator,
    TypeValidator,
    Validator,
    Verdict,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class SettingsGroup:
    """Раздел config.json.

    Подклассы задают ``group_name``, ``defaults`` и ``validators``.
    Неизвестные ключи при чтении пропускаются, при записи считаются ошибкой.
    """

    group_name: ClassVar[str] = ""
    defaults: ClassVar[Dict[str, Any]] = {}
    validators: ClassVar[Dict[str, Validator]] = {}

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self.reset_to_defaults()

    def keys(self) -> Tuple[str, ...]:
        return tuple(self.defaults)

    def get(self, key: str, default: Any = None) -> Any:
        self._require_key(key)
        return self._values.get(key, default)

    def validate(self, key: str, value: Any) -> Verdict:
        validator = self.validators.get(key)
        return validator.validate(value) if validator else (True, "")

    def set(self, key: str, value: Any) -> None:
        """Записывает значение или бросает SettingsValidationError."""

        self._require_key(key)
        is_valid, error = self.validate(key, value)
        if not is_valid:
            raise SettingsValidationError(f"{self.group_name}.{key}", value, error)
        self._values[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def from_dict(self, data: Mapping[str, Any]) -> None:
        for key in self.keys():
            if key in data:
                self.set(key, data[key])

    def reset_to_defaults(self) -> None:
        self._values = copy.deepcopy(self.defaults)

    def _require_key(self, key: str) -> None:
        if key not in self.defaults:
            raise SettingsNotFoundError(self.group_name, key)


class LoggingSettings(SettingsGroup):
    group_name = "logging"
    defaults = {
        "enabled": True,
        "level": "INFO",
        "max_file_size_mb": 10,
        "max_archived_files": 5,
    }
    validators = {
        "enabled": TypeValidator(bool),
        "level": EnumValidator(LOG_LEVELS),
        "max_file_size_mb": CompositeValidator([TypeValidator(int), RangeValidator(1, 1000)]),
        "max_archived_files": CompositeValidator([TypeValidator(int), RangeValidator(1, 50)]),
    }


class MonitorSettings(SettingsGroup):
    """Как вызывать docker и какие образы считать системными."""

    group_name = "monitor"
    defaults = {
        "docker_binary": "docker",
        # 0 отключает таймаут
        "command_timeout_sec": 30,
        "exclude_system_images": False,
        "system_image_markers": ["k8s.gcr.io", "kubernetes"],
    }
    validators = {
        "docker_binary": CompositeValidator([TypeValidator(str), RegexValidator(r"^\S+$")]),
        "command_timeout_sec": CompositeValidator([TypeValidator(int), RangeValidator(0, 600)]),
        "exclude_system_images": TypeValidator(bool),
        "system_image_markers": ListOfValidator(RegexValidator(r"^\S.*$")),
    }


GROUP_TYPES: Tuple[Type[SettingsGroup], ...] = (LoggingSettings, MonitorSettings)
