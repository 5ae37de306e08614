"""Единый реестр настроек монитора поверх config.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

from src.settings.exceptions import SettingsIOError, SettingsNotFoundError, SettingsValidationError
from src.settings.groups import GROUP_TYPES, SettingsGroup
from src.settings.migration import migrate, parse_version
from src.settings.schemas import CONFIG_VERSION, default_config
from src.utils.paths import CONFIG_DIR

LOGGER = logging.getLogger(__name__)

_MISSING = object()

LEGACY_VERSION = "1.0.0"


class SettingsRegistry:
    """Singleton: все модули читают одни и те же группы настроек.

    Повторный вызов конструктора возвращает существующий экземпляр и
    только меняет путь к файлу, если он передан.
    """

    _instance: Optional["SettingsRegistry"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "SettingsRegistry":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._ready = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if self._ready:
            if config_path is not None:
                self._file_path = config_path
            return
        self._file_path = config_path or CONFIG_DIR / "config.json"
        self._groups: Dict[str, SettingsGroup] = {
            group_type.group_name: group_type() for group_type in GROUP_TYPES
        }
        self._extra: Dict[str, Any] = {
            key: value for key, value in default_config().items() if key not in self._groups
        }
        self._ready = True

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    @property
    def config_path(self) -> Path:
        return self._file_path

    def get_group(self, group: str) -> SettingsGroup:
        try:
            return self._groups[group]
        except KeyError:
            raise SettingsNotFoundError(group) from None

    def get_value(self, group: str, key: str, default: Any = _MISSING) -> Any:
        """Значение настройки; ``default`` подавляет SettingsNotFoundError."""

        try:
            return self.get_group(group).get(key)
        except SettingsNotFoundError:
            if default is _MISSING:
                raise
            return default

    def set_value(self, group: str, key: str, value: Any) -> None:
        settings_group = self.get_group(group)
        previous = settings_group.get(key)
        settings_group.set(key, value)
        LOGGER.debug("Setting %s.%s changed: %r -> %r", group, key, previous, value)

    def save_to_disk(self, path: Optional[Path] = None) -> None:
        target = path or self._file_path
        payload = dict(self._extra)
        payload.update({name: group.to_dict() for name, group in self._groups.items()})
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise SettingsIOError(target, str(exc)) from exc

    def load_from_disk(self, path: Optional[Path] = None) -> None:
        """Читает файл, мигрирует старые версии и проверяет все значения.

        Отсутствующий файл создаётся со значениями по умолчанию.
        """

        target = path or self._file_path
        if not target.exists():
            LOGGER.info("Config file %s not found, writing defaults", target)
            self.save_to_disk(target)
            return

        content = self._read(target)
        # файл без version старше самой первой схемы
        raw_version = content.get("version", LEGACY_VERSION)
        try:
            version = parse_version(raw_version)
        except ValueError as exc:
            raise SettingsIOError(target, f"bad version {raw_version!r}") from exc
        config = self._merge_with_defaults(content)
        config = migrate(config, version, config_path=target)
        config["version"] = CONFIG_VERSION

        for name, group in self._groups.items():
            section = config.pop(name)
            if isinstance(section, dict):
                group.from_dict(section)
        self._extra = config
        self.validate()

    def validate(self) -> bool:
        for qualified_key, group, key in self._iter_keys():
            value = group.get(key)
            is_valid, error = group.validate(key, value)
            if not is_valid:
                raise SettingsValidationError(qualified_key, value, error)
        return True

    def reset_to_defaults(self) -> None:
        for group in self._groups.values():
            group.reset_to_defaults()

    def _iter_keys(self) -> Iterator[Tuple[str, SettingsGroup, str]]:
        for name, group in self._groups.items():
            for key in group.keys():
                yield f"{name}.{key}", group, key

    @staticmethod
    def _read(target: Path) -> Dict[str, Any]:
        try:
            content = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsIOError(target, str(exc)) from exc
        if not isinstance(content, dict):
            raise SettingsIOError(target, "top-level JSON object expected")
        return content

    @staticmethod
    def _merge_with_defaults(incoming: Dict[str, Any]) -> Dict[str, Any]:
        config = default_config()
        for key, value in incoming.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key].update(value)
            else:
                config[key] = value
        return config
