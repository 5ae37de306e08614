"""Версия и содержимое config.json по умолчанию."""

from __future__ import annotations

from typing import Any, Dict

from src.settings.groups import GROUP_TYPES

CONFIG_VERSION = "1.1.0"
SCHEMA_VERSION = 2


def default_config() -> Dict[str, Any]:
    """Новый словарь config.json со значениями групп по умолчанию."""

    config: Dict[str, Any] = {"version": CONFIG_VERSION, "schema_version": SCHEMA_VERSION}
    for group_type in GROUP_TYPES:
        config[group_type.group_name] = group_type().to_dict()
    return config
