"""Каталог окружений: загрузка environments.json и CRUD."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from src.environments.exceptions import EnvironmentConfigError
from src.environments.models import EnvironmentConfig

DEFAULT_ENVIRONMENTS: List[Dict[str, Any]] = [
    {"name": "Dev Environment", "docker_host": "", "comment": ""},
    {"name": "UAT Environment", "docker_host": "", "comment": ""},
]


class EnvironmentCatalog:
    """Упорядоченный список окружений, сохраняемый в JSON."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._logger = logging.getLogger(__name__)
        self._environments: List[EnvironmentConfig] = []
        self.load_from_disk()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def names(self) -> List[str]:
        return [environment.name for environment in self._environments]

    def hosts(self) -> Dict[str, str]:
        """Сопоставление имени окружения и DOCKER_HOST."""

        return {item.name: item.docker_host for item in self._environments}

    # ------------------------------------------------------------- persistence --
    def load_from_disk(self) -> None:
        """Загружает environments.json, создаёт файл с примером при отсутствии."""

        if not self._file_path.exists():
            self._logger.info("Environments file %s not found, writing defaults.", self._file_path)
            self._environments = [
                EnvironmentConfig.from_dict(item) for item in DEFAULT_ENVIRONMENTS
            ]
            self.save_to_disk()
            return

        try:
            content: Dict[str, Any] = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise EnvironmentConfigError(str(exc), path=self._file_path) from exc

        entries = content.get("environments", []) if isinstance(content, dict) else []
        loaded: List[EnvironmentConfig] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise EnvironmentConfigError(f"unexpected entry {entry!r}", path=self._file_path)
            try:
                loaded.append(EnvironmentConfig.from_dict(entry))
            except ValueError as exc:
                raise EnvironmentConfigError(str(exc), path=self._file_path) from exc
        self._validate(loaded)
        self._environments = loaded

    def save_to_disk(self) -> None:
        """Сериализует окружения в JSON."""

        payload = {
            "environments": [environment.to_dict() for environment in self._environments],
        }
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    # ----------------------------------------------------------------- helpers --
    def _validate(self, environments: List[EnvironmentConfig]) -> None:
        if not environments:
            raise EnvironmentConfigError("no environments configured", path=self._file_path)
        seen: set[str] = set()
        for environment in environments:
            if environment.name in seen:
                raise EnvironmentConfigError(
                    f"duplicate environment name '{environment.name}'", path=self._file_path
                )
            seen.add(environment.name)
