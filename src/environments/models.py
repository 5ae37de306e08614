"""Модель описания одного Docker-окружения."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from src.utils.helpers import normalize_socket_path


@dataclass(slots=True)
class EnvironmentConfig:
    """Имя окружения и адрес его Docker daemon."""

    name: str
    docker_host: str = ""  # пусто: локальный daemon
    comment: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Сериализует модель в dict."""

        return {
            "name": self.name,
            "docker_host": self.docker_host,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnvironmentConfig":
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Environment name is required")
        return cls(
            name=name,
            docker_host=normalize_socket_path(str(data.get("docker_host") or "")),
            comment=data.get("comment", ""),
        )
