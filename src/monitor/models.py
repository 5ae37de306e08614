"""Структуры данных, описывающие состояние Docker-окружений."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Tuple

# Пары (поле модели, ключ JSON из вывода docker --format "{{json .}}")
CONTAINER_KEYS: Tuple[Tuple[str, str], ...] = (
    ("command", "Command"),
    ("created_at", "CreatedAt"),
    ("id", "ID"),
    ("image", "Image"),
    ("labels", "Labels"),
    ("local_volumes", "LocalVolumes"),
    ("mounts", "Mounts"),
    ("names", "Names"),
    ("networks", "Networks"),
    ("ports", "Ports"),
    ("running_for", "RunningFor"),
    ("size", "Size"),
    ("state", "State"),
    ("status", "Status"),
)

IMAGE_KEYS: Tuple[Tuple[str, str], ...] = (
    ("containers", "Containers"),
    ("created_at", "CreatedAt"),
    ("created_since", "CreatedSince"),
    ("digest", "Digest"),
    ("id", "ID"),
    ("repository", "Repository"),
    ("shared_size", "SharedSize"),
    ("size", "Size"),
    ("tag", "Tag"),
    ("unique_size", "UniqueSize"),
    ("virtual_size", "VirtualSize"),
)


def _extract(data: Mapping[str, Any], keys: Tuple[Tuple[str, str], ...]) -> Dict[str, str]:
    """Достаёт значения по ключам JSON без учёта регистра."""

    lowered = {str(key).lower(): value for key, value in data.items()}
    values: Dict[str, str] = {}
    for attribute, source_key in keys:
        value = lowered.get(source_key.lower())
        values[attribute] = "" if value is None else str(value)
    return values


@dataclass(slots=True)
class ContainerRecord:
    """Одна строка docker container ls; значимо только поле state."""

    command: str = ""
    created_at: str = ""
    id: str = ""
    image: str = ""
    labels: str = ""
    local_volumes: str = ""
    mounts: str = ""
    names: str = ""
    networks: str = ""
    ports: str = ""
    running_for: str = ""
    size: str = ""
    state: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContainerRecord":
        return cls(**_extract(data, CONTAINER_KEYS))

    def to_dict(self) -> Dict[str, str]:
        return {source: getattr(self, attribute) for attribute, source in CONTAINER_KEYS}

    def is_empty(self) -> bool:
        """True для записи, которую не удалось разобрать."""

        return all(getattr(self, item.name) == "" for item in fields(self))


@dataclass(slots=True)
class ImageRecord:
    """Одна строка docker images."""

    containers: str = ""
    created_at: str = ""
    created_since: str = ""
    digest: str = ""
    id: str = ""
    repository: str = ""
    shared_size: str = ""
    size: str = ""
    tag: str = ""
    unique_size: str = ""
    virtual_size: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImageRecord":
        return cls(**_extract(data, IMAGE_KEYS))

    def to_dict(self) -> Dict[str, str]:
        return {source: getattr(self, attribute) for attribute, source in IMAGE_KEYS}

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) == "" for item in fields(self))


@dataclass(slots=True)
class EnvironmentState:
    """Агрегированное состояние одного окружения, изменяется на месте."""

    name: str
    docker_version: str = ""
    running_containers: int = 0
    stopped_containers: int = 0
    total_local_images: int = 0
    containers: List[ContainerRecord] = field(default_factory=list)
    images: List[ImageRecord] = field(default_factory=list)
    degraded_containers: int = 0  # записи, не прошедшие разбор
    degraded_images: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.name,
            "docker_version": self.docker_version,
            "running_containers": self.running_containers,
            "stopped_containers": self.stopped_containers,
            "total_local_images": self.total_local_images,
            "containers": [record.to_dict() for record in self.containers],
            "images": [record.to_dict() for record in self.images],
            "degraded_containers": self.degraded_containers,
            "degraded_images": self.degraded_images,
        }
