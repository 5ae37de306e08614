"""Проверки Docker-окружения.

Проверка ничего не знает о реестре окружений: она выполняет команду и
возвращает обновление (``ProbeUpdate``), которое затем применяет владелец
реестра. Поэтому один и тот же экземпляр проверки можно использовать в
нескольких workflow.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, TypeVar

from src.monitor.exceptions import ProbeExecutionError
from src.monitor.executor import CommandExecutor
from src.monitor.models import ContainerRecord, EnvironmentState, ImageRecord
from src.monitor.splitter import RecordFactory, SplitResult, split_records
from src.utils.helpers import shorten

LOGGER = logging.getLogger(__name__)

JSON_FORMAT = '"{{json .}}"'
VERSION_ARGS: Tuple[str, ...] = ("--version",)
CONTAINERS_ARGS: Tuple[str, ...] = ("container", "ls", "-a", "--format", JSON_FORMAT)
IMAGES_ARGS: Tuple[str, ...] = ("images", "--format", JSON_FORMAT)

CONTAINER_LEADING_KEY = "Command"
IMAGE_LEADING_KEY = "Containers"
STOPPED_STATE = "exited"
DEFAULT_SYSTEM_IMAGE_MARKERS: Tuple[str, ...] = ("k8s.gcr.io", "kubernetes")

T = TypeVar("T")


# ------------------------------------------------------------------- updates
class ProbeUpdate(ABC):
    """Изменение состояния окружения, полученное от проверки."""

    @abstractmethod
    def apply(self, state: EnvironmentState) -> None:
        """Перезаписывает соответствующие поля состояния."""


@dataclass(slots=True)
class VersionUpdate(ProbeUpdate):
    version: str

    def apply(self, state: EnvironmentState) -> None:
        state.docker_version = self.version


@dataclass(slots=True)
class ContainerStatusUpdate(ProbeUpdate):
    running: int
    stopped: int
    containers: List[ContainerRecord] = field(default_factory=list)
    degraded: int = 0

    def apply(self, state: EnvironmentState) -> None:
        state.running_containers = self.running
        state.stopped_containers = self.stopped
        state.containers = list(self.containers)
        state.degraded_containers = self.degraded


@dataclass(slots=True)
class ImageInventoryUpdate(ProbeUpdate):
    total: int
    images: List[ImageRecord] = field(default_factory=list)
    degraded: int = 0

    def apply(self, state: EnvironmentState) -> None:
        state.total_local_images = self.total
        state.images = list(self.images)
        state.degraded_images = self.degraded


# -------------------------------------------------------------------- probes
class Probe(ABC):
    """Единица работы: одна команда docker и разбор её вывода."""

    name: str = ""

    def __init__(self, executor: CommandExecutor) -> None:
        self._executor = executor

    @abstractmethod
    def execute(self, environment: str) -> ProbeUpdate:
        """Выполняет проверку, при сбое команды поднимает ProbeExecutionError."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class VersionProbe(Probe):
    """docker --version; вывод сохраняется как есть."""

    name = "docker_version"

    def execute(self, environment: str) -> VersionUpdate:
        version = self._executor.run(VERSION_ARGS, environment)
        LOGGER.info("Docker version for %s: %s", environment, version.strip())
        return VersionUpdate(version=version)


class ContainerStatusProbe(Probe):
    """Подсчёт запущенных и остановленных контейнеров."""

    name = "containers_status"

    def execute(self, environment: str) -> ContainerStatusUpdate:
        # CLI пишет то в stdout, то в stderr в зависимости от версии
        output = self._executor.run(CONTAINERS_ARGS, environment, combine_output=True)
        result = _split_or_fail(
            output,
            CONTAINER_LEADING_KEY,
            ContainerRecord.from_dict,
            (self._executor.docker_binary, *CONTAINERS_ARGS),
        )

        stopped = 0
        running = 0
        for record in result.records:
            if record.state == STOPPED_STATE:
                stopped += 1
            else:
                running += 1

        LOGGER.info(
            "Environment %s: stopped containers %d, running containers %d",
            environment,
            stopped,
            running,
        )
        return ContainerStatusUpdate(
            running=running,
            stopped=stopped,
            containers=result.records,
            degraded=len(result.degraded),
        )


class ImageInventoryProbe(Probe):
    """Инвентаризация локальных образов."""

    name = "local_images"

    def __init__(
        self,
        executor: CommandExecutor,
        *,
        exclude_system_images: bool = False,
        system_image_markers: Iterable[str] = DEFAULT_SYSTEM_IMAGE_MARKERS,
    ) -> None:
        super().__init__(executor)
        self.exclude_system_images = exclude_system_images
        self.system_image_markers = tuple(system_image_markers)

    def execute(self, environment: str) -> ImageInventoryUpdate:
        output = self._executor.run(IMAGES_ARGS, environment, combine_output=True)
        result = _split_or_fail(
            output,
            IMAGE_LEADING_KEY,
            ImageRecord.from_dict,
            (self._executor.docker_binary, *IMAGES_ARGS),
        )

        images = result.records
        if self.exclude_system_images:
            images = [image for image in images if not self.is_system_image(image)]
            skipped = len(result.records) - len(images)
            if skipped:
                LOGGER.debug("Skipped %d system images for %s", skipped, environment)

        LOGGER.info("Environment %s: total local images %d", environment, len(images))
        return ImageInventoryUpdate(
            total=len(images),
            images=images,
            degraded=len(result.degraded),
        )

    def is_system_image(self, image: ImageRecord) -> bool:
        return any(marker in image.repository for marker in self.system_image_markers)


def _split_or_fail(
    output: str,
    leading_key: str,
    factory: RecordFactory[T],
    command: Sequence[str],
) -> SplitResult[T]:
    """Разбирает вывод; непустой вывод без единой записи считается сбоем."""

    result = split_records(output, leading_key, factory)
    if output.strip() and not result.records:
        raise ProbeExecutionError(
            command,
            f"no '{leading_key}' records found in output: {shorten(output)}",
            output=output,
        )
    return result


def build_default_probes(
    executor: CommandExecutor,
    *,
    exclude_system_images: bool = False,
    system_image_markers: Iterable[str] = DEFAULT_SYSTEM_IMAGE_MARKERS,
) -> Tuple[Probe, ...]:
    """Стандартный набор проверок, общий для всех окружений."""

    return (
        VersionProbe(executor),
        ContainerStatusProbe(executor),
        ImageInventoryProbe(
            executor,
            exclude_system_images=exclude_system_images,
            system_image_markers=system_image_markers,
        ),
    )
