"""Workflow: последовательность проверок, привязанная к одному окружению."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.monitor.exceptions import ProbeExecutionError
from src.monitor.probes import Probe
from src.monitor.registry import EnvironmentRegistry

LOGGER = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    """Состояния workflow."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Workflow:
    """Окружение и упорядоченный список проверок для него."""

    environment: str
    probes: Sequence[Probe] = field(default_factory=tuple)
    state: WorkflowState = WorkflowState.PENDING
    failed_at: Optional[int] = None
    error: Optional[ProbeExecutionError] = None

    def run(self, registry: EnvironmentRegistry) -> None:
        """Выполняет проверки по порядку и останавливается на первой ошибке.

        Обновления уже выполненных проверок остаются в реестре.
        """

        LOGGER.info("Executing workflow - %s", self.environment)
        self.state = WorkflowState.RUNNING
        self.failed_at = None
        self.error = None
        for index, probe in enumerate(self.probes):
            try:
                update = probe.execute(self.environment)
            except ProbeExecutionError as exc:
                self.state = WorkflowState.FAILED
                self.failed_at = index
                self.error = exc
                raise
            registry.apply(self.environment, update)
        self.state = WorkflowState.COMPLETED


@dataclass(slots=True)
class WorkflowResult:
    """Итог выполнения одного workflow."""

    environment: str
    state: WorkflowState
    failed_at: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is WorkflowState.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "state": self.state.value,
            "failed_at": self.failed_at,
            "error": self.error_message,
        }


class WorkflowRunner:
    """Выполняет workflow один за другим; сбой одного не мешает остальным."""

    def __init__(self, registry: EnvironmentRegistry) -> None:
        self._registry = registry

    def run_all(self, workflows: Iterable[Workflow]) -> List[WorkflowResult]:
        results: List[WorkflowResult] = []
        for index, workflow in enumerate(workflows):
            LOGGER.info("# %s Workflow - %s", index, workflow.environment)
            try:
                workflow.run(self._registry)
            except ProbeExecutionError as exc:
                LOGGER.error(
                    "Error occurred in workflow %s at probe %s: %s",
                    workflow.environment,
                    workflow.failed_at,
                    exc,
                )
            results.append(
                WorkflowResult(
                    environment=workflow.environment,
                    state=workflow.state,
                    failed_at=workflow.failed_at,
                    error_message=str(workflow.error) if workflow.error else None,
                )
            )
        return results


def build_workflows(names: Iterable[str], probes: Sequence[Probe]) -> List[Workflow]:
    """По одному workflow на окружение, все с общими экземплярами проверок."""

    return [Workflow(environment=name, probes=tuple(probes)) for name in names]
