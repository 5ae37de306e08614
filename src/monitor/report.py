"""Сводка по результатам проверок: текст для консоли и JSON."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from src.monitor.models import EnvironmentState
from src.monitor.registry import EnvironmentRegistry
from src.monitor.workflow import WorkflowResult


def format_environment(state: EnvironmentState) -> List[str]:
    """Строки сводки для одного окружения."""

    lines = [
        f"Docker version: {state.docker_version.strip() or 'N/A'}",
        f"Stopped Containers: {state.stopped_containers} "
        f"Running Containers: {state.running_containers}",
        f"Total local images: {state.total_local_images}",
    ]
    degraded = state.degraded_containers + state.degraded_images
    if degraded:
        lines.append(f"Unparsed records: {degraded}")
    return lines


def render_summary(registry: EnvironmentRegistry, results: Sequence[WorkflowResult]) -> str:
    """Сводка по всем workflow в порядке их выполнения."""

    lines: List[str] = []
    for index, result in enumerate(results):
        lines.append(f"# {index} Workflow - {result.environment}: {result.state.value}")
        for state in registry.find(result.environment):
            lines.extend(f"  {line}" for line in format_environment(state))
        if result.error_message:
            lines.append(f"  Error occurred at probe {result.failed_at}: {result.error_message}")
    return "\n".join(lines)


def first_container_image(registry: EnvironmentRegistry) -> Optional[str]:
    """Образ первого контейнера первого окружения, если он есть."""

    states = registry.states()
    if not states or not states[0].containers:
        return None
    return states[0].containers[0].image


def render_json(registry: EnvironmentRegistry, results: Sequence[WorkflowResult]) -> str:
    """Та же сводка в JSON, вместе с разобранными записями контейнеров и образов."""

    payload: Dict[str, Any] = {
        "workflows": [result.to_dict() for result in results],
        "environments": [state.to_dict() for state in registry],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
