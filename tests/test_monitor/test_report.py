"""Тесты текстовой и JSON-сводки."""

from __future__ import annotations

import json

from src.monitor.models import ContainerRecord
from src.monitor.probes import ContainerStatusUpdate, VersionUpdate
from src.monitor.registry import EnvironmentRegistry
from src.monitor.report import (
    first_container_image,
    format_environment,
    render_json,
    render_summary,
)
from src.monitor.workflow import WorkflowResult, WorkflowState


def test_format_environment_lines() -> None:
    registry = EnvironmentRegistry(["Dev"])
    registry.apply("Dev", VersionUpdate(version="Docker version 24.0.7\n"))
    registry.apply("Dev", ContainerStatusUpdate(running=3, stopped=1, degraded=1))

    lines = format_environment(registry.get("Dev"))

    assert lines[0] == "Docker version: Docker version 24.0.7"
    assert lines[1] == "Stopped Containers: 1 Running Containers: 3"
    assert lines[2] == "Total local images: 0"
    assert lines[3] == "Unparsed records: 1"


def test_render_summary_reports_failures() -> None:
    registry = EnvironmentRegistry(["Dev", "UAT"])
    results = [
        WorkflowResult(environment="Dev", state=WorkflowState.COMPLETED),
        WorkflowResult(
            environment="UAT",
            state=WorkflowState.FAILED,
            failed_at=0,
            error_message="Command 'docker --version' failed: boom",
        ),
    ]

    summary = render_summary(registry, results)

    assert "# 0 Workflow - Dev: completed" in summary
    assert "# 1 Workflow - UAT: failed" in summary
    assert "Error occurred at probe 0: Command 'docker --version' failed: boom" in summary
    assert "Docker version: N/A" in summary


def test_first_container_image_is_guarded() -> None:
    assert first_container_image(EnvironmentRegistry([])) is None

    registry = EnvironmentRegistry(["Dev", "UAT"])
    assert first_container_image(registry) is None

    registry.apply(
        "Dev",
        ContainerStatusUpdate(running=1, stopped=0, containers=[ContainerRecord(image="nginx")]),
    )
    assert first_container_image(registry) == "nginx"


def test_render_json_includes_records_and_failures() -> None:
    registry = EnvironmentRegistry(["Dev"])
    containers = [ContainerRecord(command="bash", image="ubuntu", state="exited")]
    registry.apply("Dev", ContainerStatusUpdate(running=0, stopped=1, containers=containers))
    results = [
        WorkflowResult(
            environment="Dev",
            state=WorkflowState.FAILED,
            failed_at=2,
            error_message="Command 'docker images' failed: timed out after 30 seconds",
        )
    ]

    document = json.loads(render_json(registry, results))

    assert document["workflows"] == [
        {
            "environment": "Dev",
            "state": "failed",
            "failed_at": 2,
            "error": "Command 'docker images' failed: timed out after 30 seconds",
        }
    ]
    dev = document["environments"][0]
    assert dev["stopped_containers"] == 1
    assert dev["containers"][0]["Image"] == "ubuntu"
    assert dev["containers"][0]["State"] == "exited"
