"""Тесты выполнения workflow и раннера."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Dict, List

import pytest

from src.monitor.exceptions import ProbeExecutionError
from src.monitor.executor import CommandExecutor
from src.monitor.probes import (
    ContainerStatusProbe,
    ImageInventoryUpdate,
    Probe,
    ProbeUpdate,
    VersionUpdate,
)
from src.monitor.registry import EnvironmentRegistry
from src.monitor.workflow import (
    Workflow,
    WorkflowRunner,
    WorkflowState,
    build_workflows,
)


class StaticProbe(Probe):
    """Проверка, возвращающая заранее заданное обновление."""

    def __init__(self, update: ProbeUpdate) -> None:
        super().__init__(CommandExecutor())
        self.update = update
        self.environments: List[str] = []

    def execute(self, environment: str) -> ProbeUpdate:
        self.environments.append(environment)
        return self.update


class FailingProbe(Probe):
    def __init__(self) -> None:
        super().__init__(CommandExecutor())
        self.calls = 0

    def execute(self, environment: str) -> ProbeUpdate:
        self.calls += 1
        raise ProbeExecutionError(["docker", "container", "ls"], "exited with code 1")


def test_workflow_runs_probes_in_order() -> None:
    registry = EnvironmentRegistry(["Dev"])
    version = StaticProbe(VersionUpdate(version="Docker version 24"))
    images = StaticProbe(ImageInventoryUpdate(total=4))
    workflow = Workflow(environment="Dev", probes=[version, images])

    workflow.run(registry)

    assert workflow.state is WorkflowState.COMPLETED
    assert workflow.failed_at is None
    assert registry.get("Dev").docker_version == "Docker version 24"
    assert registry.get("Dev").total_local_images == 4
    assert version.environments == ["Dev"]


def test_workflow_stops_at_first_failure_without_rollback() -> None:
    registry = EnvironmentRegistry(["Dev"])
    first = StaticProbe(VersionUpdate(version="Docker version 24"))
    failing = FailingProbe()
    last = StaticProbe(ImageInventoryUpdate(total=9))
    workflow = Workflow(environment="Dev", probes=[first, failing, last])

    with pytest.raises(ProbeExecutionError):
        workflow.run(registry)

    state = registry.get("Dev")
    assert workflow.state is WorkflowState.FAILED
    assert workflow.failed_at == 1
    assert state.docker_version == "Docker version 24"
    assert (state.running_containers, state.stopped_containers) == (0, 0)
    assert state.total_local_images == 0
    assert failing.calls == 1
    assert last.environments == []


def test_rerun_after_failure_clears_previous_error() -> None:
    registry = EnvironmentRegistry(["Dev"])
    workflow = Workflow(environment="Dev", probes=[FailingProbe()])
    with pytest.raises(ProbeExecutionError):
        workflow.run(registry)

    workflow.probes = [StaticProbe(VersionUpdate(version="Docker version 24"))]
    result = WorkflowRunner(registry).run_all([workflow])[0]

    assert result.state is WorkflowState.COMPLETED
    assert (result.failed_at, result.error_message) == (None, None)


def test_new_workflow_is_pending() -> None:
    assert Workflow(environment="Dev").state is WorkflowState.PENDING


def test_runner_continues_after_failed_workflow(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    registry = EnvironmentRegistry(["Dev", "UAT"])
    version = StaticProbe(VersionUpdate(version="Docker version 24"))
    workflows = [
        Workflow(environment="Dev", probes=[FailingProbe(), version]),
        Workflow(environment="UAT", probes=[version]),
    ]

    results = WorkflowRunner(registry).run_all(workflows)

    assert [result.state for result in results] == [WorkflowState.FAILED, WorkflowState.COMPLETED]
    assert results[0].failed_at == 0
    assert "exited with code 1" in (results[0].error_message or "")
    assert not results[0].succeeded
    assert results[1].succeeded
    assert registry.get("Dev").docker_version == ""
    assert registry.get("UAT").docker_version == "Docker version 24"
    assert "Error occurred" in caplog.text


def test_build_workflows_shares_probe_instances() -> None:
    probe = StaticProbe(VersionUpdate(version="v"))

    workflows = build_workflows(["Dev", "UAT"], [probe])

    assert [workflow.environment for workflow in workflows] == ["Dev", "UAT"]
    assert workflows[0].probes[0] is workflows[1].probes[0]


def quoted(*records: Dict[str, Any]) -> str:
    return "".join('"' + json.dumps(record, separators=(",", ":")) + '"\n' for record in records)


def test_container_status_scenario_for_dev_only() -> None:
    blob = quoted(
        {"Command": "bash", "ID": "1", "Image": "alpine", "State": "exited"},
        {"Command": "nginx", "ID": "2", "Image": "nginx", "State": "running"},
    )

    def runner(args, *, env, timeout, combine_output):  # type: ignore[no-untyped-def]
        return subprocess.CompletedProcess(args, 0, blob.encode("utf-8"), b"")

    registry = EnvironmentRegistry(["Dev", "UAT"])
    probe = ContainerStatusProbe(CommandExecutor(runner=runner))

    Workflow(environment="Dev", probes=[probe]).run(registry)

    dev = registry.get("Dev")
    uat = registry.get("UAT")
    assert dev.stopped_containers == 1
    assert dev.running_containers == 1
    assert [record.image for record in dev.containers] == ["alpine", "nginx"]
    assert (uat.stopped_containers, uat.running_containers) == (0, 0)
    assert uat.containers == []
