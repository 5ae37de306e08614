"""Тесты моделей записей и состояния окружения."""

from __future__ import annotations

from src.monitor.models import ContainerRecord, EnvironmentState, ImageRecord


def test_container_record_keys_are_case_insensitive() -> None:
    record = ContainerRecord.from_dict({"command": "bash", "state": "exited", "Id": "x1"})
    assert record.command == "bash"
    assert record.state == "exited"
    assert record.id == "x1"


def test_container_record_ignores_unknown_and_converts_values() -> None:
    record = ContainerRecord.from_dict({"State": "running", "Size": 42, "Mounts": None, "Extra": 1})
    assert record.state == "running"
    assert record.size == "42"
    assert record.mounts == ""


def test_container_record_to_dict_uses_cli_keys() -> None:
    data = ContainerRecord(id="abc", state="running").to_dict()
    assert data["ID"] == "abc"
    assert data["State"] == "running"
    assert set(data) >= {"Command", "RunningFor", "LocalVolumes"}


def test_image_record_created_since() -> None:
    record = ImageRecord.from_dict({"CreatedSince": "2 days ago", "Repository": "redis"})
    assert record.created_since == "2 days ago"
    assert record.repository == "redis"
    assert not record.is_empty()
    assert ImageRecord().is_empty()


def test_environment_state_defaults() -> None:
    state = EnvironmentState(name="Dev")
    assert state.docker_version == ""
    assert state.running_containers == 0
    assert state.stopped_containers == 0
    assert state.total_local_images == 0
    assert state.containers == []
    assert state.images == []
    other = EnvironmentState(name="UAT")
    assert state.containers is not other.containers


def test_environment_state_to_dict() -> None:
    state = EnvironmentState(name="Dev", running_containers=2, containers=[ContainerRecord(id="a")])
    data = state.to_dict()
    assert data["environment"] == "Dev"
    assert data["running_containers"] == 2
    assert data["containers"][0]["ID"] == "a"
