"""Тесты каталога окружений."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.environments.catalog import EnvironmentCatalog
from src.environments.exceptions import EnvironmentConfigError


def write_environments(path: Path, entries: list) -> None:
    path.write_text(json.dumps({"environments": entries}), encoding="utf-8")


def test_missing_file_is_created_with_defaults(tmp_path: Path) -> None:
    file_path = tmp_path / "environments.json"

    catalog = EnvironmentCatalog(file_path)

    assert file_path.exists()
    assert catalog.names() == ["Dev Environment", "UAT Environment"]


def test_load_preserves_order_and_hosts(tmp_path: Path) -> None:
    file_path = tmp_path / "environments.json"
    write_environments(
        file_path,
        [
            {"name": "UAT", "docker_host": "ssh://deploy@uat"},
            {"name": "Dev", "docker_host": "/var/run/docker.sock"},
        ],
    )

    catalog = EnvironmentCatalog(file_path)

    assert catalog.names() == ["UAT", "Dev"]
    assert catalog.hosts() == {
        "UAT": "ssh://deploy@uat",
        "Dev": "unix:///var/run/docker.sock",
    }


def test_duplicate_names_rejected(tmp_path: Path) -> None:
    file_path = tmp_path / "environments.json"
    write_environments(file_path, [{"name": "Dev"}, {"name": "Dev"}])

    with pytest.raises(EnvironmentConfigError) as excinfo:
        EnvironmentCatalog(file_path)
    assert "duplicate" in excinfo.value.reason


def test_empty_list_rejected(tmp_path: Path) -> None:
    file_path = tmp_path / "environments.json"
    write_environments(file_path, [])

    with pytest.raises(EnvironmentConfigError):
        EnvironmentCatalog(file_path)


def test_broken_json_rejected(tmp_path: Path) -> None:
    file_path = tmp_path / "environments.json"
    file_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(EnvironmentConfigError):
        EnvironmentCatalog(file_path)
