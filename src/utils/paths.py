"""Пути рабочей директории монитора."""

from __future__ import annotations

import os
from pathlib import Path


def resolve_workdir() -> Path:
    """~/.dockmon либо $DOCKMON_HOME/.dockmon."""

    home_dir = Path(os.environ.get("DOCKMON_HOME", Path.home()))
    return home_dir / ".dockmon"


# config.json, environments.json и logs/
CONFIG_DIR = resolve_workdir()
