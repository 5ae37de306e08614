"""Ошибки конфигурации окружений."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from src.monitor.exceptions import MonitorError


class EnvironmentConfigError(MonitorError):
    """Повторяющиеся имена, пустой список или повреждённый environments.json."""

    def __init__(self, reason: str, *, path: Optional[Path] = None) -> None:
        self.reason = reason
        self.path = path
        prefix = f"Invalid environments file '{path}'" if path else "Invalid environments"
        super().__init__(
            f"{prefix}: {reason}",
            context={"path": str(path) if path else None, "reason": reason},
        )
