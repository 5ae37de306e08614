"""Исключения конвейера проверок Docker-окружений."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

LOGGER = logging.getLogger(__name__)


class MonitorError(Exception):
    """Базовое исключение мониторинга с поддержкой контекста."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        """Сохраняет сообщение и контекст, логируя ошибку."""

        self.message = message
        self.context = context or {}
        super().__init__(message)
        LOGGER.error("%s | context=%s", message, self.context)


class ProbeExecutionError(MonitorError):
    """Команда docker не запустилась, завершилась с ошибкой или вернула мусор."""

    def __init__(
        self,
        command: Sequence[str],
        reason: str,
        *,
        returncode: Optional[int] = None,
        output: str = "",
    ) -> None:
        self.command = " ".join(command)
        self.reason = reason
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Command '{self.command}' failed: {reason}",
            context={"command": self.command, "returncode": returncode},
        )
