"""Запуск команд docker CLI для конкретного окружения."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import psutil

from src.monitor.exceptions import ProbeExecutionError
from src.utils.helpers import shorten

LOGGER = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]


def run_bounded(
    args: Sequence[str],
    *,
    env: Dict[str, str],
    timeout: Optional[float],
    combine_output: bool,
) -> "subprocess.CompletedProcess[bytes]":
    """Выполняет команду синхронно, по таймауту убивает всё дерево процессов."""

    process = subprocess.Popen(
        list(args),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if combine_output else subprocess.PIPE,
        env=env,
    )
    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _terminate_tree(process.pid)
        process.communicate(timeout=5)
        raise
    return subprocess.CompletedProcess(list(args), process.returncode, stdout, stderr)


def _terminate_tree(pid: int) -> None:
    """Принудительно завершает процесс и всех его потомков."""

    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return
    try:
        victims = parent.children(recursive=True) + [parent]
    except (psutil.NoSuchProcess, psutil.AccessDenied) as exc:
        LOGGER.warning("Cannot list children of process %s: %s", pid, exc)
        victims = [parent]
    for victim in victims:
        try:
            victim.kill()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied as exc:
            LOGGER.warning("Cannot kill process %s: %s", victim.pid, exc)
    psutil.wait_procs(victims, timeout=5)


def _decode(raw: bytes, command: Sequence[str]) -> str:
    """UTF-8 с заменой битых байтов: испорченной оказывается только одна запись."""

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        LOGGER.warning("Output of %s is not valid UTF-8, replacing bad bytes: %s", command, exc)
        return raw.decode("utf-8", errors="replace")


class CommandExecutor:
    """Выполняет команды docker с учётом DOCKER_HOST окружения."""

    def __init__(
        self,
        *,
        docker_binary: str = "docker",
        timeout_seconds: int = 30,
        hosts: Optional[Mapping[str, str]] = None,
        runner: Runner = run_bounded,
    ) -> None:
        self.docker_binary = docker_binary
        self.timeout_seconds = timeout_seconds
        self._hosts: Dict[str, str] = dict(hosts or {})
        self._runner = runner

    def run(
        self,
        arguments: Sequence[str],
        environment: str,
        *,
        combine_output: bool = False,
    ) -> str:
        """Запускает docker с аргументами и возвращает декодированный вывод."""

        command: List[str] = [self.docker_binary, *arguments]
        timeout = None if self.timeout_seconds <= 0 else self.timeout_seconds
        LOGGER.debug("Running %s for environment %s", command, environment)
        try:
            completed = self._runner(
                command,
                env=self.build_env(environment),
                timeout=timeout,
                combine_output=combine_output,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProbeExecutionError(command, f"timed out after {timeout} seconds") from exc
        except OSError as exc:
            raise ProbeExecutionError(command, f"cannot start process: {exc}") from exc

        output = _decode(completed.stdout or b"", command)

        if completed.returncode != 0:
            details = output.strip()
            if not details and completed.stderr:
                details = completed.stderr.decode("utf-8", errors="replace").strip()
            raise ProbeExecutionError(
                command,
                f"exited with code {completed.returncode}: {shorten(details)}",
                returncode=completed.returncode,
                output=output,
            )
        return output

    def build_env(self, environment: str) -> Dict[str, str]:
        """Формирует переменные окружения процесса docker."""

        env = os.environ.copy()
        if environment not in self._hosts:
            return env
        host = self._hosts[environment].strip()
        if host:
            env["DOCKER_HOST"] = host
        else:
            env.pop("DOCKER_HOST", None)
        return env
