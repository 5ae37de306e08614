"""Реестр состояний Docker-окружений.

Реестр единолично владеет всеми ``EnvironmentState``. Записи создаются один
раз при построении реестра и не удаляются до конца запуска.

Повторяющиеся имена окружений считаются ошибкой вызывающей стороны, но не
отклоняются: при обновлении изменяются все записи с совпадающим именем.

Реестр не потокобезопасен. Если workflow когда-нибудь будут выполняться
параллельно, каждая запись должна принадлежать ровно одному workflow либо
обновляться под собственной блокировкой.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List

from src.monitor.models import EnvironmentState
from src.monitor.probes import ProbeUpdate

LOGGER = logging.getLogger(__name__)


class EnvironmentRegistry:
    """Упорядоченный набор состояний окружений с поиском по имени."""

    def __init__(self, names: Iterable[str]) -> None:
        self._states: List[EnvironmentState] = []
        self._index: Dict[str, List[EnvironmentState]] = {}
        for name in names:
            state = EnvironmentState(name=name)
            self._states.append(state)
            matches = self._index.setdefault(name, [])
            if matches:
                LOGGER.warning(
                    "Duplicate environment name %r, updates will be applied to all %d entries",
                    name,
                    len(matches) + 1,
                )
            matches.append(state)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[EnvironmentState]:
        return iter(self._states)

    def states(self) -> List[EnvironmentState]:
        """Все состояния в порядке исходного списка имён."""

        return list(self._states)

    def names(self) -> List[str]:
        return [state.name for state in self._states]

    def find(self, name: str) -> List[EnvironmentState]:
        """Все записи с точным совпадением имени."""

        return list(self._index.get(name, []))

    def get(self, name: str) -> EnvironmentState:
        """Первая запись с указанным именем."""

        matches = self._index.get(name)
        if not matches:
            raise KeyError(f"Environment '{name}' not found")
        return matches[0]

    def apply(self, name: str, update: ProbeUpdate) -> int:
        """Применяет обновление ко всем записям с именем name."""

        matches = self._index.get(name, [])
        if not matches:
            LOGGER.warning("Environment %r is not registered, %s dropped", name, update)
            return 0
        for state in matches:
            update.apply(state)
        return len(matches)
