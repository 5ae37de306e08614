"""Разбор склеенного потока JSON-объектов из вывода docker CLI.

Команды вида ``docker container ls --format "\\"{{json .}}\\""`` печатают
объекты, каждый из которых обёрнут в кавычки, без запятых и без скобок
списка. Поэтому поток режется по известному первому ключу записи: перед
каждым вхождением маркера вставляется разделитель, после чего каждый
фрагмент разбирается отдельно.

Ошибка разбора одного фрагмента не прерывает весь разбор: вместо записи
возвращается пустая запись, а номер фрагмента попадает в ``degraded``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, TypeVar

LOGGER = logging.getLogger(__name__)

SENTINEL = "<===>"

T = TypeVar("T")

RecordFactory = Callable[[Dict[str, Any]], T]


@dataclass(slots=True)
class SplitResult(Generic[T]):
    """Результат разбора: записи в исходном порядке и номера испорченных."""

    records: List[T] = field(default_factory=list)
    degraded: List[int] = field(default_factory=list)

    @property
    def fragments(self) -> int:
        return len(self.records)


def record_marker(leading_key: str) -> str:
    """Текст, с которого начинается каждая запись: "{"Key":"""

    return f'"{{"{leading_key}":'


def split_records(raw: str, leading_key: str, factory: RecordFactory[T]) -> SplitResult[T]:
    """Делит поток на записи и разбирает каждую через factory."""

    marker = record_marker(leading_key)
    adjusted = raw.replace(marker, SENTINEL + marker)
    fragments = adjusted.split(SENTINEL)[1:]

    result: SplitResult[T] = SplitResult()
    for index, fragment in enumerate(fragments):
        payload = _clean_fragment(fragment)
        try:
            data = json.loads(payload)
            if not isinstance(data, dict):
                raise ValueError(f"expected JSON object, got {type(data).__name__}")
            record = factory(data)
        except ValueError as exc:
            LOGGER.warning(
                "Record %s (%s) could not be parsed, using empty record: %s",
                index,
                leading_key,
                exc,
            )
            record = factory({})
            result.degraded.append(index)
        result.records.append(record)
    return result


def _clean_fragment(fragment: str) -> str:
    """Убирает пробелы и обёртывающие кавычки вокруг одного объекта."""

    value = fragment.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value
