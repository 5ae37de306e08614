"""Валидаторы значений config.json.

Каждый валидатор возвращает пару ``(ok, error)``; пустая строка ошибки
означает, что значение принято.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Pattern, Tuple

Verdict = Tuple[bool, str]

ACCEPTED: Verdict = (True, "")


def _rejected(reason: str) -> Verdict:
    return False, reason


class Validator(ABC):
    """Проверка одного значения настройки."""

    @abstractmethod
    def validate(self, value: Any) -> Verdict:
        """Возвращает ACCEPTED либо (False, причина)."""


class TypeValidator(Validator):
    """Проверка типа. bool проходит только если он указан явно."""

    def __init__(self, expected_type: type | Tuple[type, ...]) -> None:
        self.expected_types: Tuple[type, ...] = (
            expected_type if isinstance(expected_type, tuple) else (expected_type,)
        )

    def validate(self, value: Any) -> Verdict:
        allowed = " | ".join(item.__name__ for item in self.expected_types)
        if isinstance(value, bool) and bool not in self.expected_types:
            return _rejected(f"expected {allowed}, got bool")
        if not isinstance(value, self.expected_types):
            return _rejected(f"expected {allowed}, got {type(value).__name__}")
        return ACCEPTED


class RangeValidator(Validator):
    """Число в замкнутом интервале; любая граница может отсутствовать."""

    def __init__(
        self, min_value: Optional[float] = None, max_value: Optional[float] = None
    ) -> None:
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> Verdict:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _rejected(f"expected a number, got {type(value).__name__}")
        too_low = self.min_value is not None and value < self.min_value
        too_high = self.max_value is not None and value > self.max_value
        if too_low or too_high:
            return _rejected(f"{value} is outside [{self.min_value}, {self.max_value}]")
        return ACCEPTED


class EnumValidator(Validator):
    def __init__(self, allowed_values: Iterable[Any]) -> None:
        self.allowed_values = list(allowed_values)

    def validate(self, value: Any) -> Verdict:
        if value not in self.allowed_values:
            return _rejected(f"{value!r} is not one of {self.allowed_values}")
        return ACCEPTED


class RegexValidator(Validator):
    """Строка целиком совпадает с шаблоном."""

    def __init__(self, pattern: str | Pattern[str]) -> None:
        self.pattern: Pattern[str] = re.compile(pattern) if isinstance(pattern, str) else pattern

    def validate(self, value: Any) -> Verdict:
        if not isinstance(value, str):
            return _rejected(f"expected a string, got {type(value).__name__}")
        if self.pattern.fullmatch(value) is None:
            return _rejected(f"{value!r} does not match {self.pattern.pattern!r}")
        return ACCEPTED


class ListOfValidator(Validator):
    """Список, каждый элемент которого принимает item_validator."""

    def __init__(self, item_validator: Validator) -> None:
        self.item_validator = item_validator

    def validate(self, value: Any) -> Verdict:
        if not isinstance(value, list):
            return _rejected(f"expected a list, got {type(value).__name__}")
        for index, item in enumerate(value):
            is_valid, error = self.item_validator.validate(item)
            if not is_valid:
                return _rejected(f"item {index}: {error}")
        return ACCEPTED


class CompositeValidator(Validator):
    """Цепочка валидаторов; побеждает первая ошибка."""

    def __init__(self, validators: Iterable[Validator]) -> None:
        self.validators: List[Validator] = list(validators)

    def validate(self, value: Any) -> Verdict:
        for validator in self.validators:
            verdict = validator.validate(value)
            if not verdict[0]:
                return verdict
        return ACCEPTED
