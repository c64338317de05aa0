"""cranesim.core.validation

Ранние проверки конфигурации крана: физически невозможное значение
отвергается до первого шага модели.
"""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Конфигурация крана физически невозможна (масса <= 0, перевёрнутые пределы...)."""


def ensure_non_negative(value: float, name: str) -> None:
    if value < 0:
        raise InvalidConfiguration(f"{name} must be >= 0, got {value}")


def ensure_positive(value: float, name: str) -> None:
    if value <= 0:
        raise InvalidConfiguration(f"{name} must be > 0, got {value}")


def ensure_in_range(value: float, min_value: float, max_value: float, name: str) -> None:
    if not (min_value <= value <= max_value):
        raise InvalidConfiguration(f"{name} must be in [{min_value}, {max_value}], got {value}")


def ensure_ordered(lo: float, hi: float, name: str) -> None:
    if not (lo < hi):
        raise InvalidConfiguration(f"{name} must satisfy min < max, got ({lo}, {hi})")
