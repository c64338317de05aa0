"""cranesim.core.units

Типизированные скаляры для динамики крана: Force, Mass, Accel.

Принцип: величины разных категорий между собой не смешиваются.
Разрешены только две физические связи:
- Mass * Accel -> Force   (F = m·a)
- Force / Mass -> Accel   (a = F/m)

Любая другая смесь (Force + Mass, Force * Force, ...) возвращает NotImplemented,
и Python поднимает TypeError ещё до того, как число попадёт в уравнения.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, TypeVar, Union

# Base units (conceptual SI multipliers)
METER: float = 1.0
SECOND: float = 1.0

DEG_TO_RAD: float = math.pi / 180.0

# Useful constants
G: float = 9.81 * METER / (SECOND**2)

Scalar = Union[int, float]

U = TypeVar("U", bound="_Unit")


def _is_scalar(x: object) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


@dataclass(frozen=True, slots=True)
class _Unit:
    """Скаляр с фантомной категорией (тег = конкретный подкласс)."""

    value: float = 0.0

    symbol: ClassVar[str] = ""

    def _same(self, other: object) -> bool:
        return type(other) is type(self)

    def __add__(self: U, other: object) -> U:
        if self._same(other):
            return type(self)(self.value + other.value)  # type: ignore[attr-defined]
        if _is_scalar(other):
            return type(self)(self.value + other)  # type: ignore[operator]
        return NotImplemented

    def __radd__(self: U, other: object) -> U:
        # sum([...]) начинает с int 0
        if _is_scalar(other):
            return type(self)(other + self.value)  # type: ignore[operator]
        return NotImplemented

    def __sub__(self: U, other: object) -> U:
        if self._same(other):
            return type(self)(self.value - other.value)  # type: ignore[attr-defined]
        if _is_scalar(other):
            return type(self)(self.value - other)  # type: ignore[operator]
        return NotImplemented

    def __rsub__(self: U, other: object) -> U:
        if _is_scalar(other):
            return type(self)(other - self.value)  # type: ignore[operator]
        return NotImplemented

    def __mul__(self: U, other: object) -> U:
        if _is_scalar(other):
            return type(self)(self.value * other)  # type: ignore[operator]
        return NotImplemented

    def __rmul__(self: U, other: object) -> U:
        if _is_scalar(other):
            return type(self)(other * self.value)  # type: ignore[operator]
        return NotImplemented

    def __truediv__(self, other: object):
        # одинаковый тег -> безразмерное отношение
        if self._same(other):
            return self.value / other.value  # type: ignore[attr-defined]
        if _is_scalar(other):
            return type(self)(self.value / other)  # type: ignore[operator]
        return NotImplemented

    def __neg__(self: U) -> U:
        return type(self)(-self.value)

    def __abs__(self: U) -> U:
        return type(self)(abs(self.value))

    def _cmp_value(self, other: object) -> float | None:
        if self._same(other):
            return float(other.value)  # type: ignore[attr-defined]
        if _is_scalar(other):
            return float(other)  # type: ignore[arg-type]
        return None

    def __lt__(self, other: object) -> bool:
        v = self._cmp_value(other)
        return NotImplemented if v is None else self.value < v

    def __le__(self, other: object) -> bool:
        v = self._cmp_value(other)
        return NotImplemented if v is None else self.value <= v

    def __gt__(self, other: object) -> bool:
        v = self._cmp_value(other)
        return NotImplemented if v is None else self.value > v

    def __ge__(self, other: object) -> bool:
        v = self._cmp_value(other)
        return NotImplemented if v is None else self.value >= v

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value:g} {self.symbol})"


class Force(_Unit):
    """Сила (Н)."""

    __slots__ = ()
    symbol = "N"

    def __truediv__(self, other: object):
        if isinstance(other, Mass):
            return Accel(self.value / other.value)
        return super().__truediv__(other)


class Mass(_Unit):
    """Масса (кг)."""

    __slots__ = ()
    symbol = "kg"

    def __mul__(self, other: object):
        if isinstance(other, Accel):
            return Force(self.value * other.value)
        return super().__mul__(other)


class Accel(_Unit):
    """Линейное ускорение (м/с²)."""

    __slots__ = ()
    symbol = "m/s^2"

    def __mul__(self, other: object):
        if isinstance(other, Mass):
            return Force(self.value * other.value)
        return super().__mul__(other)


def newtons(x: Scalar) -> Force:
    return Force(float(x))


def kilograms(x: Scalar) -> Mass:
    return Mass(float(x))


def meters_per_sec_squared(x: Scalar) -> Accel:
    return Accel(float(x))


def sign(x: Union[Scalar, _Unit]) -> float:
    """-1 / 0 / +1 для числа или типизированной величины."""

    v = x.value if isinstance(x, _Unit) else float(x)
    return 1.0 if v > 0 else (-1.0 if v < 0 else 0.0)
