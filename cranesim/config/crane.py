"""Конфигурация крана (data-only).

Модуль только хранит данные:
- массы рельса, тележки и груза;
- гравитация и константы трения;
- пределы хода рельса/тележки/троса;
- выбор динамической модели и параметры стабилизации шага.

Ключевое правило:
- Конфиг задаётся один раз до симуляции и во время прогона не меняется.
  Вся проверка выполняется в `__post_init__`; модель получает уже
  валидный конфиг.

Соглашение о координатах:
- X: движение рельса вдоль рамы ("вперёд");
- Y: движение тележки вдоль рельса (влево-вправо);
- Z: вертикаль вверх, груз висит ниже тележки.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math

from cranesim.core.types import ModelType
from cranesim.core.units import G, Accel, Mass, kilograms, meters_per_sec_squared
from cranesim.core.validation import (
    InvalidConfiguration,
    ensure_in_range,
    ensure_non_negative,
    ensure_ordered,
    ensure_positive,
)


Limits = Tuple[float, float]


def _check_finite(name: str, *values: float) -> None:
    for v in values:
        if not math.isfinite(float(v)):
            raise InvalidConfiguration(f"{name} must contain finite numbers; got {values}")


@dataclass(frozen=True)
class CraneConfig:
    """Полный конфиг крана. Значения по умолчанию — лабораторный 3D-кран."""

    model_type: ModelType = ModelType.LINEAR

    payload_mass: Mass = kilograms(1.000)  # Mc, масса груза
    cart_mass: Mass = kilograms(1.155)  # Mw, масса тележки
    rail_mass: Mass = kilograms(2.200)  # Ms, масса подвижного рельса
    g: Accel = meters_per_sec_squared(G)

    # Вязкое трение осей, Н·с/м
    rail_friction: float = 100.0  # Tx
    cart_friction: float = 82.0  # Ty
    winding_friction: float = 75.0  # Tr, намотка троса

    # Сухое трение сталь-сталь (сильно зависит от марки стали)
    static_friction_coeff: float = 0.8
    kinetic_friction_coeff: float = 0.7

    rail_limits: Limits = (-0.30, 0.30)
    cart_limits: Limits = (-0.35, 0.35)
    line_limits: Limits = (0.05, 0.90)
    initial_line_length: float = 0.5

    # Стабилизация шага (эмпирические константы, не физика)
    swing_limit_rad: float = 1.4
    swing_damping: float = 1.0e-4
    snap_epsilon: float = 1.0e-9
    max_substeps: int = 250

    def __post_init__(self) -> None:
        if not isinstance(self.model_type, ModelType):
            raise InvalidConfiguration(f"model_type must be a ModelType; got {self.model_type!r}")

        for name in ("payload_mass", "cart_mass", "rail_mass"):
            mass = getattr(self, name)
            if not isinstance(mass, Mass):
                raise InvalidConfiguration(f"{name} must be a Mass; got {mass!r}")
            _check_finite(name, mass.value)
            ensure_positive(mass.value, name)

        if not isinstance(self.g, Accel):
            raise InvalidConfiguration(f"g must be an Accel; got {self.g!r}")
        _check_finite("g", self.g.value)
        ensure_non_negative(self.g.value, "g")

        for name in ("rail_friction", "cart_friction", "winding_friction"):
            value = float(getattr(self, name))
            _check_finite(name, value)
            ensure_non_negative(value, name)

        ensure_non_negative(self.kinetic_friction_coeff, "kinetic_friction_coeff")
        ensure_non_negative(self.static_friction_coeff, "static_friction_coeff")
        if self.static_friction_coeff < self.kinetic_friction_coeff:
            raise InvalidConfiguration("static_friction_coeff must be >= kinetic_friction_coeff")

        for name in ("rail_limits", "cart_limits", "line_limits"):
            lo, hi = getattr(self, name)
            _check_finite(name, lo, hi)
            ensure_ordered(lo, hi, name)

        # R > 0 везде: углы и их производные делятся на длину троса
        ensure_positive(self.line_limits[0], "line_limits[0]")
        ensure_in_range(self.initial_line_length, *self.line_limits, "initial_line_length")

        if not (0.0 < self.swing_limit_rad < 0.5 * math.pi):
            raise InvalidConfiguration(f"swing_limit_rad must be in (0, pi/2), got {self.swing_limit_rad}")
        ensure_in_range(self.swing_damping, 0.0, 1.0, "swing_damping")
        ensure_non_negative(self.snap_epsilon, "snap_epsilon")
        if int(self.max_substeps) < 1:
            raise InvalidConfiguration(f"max_substeps must be >= 1, got {self.max_substeps}")

    @property
    def rail_cart_mass(self) -> Mass:
        """Масса, которую тащит привод рельса (рельс + тележка)."""

        return self.rail_mass + self.cart_mass

    def __repr__(self) -> str:
        return (
            f"CraneConfig(type={self.model_type.value}, "
            f"Mp={self.payload_mass.value}kg, Mw={self.cart_mass.value}kg, Ms={self.rail_mass.value}kg, "
            f"rail={self.rail_limits}, cart={self.cart_limits}, line={self.line_limits})"
        )


DEFAULT_CRANE_CONFIG = CraneConfig()
