"""cranesim.core.types

Типы данных на границе с хост-приложением (контроллер/визуализатор).

`ModelState` — единственный контракт данных наружу: набор полей и единицы
менять нельзя, хост читает их каждый тик.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Dict, Tuple
import math

from cranesim.core.units import DEG_TO_RAD


class ModelType(str, Enum):
    """Выбор динамики крана. Фиксируется в конфиге до запуска."""

    # Самая простая и "неубиваемая" модель: независимые оси + маятник в малых углах
    LINEAR = "linear"

    # Нелинейная модель с постоянной длиной троса, 2 управляющие силы (Fwind игнорируется)
    NONLINEAR_CONST_LINE = "nonlinear_const_line"

    # Нелинейная полная модель (X, Y, R, α, β) со всеми 3 силами
    NONLINEAR_COMPLETE = "nonlinear_complete"

    # Исходные опубликованные уравнения с вязким трением (эталон для сравнения)
    NONLINEAR_ORIGINAL = "nonlinear_original"


@dataclass(frozen=True, slots=True)
class ModelState:
    """Выходное состояние модели на момент снимка."""

    alfa: float = 0.0  # α, раскачка груза в направлении тележки (Y), рад
    beta: float = 0.0  # β, раскачка груза в направлении рельса (X), рад

    rail_offset: float = 0.0  # Xw, смещение рельса с тележкой от центра рамы, м
    cart_offset: float = 0.0  # Yw, смещение тележки от центра рельса, м
    lift_line: float = 0.0  # R, длина троса, м

    # 3D координаты груза (Z вверх, груз висит в отрицательных Z)
    payload_x: float = 0.0
    payload_y: float = 0.0
    payload_z: float = 0.0

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @property
    def payload(self) -> Tuple[float, float, float]:
        return (self.payload_x, self.payload_y, self.payload_z)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.to_dict().values())

    def __repr__(self) -> str:
        return (
            "ModelState(\n"
            f"  α={self.alfa / DEG_TO_RAD:.2f}° β={self.beta / DEG_TO_RAD:.2f}°\n"
            f"  rail={self.rail_offset:.4f}m cart={self.cart_offset:.4f}m line={self.lift_line:.4f}m\n"
            f"  payload=({self.payload_x:.4f}, {self.payload_y:.4f}, {self.payload_z:.4f})\n"
            ")"
        )
