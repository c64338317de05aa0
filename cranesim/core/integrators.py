"""Численные интеграторы шага.

Ускорение `a` может быть `Accel` (линейные оси) или float в рад/с²
(углы раскачки груза).
"""

from __future__ import annotations

from typing import Union

from cranesim.core.units import Accel

AccelLike = Union[Accel, float]


def _accel_value(a: AccelLike) -> float:
    return a.value if isinstance(a, Accel) else float(a)


def integrate_velocity(v0: float, a: AccelLike, dt: float) -> float:
    """v = v0 + a·Δt (явный Эйлер)."""

    return float(v0) + _accel_value(a) * float(dt)


def integrate_pos(x0: float, v: float, a: AccelLike, dt: float) -> float:
    """Velocity Verlet: x = x0 + (v_old + v_new)·Δt/2."""

    old_v = float(v)
    new_v = integrate_velocity(old_v, a, dt)
    return float(x0) + (old_v + new_v) * float(dt) * 0.5


def average_velocity(x1: float, x2: float, dt: float) -> float:
    # avg velocity = (x2 - x1) / (t2 - t1)
    return (float(x2) - float(x1)) / float(dt)
