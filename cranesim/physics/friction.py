"""Закон трения осей (Кулон + трение покоя + вязкая часть).

Один закон на всё: его вызывают и `Component`, и каждая динамическая модель
крана.

Режимы:
- покой (|v| < VELOCITY_EPSILON): трение противодействует приложенной силе
  и не больше static_coeff·|N|. Может полностью погасить силу (залипание),
  но не может развернуть её;
- скольжение: трение = kinetic_coeff·|N| + viscous·|v| против скорости,
  от величины приложенной силы не зависит.

Соглашение о знаке: возвращается знаковая сила трения,
чистая сила = applied + friction.
"""

from __future__ import annotations

from cranesim.core.units import Force, newtons, sign


# Ниже этой скорости (м/с или рад/с) ось считается стоящей
VELOCITY_EPSILON: float = 1.0e-6


def is_stuck(velocity: float) -> bool:
    return abs(float(velocity)) < VELOCITY_EPSILON


def static_friction_limit(normal: Force, static_coeff: float) -> Force:
    """Максимальная удерживающая сила трения покоя."""

    return abs(normal) * float(static_coeff)


def friction_force(
    applied: Force,
    velocity: float,
    normal: Force,
    static_coeff: float,
    kinetic_coeff: float,
    viscous: float = 0.0,
) -> Force:
    """Знаковая сила трения для одной оси."""

    if is_stuck(velocity):
        limit = static_friction_limit(normal, static_coeff)
        if abs(applied) <= limit:
            return -applied
        # сорвались с места: трение уже кинетическое, против направления силы
        return newtons(-sign(applied) * float(kinetic_coeff) * abs(normal.value))

    v = float(velocity)
    magnitude = float(kinetic_coeff) * abs(normal.value) + float(viscous) * abs(v)
    return newtons(-sign(v) * magnitude)


def settle_velocity(v_old: float, v_new: float, applied: Force, static_limit: Force) -> float:
    """Не даём трению развернуть скорость за один шаг.

    Если ось скользила, а после шага скорость сменила знак при приводе слабее
    трения покоя, ось остановилась.
    """

    v0 = float(v_old)
    v1 = float(v_new)
    if v0 != 0.0 and v0 * v1 < 0.0 and abs(applied) <= static_limit:
        return 0.0
    return v1


def clamp_force_by_pos_limits(force: Force, pos: float, limit_min: float, limit_max: float) -> Force:
    """Жёсткий упор: у границы хода сила наружу не передаётся на ось."""

    if pos <= limit_min and force < 0.0:
        return Force()
    if pos >= limit_max and force > 0.0:
        return Force()
    return force
