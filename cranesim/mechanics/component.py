"""Одиночная ось движения: своя позиция, скорость, ускорение и чистая сила.

Ось не знает о соседях: трение, упоры и пределы скорости/ускорения
считаются только по её собственному состоянию. Модель крана этот класс
напрямую не использует, но делит с ним закон трения
(`cranesim.physics.friction`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math

from cranesim.core.integrators import integrate_pos, integrate_velocity
from cranesim.core.units import Accel, Force, Mass, kilograms, meters_per_sec_squared, sign
from cranesim.physics.friction import (
    clamp_force_by_pos_limits,
    friction_force,
    is_stuck,
    settle_velocity,
    static_friction_limit,
)


@dataclass
class Component:
    """Одна ось со своими Pos / Vel / Acc и силами."""

    pos: float = 0.0
    limit_min: float = -math.inf
    limit_max: float = math.inf

    mass: Mass = kilograms(1.0)
    vel_max: float = 0.0  # предел скорости, 0 = выключен
    acc_max: float = 0.0  # предел ускорения, 0 = выключен

    vel: float = 0.0
    acc: Accel = Accel()  # фактическое ускорение

    applied: Force = Force()  # приложенная сила
    s_friction: Force = Force()  # трение покоя
    k_friction: Force = Force()  # трение скольжения
    fnet: Force = Force()  # чистая сила
    net_acc: Accel = Accel()  # чистое ускорение от сил

    friction_dir: float = 1.0

    # Если True, Pos не меняется в update() (ось зафиксирована)
    const: bool = False

    # Сталь по стали, сухая поверхность
    coeff_static: float = 0.8
    coeff_kinetic: float = 0.7

    _static_limit: Force = field(default=Force(), init=False, repr=False)

    def set_limits(self, limit_min: float, limit_max: float) -> None:
        self.limit_min = float(limit_min)
        self.limit_max = float(limit_max)

    def reset(self) -> None:
        """Сбросить динамику (Pos, Vel, Acc, силы). Масса, пределы и коэффициенты остаются."""

        self.pos = 0.0
        self.vel = 0.0
        self.acc = Accel()
        self.applied = Force()
        self.s_friction = Force()
        self.k_friction = Force()
        self.fnet = Force()
        self.net_acc = Accel()
        self.friction_dir = 1.0
        self._static_limit = Force()

    def update(self, new_acc: Accel, dt: float) -> None:
        """Шаг Velocity Verlet + пределы скорости/ускорения/хода."""

        acc = new_acc
        if self.acc_max > 0.0 and abs(acc.value) > self.acc_max:
            acc = meters_per_sec_squared(sign(acc) * self.acc_max)
        self.acc = acc

        if self.const:
            return

        v_old = self.vel
        v_new = integrate_velocity(v_old, acc, dt)
        if self.vel_max > 0.0 and abs(v_new) > self.vel_max:
            v_new = sign(v_new) * self.vel_max
        if self.k_friction.value != 0.0:
            v_new = settle_velocity(v_old, v_new, self.applied, self._static_limit)

        pos = integrate_pos(self.pos, v_old, acc, dt)
        if pos <= self.limit_min:
            pos = self.limit_min
            v_new = max(v_new, 0.0)
        elif pos >= self.limit_max:
            pos = self.limit_max
            v_new = min(v_new, 0.0)

        self.pos = pos
        self.vel = v_new

    def apply_force(self, applied: Force, g: Accel) -> Accel:
        """Приложить силу; трение по собственным коэффициентам оси."""

        applied = self.clamp_force_by_pos_limits(applied)
        normal = self.mass * abs(g)
        friction = friction_force(applied, self.vel, normal, self.coeff_static, self.coeff_kinetic)
        return self._accept(applied, friction, static_friction_limit(normal, self.coeff_static))

    def apply_force_nonlinear(self, applied: Force, g: Accel, T: float, Ts: float) -> Accel:
        """Вариант нелинейной модели: трение задаётся снаружи.

        T:  вязкое трение (Н·с/м), действует только при скольжении;
        Ts: множитель трения покоя относительно нормальной силы.
        """

        applied = self.clamp_force_by_pos_limits(applied)
        normal = self.mass * abs(g)
        friction = friction_force(applied, self.vel, normal, Ts, 0.0, viscous=T)
        return self._accept(applied, friction, static_friction_limit(normal, Ts))

    def clamp_force_by_pos_limits(self, force: Force) -> Force:
        return clamp_force_by_pos_limits(force, self.pos, self.limit_min, self.limit_max)

    def step(self, applied: Force, g: Accel, dt: float) -> float:
        """apply_force + update за один вызов. Возвращает новую позицию."""

        self.update(self.apply_force(applied, g), dt)
        return self.pos

    def _accept(self, applied: Force, friction: Force, static_limit: Force) -> Accel:
        held = is_stuck(self.vel) and abs(applied) <= static_limit
        self.applied = applied
        self._static_limit = static_limit
        if held:
            self.s_friction = friction
            self.k_friction = Force()
        else:
            self.s_friction = Force()
            self.k_friction = friction
        if friction.value != 0.0:
            self.friction_dir = sign(friction)

        self.fnet = applied + friction
        self.net_acc = self.fnet / self.mass
        return self.net_acc
