"""Динамика крана: один фиксированный шаг в четырёх формулировках.

Обобщённые координаты: q = (X, Y, R, α, β)
- X: рельс с тележкой вдоль рамы;
- Y: тележка вдоль рельса;
- R: длина троса;
- α, β: углы раскачки груза (см. `cranesim.mechanics.kinematics`).

Каждая формулировка: функция `fn(state, cfg, rel, dt, diag)`, которая
меняет только явно переданные `state` и `diag`. Общих скрытых полей нет.

Важно:
- Лебёдка держит статический вес груза; Fwind > 0 травит трос (R растёт).
- Трение всех осей считается одним законом `friction_force()`.
- Пределы хода и стабилизацию шага делает `CraneModel`, не формулировки.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Set, Tuple
import math

import numpy as np
from numpy.typing import NDArray

from cranesim.config.crane import CraneConfig
from cranesim.core.integrators import integrate_pos, integrate_velocity
from cranesim.core.types import ModelType
from cranesim.core.units import Accel, Force, Mass, newtons
from cranesim.mechanics.kinematics import LineFrame, line_velocity_terms
from cranesim.physics.friction import (
    clamp_force_by_pos_limits,
    friction_force,
    is_stuck,
    settle_velocity,
    static_friction_limit,
)


@dataclass
class CraneDynamicState:
    # Положения
    x: float = 0.0
    y: float = 0.0
    r: float = 0.5
    alfa: float = 0.0
    beta: float = 0.0

    # Скорости
    x_vel: float = 0.0
    y_vel: float = 0.0
    r_vel: float = 0.0
    alfa_vel: float = 0.0
    beta_vel: float = 0.0

    def to_vector(self) -> NDArray[np.float64]:
        return np.array(
            [
                self.x,
                self.y,
                self.r,
                self.alfa,
                self.beta,
                self.x_vel,
                self.y_vel,
                self.r_vel,
                self.alfa_vel,
                self.beta_vel,
            ],
            dtype=np.float64,
        )

    @classmethod
    def from_vector(cls, y: NDArray[np.float64]) -> "CraneDynamicState":
        y = np.asarray(y, dtype=np.float64)
        if y.shape[0] != 10:
            raise ValueError(f"CraneDynamicState vector must have length 10; got {y.shape[0]}")

        return cls(
            x=float(y[0]),
            y=float(y[1]),
            r=float(y[2]),
            alfa=float(y[3]),
            beta=float(y[4]),
            x_vel=float(y[5]),
            y_vel=float(y[6]),
            r_vel=float(y[7]),
            alfa_vel=float(y[8]),
            beta_vel=float(y[9]),
        )

    def copy(self) -> "CraneDynamicState":
        return CraneDynamicState(**self.__dict__)


@dataclass
class AxisDiagnostics:
    """Промежуточные величины одной оси за последний шаг."""

    applied: Force = Force()
    friction: Force = Force()
    net: Force = Force()
    driving_acc: Accel = Accel()
    friction_acc: Accel = Accel()
    net_acc: Accel = Accel()
    stuck: bool = False


@dataclass
class StepDiagnostics:
    rail: AxisDiagnostics = field(default_factory=AxisDiagnostics)
    cart: AxisDiagnostics = field(default_factory=AxisDiagnostics)
    wind: AxisDiagnostics = field(default_factory=AxisDiagnostics)


@dataclass(frozen=True)
class BasicRelations:
    """Общие для всех формулировок величины одного шага."""

    f_rail: Force  # уже с учётом упоров
    f_cart: Force
    f_wind: Force

    mu1: float  # Mpayload / Mcart
    mu2: float  # Mpayload / (Mcart + Mrail)

    # Нормальные нагрузки осей (для сухого трения)
    rail_normal: Force
    cart_normal: Force
    line_normal: Force  # вес груза; его же держит лебёдка


def prepare_basic_relations(
    state: CraneDynamicState,
    cfg: CraneConfig,
    f_rail: Force,
    f_cart: Force,
    f_wind: Force,
) -> BasicRelations:
    mp = cfg.payload_mass
    g = abs(cfg.g)
    return BasicRelations(
        f_rail=clamp_force_by_pos_limits(f_rail, state.x, *cfg.rail_limits),
        f_cart=clamp_force_by_pos_limits(f_cart, state.y, *cfg.cart_limits),
        f_wind=clamp_force_by_pos_limits(f_wind, state.r, *cfg.line_limits),
        mu1=mp / cfg.cart_mass,
        mu2=mp / cfg.rail_cart_mass,
        rail_normal=(cfg.rail_cart_mass + mp) * g,
        cart_normal=(cfg.cart_mass + mp) * g,
        line_normal=mp * g,
    )


def _integrate(x: float, v: float, a: float, dt: float) -> Tuple[float, float]:
    return integrate_pos(x, v, a, dt), integrate_velocity(v, a, dt)


def _record(
    diag: AxisDiagnostics,
    applied: Force,
    friction: Force,
    mass: Mass,
    net_acc: Accel,
    stuck: bool,
) -> None:
    diag.applied = applied
    diag.friction = friction
    diag.net = applied + friction
    diag.driving_acc = applied / mass
    diag.friction_acc = friction / mass
    diag.net_acc = net_acc
    diag.stuck = stuck


# ---------- Linear ----------


def _axis_step(
    pos: float,
    vel: float,
    applied: Force,
    mass: Mass,
    normal: Force,
    viscous: float,
    cfg: CraneConfig,
    dt: float,
    diag: AxisDiagnostics,
) -> Tuple[float, float, Accel]:
    friction = friction_force(
        applied, vel, normal, cfg.static_friction_coeff, cfg.kinetic_friction_coeff, viscous
    )
    acc = (applied + friction) / mass

    limit = static_friction_limit(normal, cfg.static_friction_coeff)
    new_vel = settle_velocity(vel, integrate_velocity(vel, acc, dt), applied, limit)
    new_pos = integrate_pos(pos, vel, acc, dt)

    _record(diag, applied, friction, mass, acc, stuck=is_stuck(vel) and abs(applied) <= limit)
    return new_pos, new_vel, acc


def linear_step(
    state: CraneDynamicState,
    cfg: CraneConfig,
    rel: BasicRelations,
    dt: float,
    diag: StepDiagnostics,
) -> None:
    """Оси независимы; маятник в малых углах, раскачиваемый ускорением подвеса."""

    x, x_vel, x_acc = _axis_step(
        state.x, state.x_vel, rel.f_rail, cfg.rail_cart_mass, rel.rail_normal,
        cfg.rail_friction, cfg, dt, diag.rail,
    )
    y, y_vel, y_acc = _axis_step(
        state.y, state.y_vel, rel.f_cart, cfg.cart_mass, rel.cart_normal,
        cfg.cart_friction, cfg, dt, diag.cart,
    )
    r, r_vel, _r_acc = _axis_step(
        state.r, state.r_vel, rel.f_wind, cfg.payload_mass, rel.line_normal,
        cfg.winding_friction, cfg, dt, diag.wind,
    )

    g = cfg.g.value
    alfa_acc = (-g * state.alfa - y_acc.value) / state.r
    beta_acc = (-g * state.beta - x_acc.value) / state.r

    state.alfa, state.alfa_vel = _integrate(state.alfa, state.alfa_vel, alfa_acc, dt)
    state.beta, state.beta_vel = _integrate(state.beta, state.beta_vel, beta_acc, dt)
    state.x, state.x_vel = x, x_vel
    state.y, state.y_vel = y, y_vel
    state.r, state.r_vel = r, r_vel


# ---------- Coupled (Lagrange) ----------

_RAIL, _CART, _LINE, _ALFA, _BETA = range(5)


@dataclass(frozen=True)
class _FrictionAxis:
    index: int  # индекс строки в системе M·q̈ = rhs
    applied: Force
    velocity: float
    normal: Force
    viscous: float
    mass: Mass
    diag: AxisDiagnostics


def _lagrange_system(
    state: CraneDynamicState,
    cfg: CraneConfig,
    rel: BasicRelations,
    r_vel: float,
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """M(q)·q̈ = Q + Jᵀ·m·(g_vec - h) без трения осей.

    J: якобиан положения груза по q (3x5), h: скоростная часть P̈.
    """

    frame = LineFrame.at(state.alfa, state.beta)
    r = state.r
    m = cfg.payload_mass.value

    J = np.column_stack(
        [
            np.array([1.0, 0.0, 0.0]),
            np.array([0.0, 1.0, 0.0]),
            frame.e,
            r * frame.e_alfa,
            r * frame.e_beta,
        ]
    )
    M = m * (J.T @ J)
    M[_RAIL, _RAIL] += cfg.rail_cart_mass.value
    M[_CART, _CART] += cfg.cart_mass.value

    h = line_velocity_terms(frame, r, r_vel, state.alfa_vel, state.beta_vel)
    g_vec = np.array([0.0, 0.0, -cfg.g.value])
    rhs = J.T @ (m * (g_vec - h))

    rhs[_RAIL] += rel.f_rail.value
    rhs[_CART] += rel.f_cart.value
    rhs[_LINE] += rel.f_wind.value - rel.line_normal.value
    return M, rhs


def _solve_locked(M: NDArray[np.float64], rhs: NDArray[np.float64], locked: Set[int]) -> NDArray[np.float64]:
    acc = np.zeros(M.shape[0], dtype=np.float64)
    free = [i for i in range(M.shape[0]) if i not in locked]
    if free:
        idx = np.array(free)
        acc[idx] = np.linalg.solve(M[np.ix_(idx, idx)], rhs[idx])
    return acc


def _solve_with_stiction(
    M: NDArray[np.float64],
    rhs: NDArray[np.float64],
    axes: Sequence[_FrictionAxis],
    cfg: CraneConfig,
) -> Tuple[NDArray[np.float64], Set[int], Dict[int, Force]]:
    """Решить систему с трением покоя на осях.

    Стоящая ось блокируется (q̈ = 0). Сила, которую блокировка должна
    поглотить, сверяется с трением покоя; если его не хватает, ось
    отпускается с кинетическим трением и система решается заново.
    """

    mu_s = cfg.static_friction_coeff
    mu_k = cfg.kinetic_friction_coeff

    rhs = rhs.copy()
    locked: Set[int] = set()
    frictions: Dict[int, Force] = {}

    for ax in axes:
        if is_stuck(ax.velocity):
            locked.add(ax.index)
            continue
        fr = friction_force(ax.applied, ax.velocity, ax.normal, mu_s, mu_k, ax.viscous)
        rhs[ax.index] += fr.value
        frictions[ax.index] = fr

    acc = _solve_locked(M, rhs, locked)
    for _ in range(len(axes)):
        released = False
        for ax in axes:
            if ax.index not in locked:
                continue
            demand = newtons(rhs[ax.index] - float(M[ax.index] @ acc))
            fr = friction_force(demand, 0.0, ax.normal, mu_s, mu_k)
            frictions[ax.index] = fr
            if abs(fr) < abs(demand):
                locked.discard(ax.index)
                rhs[ax.index] += fr.value
                released = True
        if not released:
            break
        acc = _solve_locked(M, rhs, locked)

    return acc, locked, frictions


def _coupled_step(
    state: CraneDynamicState,
    cfg: CraneConfig,
    rel: BasicRelations,
    dt: float,
    diag: StepDiagnostics,
    *,
    const_line: bool,
) -> None:
    r_vel = 0.0 if const_line else state.r_vel
    M, rhs = _lagrange_system(state, cfg, rel, r_vel)

    dofs: List[int] = [_RAIL, _CART, _ALFA, _BETA] if const_line else [_RAIL, _CART, _LINE, _ALFA, _BETA]
    M = M[np.ix_(dofs, dofs)]
    rhs = rhs[dofs]

    axes = [
        _FrictionAxis(dofs.index(_RAIL), rel.f_rail, state.x_vel, rel.rail_normal,
                      cfg.rail_friction, cfg.rail_cart_mass, diag.rail),
        _FrictionAxis(dofs.index(_CART), rel.f_cart, state.y_vel, rel.cart_normal,
                      cfg.cart_friction, cfg.cart_mass, diag.cart),
    ]
    if not const_line:
        axes.append(
            _FrictionAxis(dofs.index(_LINE), rel.f_wind, state.r_vel, rel.line_normal,
                          cfg.winding_friction, cfg.payload_mass, diag.wind)
        )

    acc_reduced, locked, frictions = _solve_with_stiction(M, rhs, axes, cfg)
    acc = np.zeros(5, dtype=np.float64)
    acc[dofs] = acc_reduced

    q = [state.x, state.y, state.r, state.alfa, state.beta]
    v = [state.x_vel, state.y_vel, r_vel, state.alfa_vel, state.beta_vel]
    new_q = list(q)
    new_v = list(v)
    for i in dofs:
        new_q[i], new_v[i] = _integrate(q[i], v[i], float(acc[i]), dt)

    for ax in axes:
        i = dofs[ax.index]
        fr = frictions.get(ax.index, Force())
        stuck = ax.index in locked
        if stuck:
            new_q[i], new_v[i] = q[i], 0.0
        else:
            limit = static_friction_limit(ax.normal, cfg.static_friction_coeff)
            new_v[i] = settle_velocity(v[i], new_v[i], ax.applied, limit)
        _record(ax.diag, ax.applied, fr, ax.mass, Accel(float(acc[i])), stuck)

    if const_line:
        diag.wind = AxisDiagnostics(stuck=True)

    state.x, state.y, state.r, state.alfa, state.beta = new_q
    state.x_vel, state.y_vel, state.r_vel, state.alfa_vel, state.beta_vel = new_v


def nonlinear_complete_step(
    state: CraneDynamicState,
    cfg: CraneConfig,
    rel: BasicRelations,
    dt: float,
    diag: StepDiagnostics,
) -> None:
    """Полная связанная модель: все 5 координат, все 3 силы."""

    _coupled_step(state, cfg, rel, dt, diag, const_line=False)


def nonlinear_const_line_step(
    state: CraneDynamicState,
    cfg: CraneConfig,
    rel: BasicRelations,
    dt: float,
    diag: StepDiagnostics,
) -> None:
    """Связанная модель с постоянной длиной троса (Fwind игнорируется)."""

    _coupled_step(state, cfg, rel, dt, diag, const_line=True)


# ---------- Original (reference equations) ----------


def nonlinear_original_step(
    state: CraneDynamicState,
    cfg: CraneConfig,
    rel: BasicRelations,
    dt: float,
    diag: StepDiagnostics,
) -> None:
    """Исходные явные уравнения: u (привод), T (вязкое трение), N = u - T.

    Натяжение троса на единицу массы груза ≈ g - N3 (лебёдка держит вес),
    его реакция через mu1/mu2 тянет тележку и рельс к грузу.
    Сухого трения и залипания здесь нет.
    """

    mp, mc, mrc = cfg.payload_mass, cfg.cart_mass, cfg.rail_cart_mass
    g = cfg.g.value

    u1 = rel.f_cart / mc
    u2 = rel.f_rail / mrc
    u3 = rel.f_wind / mp

    # только вязкая часть общего закона: без нормальной нагрузки и сухих коэффициентов
    fr_cart = friction_force(rel.f_cart, state.y_vel, Force(), 0.0, 0.0, viscous=cfg.cart_friction)
    fr_rail = friction_force(rel.f_rail, state.x_vel, Force(), 0.0, 0.0, viscous=cfg.rail_friction)
    fr_wind = friction_force(rel.f_wind, state.r_vel, Force(), 0.0, 0.0, viscous=cfg.winding_friction)

    t1 = -(fr_cart / mc)
    t2 = -(fr_rail / mrc)
    t3 = -(fr_wind / mp)

    n1 = u1 - t1
    n2 = u2 - t2
    n3 = u3 - t3

    ca, sa = math.cos(state.alfa), math.sin(state.alfa)
    cb, sb = math.cos(state.beta), math.sin(state.beta)
    r = state.r
    r_vel, a_vel, b_vel = state.r_vel, state.alfa_vel, state.beta_vel

    tension = g - n3.value
    x_acc = n2.value + rel.mu2 * tension * ca * sb
    y_acc = n1.value + rel.mu1 * tension * sa
    r_acc = (
        g * ca * cb
        - tension
        - x_acc * ca * sb
        - y_acc * sa
        + r * (a_vel * a_vel + (b_vel * ca) ** 2)
    )
    alfa_acc = (
        (-g * sa * cb + x_acc * sa * sb - y_acc * ca - 2.0 * r_vel * a_vel) / r
        - b_vel * b_vel * sa * ca
    )
    beta_acc = (-g * sb - x_acc * cb - 2.0 * r_vel * b_vel * ca + 2.0 * r * a_vel * b_vel * sa) / (r * ca)

    _record(diag.rail, rel.f_rail, fr_rail, mrc, Accel(x_acc), stuck=False)
    _record(diag.cart, rel.f_cart, fr_cart, mc, Accel(y_acc), stuck=False)
    _record(diag.wind, rel.f_wind, fr_wind, mp, Accel(r_acc), stuck=False)

    state.x, state.x_vel = _integrate(state.x, state.x_vel, x_acc, dt)
    state.y, state.y_vel = _integrate(state.y, state.y_vel, y_acc, dt)
    state.r, state.r_vel = _integrate(state.r, state.r_vel, r_acc, dt)
    state.alfa, state.alfa_vel = _integrate(state.alfa, state.alfa_vel, alfa_acc, dt)
    state.beta, state.beta_vel = _integrate(state.beta, state.beta_vel, beta_acc, dt)


Formulation = Callable[[CraneDynamicState, CraneConfig, BasicRelations, float, StepDiagnostics], None]

FORMULATIONS: Dict[ModelType, Formulation] = {
    ModelType.LINEAR: linear_step,
    ModelType.NONLINEAR_CONST_LINE: nonlinear_const_line_step,
    ModelType.NONLINEAR_COMPLETE: nonlinear_complete_step,
    ModelType.NONLINEAR_ORIGINAL: nonlinear_original_step,
}
