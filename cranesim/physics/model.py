"""CraneModel: фиксированный шаг с аккумулятором поверх формулировок динамики.

Хост вызывает `update_fixed()` раз в кадр с реальным временем кадра.
Модель копит время и прогоняет целое число подшагов `fixed_time`,
остаток переносит на следующий кадр. Нелинейные уравнения устойчивы
только при малом постоянном шаге, поэтому шаг не зависит от кадра.

Каждый подшаг:
1) prepare_basic_relations: силы с учётом упоров, массы, нормальные нагрузки;
2) выбранная формулировка (FORMULATIONS[model_type]);
3) _apply_limits: пределы хода X/Y/R и углов;
4) _dampen_all_values: стабилизация раскачки и обнуление "шума".
"""

from __future__ import annotations

from typing import Optional
import logging
import math

from cranesim.config.crane import DEFAULT_CRANE_CONFIG, CraneConfig
from cranesim.core.types import ModelState
from cranesim.core.units import Force
from cranesim.mechanics.kinematics import payload_position
from cranesim.physics.dynamics import (
    FORMULATIONS,
    BasicRelations,
    CraneDynamicState,
    StepDiagnostics,
    prepare_basic_relations,
)

logger = logging.getLogger(__name__)


class CraneModel:
    def __init__(self, config: Optional[CraneConfig] = None):
        self._cfg = config if config is not None else DEFAULT_CRANE_CONFIG
        self._step_fn = FORMULATIONS[self._cfg.model_type]

        self._state = CraneDynamicState(r=self._cfg.initial_line_length)
        self._diag = StepDiagnostics()
        self._rel: Optional[BasicRelations] = None

        self._accumulator = 0.0
        self._counter = 0
        self._dropped = 0.0

        logger.debug("CraneModel created: %r", self._cfg)

    # ---------- Public API ----------

    @property
    def config(self) -> CraneConfig:
        return self._cfg

    @property
    def diagnostics(self) -> StepDiagnostics:
        return self._diag

    @property
    def relations(self) -> Optional[BasicRelations]:
        """Соотношения последнего подшага (None до первого шага)."""

        return self._rel

    @property
    def simulation_time(self) -> float:
        """Накопленное, но ещё не просчитанное время (< fixed_time)."""

        return self._accumulator

    @property
    def simulation_counter(self) -> int:
        return self._counter

    @property
    def dropped_time(self) -> float:
        return self._dropped

    def reset(self) -> None:
        self._state = CraneDynamicState(r=self._cfg.initial_line_length)
        self._diag = StepDiagnostics()
        self._rel = None
        self._accumulator = 0.0
        self._counter = 0
        self._dropped = 0.0

    def update_fixed(
        self,
        fixed_time: float,
        delta_time: float,
        f_rail: Force,
        f_cart: Force,
        f_wind: Force,
    ) -> ModelState:
        fixed_time = float(fixed_time)
        delta_time = float(delta_time)
        if not (math.isfinite(fixed_time) and fixed_time > 0.0):
            raise ValueError(f"fixed_time must be > 0, got {fixed_time}")
        if not (math.isfinite(delta_time) and delta_time >= 0.0):
            raise ValueError(f"delta_time must be >= 0, got {delta_time}")

        self._accumulator += delta_time
        steps = int(self._accumulator / fixed_time)

        max_steps = int(self._cfg.max_substeps)
        if steps > max_steps:
            dropped = (steps - max_steps) * fixed_time
            self._dropped += dropped
            self._accumulator -= dropped
            logger.warning(
                "update_fixed: %d sub-steps requested, capped at %d; dropped %.4f s",
                steps,
                max_steps,
                dropped,
            )
            steps = max_steps

        for _ in range(steps):
            self._substep(fixed_time, f_rail, f_cart, f_wind)
            self._accumulator -= fixed_time

        logger.debug("update_fixed: %d sub-steps, leftover %.6f s", steps, self._accumulator)

        # накопленная ошибка вычитаний не должна уводить остаток в минус
        if self._accumulator < 0.0:
            self._accumulator = 0.0

        return self.get_state()

    def update(self, delta_time: float, f_rail: Force, f_cart: Force, f_wind: Force) -> ModelState:
        """Один шаг размером delta_time, без аккумулятора."""

        delta_time = float(delta_time)
        if not (math.isfinite(delta_time) and delta_time >= 0.0):
            raise ValueError(f"delta_time must be >= 0, got {delta_time}")
        if delta_time > 0.0:
            self._substep(delta_time, f_rail, f_cart, f_wind)
        return self.get_state()

    def get_state(self) -> ModelState:
        s = self._state
        px, py, pz = payload_position(s.x, s.y, s.r, s.alfa, s.beta)
        return ModelState(
            alfa=s.alfa,
            beta=s.beta,
            rail_offset=s.x,
            cart_offset=s.y,
            lift_line=s.r,
            payload_x=px,
            payload_y=py,
            payload_z=pz,
        )

    # ---------- Internal ----------

    def _substep(self, dt: float, f_rail: Force, f_cart: Force, f_wind: Force) -> None:
        self._rel = prepare_basic_relations(self._state, self._cfg, f_rail, f_cart, f_wind)
        self._step_fn(self._state, self._cfg, self._rel, dt, self._diag)
        self._apply_limits()
        self._dampen_all_values(dt)
        self._counter += 1

    def _apply_limits(self) -> None:
        s = self._state
        cfg = self._cfg
        swing = (-cfg.swing_limit_rad, cfg.swing_limit_rad)

        s.x, s.x_vel = _clamp_axis(s.x, s.x_vel, *cfg.rail_limits)
        s.y, s.y_vel = _clamp_axis(s.y, s.y_vel, *cfg.cart_limits)
        s.r, s.r_vel = _clamp_axis(s.r, s.r_vel, *cfg.line_limits)
        s.alfa, s.alfa_vel = _clamp_axis(s.alfa, s.alfa_vel, *swing)
        s.beta, s.beta_vel = _clamp_axis(s.beta, s.beta_vel, *swing)

    def _dampen_all_values(self, dt: float) -> None:
        """Гасим раскачку; углы и скорости ниже snap_epsilon обнуляем.

        Явный шаг Верле на маятнике с ω² = g/R накачивает энергию примерно
        на 0.5·ω²·dt² за шаг; ровно столько и снимаем, плюс swing_damping.
        """

        s = self._state
        cfg = self._cfg

        omega2 = cfg.g.value / s.r
        factor = max(0.0, 1.0 - (cfg.swing_damping + 0.5 * omega2 * dt * dt))
        s.alfa_vel *= factor
        s.beta_vel *= factor

        eps = cfg.snap_epsilon
        # положения осей не трогаем: пределы хода уже применены
        for name in ("alfa", "beta", "x_vel", "y_vel", "r_vel", "alfa_vel", "beta_vel"):
            if abs(getattr(s, name)) < eps:
                setattr(s, name, 0.0)


def _clamp_axis(pos: float, vel: float, lo: float, hi: float) -> tuple[float, float]:
    if pos <= lo:
        return lo, max(vel, 0.0)
    if pos >= hi:
        return hi, min(vel, 0.0)
    return pos, vel
