"""Безголовый прогон модели: то же, что делает хост, только без визуализации.

Хост раз в кадр зовёт `update_fixed(fixed_time, frame_time, ...)` и читает
`ModelState`. Здесь кадры идут с постоянным `frame_time`, силы берутся из
расписания `t -> (Frail, Fcart, Fwind)`, результат — массивы numpy по
каждому полю `ModelState`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple
import logging
import math

import numpy as np

from cranesim.core.types import ModelState
from cranesim.core.units import Force, newtons
from cranesim.core.validation import ensure_positive
from cranesim.physics.model import CraneModel

logger = logging.getLogger(__name__)


Forces = Tuple[Force, Force, Force]
ForceSchedule = Callable[[float], Forces]


@dataclass(frozen=True)
class SimulationSettings:
    duration_s: float = 5.0
    frame_time: float = 1.0 / 60.0  # кадр хоста
    fixed_time: float = 0.001  # шаг физики

    def __post_init__(self) -> None:
        ensure_positive(self.duration_s, "duration_s")
        ensure_positive(self.frame_time, "frame_time")
        ensure_positive(self.fixed_time, "fixed_time")

    @property
    def n_frames(self) -> int:
        return int(math.ceil(self.duration_s / self.frame_time - 1e-9))


def constant_forces(f_rail: float = 0.0, f_cart: float = 0.0, f_wind: float = 0.0) -> ForceSchedule:
    forces = (newtons(f_rail), newtons(f_cart), newtons(f_wind))

    def schedule(t: float) -> Forces:
        return forces

    return schedule


def step_forces(
    t_on: float,
    t_off: float,
    f_rail: float = 0.0,
    f_cart: float = 0.0,
    f_wind: float = 0.0,
) -> ForceSchedule:
    """Прямоугольный импульс: силы действуют на [t_on, t_off), иначе ноль."""

    if t_off < t_on:
        raise ValueError(f"t_off must be >= t_on; got {t_on}..{t_off}")

    on = (newtons(f_rail), newtons(f_cart), newtons(f_wind))
    off = (Force(), Force(), Force())

    def schedule(t: float) -> Forces:
        return on if t_on <= t < t_off else off

    return schedule


def run_simulation(
    model: CraneModel,
    schedule: ForceSchedule,
    settings: SimulationSettings = SimulationSettings(),
) -> Dict[str, np.ndarray]:
    """Прогнать модель по кадрам. Строка i: состояние в конце кадра i."""

    n = settings.n_frames
    names = ModelState.field_names()

    time = np.zeros((n,), dtype=np.float64)
    buf = {k: np.zeros((n,), dtype=np.float64) for k in names}

    for i in range(n):
        t = i * settings.frame_time
        f_rail, f_cart, f_wind = schedule(t)

        state = model.update_fixed(settings.fixed_time, settings.frame_time, f_rail, f_cart, f_wind)

        time[i] = t + settings.frame_time
        for k in names:
            buf[k][i] = getattr(state, k)

    logger.debug(
        "run_simulation: %d frames, %d sub-steps, dropped %.4f s",
        n,
        model.simulation_counter,
        model.dropped_time,
    )
    return {"time": time, **buf}
