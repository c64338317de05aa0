"""Кинематика троса: направление троса, его производные и положение груза.

Соглашения:
- точка подвеса: тележка (X, Y, 0), Z вверх;
- груз = подвес + R·e, где
      e = (cos α · sin β,  sin α,  -cos α · cos β);
- α: раскачка в направлении тележки (Y), β: в направлении рельса (X);
  α = β = 0 — груз висит отвесно.

Производные e по углам взаимно ортогональны:
- e_α = ∂e/∂α, |e_α| = 1;
- e_β = ∂e/∂β, |e_β| = cos α (поэтому α держим строго внутри ±π/2).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math

import numpy as np
from numpy.typing import NDArray

from cranesim.core.units import DEG_TO_RAD


Vec3 = NDArray[np.float64]


@dataclass(frozen=True, eq=False)
class LineFrame:
    """Направление троса и его производные при заданных углах."""

    alfa: float
    beta: float
    e: Vec3
    e_alfa: Vec3
    e_beta: Vec3
    e_alfa_beta: Vec3  # ∂²e/∂α∂β
    e_beta_beta: Vec3  # ∂²e/∂β²

    @classmethod
    def at(cls, alfa: float, beta: float) -> "LineFrame":
        ca, sa = math.cos(alfa), math.sin(alfa)
        cb, sb = math.cos(beta), math.sin(beta)
        return cls(
            alfa=float(alfa),
            beta=float(beta),
            e=np.array([ca * sb, sa, -ca * cb], dtype=np.float64),
            e_alfa=np.array([-sa * sb, ca, sa * cb], dtype=np.float64),
            e_beta=np.array([ca * cb, 0.0, ca * sb], dtype=np.float64),
            e_alfa_beta=np.array([-sa * cb, 0.0, -sa * sb], dtype=np.float64),
            e_beta_beta=np.array([-ca * sb, 0.0, ca * cb], dtype=np.float64),
        )

    def __repr__(self) -> str:
        return f"LineFrame(α={self.alfa / DEG_TO_RAD:.1f}°, β={self.beta / DEG_TO_RAD:.1f}°, e={self.e})"


def payload_position(x: float, y: float, r: float, alfa: float, beta: float) -> Tuple[float, float, float]:
    """3D координата груза по положению тележки, длине троса и углам."""

    ca = math.cos(alfa)
    px = x + r * ca * math.sin(beta)
    py = y + r * math.sin(alfa)
    pz = -r * ca * math.cos(beta)
    return float(px), float(py), float(pz)


def line_velocity_terms(
    frame: LineFrame,
    r: float,
    r_vel: float,
    alfa_vel: float,
    beta_vel: float,
) -> Vec3:
    """Скоростная часть ускорения груза (всё, что не умножается на q̈).

    P̈ = S̈ + R̈·e + R·(α̈·e_α + β̈·e_β) + h, где
        h = 2Ṙ·(α̇·e_α + β̇·e_β) + R·(-α̇²·e + 2α̇β̇·e_αβ + β̇²·e_ββ)
    (∂²e/∂α² = -e).
    """

    e_dot = alfa_vel * frame.e_alfa + beta_vel * frame.e_beta
    curvature = (
        -(alfa_vel * alfa_vel) * frame.e
        + 2.0 * alfa_vel * beta_vel * frame.e_alfa_beta
        + (beta_vel * beta_vel) * frame.e_beta_beta
    )
    return 2.0 * r_vel * e_dot + r * curvature
