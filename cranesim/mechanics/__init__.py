"""Механика: одиночная ось и кинематика троса."""

from cranesim.mechanics.component import Component
from cranesim.mechanics.kinematics import LineFrame, line_velocity_terms, payload_position

__all__ = [
    "Component",
    "LineFrame",
    "line_velocity_terms",
    "payload_position",
]
