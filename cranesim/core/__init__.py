"""Core utilities: units, integrators, types, validation."""

from __future__ import annotations

__all__ = [
    "units",
    "integrators",
    "types",
    "validation",
]
