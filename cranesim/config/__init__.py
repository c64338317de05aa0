"""Конфиги крана."""

from __future__ import annotations

from .crane import DEFAULT_CRANE_CONFIG, CraneConfig, Limits

__all__ = [
    "CraneConfig",
    "DEFAULT_CRANE_CONFIG",
    "Limits",
]
