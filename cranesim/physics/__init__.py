"""Пакет физики крана (трение, динамика, модель с фиксированным шагом)."""

from __future__ import annotations

from .model import CraneModel

__all__ = [
    "CraneModel",
]
