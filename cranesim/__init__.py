"""cranesim package.

Важно: пакет не должен иметь побочных эффектов при импорте.
Поэтому здесь нет eager-import'ов модели и numpy-слоя.

Импортируй нужное напрямую:
- from cranesim.physics.model import CraneModel
- from cranesim.config import CraneConfig
- from cranesim.core.units import newtons
"""

from __future__ import annotations

__all__: list[str] = []
