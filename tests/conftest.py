"""Pytest configuration.

`cranesim/` лежит в корне репозитория (flat layout). Чтобы `import cranesim`
работал и без editable-установки, кладём корень репозитория в sys.path.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


from cranesim.config.crane import CraneConfig  # noqa: E402
from cranesim.core.types import ModelType  # noqa: E402


@pytest.fixture(params=list(ModelType), ids=lambda t: t.value)
def any_model_config(request) -> CraneConfig:
    return CraneConfig(model_type=request.param)
