import math

import pytest

from cranesim.config import DEFAULT_CRANE_CONFIG, CraneConfig
from cranesim.core.types import ModelType
from cranesim.core.units import kilograms, meters_per_sec_squared
from cranesim.core.validation import InvalidConfiguration


class TestCraneConfigDefaults:
    def test_default_masses(self) -> None:
        cfg = DEFAULT_CRANE_CONFIG
        assert cfg.payload_mass == kilograms(1.0)
        assert cfg.cart_mass == kilograms(1.155)
        assert cfg.rail_mass == kilograms(2.2)
        assert cfg.rail_cart_mass.value == pytest.approx(3.355)

    def test_default_model_is_linear(self) -> None:
        assert DEFAULT_CRANE_CONFIG.model_type is ModelType.LINEAR

    def test_default_limits(self) -> None:
        cfg = DEFAULT_CRANE_CONFIG
        assert cfg.rail_limits == (-0.30, 0.30)
        assert cfg.cart_limits == (-0.35, 0.35)
        assert cfg.line_limits[0] > 0.0
        assert cfg.line_limits[0] <= cfg.initial_line_length <= cfg.line_limits[1]

    def test_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CRANE_CONFIG.rail_friction = 1.0  # type: ignore[misc]

    def test_model_type_from_string_value(self) -> None:
        assert ModelType("nonlinear_complete") is ModelType.NONLINEAR_COMPLETE


class TestCraneConfigInvariants:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"payload_mass": kilograms(0.0)},
            {"cart_mass": kilograms(-1.0)},
            {"rail_mass": kilograms(math.nan)},
            {"g": meters_per_sec_squared(-9.81)},
            {"rail_friction": -1.0},
            {"static_friction_coeff": 0.5, "kinetic_friction_coeff": 0.7},
            {"kinetic_friction_coeff": -0.1},
            {"rail_limits": (0.3, -0.3)},
            {"cart_limits": (0.0, math.inf)},
            {"line_limits": (0.0, 0.9)},
            {"initial_line_length": 1.5},
            {"swing_limit_rad": 0.5 * math.pi},
            {"swing_damping": 2.0},
            {"max_substeps": 0},
        ],
    )
    def test_invalid_raises(self, kwargs) -> None:
        with pytest.raises(InvalidConfiguration):
            CraneConfig(**kwargs)

    def test_plain_float_mass_rejected(self) -> None:
        with pytest.raises(InvalidConfiguration):
            CraneConfig(payload_mass=1.0)  # type: ignore[arg-type]

    def test_invalid_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            CraneConfig(cart_mass=kilograms(0.0))

    def test_zero_gravity_allowed(self) -> None:
        cfg = CraneConfig(g=meters_per_sec_squared(0.0))
        assert cfg.g.value == 0.0

    def test_repr_mentions_model(self) -> None:
        assert "nonlinear_original" in repr(CraneConfig(model_type=ModelType.NONLINEAR_ORIGINAL))
