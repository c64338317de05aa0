import logging
import math

import numpy as np
import pytest

from cranesim.config.crane import CraneConfig
from cranesim.core.types import ModelState, ModelType
from cranesim.core.units import Force, newtons
from cranesim.mechanics.kinematics import payload_position
from cranesim.physics import CraneModel

FRAME = 1.0 / 60.0
ZERO = Force()


def _random_run(model: CraneModel, seed: int, n_frames: int, fixed_time: float = 0.002) -> list:
    rng = np.random.default_rng(seed)
    forces = rng.uniform(-60.0, 60.0, size=(n_frames, 3))
    states = []
    for f_rail, f_cart, f_wind in forces:
        states.append(
            model.update_fixed(fixed_time, FRAME, newtons(f_rail), newtons(f_cart), newtons(f_wind))
        )
    return states


class TestInitialState:
    def test_starts_at_rest(self) -> None:
        model = CraneModel()
        s = model.get_state()
        assert s == ModelState(lift_line=0.5, payload_z=-0.5)
        assert model.simulation_counter == 0
        assert model.relations is None

    def test_repr_in_degrees(self) -> None:
        text = repr(ModelState(alfa=math.pi / 2.0, beta=-math.pi / 4.0))
        assert "α=90.00°" in text
        assert "β=-45.00°" in text

    def test_get_state_is_pure(self) -> None:
        model = CraneModel()
        model.update_fixed(0.01, 0.055, newtons(50.0), ZERO, ZERO)
        a = model.get_state()
        b = model.get_state()
        assert a == b
        assert model.simulation_counter == 5


class TestLimits:
    def test_position_limit_near_zero_is_respected(self) -> None:
        cfg = CraneConfig(rail_limits=(5e-10, 1.0))
        model = CraneModel(cfg)
        for _ in range(10):
            s = model.update(0.01, ZERO, ZERO, ZERO)
            assert s.rail_offset >= cfg.rail_limits[0]
        assert s.rail_offset == 5e-10

    def test_limits_hold_under_random_forces(self, any_model_config: CraneConfig) -> None:
        cfg = any_model_config
        model = CraneModel(cfg)
        for s in _random_run(model, seed=42, n_frames=180):
            assert s.is_finite()
            assert cfg.rail_limits[0] <= s.rail_offset <= cfg.rail_limits[1]
            assert cfg.cart_limits[0] <= s.cart_offset <= cfg.cart_limits[1]
            assert cfg.line_limits[0] <= s.lift_line <= cfg.line_limits[1]
            assert abs(s.alfa) <= cfg.swing_limit_rad
            assert abs(s.beta) <= cfg.swing_limit_rad

    def test_payload_hangs_on_line(self, any_model_config: CraneConfig) -> None:
        model = CraneModel(any_model_config)
        s = _random_run(model, seed=7, n_frames=60)[-1]
        expected = payload_position(s.rail_offset, s.cart_offset, s.lift_line, s.alfa, s.beta)
        assert s.payload == pytest.approx(expected)


class TestDeterminism:
    def test_same_inputs_same_states(self, any_model_config: CraneConfig) -> None:
        a = _random_run(CraneModel(any_model_config), seed=3, n_frames=90)
        b = _random_run(CraneModel(any_model_config), seed=3, n_frames=90)
        assert a == b


class TestLinear:
    def test_rest_without_forces_stays_exactly_at_rest(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.LINEAR))
        rest = model.get_state()
        for _ in range(600):
            s = model.update_fixed(0.01, FRAME, ZERO, ZERO, ZERO)
            assert s == rest

    def test_swing_does_not_grow(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.LINEAR))
        for _ in range(18):
            model.update_fixed(0.001, FRAME, ZERO, newtons(50.0), ZERO)

        alfa = []
        for _ in range(6 * 60):
            alfa.append(model.update_fixed(0.001, FRAME, ZERO, ZERO, ZERO).alfa)
        alfa = np.abs(np.array(alfa))

        early = alfa[60:180].max()  # 1..3 s
        late = alfa[240:360].max()  # 4..6 s
        assert early > 0.01
        assert late <= early


class TestNonlinearComplete:
    def test_cart_reaches_stop_and_stays(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.NONLINEAR_COMPLETE))
        f_cart = newtons(50.0)

        cart = []
        for _ in range(4 * 60):
            cart.append(model.update_fixed(0.001, FRAME, ZERO, f_cart, ZERO).cart_offset)

        first = next(i for i, y in enumerate(cart) if y == 0.35)
        assert first * FRAME < 2.0
        assert all(y == 0.35 for y in cart[first:])

    def test_cart_offset_rises_monotonically_until_clamped(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.NONLINEAR_COMPLETE))
        ys = np.array(
            [model.update_fixed(0.01, 0.01, ZERO, newtons(50.0), ZERO).cart_offset for _ in range(100)]
        )

        first = int(np.argmax(ys == 0.35))
        assert ys[first] == 0.35
        assert first > 0
        assert ys[0] > 0.0
        assert np.all(np.diff(ys[: first + 1]) > 0.0)
        assert np.all(ys[first:] == 0.35)

    def test_weak_force_does_not_break_static_friction(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.NONLINEAR_COMPLETE))
        for _ in range(60):
            s = model.update_fixed(0.002, FRAME, newtons(20.0), newtons(10.0), newtons(5.0))
        assert s.rail_offset == 0.0
        assert s.cart_offset == 0.0
        assert s.lift_line == 0.5
        assert model.diagnostics.cart.stuck


class TestConstLine:
    def test_line_never_changes(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.NONLINEAR_CONST_LINE))
        for s in _random_run(model, seed=11, n_frames=120):
            assert s.lift_line == 0.5


class TestUpdateFixed:
    def test_accumulator_carries_leftover(self) -> None:
        model = CraneModel()
        model.update_fixed(0.01, 0.025, ZERO, ZERO, ZERO)
        assert model.simulation_counter == 2
        assert model.simulation_time == pytest.approx(0.005)

        model.update_fixed(0.01, 0.006, ZERO, ZERO, ZERO)
        assert model.simulation_counter == 3
        assert model.simulation_time == pytest.approx(0.001)

    def test_short_frame_runs_no_substep(self) -> None:
        model = CraneModel()
        model.update_fixed(0.01, 0.004, newtons(50.0), ZERO, ZERO)
        assert model.simulation_counter == 0
        assert model.get_state().rail_offset == 0.0

    def test_substep_cap_drops_time(self, caplog: pytest.LogCaptureFixture) -> None:
        model = CraneModel(CraneConfig(max_substeps=10))
        with caplog.at_level(logging.WARNING, logger="cranesim.physics.model"):
            model.update_fixed(0.001, 1.0, ZERO, ZERO, ZERO)
        assert model.simulation_counter == 10
        assert model.dropped_time == pytest.approx(0.99, abs=2e-3)
        assert model.simulation_time < 0.002
        assert "capped" in caplog.text

    @pytest.mark.parametrize("fixed_time,delta_time", [(0.0, 0.01), (-0.01, 0.01), (0.01, -0.01), (math.nan, 0.01)])
    def test_bad_arguments(self, fixed_time: float, delta_time: float) -> None:
        with pytest.raises(ValueError):
            CraneModel().update_fixed(fixed_time, delta_time, ZERO, ZERO, ZERO)


class TestUpdate:
    def test_zero_delta_is_noop(self) -> None:
        model = CraneModel()
        before = model.get_state()
        assert model.update(0.0, newtons(50.0), newtons(50.0), newtons(50.0)) == before
        assert model.simulation_counter == 0

    def test_single_step(self) -> None:
        model = CraneModel()
        model.update(0.01, ZERO, newtons(50.0), ZERO)
        assert model.simulation_counter == 1
        assert model.get_state().cart_offset > 0.0

    def test_negative_delta_raises(self) -> None:
        with pytest.raises(ValueError):
            CraneModel().update(-0.01, ZERO, ZERO, ZERO)


def test_reset_restores_rest() -> None:
    model = CraneModel(CraneConfig(model_type=ModelType.NONLINEAR_COMPLETE))
    model.update_fixed(0.002, 0.5, newtons(60.0), newtons(-60.0), newtons(30.0))
    model.reset()
    assert model.get_state() == CraneModel().get_state()
    assert model.simulation_counter == 0
    assert model.simulation_time == 0.0
    assert model.dropped_time == 0.0
