import numpy as np
import pytest

from cranesim.config.crane import CraneConfig
from cranesim.core.types import ModelState, ModelType
from cranesim.core.units import Force, newtons
from cranesim.physics import CraneModel
from cranesim.simulation import SimulationSettings, constant_forces, run_simulation, step_forces


class TestSchedules:
    def test_constant(self) -> None:
        sched = constant_forces(f_cart=12.0)
        assert sched(0.0) == (Force(), newtons(12.0), Force())
        assert sched(100.0) == sched(0.0)

    def test_step_window(self) -> None:
        sched = step_forces(0.5, 1.0, f_rail=40.0, f_wind=-3.0)
        assert sched(0.49) == (Force(), Force(), Force())
        assert sched(0.5) == (newtons(40.0), Force(), newtons(-3.0))
        assert sched(1.0) == (Force(), Force(), Force())

    def test_step_window_order(self) -> None:
        with pytest.raises(ValueError):
            step_forces(1.0, 0.5)


class TestSettings:
    def test_frame_count(self) -> None:
        assert SimulationSettings(duration_s=1.0, frame_time=0.1).n_frames == 10

    @pytest.mark.parametrize("kwargs", [{"duration_s": 0.0}, {"frame_time": -0.1}, {"fixed_time": 0.0}])
    def test_invalid(self, kwargs) -> None:
        with pytest.raises(ValueError):
            SimulationSettings(**kwargs)


class TestRunSimulation:
    def test_output_layout(self) -> None:
        settings = SimulationSettings(duration_s=0.5, frame_time=0.05, fixed_time=0.005)
        out = run_simulation(CraneModel(), constant_forces(), settings)

        assert set(out) == {"time", *ModelState.field_names()}
        for arr in out.values():
            assert isinstance(arr, np.ndarray)
            assert arr.dtype == np.float64
            assert arr.shape == (settings.n_frames,)
        assert out["time"][-1] == pytest.approx(0.5)
        np.testing.assert_array_equal(out["lift_line"], 0.5)

    def test_pushed_cart_moves_and_payload_lags(self) -> None:
        model = CraneModel(CraneConfig(model_type=ModelType.NONLINEAR_COMPLETE))
        settings = SimulationSettings(duration_s=0.3, frame_time=1.0 / 60.0, fixed_time=0.001)
        out = run_simulation(model, constant_forces(f_cart=50.0), settings)

        assert np.all(np.diff(out["cart_offset"]) >= 0.0)
        assert out["cart_offset"][-1] > 0.0
        assert out["alfa"][:5].max() < 0.0
        assert model.simulation_counter == pytest.approx(300, abs=1)
