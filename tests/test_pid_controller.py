"""
Unit tests for PID Controller.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.core.pid_controller import PIDController
from pid_loop.core.pid_params import (
    PIDParams,
    PIDPresets,
    DerivativeMode,
    ZeroDtPolicy,
)


class TestPIDController:
    """Test suite for PIDController class."""

    def test_initialization_default(self):
        """Default controller has zero target and gains and no bounds."""
        pid = PIDController()
        assert pid.target == 0.0
        assert pid.kp == 0.0
        assert pid.ki == 0.0
        assert pid.kd == 0.0
        assert pid.params.output_min is None
        assert pid.params.output_max is None
        assert pid.integral == 0.0
        assert pid.last_error is None

    @pytest.mark.parametrize("measurement", [-50.0, 0.0, 3.5, 1e6])
    @pytest.mark.parametrize("dt", [0.01, 1.0, 5.0])
    def test_zero_gains_output_zero(self, measurement, dt):
        """Zero gains give zero output for any measurement."""
        pid = PIDController(PIDParams(target=10.0))
        assert pid.update(measurement, dt) == 0.0
        assert pid.update(measurement, dt) == 0.0

    def test_proportional_only(self):
        """P-only output is kp * (target - measurement)."""
        pid = PIDController(PIDParams(target=100.0, kp=2.0))

        # error=20, P term = 2.0 * 20 = 40
        output = pid.update(80.0, 0.1)
        assert output == pytest.approx(40.0)

    def test_reset_then_proportional(self):
        """After reset a single P-only update is exactly kp * error."""
        pid = PIDController(PIDParams(target=100.0, kp=1.5, ki=0.3, kd=0.7))
        for m in (10.0, 20.0, 40.0):
            pid.update(m, 0.5)

        pid.reset()
        pid.set_gains(ki=0.0, kd=0.0)

        assert pid.update(60.0, 0.5) == 1.5 * (100.0 - 60.0)

    def test_integral_accumulation(self):
        """Integral accumulator is the sum of error * dt."""
        pid = PIDController(PIDParams(target=10.0, ki=1.0))

        for _ in range(10):
            pid.update(0.0, 0.1)

        assert pid.integral == pytest.approx(10.0)

    def test_integral_monotonic_with_constant_error(self):
        """Constant positive error grows the integral and an I-only output every tick."""
        pid = PIDController(PIDParams(target=5.0, ki=0.5))

        integrals = []
        outputs = []
        for _ in range(20):
            outputs.append(pid.update(2.0, 0.25))
            integrals.append(pid.integral)

        assert all(b > a for a, b in zip(integrals, integrals[1:]))
        assert all(b > a for a, b in zip(outputs, outputs[1:]))

    def test_output_max_clamp(self):
        """Raw output 50 with output_max 10 returns exactly 10."""
        pid = PIDController(PIDParams(target=50.0, kp=1.0, output_max=10.0))
        assert pid.update(0.0, 1.0) == 10.0
        assert pid.state.output_unsat == pytest.approx(50.0)
        assert pid.state.saturated

    def test_output_min_clamp(self):
        """Raw output -50 with output_min -10 returns exactly -10."""
        pid = PIDController(PIDParams(target=-50.0, kp=1.0, output_min=-10.0))
        assert pid.update(0.0, 1.0) == -10.0

    def test_clamp_is_one_sided(self):
        """Only a configured bound is applied."""
        pid = PIDController(PIDParams(target=50.0, kp=1.0, output_min=0.0))
        assert pid.update(0.0, 1.0) == pytest.approx(50.0)

        pid = PIDController(PIDParams(target=-50.0, kp=1.0, output_max=0.0))
        assert pid.update(0.0, 1.0) == pytest.approx(-50.0)

    def test_inverted_bounds_resolve_to_max(self):
        """Lower bound is applied first, so output_max wins when bounds cross."""
        pid = PIDController(PIDParams(target=0.0, output_min=5.0, output_max=-5.0))
        assert pid.update(0.0, 1.0) == -5.0

    def test_legacy_derivative_first_tick(self):
        """First tick uses previous error 0: derivative = (0 - error) / dt."""
        pid = PIDController(PIDParams(target=10.0, kd=1.0))
        output = pid.update(0.0, 0.5)
        assert output == pytest.approx((0.0 - 10.0) / 0.5)

    def test_legacy_derivative_sign(self):
        """Legacy numerator is previous error minus current error."""
        pid = PIDController(PIDParams(target=10.0, kd=2.0))
        pid.update(0.0, 1.0)  # error 10
        output = pid.update(4.0, 1.0)  # error 6
        assert output == pytest.approx(2.0 * (10.0 - 6.0) / 1.0)

    def test_error_derivative_sign(self):
        """ERROR mode uses the textbook sign: current minus previous error."""
        params = PIDParams(target=10.0, kd=2.0, derivative_mode=DerivativeMode.ERROR)
        pid = PIDController(params)
        pid.update(0.0, 1.0)
        output = pid.update(4.0, 1.0)
        assert output == pytest.approx(2.0 * (6.0 - 10.0) / 1.0)

    def test_zero_dt_skips_derivative(self):
        """dt == 0 drops the derivative term and leaves the integral unchanged."""
        pid = PIDController(PIDParams(target=10.0, kp=1.0, ki=1.0, kd=100.0))
        pid.update(0.0, 1.0)
        integral = pid.integral

        output = pid.update(0.0, 0.0)
        assert pid.state.d_term == 0.0
        assert pid.integral == integral
        assert output == pytest.approx(1.0 * 10.0 + 1.0 * integral)
        assert pid.last_error == 10.0

    def test_zero_dt_raise_policy(self):
        """RAISE policy surfaces a ZeroDivisionError."""
        params = PIDParams(target=1.0, kd=1.0, zero_dt_policy=ZeroDtPolicy.RAISE)
        pid = PIDController(params)
        with pytest.raises(ZeroDivisionError):
            pid.update(0.0, 0.0)

    def test_update_stores_last_error(self):
        """Every update records the error for the next tick."""
        pid = PIDController(PIDParams(target=3.0))
        pid.update(1.0, 0.1)
        assert pid.last_error == 2.0
        pid.update(5.0, 0.1)
        assert pid.last_error == -2.0

    def test_reset(self):
        """Reset clears the integral and previous error."""
        pid = PIDController(PIDParams(target=100.0, kp=1.0, ki=1.0))

        for _ in range(10):
            pid.update(0.0, 0.1)

        assert pid.integral > 0

        pid.reset()

        assert pid.integral == 0.0
        assert pid.last_error is None
        assert pid.output == 0.0

    def test_reset_idempotent(self):
        """Two resets leave the same state as one."""
        pid = PIDController(PIDParams(target=1.0, ki=1.0))
        pid.update(0.0, 1.0)

        pid.reset()
        pid.reset()

        assert pid.integral == 0.0
        assert pid.last_error is None

    def test_set_keeps_accumulated_state(self):
        """Reconfiguring does not reset integral or previous error."""
        pid = PIDController(PIDParams(target=10.0, ki=1.0))
        pid.update(0.0, 1.0)
        pid.update(0.0, 1.0)

        pid.set(target=20.0, kp=0.0, ki=2.0, kd=0.0, output_min=None, output_max=100.0)

        assert pid.integral == pytest.approx(20.0)
        assert pid.last_error == 10.0
        assert pid.target == 20.0
        assert pid.params.output_max == 100.0

        # New gain applies to the existing accumulator right away
        output = pid.update(20.0, 1.0)
        assert output == pytest.approx(2.0 * 20.0)

    def test_property_setters(self):
        """Gains and target can be changed between ticks."""
        pid = PIDController()
        pid.target = 5.0
        pid.kp = 2.0
        pid.ki = -1.0  # not validated
        pid.kd = 0.5
        assert pid.params.target == 5.0
        assert pid.params.kp == 2.0
        assert pid.params.ki == -1.0
        assert pid.params.kd == 0.5

    def test_negative_gains_accepted(self):
        """Negative gains are applied as given."""
        pid = PIDController(PIDParams(target=1.0, kp=-3.0))
        assert pid.update(0.0, 1.0) == pytest.approx(-3.0)

    def test_get_error(self):
        """get_error does not touch state."""
        pid = PIDController(PIDParams(target=7.0))
        assert pid.get_error(2.0) == 5.0
        assert pid.last_error is None

    def test_set_output_limits(self):
        pid = PIDController(PIDParams(target=100.0, kp=1.0))
        pid.set_output_limits(-1.0, 1.0)
        assert pid.update(0.0, 1.0) == 1.0

    def test_csv_log(self, tmp_path):
        """Controller writes one CSV row per update."""
        path = tmp_path / "pid.csv"
        with PIDController(PIDParams(target=1.0, kp=1.0), csv_path=str(path)) as pid:
            for _ in range(3):
                pid.update(0.0, 0.1)

        lines = path.read_text().strip().splitlines()
        assert len(lines) == 4
        assert lines[0].startswith("iteration,time,dt,target")


class TestPIDParams:
    """Test suite for PIDParams class."""

    def test_default_values(self):
        params = PIDParams()
        assert params.target == 0.0
        assert params.kp == 0.0
        assert params.derivative_mode == DerivativeMode.LEGACY
        assert params.zero_dt_policy == ZeroDtPolicy.SKIP_DERIVATIVE

    def test_no_validation(self):
        """Out-of-range values are accepted."""
        params = PIDParams(kp=-1.0, output_min=10.0, output_max=5.0)
        assert params.kp == -1.0

    def test_copy(self):
        params1 = PIDParams(kp=1.0, ki=0.5)
        params2 = params1.copy(kp=2.0)

        assert params1.kp == 1.0
        assert params2.kp == 2.0
        assert params2.ki == 0.5

    def test_from_dict_converts_enums(self):
        d = {'target': 3.0, 'kp': 3.0, 'derivative_mode': 'error', 'zero_dt_policy': 'raise'}
        params = PIDParams.from_dict(d)

        assert params.target == 3.0
        assert params.derivative_mode == DerivativeMode.ERROR
        assert params.zero_dt_policy == ZeroDtPolicy.RAISE

    def test_json_serialization(self):
        params1 = PIDParams(target=25.0, kp=2.0, ki=0.5, kd=0.1, output_min=0.0)
        params2 = PIDParams.from_json(params1.to_json())
        assert params2 == params1

    def test_presets_have_bounds(self):
        for preset in (PIDPresets.thermal_room(), PIDPresets.pitch_stabilizer(),
                       PIDPresets.rotational_positioner()):
            assert preset.output_min < preset.output_max


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
