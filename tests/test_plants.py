"""
Unit tests for process models.
"""

import math
import pytest
import numpy as np
import control as ct
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.plants import (
    ProcessModel,
    ThermalRoom,
    PitchStabilizer,
    RotationalPositioner,
    ModelType,
    create_model,
    resolve_model_type,
)
from pid_loop.utils.math_utils import wrap_angle


class TestThermalRoom:
    """Test suite for ThermalRoom."""

    def test_defaults(self):
        room = ThermalRoom()
        assert room.temperature == 0.0
        assert room.thermal_mass == 20.0
        assert room.conductivity == 0.01

    def test_single_step(self):
        """Heater power 10 into C=50 with no wall loss warms by 0.2 per second."""
        room = ThermalRoom(
            temperature=15.0, external_temperature=15.0,
            conductivity=5.0, thermal_mass=50.0, heat_loss=0.0
        )
        room.step(10.0, 1.0)
        assert room.current() == pytest.approx(15.2)

    def test_cools_toward_outside(self):
        """Without heating the room relaxes to the external temperature."""
        room = ThermalRoom(temperature=30.0, external_temperature=10.0,
                           conductivity=2.0, thermal_mass=10.0)
        for _ in range(1000):
            room.step(0.0, 0.1)
        assert room.current() == pytest.approx(10.0, abs=1e-3)

    def test_heat_loss_lowers_temperature(self):
        room = ThermalRoom(temperature=20.0, external_temperature=20.0, heat_loss=4.0,
                           thermal_mass=20.0)
        room.step(0.0, 1.0)
        assert room.current() == pytest.approx(19.8)

    def test_temperature_not_saturated(self):
        room = ThermalRoom(thermal_mass=1.0, conductivity=0.0)
        room.step(1e6, 1.0)
        assert room.current() == pytest.approx(1e6)

    def test_tiny_thermal_mass_not_guarded(self):
        """Non-physical configuration propagates as a huge step instead of an error."""
        room = ThermalRoom(thermal_mass=1e-12, conductivity=0.0)
        room.step(1.0, 1.0)
        assert room.current() > 1e11

    def test_zero_thermal_mass_divides_by_zero(self):
        room = ThermalRoom(thermal_mass=0.0)
        with pytest.raises(ZeroDivisionError):
            room.step(1.0, 1.0)

    def test_measurement_is_temperature(self):
        room = ThermalRoom(temperature=21.0)
        assert room.measurement(100.0) == 21.0

    def test_reset(self):
        room = ThermalRoom(temperature=12.0)
        for _ in range(10):
            room.step(50.0, 1.0)
        room.reset()
        assert room.temperature == 12.0

    def test_set_params(self):
        room = ThermalRoom()
        room.set_params(external_temperature=-5.0, heat_loss=2.0)
        assert room.external_temperature == -5.0
        assert room.heat_loss == 2.0

    def test_set_params_unknown(self):
        with pytest.raises(ValueError):
            ThermalRoom().set_params(humidity=0.5)

    def test_transfer_function_pole(self):
        """Linear model pole sits at -k/C."""
        room = ThermalRoom(thermal_mass=50.0, conductivity=5.0)
        poles = ct.poles(room.transfer_function)
        assert np.allclose(poles, [-0.1])

    def test_is_process_model(self):
        assert isinstance(ThermalRoom(), ProcessModel)


class TestPitchStabilizer:
    """Test suite for PitchStabilizer."""

    def test_defaults(self):
        plane = PitchStabilizer()
        assert plane.pitch == 0.0
        assert plane.pitch_rate == 0.2
        assert plane.inertia == 20.0

    def test_single_step(self):
        """Acceleration feeds the rate, the new rate feeds the pitch."""
        plane = PitchStabilizer(pitch=0.0, pitch_rate=0.0, inertia=10.0,
                                natural_moment=1.0, effectiveness=2.0, disturbance=1.0)
        plane.step(3.0, 0.5)
        # a = (1 + 2*3 + 1) / 10 = 0.8
        assert plane.pitch_rate == pytest.approx(0.4)
        assert plane.pitch == pytest.approx(0.2)

    def test_double_integrator(self):
        """Constant deflection gives quadratic pitch growth."""
        plane = PitchStabilizer(pitch_rate=0.0, natural_moment=0.0, inertia=1.0,
                                effectiveness=1.0)
        for _ in range(100):
            plane.step(1.0, 0.01)
        # semi-implicit Euler: sum_{k=1..n} k*a*dt^2
        assert plane.pitch == pytest.approx(0.01 ** 2 * 100 * 101 / 2)

    def test_natural_moment_drifts_without_control(self):
        plane = PitchStabilizer()
        for _ in range(10):
            plane.step(0.0, 0.1)
        assert plane.pitch > 0.0

    def test_reset(self):
        plane = PitchStabilizer()
        for _ in range(10):
            plane.step(5.0, 0.1)
        plane.reset()
        assert plane.pitch == 0.0
        assert plane.pitch_rate == 0.2

    def test_transfer_function_double_pole(self):
        plane = PitchStabilizer(inertia=20.0, effectiveness=0.5)
        poles = ct.poles(plane.transfer_function)
        assert np.allclose(poles, [0.0, 0.0])

    def test_disturbance_param(self):
        assert PitchStabilizer.disturbance_param == "disturbance"


class TestRotationalPositioner:
    """Test suite for RotationalPositioner."""

    @pytest.mark.parametrize("error,wrapped", [
        (190.0, -170.0),
        (-190.0, 170.0),
        (180.0, -180.0),
        (-180.0, -180.0),
        (0.0, 0.0),
        (725.0, 5.0),
    ])
    def test_wrap_angle(self, error, wrapped):
        assert wrap_angle(error) == pytest.approx(wrapped)

    def test_measurement_gives_wrapped_error(self):
        """Controller error target - measurement equals the wrapped error."""
        shaft = RotationalPositioner(position=0.0)
        target = 190.0
        assert target - shaft.measurement(target) == pytest.approx(-170.0)

        shaft = RotationalPositioner(position=190.0)
        assert 0.0 - shaft.measurement(0.0) == pytest.approx(170.0)

    def test_step_ignores_dt(self):
        """Velocity and position advance once per tick whatever dt is."""
        a = RotationalPositioner(inertia=2.0)
        b = RotationalPositioner(inertia=2.0)
        a.step(4.0, 0.01)
        b.step(4.0, 10.0)
        assert a.velocity == b.velocity == 2.0
        assert a.position == b.position == 2.0

    def test_velocity_persists(self):
        shaft = RotationalPositioner()
        shaft.step(1.0, 1.0)
        shaft.step(0.0, 1.0)
        assert shaft.velocity == 1.0
        assert shaft.position == 2.0

    def test_no_disturbance_input(self):
        assert RotationalPositioner.disturbance_param is None

    def test_reset(self):
        shaft = RotationalPositioner(position=45.0)
        shaft.step(10.0, 1.0)
        shaft.reset()
        assert shaft.position == 45.0
        assert shaft.velocity == 0.0


class TestRegistry:
    """Model lookup."""

    def test_create_by_name(self):
        room = create_model("thermal_room", temperature=18.0)
        assert isinstance(room, ThermalRoom)
        assert room.temperature == 18.0

    def test_create_by_enum(self):
        assert isinstance(create_model(ModelType.PITCH_STABILIZER), PitchStabilizer)

    def test_unknown_model(self):
        with pytest.raises(ValueError):
            resolve_model_type("robotic_arm")

    def test_unknown_plant_param(self):
        with pytest.raises(ValueError):
            create_model("rotational_positioner", friction=0.1)

    def test_fresh_instances(self):
        """Each call builds an independent model."""
        a = create_model("thermal_room")
        b = create_model("thermal_room")
        a.step(100.0, 1.0)
        assert b.temperature == 0.0
        assert not math.isclose(a.temperature, b.temperature)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
