"""
Simulation scenarios for the control loop.
Defines setpoint profiles and plant disturbances as functions of time.
"""

from typing import Callable, Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum
import numpy as np

from pid_loop.utils.validators import validate_positive


class SetpointType(Enum):
    """Types of setpoint profiles."""
    STEP = "step"
    RAMP = "ramp"
    SINE = "sine"
    SQUARE = "square"
    STAIRCASE = "staircase"
    CUSTOM = "custom"


class DisturbanceType(Enum):
    """Types of disturbances."""
    NONE = "none"
    STEP = "step"
    PULSE = "pulse"
    SINE = "sine"
    CUSTOM = "custom"


@dataclass
class SimulationScenario:
    """
    Defines a complete simulation scenario.

    The disturbance value is written each tick into the plant input named
    by the model's ``disturbance_param`` (heat loss for the room, external
    torque for the aircraft).
    """

    name: str
    duration: float
    dt: float = 0.1

    # Setpoint configuration
    setpoint_type: SetpointType = SetpointType.STEP
    setpoint_initial: float = 0.0
    setpoint_final: float = 1.0
    setpoint_time: float = 0.0  # Time of setpoint change
    setpoint_params: Optional[Dict[str, Any]] = None
    setpoint_function: Optional[Callable[[float], float]] = None

    # Disturbance configuration
    disturbance_type: DisturbanceType = DisturbanceType.NONE
    disturbance_magnitude: float = 0.0
    disturbance_time: float = 0.0
    disturbance_params: Optional[Dict[str, Any]] = None
    disturbance_function: Optional[Callable[[float], float]] = None

    def __post_init__(self):
        validate_positive(self.duration, "duration")
        validate_positive(self.dt, "dt")

    @property
    def n_ticks(self) -> int:
        return int(round(self.duration / self.dt))

    @property
    def has_disturbance(self) -> bool:
        return (
            self.disturbance_function is not None or
            self.disturbance_type != DisturbanceType.NONE
        )

    def get_setpoint(self, t: float) -> float:
        """
        Target the controller should track at time ``t``.

        Profiles move between ``setpoint_initial`` and ``setpoint_final``:

        - STEP: initial before ``setpoint_time``, final from then on
        - RAMP: linear over ``ramp_duration`` starting at ``setpoint_time``
        - SINE: oscillates between the two at ``frequency`` Hz
        - SQUARE: final for the first half of each ``period``, then initial
        - STAIRCASE: ``n_steps`` equal levels spread over the duration;
          a single step holds the initial value
        """
        if self.setpoint_function is not None:
            return self.setpoint_function(t)

        params = self.setpoint_params or {}
        low, high = self.setpoint_initial, self.setpoint_final
        kind = self.setpoint_type

        if kind == SetpointType.RAMP:
            span = params.get('ramp_duration', 1.0)
            if t <= self.setpoint_time:
                return low
            if t >= self.setpoint_time + span:
                return high
            return low + (t - self.setpoint_time) / span * (high - low)

        if kind == SetpointType.SINE:
            phase = 2 * np.pi * params.get('frequency', 0.1) * t
            return float((low + high) / 2 + (high - low) / 2 * np.sin(phase))

        if kind == SetpointType.SQUARE:
            half_period = params.get('period', 10.0) / 2
            return high if int(t // half_period) % 2 == 0 else low

        if kind == SetpointType.STAIRCASE:
            n_steps = params.get('n_steps', 5)
            if n_steps == 1:
                return low
            level = min(int(t * n_steps / self.duration), n_steps - 1)
            return low + level * (high - low) / (n_steps - 1)

        if kind == SetpointType.STEP:
            return low if t < self.setpoint_time else high

        return high

    def get_disturbance(self, t: float) -> float:
        """
        Disturbance at time ``t``; zero before ``disturbance_time``.

        STEP holds ``disturbance_magnitude``, PULSE holds it for
        ``pulse_duration`` seconds and SINE swings by it at ``frequency`` Hz.
        """
        if self.disturbance_function is not None:
            return self.disturbance_function(t)

        params = self.disturbance_params or {}
        elapsed = t - self.disturbance_time
        magnitude = self.disturbance_magnitude
        kind = self.disturbance_type

        if kind == DisturbanceType.NONE or elapsed < 0:
            return 0.0
        if kind == DisturbanceType.STEP:
            return magnitude
        if kind == DisturbanceType.PULSE:
            return magnitude if elapsed < params.get('pulse_duration', 1.0) else 0.0
        if kind == DisturbanceType.SINE:
            return float(magnitude * np.sin(2 * np.pi * params.get('frequency', 0.5) * elapsed))
        return 0.0


class ScenarioLibrary:
    """Pre-defined scenarios, one family per process model."""

    @staticmethod
    def room_warmup(
        target: float = 25.0,
        start: float = 15.0,
        duration: float = 600.0,
        dt: float = 1.0
    ) -> SimulationScenario:
        """Heat the room from its starting temperature to the target."""
        return SimulationScenario(
            name="Room Warm-up",
            duration=duration,
            dt=dt,
            setpoint_type=SetpointType.STEP,
            setpoint_initial=start,
            setpoint_final=target
        )

    @staticmethod
    def room_open_window(
        target: float = 22.0,
        heat_loss: float = 40.0,
        duration: float = 900.0,
        dt: float = 1.0
    ) -> SimulationScenario:
        """Hold temperature while a window opens halfway through."""
        return SimulationScenario(
            name="Room Open Window",
            duration=duration,
            dt=dt,
            setpoint_type=SetpointType.STEP,
            setpoint_initial=target,
            setpoint_final=target,
            disturbance_type=DisturbanceType.STEP,
            disturbance_magnitude=heat_loss,
            disturbance_time=duration / 2
        )

    @staticmethod
    def pitch_gust(
        target: float = 0.0,
        gust: float = 2.0,
        duration: float = 60.0,
        dt: float = 0.05
    ) -> SimulationScenario:
        """Hold level flight through a short gust."""
        return SimulationScenario(
            name="Pitch Gust",
            duration=duration,
            dt=dt,
            setpoint_type=SetpointType.STEP,
            setpoint_initial=target,
            setpoint_final=target,
            disturbance_type=DisturbanceType.PULSE,
            disturbance_magnitude=gust,
            disturbance_time=duration / 3,
            disturbance_params={'pulse_duration': 2.0}
        )

    @staticmethod
    def pitch_climb(
        angle: float = 10.0,
        ramp_duration: float = 5.0,
        duration: float = 60.0,
        dt: float = 0.05
    ) -> SimulationScenario:
        """Ramp into a climb attitude."""
        return SimulationScenario(
            name="Pitch Climb",
            duration=duration,
            dt=dt,
            setpoint_type=SetpointType.RAMP,
            setpoint_initial=0.0,
            setpoint_final=angle,
            setpoint_time=1.0,
            setpoint_params={'ramp_duration': ramp_duration}
        )

    @staticmethod
    def positioner_sweep(
        low: float = -170.0,
        high: float = 170.0,
        period: float = 200.0,
        duration: float = 400.0,
        dt: float = 1.0
    ) -> SimulationScenario:
        """Jump across the +/-180 seam and back."""
        return SimulationScenario(
            name="Positioner Sweep",
            duration=duration,
            dt=dt,
            setpoint_type=SetpointType.SQUARE,
            setpoint_initial=low,
            setpoint_final=high,
            setpoint_params={'period': period}
        )

    @staticmethod
    def custom(
        name: str,
        duration: float,
        setpoint_func: Callable[[float], float],
        disturbance_func: Optional[Callable[[float], float]] = None,
        dt: float = 0.1
    ) -> SimulationScenario:
        """Create custom scenario with function-defined profiles."""
        return SimulationScenario(
            name=name,
            duration=duration,
            dt=dt,
            setpoint_type=SetpointType.CUSTOM,
            setpoint_function=setpoint_func,
            disturbance_type=DisturbanceType.CUSTOM if disturbance_func else DisturbanceType.NONE,
            disturbance_function=disturbance_func
        )
