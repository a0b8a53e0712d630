"""
Aircraft pitch held by a stabilizer surface.

The controller output is the stabilizer deflection s, which sets the
angular acceleration:

    a = (M0 + Ms * s + D) / I

Pitch rate and pitch are integrated from it, so the loop regulates a
double integrator through its acceleration.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

import control as ct

from pid_loop.plants.process_model import apply_params, snapshot, restore


@dataclass
class PitchStabilizer:
    """
    Pitch dynamics of a rigid aircraft.

    Attributes:
        pitch: Current pitch angle (deg)
        pitch_rate: Current pitch rate (deg/s)
        inertia: Moment of inertia about the pitch axis I
        natural_moment: Moment the airframe produces on its own M0
        effectiveness: Moment per unit of stabilizer deflection Ms
        disturbance: External torque D (gusts, load shifts)
    """

    pitch: float = 0.0
    pitch_rate: float = 0.2
    inertia: float = 20.0
    natural_moment: float = 0.2
    effectiveness: float = 0.5
    disturbance: float = 0.0

    disturbance_param: ClassVar[Optional[str]] = "disturbance"
    PARAMETERS: ClassVar[tuple] = (
        "pitch", "pitch_rate", "inertia", "natural_moment",
        "effectiveness", "disturbance",
    )

    _initial: Dict[str, Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._initial = snapshot(self)

    def angular_acceleration(self, deflection: float) -> float:
        return (self.natural_moment + self.effectiveness * deflection + self.disturbance) / self.inertia

    def step(self, control_signal: float, dt: float) -> None:
        """Apply stabilizer deflection ``control_signal`` for one tick."""
        self.pitch_rate += self.angular_acceleration(control_signal) * dt
        self.pitch += self.pitch_rate * dt

    def current(self) -> float:
        return self.pitch

    def measurement(self, target: float) -> float:
        return self.pitch

    def reset(self) -> None:
        restore(self, self._initial)

    def set_params(self, **changes: float) -> None:
        apply_params(self, changes, self.PARAMETERS)

    def get_state(self) -> Dict[str, float]:
        return {'pitch': self.pitch, 'pitch_rate': self.pitch_rate}

    def get_info(self) -> Dict[str, Any]:
        return {
            'type': 'PitchStabilizer',
            'inertia': self.inertia,
            'natural_moment': self.natural_moment,
            'effectiveness': self.effectiveness,
            'disturbance': self.disturbance,
        }

    @property
    def transfer_function(self) -> ct.TransferFunction:
        """Deflection to pitch, ignoring the constant moments: (Ms/I) / s^2."""
        return ct.TransferFunction([self.effectiveness / self.inertia], [1.0, 0.0, 0.0])
