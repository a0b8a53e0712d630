"""
Rotating shaft positioned by a torque command.

Angles are in degrees on a circle. Before the controller sees the
position, the tracking error is wrapped into [-180, 180) so the loop
always turns the short way round instead of fighting the +/-180 seam.

The tick length is folded into the gains: velocity and position advance
by one increment per tick regardless of dt.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from pid_loop.plants.process_model import apply_params, snapshot, restore
from pid_loop.utils.math_utils import wrap_angle


@dataclass
class RotationalPositioner:
    """
    Attributes:
        position: Shaft angle (deg), unbounded
        velocity: Angle change per tick (deg/tick)
        inertia: Rotational inertia dividing the applied torque
    """

    position: float = 0.0
    velocity: float = 0.0
    inertia: float = 1.0

    disturbance_param: ClassVar[Optional[str]] = None
    PARAMETERS: ClassVar[tuple] = ("position", "velocity", "inertia")

    _initial: Dict[str, Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._initial = snapshot(self)

    def step(self, control_signal: float, dt: float) -> None:
        """Apply torque ``control_signal``; ``dt`` is not used."""
        acceleration = control_signal / self.inertia
        self.velocity += acceleration
        self.position += self.velocity

    def current(self) -> float:
        return self.position

    def wrapped_error(self, target: float) -> float:
        """Shortest signed angle from the current position to ``target``."""
        return wrap_angle(target - self.position)

    def measurement(self, target: float) -> float:
        """
        Position shifted by whole turns to lie within 180 degrees of ``target``.

        The controller's ``target - measurement`` is then the wrapped error.
        The result is not the shaft angle; use ``current`` for that.
        """
        return target - self.wrapped_error(target)

    def reset(self) -> None:
        restore(self, self._initial)

    def set_params(self, **changes: float) -> None:
        apply_params(self, changes, self.PARAMETERS)

    def get_state(self) -> Dict[str, float]:
        return {'position': self.position, 'velocity': self.velocity}

    def get_info(self) -> Dict[str, Any]:
        return {
            'type': 'RotationalPositioner',
            'inertia': self.inertia,
        }
