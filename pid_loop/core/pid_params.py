"""
PID Controller Parameters Configuration.
Encapsulates target, gains and saturation bounds in a serializable structure.

No domain validation happens here: negative gains or inverted bounds are
accepted as given and are the caller's responsibility.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum
import json


class DerivativeMode(Enum):
    """Sign convention of the derivative numerator."""
    LEGACY = "legacy"  # (previous_error - error) / dt
    ERROR = "error"  # (error - previous_error) / dt


class ZeroDtPolicy(Enum):
    """Behaviour of the derivative term when dt is not strictly positive."""
    SKIP_DERIVATIVE = "skip_derivative"
    RAISE = "raise"


@dataclass
class PIDParams:
    """
    PID Controller Parameters.

    Holds the setpoint, the three gains and optional output bounds.
    Provides copy and serialization helpers.
    """

    target: float = 0.0  # Desired setpoint

    # Core gains
    kp: float = 0.0  # Proportional gain
    ki: float = 0.0  # Integral gain
    kd: float = 0.0  # Derivative gain

    # Output limits (saturation)
    output_min: Optional[float] = None
    output_max: Optional[float] = None

    derivative_mode: DerivativeMode = DerivativeMode.LEGACY
    zero_dt_policy: ZeroDtPolicy = ZeroDtPolicy.SKIP_DERIVATIVE

    def copy(self, **changes) -> 'PIDParams':
        """
        Create a copy with optional parameter changes.

        Args:
            **changes: Parameters to override

        Returns:
            New PIDParams instance
        """
        params = {
            'target': self.target,
            'kp': self.kp,
            'ki': self.ki,
            'kd': self.kd,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'derivative_mode': self.derivative_mode,
            'zero_dt_policy': self.zero_dt_policy,
        }
        params.update(changes)
        return PIDParams(**params)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'target': self.target,
            'kp': self.kp,
            'ki': self.ki,
            'kd': self.kd,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'derivative_mode': self.derivative_mode.value,
            'zero_dt_policy': self.zero_dt_policy.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PIDParams':
        """
        Create from dictionary.

        Args:
            data: Dictionary of parameters

        Returns:
            PIDParams instance
        """
        data = data.copy()

        # Convert enum strings to enums
        if 'derivative_mode' in data and isinstance(data['derivative_mode'], str):
            data['derivative_mode'] = DerivativeMode(data['derivative_mode'])
        if 'zero_dt_policy' in data and isinstance(data['zero_dt_policy'], str):
            data['zero_dt_policy'] = ZeroDtPolicy(data['zero_dt_policy'])

        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'PIDParams':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        return (
            f"PIDParams(target={self.target:.4f}, Kp={self.kp:.4f}, "
            f"Ki={self.ki:.4f}, Kd={self.kd:.4f}, "
            f"limits=[{self.output_min}, {self.output_max}], "
            f"derivative={self.derivative_mode.value})"
        )


class PIDPresets:
    """Starting points for each process model."""

    @staticmethod
    def thermal_room(target: float = 25.0) -> PIDParams:
        """Heater power in watts; the heater cannot cool."""
        return PIDParams(
            target=target, kp=10.0, ki=0.5, kd=0.0,
            output_min=0.0, output_max=200.0
        )

    @staticmethod
    def pitch_stabilizer(target: float = 0.0) -> PIDParams:
        """Stabilizer deflection in degrees."""
        return PIDParams(
            target=target, kp=4.0, ki=0.2, kd=8.0,
            output_min=-30.0, output_max=30.0,
            derivative_mode=DerivativeMode.ERROR
        )

    @staticmethod
    def rotational_positioner(target: float = 90.0) -> PIDParams:
        """Torque per tick; gains already include the tick length."""
        return PIDParams(
            target=target, kp=0.05, ki=0.0, kd=0.5,
            output_min=-5.0, output_max=5.0,
            derivative_mode=DerivativeMode.ERROR
        )
