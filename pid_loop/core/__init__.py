"""Core PID controller components."""

from pid_loop.core.pid_controller import PIDController, PIDState
from pid_loop.core.pid_params import (
    PIDParams,
    PIDPresets,
    DerivativeMode,
    ZeroDtPolicy,
)

__all__ = [
    "PIDController",
    "PIDState",
    "PIDParams",
    "PIDPresets",
    "DerivativeMode",
    "ZeroDtPolicy",
]
