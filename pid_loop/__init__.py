"""
PID Control Loop
================

A discrete-time PID controller driving simplified process models:
- PID controller with one-sided output saturation and explicit dt
- Heated room, pitch-stabilized aircraft and rotational positioner plants
- Tick-by-tick simulation loop with observers, history and CSV logging
- Scenario runner and performance metrics
"""

from pid_loop.core.pid_controller import PIDController
from pid_loop.core.pid_params import PIDParams, DerivativeMode, ZeroDtPolicy
from pid_loop.plants import (
    ProcessModel,
    ThermalRoom,
    PitchStabilizer,
    RotationalPositioner,
    ModelType,
)
from pid_loop.simulation.simulator import SimulationLoop, create_simulation

__version__ = "1.0.0"
__all__ = [
    "PIDController",
    "PIDParams",
    "DerivativeMode",
    "ZeroDtPolicy",
    "ProcessModel",
    "ThermalRoom",
    "PitchStabilizer",
    "RotationalPositioner",
    "ModelType",
    "SimulationLoop",
    "create_simulation",
]
