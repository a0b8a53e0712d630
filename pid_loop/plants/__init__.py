"""Process models driven by the control loop."""

from pid_loop.plants.process_model import ProcessModel
from pid_loop.plants.thermal_room import ThermalRoom
from pid_loop.plants.pitch_stabilizer import PitchStabilizer
from pid_loop.plants.rotational_positioner import RotationalPositioner
from pid_loop.plants.registry import (
    ModelType,
    MODEL_REGISTRY,
    resolve_model_type,
    create_model,
)

__all__ = [
    "ProcessModel",
    "ThermalRoom",
    "PitchStabilizer",
    "RotationalPositioner",
    "ModelType",
    "MODEL_REGISTRY",
    "resolve_model_type",
    "create_model",
]
