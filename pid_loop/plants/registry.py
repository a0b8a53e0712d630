"""Lookup of process models by name."""

from enum import Enum
from typing import Dict, Type, Union

from pid_loop.plants.process_model import ProcessModel
from pid_loop.plants.thermal_room import ThermalRoom
from pid_loop.plants.pitch_stabilizer import PitchStabilizer
from pid_loop.plants.rotational_positioner import RotationalPositioner


class ModelType(Enum):
    """Available process models."""
    THERMAL_ROOM = "thermal_room"
    PITCH_STABILIZER = "pitch_stabilizer"
    ROTATIONAL_POSITIONER = "rotational_positioner"


MODEL_REGISTRY: Dict[ModelType, Type] = {
    ModelType.THERMAL_ROOM: ThermalRoom,
    ModelType.PITCH_STABILIZER: PitchStabilizer,
    ModelType.ROTATIONAL_POSITIONER: RotationalPositioner,
}


def resolve_model_type(kind: Union[ModelType, str]) -> ModelType:
    """
    Accept a ModelType or its string value.

    Raises:
        ValueError: If the name matches no model
    """
    if isinstance(kind, ModelType):
        return kind
    try:
        return ModelType(kind)
    except ValueError:
        names = ", ".join(m.value for m in ModelType)
        raise ValueError(f"Unknown process model '{kind}', expected one of: {names}") from None


def create_model(kind: Union[ModelType, str], **plant_params: float) -> ProcessModel:
    """
    Build a fresh process model; keyword arguments become its initial state.

    Raises:
        ValueError: If the model is unknown or a keyword is not one of its parameters
    """
    model_cls = MODEL_REGISTRY[resolve_model_type(kind)]
    unknown = sorted(set(plant_params) - set(model_cls.PARAMETERS))
    if unknown:
        raise ValueError(
            f"{model_cls.__name__} has no parameter(s) {', '.join(unknown)}"
        )
    return model_cls(**plant_params)
