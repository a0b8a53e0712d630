"""
Bounded operator controls.

Host UIs (sliders, number boxes, config files) write into these knobs;
each knob keeps its value inside its range, and the panel turns the
current knob values into the PIDParams applied on the next tick.
"""

from typing import Dict, Iterator, Optional, Tuple, Union

from pid_loop.core.pid_params import PIDParams, PIDPresets
from pid_loop.plants.registry import ModelType, resolve_model_type
from pid_loop.utils.math_utils import clamp
from pid_loop.utils.validators import ValidationError, validate_positive, validate_real


class BoundedParameter:
    """
    A number confined to [min_value, max_value].

    Without an explicit start value the knob starts at the midpoint.
    """

    def __init__(
        self,
        min_value: float = 0.0,
        max_value: float = 0.0,
        step: float = 1.0,
        start_value: Optional[float] = None
    ):
        self.min_value = validate_real(min_value, "min_value")
        self.max_value = validate_real(max_value, "max_value")
        if self.min_value > self.max_value:
            raise ValidationError(
                f"min_value must not exceed max_value, got [{min_value}, {max_value}]"
            )
        self.step = validate_positive(step, "step")

        self._value = (self.min_value + self.max_value) / 2
        if start_value is not None:
            self.set_value(start_value)

    @property
    def value(self) -> float:
        return self._value

    def get_value(self) -> float:
        return self._value

    def set_value(self, value: float) -> float:
        """Store ``value`` clamped into range and return what was stored."""
        self._value = clamp(validate_real(value, "value"), self.min_value, self.max_value)
        return self._value

    def nudge(self, count: int = 1) -> float:
        """Move by ``count`` steps (negative moves down), staying in range."""
        return self.set_value(self._value + count * self.step)

    def __repr__(self) -> str:
        return (
            f"BoundedParameter({self._value} in "
            f"[{self.min_value}, {self.max_value}], step={self.step})"
        )


# (min, max, step) per knob for each model
_PANEL_RANGES: Dict[ModelType, Dict[str, Tuple[float, float, float]]] = {
    ModelType.THERMAL_ROOM: {
        'target': (0.0, 100.0, 0.5),
        'kp': (0.0, 100.0, 0.1),
        'ki': (0.0, 10.0, 0.01),
        'kd': (0.0, 10.0, 0.01),
    },
    ModelType.PITCH_STABILIZER: {
        'target': (-45.0, 45.0, 0.5),
        'kp': (0.0, 50.0, 0.1),
        'ki': (0.0, 10.0, 0.01),
        'kd': (0.0, 50.0, 0.1),
    },
    ModelType.ROTATIONAL_POSITIONER: {
        'target': (-180.0, 180.0, 1.0),
        'kp': (0.0, 5.0, 0.01),
        'ki': (0.0, 1.0, 0.001),
        'kd': (0.0, 5.0, 0.01),
    },
}

_PRESETS = {
    ModelType.THERMAL_ROOM: PIDPresets.thermal_room,
    ModelType.PITCH_STABILIZER: PIDPresets.pitch_stabilizer,
    ModelType.ROTATIONAL_POSITIONER: PIDPresets.rotational_positioner,
}

PARAM_KEYS = ('target', 'kp', 'ki', 'kd', 'output_min', 'output_max')


class ControlPanel:
    """
    Named set of bounded knobs feeding a controller.

    Knobs named after PIDParams fields (target, kp, ki, kd, output_min,
    output_max) are copied into the parameters returned by ``to_params``;
    any other knob is carried along for the host to read.
    """

    def __init__(self):
        self._controls: Dict[str, BoundedParameter] = {}

    def add_control(self, name: str, control: BoundedParameter) -> None:
        self._controls[name] = control

    def get_control(self, name: str) -> Optional[BoundedParameter]:
        return self._controls.get(name)

    def remove_control(self, name: str) -> None:
        self._controls.pop(name, None)

    def clear_controls(self) -> None:
        self._controls.clear()

    def set_value(self, name: str, value: float) -> float:
        """
        Set a knob by name.

        Raises:
            KeyError: If no knob has that name
        """
        return self._controls[name].set_value(value)

    def values(self) -> Dict[str, float]:
        return {name: control.value for name, control in self._controls.items()}

    def to_params(self, base: Optional[PIDParams] = None) -> PIDParams:
        """Parameters for the next tick: ``base`` overridden by the matching knobs."""
        base = base if base is not None else PIDParams()
        changes = {
            name: control.value
            for name, control in self._controls.items()
            if name in PARAM_KEYS
        }
        return base.copy(**changes)

    def __contains__(self, name: str) -> bool:
        return name in self._controls

    def __iter__(self) -> Iterator[str]:
        return iter(self._controls)

    def __len__(self) -> int:
        return len(self._controls)

    @classmethod
    def for_model(cls, kind: Union[ModelType, str]) -> 'ControlPanel':
        """Panel with target and gain knobs ranged and preset for a process model."""
        kind = resolve_model_type(kind)
        preset = _PRESETS[kind]()

        panel = cls()
        for name, (lo, hi, step) in _PANEL_RANGES[kind].items():
            panel.add_control(
                name, BoundedParameter(lo, hi, step, start_value=getattr(preset, name))
            )
        return panel
