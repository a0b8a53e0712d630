"""
Heated room losing heat through its walls.

    dT/dt = (Q - k * (T - T_ext) - H_loss) / C

Q is the heater power supplied by the controller. Temperature itself is
never saturated; bounds on Q belong to the controller's output limits.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

import control as ct

from pid_loop.plants.process_model import apply_params, snapshot, restore


@dataclass
class ThermalRoom:
    """
    Room temperature driven by a heater.

    Attributes:
        temperature: Current room temperature T (degC)
        external_temperature: Outside temperature T_ext (degC)
        thermal_mass: Heat capacity of the room C
        conductivity: Wall heat transfer coefficient k
        heat_loss: Constant ambient loss H_loss
    """

    temperature: float = 0.0
    external_temperature: float = 0.0
    thermal_mass: float = 20.0
    conductivity: float = 0.01
    heat_loss: float = 0.0

    disturbance_param: ClassVar[Optional[str]] = "heat_loss"
    PARAMETERS: ClassVar[tuple] = (
        "temperature", "external_temperature", "thermal_mass",
        "conductivity", "heat_loss",
    )

    _initial: Dict[str, Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._initial = snapshot(self)

    def step(self, control_signal: float, dt: float) -> None:
        """Integrate one tick of heater power ``control_signal``."""
        leak = self.conductivity * (self.temperature - self.external_temperature)
        self.temperature += ((control_signal - leak - self.heat_loss) / self.thermal_mass) * dt

    def current(self) -> float:
        return self.temperature

    def measurement(self, target: float) -> float:
        return self.temperature

    def reset(self) -> None:
        restore(self, self._initial)

    def set_params(self, **changes: float) -> None:
        apply_params(self, changes, self.PARAMETERS)

    def get_state(self) -> Dict[str, float]:
        return {'temperature': self.temperature}

    def get_info(self) -> Dict[str, Any]:
        return {
            'type': 'ThermalRoom',
            'external_temperature': self.external_temperature,
            'thermal_mass': self.thermal_mass,
            'conductivity': self.conductivity,
            'heat_loss': self.heat_loss,
        }

    @property
    def transfer_function(self) -> ct.TransferFunction:
        """Heater power to temperature deviation: (1/C) / (s + k/C)."""
        C = self.thermal_mass
        return ct.TransferFunction([1.0 / C], [1.0, self.conductivity / C])
