"""
Process model interface.

A process model owns the physical state of one simulated plant and
advances it one tick at a time. Models are independent dataclasses that
satisfy the ``ProcessModel`` protocol; none inherits from another.
"""

from dataclasses import fields
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class ProcessModel(Protocol):
    """Capabilities every plant offers to the simulation loop."""

    disturbance_param: Optional[str]

    def step(self, control_signal: float, dt: float) -> None:
        """Advance the physical state by one tick."""
        ...

    def current(self) -> float:
        """Observable output of the plant."""
        ...

    def measurement(self, target: float) -> float:
        """Value handed to the controller when it regulates toward ``target``."""
        ...

    def reset(self) -> None:
        """Restore the state the model was constructed with."""
        ...

    def set_params(self, **changes: float) -> None:
        """Change environment or plant parameters between ticks."""
        ...

    def get_state(self) -> Dict[str, float]:
        ...

    def get_info(self) -> Dict[str, Any]:
        ...


def apply_params(model: Any, changes: Dict[str, float], allowed: tuple) -> None:
    """
    Assign keyword changes to a model's attributes.

    Raises:
        ValueError: If a name is not one of ``allowed``
    """
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise ValueError(
            f"{type(model).__name__} has no parameter(s) {', '.join(unknown)}; "
            f"expected one of {', '.join(allowed)}"
        )
    for name, value in changes.items():
        setattr(model, name, value)


def snapshot(model: Any) -> Dict[str, Any]:
    """Constructor fields of a dataclass model, used to remember its initial state."""
    return {f.name: getattr(model, f.name) for f in fields(model) if f.init}


def restore(model: Any, initial: Dict[str, Any]) -> None:
    """Write a snapshot back onto ``model``."""
    for name, value in initial.items():
        setattr(model, name, value)
