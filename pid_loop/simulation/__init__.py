"""Simulation loop, scenarios and operator controls."""

from pid_loop.simulation.simulator import (
    SimulationLoop,
    SimulationResult,
    TickResult,
    create_simulation,
)
from pid_loop.simulation.scenarios import (
    SimulationScenario,
    ScenarioLibrary,
    SetpointType,
    DisturbanceType,
)
from pid_loop.simulation.controls import BoundedParameter, ControlPanel

__all__ = [
    "SimulationLoop",
    "SimulationResult",
    "TickResult",
    "create_simulation",
    "SimulationScenario",
    "ScenarioLibrary",
    "SetpointType",
    "DisturbanceType",
    "BoundedParameter",
    "ControlPanel",
]
