#!/usr/bin/env python3
"""
Basic Control Loop Demo

Demonstrates:
- Heated room driven by a PI controller
- Scenario run with an opening window
- CSV logging
- Performance metrics
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.core.pid_params import PIDParams
from pid_loop.simulation.simulator import SimulationLoop
from pid_loop.simulation.scenarios import ScenarioLibrary


def main():
    print("=" * 60)
    print("Basic Control Loop Demo")
    print("=" * 60)

    params = PIDParams(
        target=22.0,
        kp=20.0,           # Watts per degree of error
        ki=0.5,            # Watts per degree-second
        kd=0.0,
        output_min=0.0,    # The heater cannot cool
        output_max=500.0
    )

    loop = SimulationLoop.create(
        "thermal_room", params,
        csv_log_path="output/room_demo.csv",
        temperature=22.0,
        external_temperature=5.0,
        thermal_mass=100.0,
        conductivity=2.0
    )

    print(f"\nPlant: {loop.model.get_info()}")
    print(f"Controller: {params}")

    scenario = ScenarioLibrary.room_open_window(target=22.0, heat_loss=40.0, duration=900.0)

    print(f"\nRunning scenario: {scenario.name}")
    result = loop.run_scenario(scenario)
    loop.close()

    print(f"Simulation completed in {result.execution_time:.3f}s")
    print(f"Final temperature: {result.values[-1]:.2f} degC")
    print(f"Final heater power: {result.outputs[-1]:.1f} W")

    print("\n" + "=" * 60)
    print("Analysis Results")
    print("=" * 60)

    metrics = loop.analyze(result)

    error_metrics = metrics['error']
    print(f"\nError Metrics:")
    print(f"  IAE: {error_metrics['iae']:.2f}")
    print(f"  Max error: {error_metrics['max_error']:.3f}")
    print(f"  RMSE: {error_metrics['rmse']:.4f}")

    effort = metrics['control_effort']
    print(f"\nControl Effort:")
    print(f"  Mean power: {effort['mean_absolute']:.1f} W")
    print(f"  Time at a limit: {effort['saturation_fraction'] * 100:.1f}%")


if __name__ == "__main__":
    Path("output").mkdir(exist_ok=True)
    main()
