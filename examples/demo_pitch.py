#!/usr/bin/env python3
"""
Pitch Stabilizer Demo

Compares the two derivative sign conventions on the aircraft model,
which is a double integrator and needs real damping to settle.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.core.pid_params import DerivativeMode, PIDPresets
from pid_loop.simulation.simulator import SimulationLoop
from pid_loop.simulation.scenarios import ScenarioLibrary


def main():
    print("=" * 60)
    print("Pitch Stabilizer Demo")
    print("=" * 60)

    scenario = ScenarioLibrary.pitch_gust(gust=2.0, duration=60.0)

    for mode in DerivativeMode:
        params = PIDPresets.pitch_stabilizer().copy(derivative_mode=mode)
        loop = SimulationLoop.create("pitch_stabilizer", params)
        result = loop.run_scenario(scenario)
        metrics = loop.analyze(result)

        print(f"\nDerivative mode: {mode.value}")
        print(f"  Final pitch: {result.values[-1]:.3f} deg")
        print(f"  Max error: {metrics['error']['max_error']:.3f} deg")
        print(f"  IAE: {metrics['error']['iae']:.3f}")


if __name__ == "__main__":
    main()
