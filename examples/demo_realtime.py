#!/usr/bin/env python3
"""
Host-driven Loop Demo

Plays the role of an animation loop: one tick per frame, an observer
prints what a chart would draw, and a control panel retargets the
positioner mid-run.
"""

import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.core.pid_params import PIDPresets
from pid_loop.simulation.controls import ControlPanel
from pid_loop.simulation.simulator import SimulationLoop, TickResult

FRAME_RATE = 60.0


def main():
    panel = ControlPanel.for_model("rotational_positioner")
    base = PIDPresets.rotational_positioner()

    # Positioner gains are per frame, so each frame is one unit tick
    loop = SimulationLoop.create(
        "rotational_positioner", panel.to_params(base),
        dt=1.0, history_size=200, position=-170.0
    )

    @loop.subscribe
    def show(tick: TickResult) -> None:
        if tick.tick % 20 == 0:
            print(f"tick {tick.tick:4d}  target {tick.target:7.1f}  position {tick.value:8.2f}")

    for frame in range(240):
        if frame == 120:
            panel.set_value('target', -150.0)
            print("-- retarget to -150 --")

        loop.tick(params=panel.to_params(base))
        time.sleep(1 / FRAME_RATE)

    print(f"\nKept {len(loop.history)} ticks of history")


if __name__ == "__main__":
    main()
