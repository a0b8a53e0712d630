"""
Control-loop simulation engine.

One tick reads the plant, updates the controller, then steps the plant
with the controller's output, always in that order. The host decides
when ticks happen (animation frame, timer, batch run) and passes the
elapsed time in.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass
import logging
import time

import numpy as np

from pid_loop.core.pid_controller import PIDController
from pid_loop.core.pid_params import PIDParams
from pid_loop.plants.process_model import ProcessModel
from pid_loop.plants.registry import ModelType, create_model
from pid_loop.simulation.scenarios import SimulationScenario
from pid_loop.analyzer.metrics import PerformanceMetrics
from pid_loop.logging.csv_logger import CSVLogger
from pid_loop.logging.data_buffer import DataBuffer

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """
    What a tick publishes to observers.

    ``value`` is the plant reading after the step. ``measurement`` is what
    the controller was handed before the step, so ``target - measurement``
    is always the error it acted on. For the rotational positioner that is
    the wrapped error, and ``measurement`` is an unwrapped angle equivalent
    to the position (e.g. 360 for target 190 at position 0), not the raw
    shaft angle.
    """
    tick: int
    time: float
    dt: float
    target: float
    value: float
    measurement: float
    output: float
    error: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'tick': self.tick,
            'time': self.time,
            'dt': self.dt,
            'target': self.target,
            'value': self.value,
            'measurement': self.measurement,
            'output': self.output,
            'error': self.error,
        }


TICK_COLUMNS = ['tick', 'time', 'dt', 'target', 'value', 'measurement', 'output', 'error']


@dataclass
class SimulationResult:
    """Container for a recorded run."""
    timestamps: np.ndarray
    targets: np.ndarray
    values: np.ndarray
    outputs: np.ndarray
    errors: np.ndarray
    p_terms: np.ndarray
    i_terms: np.ndarray
    d_terms: np.ndarray
    disturbances: np.ndarray

    # Metadata
    scenario_name: str = ""
    controller_params: Optional[Dict[str, Any]] = None
    plant_info: Optional[Dict[str, Any]] = None
    execution_time: float = 0.0

    def to_dict(self) -> Dict[str, np.ndarray]:
        """Convert to dictionary format."""
        return {
            'timestamp': self.timestamps,
            'target': self.targets,
            'value': self.values,
            'output': self.outputs,
            'error': self.errors,
            'p_term': self.p_terms,
            'i_term': self.i_terms,
            'd_term': self.d_terms,
            'disturbance': self.disturbances,
        }

    def __len__(self) -> int:
        return len(self.timestamps)


def create_simulation(
    model: Union[ModelType, str],
    target: float = 0.0,
    kp: float = 0.0,
    ki: float = 0.0,
    kd: float = 0.0,
    output_min: Optional[float] = None,
    output_max: Optional[float] = None,
    params: Optional[PIDParams] = None,
    csv_path: Optional[str] = None,
    **plant_params: float
) -> Tuple[PIDController, ProcessModel]:
    """
    Build a controller and a fresh process model for one simulation run.

    Args:
        model: Process model name or ModelType
        target, kp, ki, kd, output_min, output_max: Controller settings,
            ignored when ``params`` is given
        params: Complete controller parameters
        csv_path: Optional controller CSV log
        **plant_params: Initial plant state and environment

    Returns:
        (controller, model) pair owned by the caller
    """
    if params is None:
        params = PIDParams(
            target=target, kp=kp, ki=ki, kd=kd,
            output_min=output_min, output_max=output_max
        )
    plant = create_model(model, **plant_params)
    controller = PIDController(params, csv_path=csv_path)
    logger.debug("Created %s with %s", type(plant).__name__, params)
    return controller, plant


class SimulationLoop:
    """
    Drives one controller and one process model tick by tick.

    The loop owns both objects for its lifetime; switching models means
    building a new loop.

    Example:
        >>> loop = SimulationLoop.create(
        ...     "thermal_room", PIDParams(target=25, kp=1, output_min=0, output_max=200),
        ...     dt=1.0, temperature=15, external_temperature=15,
        ...     conductivity=5, thermal_mass=50)
        >>> loop.tick().value
        15.2
    """

    def __init__(
        self,
        controller: PIDController,
        model: ProcessModel,
        dt: Optional[float] = None,
        history_size: Optional[int] = None,
        csv_log_path: Optional[str] = None
    ):
        """
        Initialize the loop.

        Args:
            controller: Controller owned by this loop
            model: Process model owned by this loop
            dt: Fixed tick length used when ``tick`` gets none
            history_size: Keep the last N ticks in a rolling buffer
            csv_log_path: Optional path for a per-tick CSV log
        """
        self._controller = controller
        self._model = model
        self._dt = dt

        self._time: float = 0.0
        self._tick_count: int = 0
        self._observers: List[Callable[[TickResult], None]] = []
        self._metrics = PerformanceMetrics()

        self._history: Optional[DataBuffer] = None
        if history_size is not None:
            self._history = DataBuffer(history_size, columns=TICK_COLUMNS)

        self._logger: Optional[CSVLogger] = None
        if csv_log_path is not None:
            self._logger = CSVLogger(csv_log_path, columns=TICK_COLUMNS)

    @classmethod
    def create(
        cls,
        model: Union[ModelType, str],
        params: Optional[PIDParams] = None,
        dt: Optional[float] = None,
        history_size: Optional[int] = None,
        csv_log_path: Optional[str] = None,
        **plant_params: float
    ) -> 'SimulationLoop':
        """Build controller, model and loop in one call."""
        controller, plant = create_simulation(
            model, params=params if params is not None else PIDParams(), **plant_params
        )
        return cls(controller, plant, dt=dt, history_size=history_size,
                   csv_log_path=csv_log_path)

    @property
    def controller(self) -> PIDController:
        return self._controller

    @property
    def model(self) -> ProcessModel:
        return self._model

    @property
    def dt(self) -> Optional[float]:
        return self._dt

    @property
    def time(self) -> float:
        """Simulated seconds since start or last reset."""
        return self._time

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def history(self) -> Optional[DataBuffer]:
        return self._history

    def subscribe(self, observer: Callable[[TickResult], None]) -> Callable[[TickResult], None]:
        """Call ``observer`` with every TickResult; returns it for use as a decorator."""
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Callable[[TickResult], None]) -> None:
        self._observers.remove(observer)

    def tick(
        self,
        dt: Optional[float] = None,
        params: Optional[PIDParams] = None,
        plant_params: Optional[Dict[str, float]] = None
    ) -> TickResult:
        """
        Advance the simulation by one tick.

        Args:
            dt: Elapsed seconds (falls back to the loop's fixed dt)
            params: Controller settings to apply before this tick
            plant_params: Plant parameters to change before this tick

        Returns:
            The published TickResult

        Raises:
            ValueError: If no dt is available
        """
        if dt is None:
            dt = self._dt
        if dt is None:
            raise ValueError("tick needs a dt: pass one or construct the loop with dt")

        if params is not None:
            self._controller.set_params(params)
        if plant_params:
            self._model.set_params(**plant_params)

        target = self._controller.target
        measurement = self._model.measurement(target)
        output = self._controller.update(measurement, dt)
        self._model.step(output, dt)

        self._time += dt
        self._tick_count += 1

        result = TickResult(
            tick=self._tick_count,
            time=self._time,
            dt=dt,
            target=target,
            value=self._model.current(),
            measurement=measurement,
            output=output,
            error=self._controller.state.error
        )
        self._publish(result)
        return result

    def _publish(self, result: TickResult) -> None:
        if self._history is not None:
            self._history.append(result.to_dict())
        if self._logger is not None:
            self._logger.log(result)
        for observer in self._observers:
            observer(result)

    def reset(self) -> None:
        """Restart: clear controller memory and restore the plant's initial state."""
        self._controller.reset()
        self._model.reset()
        self._time = 0.0
        self._tick_count = 0
        if self._history is not None:
            self._history.clear()
        logger.info("Simulation reset (%s)", type(self._model).__name__)

    def run(self, n_ticks: int, dt: Optional[float] = None) -> SimulationResult:
        """
        Run ``n_ticks`` ticks with the current settings and record them.

        Args:
            n_ticks: Number of ticks
            dt: Tick length (falls back to the loop's fixed dt)

        Returns:
            SimulationResult of the recorded ticks
        """
        return self._record(n_ticks, lambda i: (dt, None, None), name="")

    def run_scenario(self, scenario: SimulationScenario) -> SimulationResult:
        """
        Reset, then run a scenario's setpoint and disturbance profiles.

        The disturbance is added on top of the value the model was built
        with, so a room configured with an ambient loss keeps that loss
        before and during the disturbance.

        Raises:
            ValueError: If the scenario has a disturbance the model cannot take
        """
        disturbance_param = self._model.disturbance_param
        if scenario.has_disturbance and disturbance_param is None:
            raise ValueError(
                f"{type(self._model).__name__} has no disturbance input for "
                f"scenario '{scenario.name}'"
            )

        self.reset()
        logger.info("Running scenario '%s' for %d ticks", scenario.name, scenario.n_ticks)

        disturbances = np.zeros(scenario.n_ticks)
        base = getattr(self._model, disturbance_param) if disturbance_param else 0.0

        def settings(i: int):
            t = i * scenario.dt
            params = self._controller.params.copy(target=scenario.get_setpoint(t))
            plant_params = None
            if scenario.has_disturbance:
                disturbances[i] = scenario.get_disturbance(t)
                plant_params = {disturbance_param: base + disturbances[i]}
            return scenario.dt, params, plant_params

        result = self._record(scenario.n_ticks, settings, name=scenario.name)
        result.disturbances = disturbances
        return result

    def _record(
        self,
        n_ticks: int,
        settings: Callable[[int], Tuple[Optional[float], Optional[PIDParams], Optional[Dict[str, float]]]],
        name: str
    ) -> SimulationResult:
        start_time = time.perf_counter()

        timestamps = np.zeros(n_ticks)
        targets = np.zeros(n_ticks)
        values = np.zeros(n_ticks)
        outputs = np.zeros(n_ticks)
        errors = np.zeros(n_ticks)
        p_terms = np.zeros(n_ticks)
        i_terms = np.zeros(n_ticks)
        d_terms = np.zeros(n_ticks)

        for i in range(n_ticks):
            dt, params, plant_params = settings(i)
            tick = self.tick(dt, params=params, plant_params=plant_params)
            state = self._controller.state

            timestamps[i] = tick.time
            targets[i] = tick.target
            values[i] = tick.value
            outputs[i] = tick.output
            errors[i] = tick.error
            p_terms[i] = state.p_term
            i_terms[i] = state.i_term
            d_terms[i] = state.d_term

        self.flush_log()

        execution_time = time.perf_counter() - start_time
        logger.debug("Recorded %d ticks in %.4fs", n_ticks, execution_time)

        return SimulationResult(
            timestamps=timestamps,
            targets=targets,
            values=values,
            outputs=outputs,
            errors=errors,
            p_terms=p_terms,
            i_terms=i_terms,
            d_terms=d_terms,
            disturbances=np.zeros(n_ticks),
            scenario_name=name,
            controller_params=self._controller.params.to_dict(),
            plant_info=self._model.get_info(),
            execution_time=execution_time
        )

    def analyze(self, result: SimulationResult) -> Dict[str, Any]:
        """Performance metrics for a recorded run."""
        params = self._controller.params
        limits = None
        if params.output_min is not None or params.output_max is not None:
            limits = (params.output_min, params.output_max)
        return self._metrics.calculate_all_metrics(
            result.timestamps, result.targets, result.values,
            result.outputs, output_limits=limits
        )

    def flush_log(self) -> None:
        if self._logger is not None:
            self._logger.flush()
        self._controller.flush_log()

    def close(self) -> None:
        """Close loop and controller logs."""
        if self._logger is not None:
            self._logger.close()
        self._controller.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
