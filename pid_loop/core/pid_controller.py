"""
PID Controller Implementation.

Features:
- Proportional, Integral, Derivative control driven by an explicit dt
- One-sided output saturation (each configured bound applied on its own)
- Selectable derivative sign convention
- Configurable handling of non-positive dt
- Live reconfiguration without resetting accumulated state
- Optional buffered CSV logging of every update
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass

from pid_loop.core.pid_params import PIDParams, DerivativeMode, ZeroDtPolicy
from pid_loop.logging.csv_logger import CSVLogger
from pid_loop.utils.math_utils import clamp


@dataclass
class PIDState:
    """Snapshot of the controller after its most recent update."""
    iteration: int = 0
    time: float = 0.0
    target: float = 0.0
    measurement: float = 0.0
    error: float = 0.0

    # Component outputs
    p_term: float = 0.0
    i_term: float = 0.0
    d_term: float = 0.0

    # Pre/post saturation output
    output_unsat: float = 0.0
    output: float = 0.0

    integral_accumulator: float = 0.0
    last_error: Optional[float] = None
    saturated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary."""
        return {
            'iteration': self.iteration,
            'time': self.time,
            'target': self.target,
            'measurement': self.measurement,
            'error': self.error,
            'p_term': self.p_term,
            'i_term': self.i_term,
            'd_term': self.d_term,
            'output_unsat': self.output_unsat,
            'output': self.output,
            'integral_accumulator': self.integral_accumulator,
            'last_error': self.last_error,
            'saturated': self.saturated,
        }


LOG_COLUMNS = [
    'iteration', 'time', 'dt', 'target', 'measurement', 'error',
    'p_term', 'i_term', 'd_term', 'output_unsat', 'output',
    'integral_accumulator', 'saturated',
]


class PIDController:
    """
    Discrete PID controller stepped with an explicit time delta.

    The integral accumulator and the previous error are owned by the
    controller and change only inside ``update`` and ``reset``.

    Example:
        >>> params = PIDParams(target=25.0, kp=1.0, output_min=0, output_max=200)
        >>> pid = PIDController(params)
        >>> heater_power = pid.update(measurement=15.0, dt=1.0)
    """

    def __init__(
        self,
        params: Optional[PIDParams] = None,
        csv_path: Optional[str] = None
    ):
        """
        Initialize PID controller.

        Args:
            params: PID parameters (all zeros, no bounds if None)
            csv_path: Path for CSV logging (no logging if None)
        """
        self._params = params if params is not None else PIDParams()

        self._integral: float = 0.0
        self._last_error: Optional[float] = None
        self._state = PIDState()
        self._iteration: int = 0
        self._time: float = 0.0

        self._logger: Optional[CSVLogger] = None
        if csv_path is not None:
            self._logger = CSVLogger(csv_path, columns=LOG_COLUMNS)

    @property
    def params(self) -> PIDParams:
        """Get current parameters."""
        return self._params

    @property
    def state(self) -> PIDState:
        """Get the snapshot of the last update."""
        return self._state

    @property
    def output(self) -> float:
        """Get last output."""
        return self._state.output

    @property
    def integral(self) -> float:
        """Get current integral accumulator (sum of error * dt)."""
        return self._integral

    @property
    def last_error(self) -> Optional[float]:
        """Error seen by the previous update, None right after construction or reset."""
        return self._last_error

    @property
    def target(self) -> float:
        return self._params.target

    @target.setter
    def target(self, value: float) -> None:
        self._params = self._params.copy(target=value)

    @property
    def kp(self) -> float:
        return self._params.kp

    @kp.setter
    def kp(self, value: float) -> None:
        self._params = self._params.copy(kp=value)

    @property
    def ki(self) -> float:
        return self._params.ki

    @ki.setter
    def ki(self, value: float) -> None:
        self._params = self._params.copy(ki=value)

    @property
    def kd(self) -> float:
        return self._params.kd

    @kd.setter
    def kd(self, value: float) -> None:
        self._params = self._params.copy(kd=value)

    def get_error(self, measurement: float) -> float:
        """Return the current error for a measurement without updating state."""
        return self._params.target - measurement

    def update(self, measurement: float, dt: float) -> float:
        """
        Run one controller cycle.

        Args:
            measurement: Plant output observed this tick
            dt: Seconds elapsed since the previous tick

        Returns:
            Control output, saturated to the configured bounds

        Raises:
            ZeroDivisionError: If dt <= 0 and the zero-dt policy is RAISE
        """
        params = self._params

        error = params.target - measurement

        self._integral += error * dt

        derivative = self._calculate_derivative(error, dt)

        p_term = params.kp * error
        i_term = params.ki * self._integral
        d_term = params.kd * derivative
        output_unsat = p_term + i_term + d_term

        output = clamp(output_unsat, params.output_min, params.output_max)

        self._last_error = error
        self._iteration += 1
        self._time += dt

        self._state = PIDState(
            iteration=self._iteration,
            time=self._time,
            target=params.target,
            measurement=measurement,
            error=error,
            p_term=p_term,
            i_term=i_term,
            d_term=d_term,
            output_unsat=output_unsat,
            output=output,
            integral_accumulator=self._integral,
            last_error=self._last_error,
            saturated=output != output_unsat
        )

        if self._logger is not None:
            row = self._state.to_dict()
            row['dt'] = dt
            row['saturated'] = int(self._state.saturated)
            self._logger.log(row)

        return output

    def _calculate_derivative(self, error: float, dt: float) -> float:
        """Rate of change of the error against the previous tick."""
        previous = self._last_error if self._last_error is not None else 0.0

        if dt <= 0:
            if self._params.zero_dt_policy == ZeroDtPolicy.RAISE:
                raise ZeroDivisionError(f"PID update needs dt > 0, got {dt}")
            return 0.0

        if self._params.derivative_mode == DerivativeMode.ERROR:
            return (error - previous) / dt
        return (previous - error) / dt

    def set(
        self,
        target: float,
        kp: float,
        ki: float,
        kd: float,
        output_min: Optional[float] = None,
        output_max: Optional[float] = None
    ) -> None:
        """
        Replace target, gains and bounds in one step.

        Accumulated integral and last error are kept, so the new gains act
        on the existing history immediately.
        """
        self.set_params(self._params.copy(
            target=target, kp=kp, ki=ki, kd=kd,
            output_min=output_min, output_max=output_max
        ))

    def set_params(self, params: PIDParams) -> None:
        """Swap in a new parameter set without touching controller memory."""
        self._params = params

    def set_gains(
        self,
        kp: Optional[float] = None,
        ki: Optional[float] = None,
        kd: Optional[float] = None
    ) -> None:
        """
        Update individual gains.

        Args:
            kp: New proportional gain (None to keep current)
            ki: New integral gain (None to keep current)
            kd: New derivative gain (None to keep current)
        """
        self._params = self._params.copy(
            kp=kp if kp is not None else self._params.kp,
            ki=ki if ki is not None else self._params.ki,
            kd=kd if kd is not None else self._params.kd
        )

    def set_output_limits(
        self,
        output_min: Optional[float] = None,
        output_max: Optional[float] = None
    ) -> None:
        """Update output limits."""
        self._params = self._params.copy(
            output_min=output_min,
            output_max=output_max
        )

    def reset(self) -> None:
        """Clear the integral and forget the previous error."""
        self._integral = 0.0
        self._last_error = None
        self._state = PIDState()
        self._iteration = 0
        self._time = 0.0

    def flush_log(self) -> None:
        """Flush any buffered log data to disk."""
        if self._logger is not None:
            self._logger.flush()

    def close(self) -> None:
        """Close controller and flush logs."""
        if self._logger is not None:
            self._logger.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"PIDController({self._params})"
