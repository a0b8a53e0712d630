"""
Performance metrics for recorded control-loop runs.
Uses numpy for vectorized calculations.
"""

from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, asdict
import numpy as np

from pid_loop.utils.math_utils import integrate_trapezoid, rms


@dataclass
class StepResponseMetrics:
    """Metrics from step response analysis."""
    rise_time: float
    settling_time_2pct: float
    settling_time_5pct: float
    overshoot_percent: float
    peak_time: float
    peak_value: float
    steady_state_value: float
    steady_state_error: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ErrorMetrics:
    """Error-based performance metrics."""
    iae: float
    ise: float
    itae: float
    mae: float
    rmse: float
    max_error: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ControlEffortMetrics:
    """Metrics related to control effort."""
    total_variation: float
    mean_absolute: float
    max_absolute: float
    rms: float
    saturation_fraction: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class PerformanceMetrics:
    """Performance metrics calculator."""

    def calculate_step_response_metrics(
        self,
        timestamps: np.ndarray,
        setpoints: np.ndarray,
        measurements: np.ndarray,
        initial_value: Optional[float] = None
    ) -> StepResponseMetrics:
        """Calculate step response metrics against the final setpoint."""
        timestamps = np.asarray(timestamps, dtype=float)
        setpoints = np.asarray(setpoints, dtype=float)
        measurements = np.asarray(measurements, dtype=float)
        if len(timestamps) < 2:
            raise ValueError("Need at least 2 data points")

        final_setpoint = setpoints[-1]
        y0 = initial_value if initial_value is not None else measurements[0]
        delta = final_setpoint - y0

        n_ss = max(1, len(measurements) // 10)
        steady_state_value = float(np.mean(measurements[-n_ss:]))

        if abs(delta) < 1e-10:
            return StepResponseMetrics(
                rise_time=0.0, settling_time_2pct=0.0, settling_time_5pct=0.0,
                overshoot_percent=0.0, peak_time=0.0,
                peak_value=float(measurements[-1]),
                steady_state_value=steady_state_value,
                steady_state_error=float(final_setpoint - steady_state_value)
            )

        y_norm = (measurements - y0) / delta

        rise_time = self._crossing_time(timestamps, y_norm, 0.9) - self._crossing_time(timestamps, y_norm, 0.1)

        settling_2pct = self._find_settling_time(timestamps, measurements, final_setpoint, 0.02)
        settling_5pct = self._find_settling_time(timestamps, measurements, final_setpoint, 0.05)

        peak_idx = int(np.argmax(y_norm))
        overshoot = max(0.0, (y_norm[peak_idx] - 1.0) * 100)

        return StepResponseMetrics(
            rise_time=max(0.0, float(rise_time)),
            settling_time_2pct=settling_2pct,
            settling_time_5pct=settling_5pct,
            overshoot_percent=float(overshoot),
            peak_time=float(timestamps[peak_idx]),
            peak_value=float(measurements[peak_idx]),
            steady_state_value=steady_state_value,
            steady_state_error=float(final_setpoint - steady_state_value)
        )

    @staticmethod
    def _crossing_time(timestamps: np.ndarray, y_norm: np.ndarray, level: float) -> float:
        """First time the normalized response reaches ``level`` (last sample if never)."""
        reached = np.nonzero(y_norm >= level)[0]
        if len(reached) == 0:
            return float(timestamps[-1])
        return float(timestamps[reached[0]])

    @staticmethod
    def _find_settling_time(timestamps: np.ndarray, measurements: np.ndarray,
                            final_value: float, tolerance: float) -> float:
        """Time after which the response stays inside the tolerance band."""
        band = tolerance * abs(final_value) if abs(final_value) > 1e-10 else tolerance
        within_band = np.abs(measurements - final_value) <= band

        outside_indices = np.where(~within_band)[0]
        if len(outside_indices) == 0:
            return 0.0

        last_outside = outside_indices[-1]
        return float(timestamps[min(last_outside + 1, len(timestamps) - 1)])

    def calculate_error_metrics(self, timestamps: np.ndarray, setpoints: np.ndarray,
                                measurements: np.ndarray) -> ErrorMetrics:
        """Integral and pointwise error metrics."""
        timestamps = np.asarray(timestamps, dtype=float)
        if len(timestamps) < 2:
            raise ValueError("Need at least 2 data points")

        errors = np.asarray(setpoints, dtype=float) - np.asarray(measurements, dtype=float)
        abs_errors = np.abs(errors)

        return ErrorMetrics(
            iae=integrate_trapezoid(abs_errors, timestamps),
            ise=integrate_trapezoid(errors ** 2, timestamps),
            itae=integrate_trapezoid(timestamps * abs_errors, timestamps),
            mae=float(np.mean(abs_errors)),
            rmse=rms(errors),
            max_error=float(np.max(abs_errors))
        )

    def calculate_control_effort_metrics(
        self,
        outputs: np.ndarray,
        output_limits: Optional[Tuple[Optional[float], Optional[float]]] = None
    ) -> ControlEffortMetrics:
        """Effort metrics; saturation is the fraction of ticks sitting on a bound."""
        outputs = np.asarray(outputs, dtype=float)
        if len(outputs) < 2:
            raise ValueError("Need at least 2 data points")

        saturation_fraction = 0.0
        if output_limits is not None:
            lo, hi = output_limits
            at_limits = np.zeros(len(outputs), dtype=bool)
            if lo is not None:
                at_limits |= outputs <= lo + 1e-10
            if hi is not None:
                at_limits |= outputs >= hi - 1e-10
            saturation_fraction = float(np.mean(at_limits))

        return ControlEffortMetrics(
            total_variation=float(np.sum(np.abs(np.diff(outputs)))),
            mean_absolute=float(np.mean(np.abs(outputs))),
            max_absolute=float(np.max(np.abs(outputs))),
            rms=rms(outputs),
            saturation_fraction=saturation_fraction
        )

    def calculate_all_metrics(self, timestamps: np.ndarray, setpoints: np.ndarray,
                              measurements: np.ndarray, outputs: np.ndarray,
                              output_limits: Optional[Tuple[Optional[float], Optional[float]]] = None
                              ) -> Dict[str, Any]:
        """Calculate all available metrics."""
        return {
            'step_response': self.calculate_step_response_metrics(timestamps, setpoints, measurements).to_dict(),
            'error': self.calculate_error_metrics(timestamps, setpoints, measurements).to_dict(),
            'control_effort': self.calculate_control_effort_metrics(outputs, output_limits).to_dict(),
        }
