"""
Mathematical utility functions for the control loop.
Uses numpy for efficient array operations.
"""

from typing import Optional
import numpy as np
from numpy.typing import ArrayLike


def clamp(value: float, min_val: Optional[float], max_val: Optional[float]) -> float:
    """
    Clamp a value between optional bounds.

    Each bound is applied on its own: the lower bound first, then the upper
    bound, so an inverted pair resolves to ``max_val``.
    """
    if min_val is not None:
        value = max(value, min_val)
    if max_val is not None:
        value = min(value, max_val)
    return value


def wrap_angle(angle: float) -> float:
    """Wrap an angle in degrees into [-180, 180)."""
    return ((angle + 180.0) % 360.0) - 180.0


def integrate_trapezoid(values: ArrayLike, timestamps: ArrayLike) -> float:
    """Integrate samples over (possibly uneven) timestamps."""
    y = np.asarray(values, dtype=float)
    t = np.asarray(timestamps, dtype=float)
    if len(y) < 2:
        return 0.0
    return float(np.sum(0.5 * (y[1:] + y[:-1]) * np.diff(t)))


def rms(values: ArrayLike) -> float:
    """Compute root mean square using numpy."""
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        return 0.0
    return float(np.sqrt(np.mean(arr ** 2)))
