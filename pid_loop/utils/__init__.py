"""Utility functions and helpers."""

from pid_loop.utils.validators import (
    ValidationError,
    validate_real,
    validate_positive,
)
from pid_loop.utils.math_utils import clamp, wrap_angle, integrate_trapezoid, rms

__all__ = [
    "ValidationError",
    "validate_real",
    "validate_positive",
    "clamp",
    "wrap_angle",
    "integrate_trapezoid",
    "rms",
]
