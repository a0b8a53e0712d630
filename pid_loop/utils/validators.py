"""
Validation utilities for caller-side configuration.

The numeric core accepts any real input; these helpers guard the
configuration layers around it (control knobs, scenarios, buffers).
"""

import numbers


class ValidationError(ValueError):
    """Custom exception for validation failures."""
    pass


def validate_real(value: float, name: str) -> float:
    """Validate that a value is a real number and return it as float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name} must be a real number, got {type(value).__name__}")
    return float(value)


def validate_positive(value: float, name: str) -> float:
    """
    Validate that a value is strictly positive.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    value = validate_real(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value

