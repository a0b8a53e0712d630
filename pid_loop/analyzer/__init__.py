"""Analysis of recorded simulation runs."""

from pid_loop.analyzer.metrics import (
    PerformanceMetrics,
    StepResponseMetrics,
    ErrorMetrics,
    ControlEffortMetrics,
)

__all__ = [
    "PerformanceMetrics",
    "StepResponseMetrics",
    "ErrorMetrics",
    "ControlEffortMetrics",
]
