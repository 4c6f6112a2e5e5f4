"""
Core infrastructure for PyAnova.

This module provides shared abstractions and utilities used by the
analysis subpackages.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing utilities
"""

from pyanova.core.result import Result
from pyanova.core.exceptions import (
    PyAnovaError,
    ValidationError,
    DimensionError,
    DesignError,
    BalanceError,
    UnsupportedDesignError,
    ObservationTypeError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyAnovaError",
    "ValidationError",
    "DimensionError",
    "DesignError",
    "BalanceError",
    "UnsupportedDesignError",
    "ObservationTypeError",
]
