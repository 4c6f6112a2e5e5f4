"""
Exception hierarchy for PyAnova.

All exceptions inherit from PyAnovaError to allow catching any
library-specific error. Every failure in this package is a configuration
or validation failure detected before (or at the very start of) the
numeric pass; numeric degeneracies are never raised.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyAnovaError(Exception):
    """Base exception for all PyAnova errors."""
    pass


class ValidationError(PyAnovaError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class DesignError(ValidationError):
    """
    The proposed experimental design is malformed.

    Raised for wrong factor-kind or factor-name counts, nested factors that
    are not contiguous and leading, misplaced or repeated subject factors,
    and random factors combined with a subject factor.

    Attributes:
        factor_kinds: The (normalized) factor kinds that were rejected, if known
    """

    def __init__(
        self,
        message: str,
        factor_kinds: tuple | None = None,
    ):
        super().__init__(message)
        self.factor_kinds = factor_kinds


class BalanceError(ValidationError):
    """
    The observations do not form a balanced design.

    Raised when cells carry unequal replicate counts, when an assignment
    vector's length differs from the observation vector, or when the total
    count is not divisible by the number of cells.

    Attributes:
        counts: Observed per-cell (or per-level) counts, if computed
    """

    def __init__(
        self,
        message: str,
        counts: tuple[int, ...] | None = None,
    ):
        super().__init__(message)
        self.counts = counts


class UnsupportedDesignError(ValidationError):
    """
    The design is valid in principle but has no error-term table.

    Raised for four or more crossed factors when any of them is random, and
    for repeated-measures designs with four or more non-subject factors.

    Attributes:
        n_factors: Number of factors that triggered the limit
        limit: Largest supported number of factors
    """

    def __init__(
        self,
        message: str,
        n_factors: int | None = None,
        limit: int | None = None,
    ):
        super().__init__(message)
        self.n_factors = n_factors
        self.limit = limit


class ObservationTypeError(ValidationError, TypeError):
    """
    Observation column is not numeric.

    Raised by the tabular front end when the projected observation column
    cannot be used as numeric data.

    Attributes:
        column: Name of the offending column
        dtype: String form of the column's dtype
    """

    def __init__(
        self,
        message: str,
        column: str | None = None,
        dtype: str | None = None,
    ):
        super().__init__(message)
        self.column = column
        self.dtype = dtype
