"""
PyAnova: balanced N-way Analysis of Variance for Python.

Decomposes the variance of balanced fixed, random, nested and
repeated-measures designs and F-tests each effect against the error term
its factor kinds call for.

Submodules:
    anova: Decomposition, error-term assignment and F-tests
    core: Result envelope, exceptions, validators, timing
"""

__version__ = "0.1.0"

from pyanova.anova import (
    anova,
    anova_dataframe,
    ftest,
    threeway_random_error,
    AnovaSolution,
    AnovaLabels,
    FactorKind,
)
from pyanova.core.exceptions import (
    PyAnovaError,
    ValidationError,
    DesignError,
    BalanceError,
    UnsupportedDesignError,
    ObservationTypeError,
)

__all__ = [
    "__version__",
    "anova",
    "anova_dataframe",
    "ftest",
    "threeway_random_error",
    "AnovaSolution",
    "AnovaLabels",
    "FactorKind",
    "PyAnovaError",
    "ValidationError",
    "DesignError",
    "BalanceError",
    "UnsupportedDesignError",
    "ObservationTypeError",
]
