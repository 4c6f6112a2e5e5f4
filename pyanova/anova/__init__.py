"""
Balanced N-way Analysis of Variance (ANOVA).

Public API:
    anova(observations, factor_kinds, ...) -> AnovaSolution
    anova_dataframe(df, observations, factors, ...) -> AnovaSolution
    ftest(numerator, denominator) -> AnovaResult
    threeway_random_error(ab, ac, abc) -> AnovaFactor    # Satterthwaite pseudo term
"""

from pyanova.anova._common import (
    DEFAULT_LABELS,
    AnovaEffect,
    AnovaFactor,
    AnovaLabels,
    AnovaParams,
    AnovaResult,
    AnovaValue,
    FactorKind,
)
from pyanova.anova._error_terms import threeway_random_error
from pyanova.anova._ftest import ftest
from pyanova.anova._tabular import anova_dataframe
from pyanova.anova.design import AnovaDesign
from pyanova.anova.solution import AnovaSolution
from pyanova.anova.solvers import anova

__all__ = [
    "anova",
    "anova_dataframe",
    "ftest",
    "threeway_random_error",
    "AnovaDesign",
    "AnovaSolution",
    "AnovaEffect",
    "AnovaFactor",
    "AnovaLabels",
    "AnovaParams",
    "AnovaResult",
    "AnovaValue",
    "FactorKind",
    "DEFAULT_LABELS",
]
