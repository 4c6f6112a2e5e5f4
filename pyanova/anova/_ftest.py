"""
F-test for one ANOVA effect.

Degenerate inputs are not special-cased: a zero denominator mean square
gives an infinite or NaN F, and zero or negative degrees of freedom give a
NaN p-value, exactly as the F distribution's survival function reports.
"""

import numpy as np
from scipy import stats as sp_stats

from pyanova.anova._common import AnovaFactor, AnovaResult


def f_pvalue(df1: float, df2: float, f: float) -> float:
    """Upper-tail probability of F(df1, df2) at f."""
    return float(sp_stats.f.sf(f, df1, df2))


def ftest(numerator: AnovaFactor, denominator: AnovaFactor) -> AnovaResult:
    """
    Test numerator against denominator.

    Args:
        numerator: Effect being tested
        denominator: Error term for the effect

    Returns:
        AnovaResult with F = numerator.ms / denominator.ms and its p-value
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        f = float(np.float64(numerator.ms) / np.float64(denominator.ms))
    p = f_pvalue(numerator.df, denominator.df, f)
    return AnovaResult(numerator, f, p, denominator)
