"""
ANOVA solver dispatch.

Public API:
    anova(observations, factor_kinds, ...) -> AnovaSolution
    anova_dataframe(df, observations, factors, ...) -> AnovaSolution  (see _tabular)
"""

import warnings
from typing import Any, Sequence

import numpy as np

from pyanova.core.compute.timing import Timer
from pyanova.core.result import Result
from pyanova.anova._common import (
    DEFAULT_LABELS,
    AnovaFactor,
    AnovaLabels,
    AnovaParams,
    AnovaResult,
    FactorKind,
)
from pyanova.anova._error_terms import crossed_error_terms, subject_error_terms
from pyanova.anova._ftest import ftest
from pyanova.anova._ss import (
    CrossedTerm,
    cell_means,
    cells_value,
    collapse_nested,
    crossed_factors,
    nested_factors,
    total_value,
)
from pyanova.anova.design import AnovaDesign
from pyanova.anova.solution import AnovaSolution


def anova(
    observations: Any,
    factor_kinds: Sequence[FactorKind | str] = (),
    *,
    factor_names: Sequence[str] = (),
    has_replicates: bool = True,
    factor_assignments: Sequence[Any] | None = None,
    labels: AnovaLabels = DEFAULT_LABELS,
) -> AnovaSolution:
    """
    N-way balanced Analysis of Variance.

    Decomposes the total variation of a balanced design into crossed main
    effects, interactions, nested effects and error, and F-tests every
    effect against the error term implied by the factor kinds.

    Args:
        observations: Either a tensor (axis 0 = replicates, then one axis
            per factor, least significant first; or an object tensor whose
            cells hold replicate sequences), or a flat 1D vector when
            factor_assignments is given
        factor_kinds: One kind per factor ('fixed', 'random', 'nested',
            'subject'/'block'), optionally preceded by 'replicate'. Missing
            trailing kinds default to fixed. Nested kinds must come first.
        factor_names: One name per factor. Default: letters in reverse
            order, so the most significant factor is 'A'.
        has_replicates: Whether axis 0 of a numeric tensor holds
            replicates. Set False for one observation per cell.
        factor_assignments: For flat observations, one label vector per
            factor (least significant first). Labels need not be sorted or
            contiguous.
        labels: Display labels for Total/Cells/Error/Remainder and the
            interaction separator.

    Returns:
        AnovaSolution with the ordered effects: Total, crossed effect
        results, nested effect results, then Error (or Remainder when
        there is no replication)

    Raises:
        DesignError: Malformed factor kinds or names
        BalanceError: Unbalanced observations
        UnsupportedDesignError: No error-term table for the design

    Examples:
        >>> result = anova(data, ['random', 'fixed'])
        >>> print(result.summary())
        >>> result['A'].p               # p-value of factor A
        >>> anova(y, factor_assignments=[dose, sex], factor_names=['dose', 'sex'])
    """
    timer = Timer()
    timer.start()

    with timer.section('normalize'):
        if factor_assignments is None:
            design = AnovaDesign.for_tensor(
                observations, factor_kinds, factor_names,
                has_replicates=has_replicates,
            )
        else:
            design = AnovaDesign.for_assignments(
                observations, factor_assignments, factor_kinds, factor_names,
            )

    result = _solve_balanced(design, labels, timer)
    return AnovaSolution(_result=result)


def _solve_balanced(
    design: AnovaDesign,
    labels: AnovaLabels,
    timer: Timer,
) -> Result[AnovaParams]:
    """Decompose, assign error terms and F-test a validated design."""
    warn_list: list[str] = []
    n_replicates = design.n_replicates

    with timer.section('decompose'):
        total = total_value(design.observations, labels)
        means = cell_means(design.observations)
        cells = cells_value(means, n_replicates, labels)
        error = AnovaFactor.from_value(labels.error, total - cells)

        among, crossed_means, effective_replicates = collapse_nested(
            means, n_replicates, design.nested_names,
        )
        terms = crossed_factors(crossed_means, effective_replicates, design.crossed_names, labels)
        nested = nested_factors(among, [t.factor for t in terms]) if among else []

    # One observation per cell: the full interaction is the only estimate of error
    no_replication = n_replicates == 1 and not nested
    if no_replication:
        top = terms[-1]
        remainder = AnovaFactor(labels.remainder, top.factor.ss, top.factor.df)
        terms[-1] = CrossedTerm(top.dims, remainder)
        residual = remainder
        warn_list.append(
            f"{labels.error} has 0 degrees of freedom (one observation per cell); "
            f"using the {labels.interaction(design.crossed_names[::-1])} "
            f"interaction as {labels.remainder}"
        )
    else:
        residual = error
        if n_replicates == 1:
            warn_list.append(
                f"{labels.error} has 0 degrees of freedom (one observation per cell); "
                f"the innermost nested effect '{nested[-1].name}' cannot be tested"
            )

    with timer.section('error_terms'):
        if design.is_repeated_measures:
            subject_dim = design.factor_kinds.index(FactorKind.SUBJECT)
            pairs = subject_error_terms(terms, subject_dim)
        else:
            kinds = tuple(reversed(design.crossed_kinds))
            crossed_error = nested[0] if nested else residual
            pairs = list(zip(terms, crossed_error_terms(terms, kinds, crossed_error)))
        if no_replication:
            pairs = [(t, d) for t, d in pairs if t.factor is not residual]

    with timer.section('ftest'):
        results: list[AnovaResult] = [ftest(t.factor, d) for t, d in pairs]
        nested_denominators = nested[1:] + [error]
        results.extend(ftest(f, d) for f, d in zip(nested, nested_denominators))

    for res in results:
        if res.denominator.ms <= 0:
            warn_list.append(
                f"Error term '{res.denominator.name}' for '{res.name}' has "
                f"non-positive mean square {res.denominator.ms:.6g}"
            )
        if not np.isfinite(res.f):
            warn_list.append(f"F statistic for '{res.name}' is not finite ({res.f})")

    for msg in warn_list:
        warnings.warn(msg, RuntimeWarning, stacklevel=3)

    timer.stop()

    effects = (total, *results, residual)
    params = AnovaParams(
        effects=effects,
        total=total,
        cells=cells,
        error=residual,
        factor_names=design.factor_names,
        factor_kinds=design.factor_kinds,
        factor_levels=design.factor_levels,
        n_replicates=n_replicates,
        n_obs=design.n,
        repeated_measures=design.is_repeated_measures,
    )

    if design.is_repeated_measures:
        design_type = 'repeated_measures'
    elif nested:
        design_type = 'nested'
    else:
        design_type = 'crossed'

    info: dict[str, Any] = {
        'design_type': design_type,
        'n_cells': int(means.size),
        'n_nested': len(nested),
        'effective_replicates': effective_replicates,
        'no_replication': no_replication,
    }
    if design.level_labels is not None:
        info['level_labels'] = dict(zip(design.factor_names, design.level_labels))

    return Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name='cpu_balanced',
        warnings=tuple(warn_list),
    )
