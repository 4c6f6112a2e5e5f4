"""
DataFrame front end for balanced ANOVA.

Projects one observation column and one column per factor out of a pandas
DataFrame and hands them to the flat-observation form of anova().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from pyanova.anova._common import DEFAULT_LABELS, AnovaLabels, FactorKind
from pyanova.anova.solution import AnovaSolution
from pyanova.anova.solvers import anova
from pyanova.core.exceptions import ObservationTypeError, ValidationError

if TYPE_CHECKING:
    import pandas as pd


def anova_dataframe(
    df: pd.DataFrame,
    observations: str,
    factors: Sequence[str],
    factor_kinds: Sequence[FactorKind | str] = (),
    *,
    factor_names: Sequence[str] | None = None,
    labels: AnovaLabels = DEFAULT_LABELS,
) -> AnovaSolution:
    """
    Balanced ANOVA on columns of a DataFrame.

    Rows with a missing value in the observation column or any factor
    column are dropped before the design is checked for balance.

    Args:
        df: Source table
        observations: Name of the observation column; coerced to numeric
        factors: Factor column names, least significant first
        factor_kinds: Kinds as for anova()
        factor_names: Display names; defaults to the factor column names
        labels: Display labels as for anova()

    Returns:
        AnovaSolution

    Raises:
        ValidationError: Unknown columns, or no complete rows
        ObservationTypeError: Observation column is boolean or cannot be
            converted to numeric

    Examples:
        >>> result = anova_dataframe(df, 'yield', ['variety', 'field'], ['fixed', 'random'])
        >>> print(result.summary())
    """
    import pandas as pd
    from pandas.api.types import is_bool_dtype

    columns = [observations, *factors]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValidationError(
            f"columns {missing} not found; available: {list(df.columns)}"
        )

    complete = df.dropna(subset=columns)
    if len(complete) == 0:
        raise ValidationError(
            f"no rows without missing values in columns {columns}"
        )

    raw = complete[observations]
    try:
        y = pd.to_numeric(raw, errors="raise")
    except (ValueError, TypeError) as e:
        raise ObservationTypeError(
            f"observations: column {observations!r} (dtype {raw.dtype}) "
            f"cannot be converted to numeric: {e}",
            column=observations,
            dtype=str(raw.dtype),
        ) from e
    if is_bool_dtype(raw) or is_bool_dtype(y):
        raise ObservationTypeError(
            f"observations: column {observations!r} is boolean, not numeric",
            column=observations,
            dtype=str(raw.dtype),
        )

    if factor_names is None or len(factor_names) == 0:
        factor_names = [str(c) for c in factors]

    assignments: list[Any] = [complete[c].to_numpy() for c in factors]
    return anova(
        y.to_numpy(dtype=np.float64),
        factor_kinds,
        factor_names=factor_names,
        factor_assignments=assignments,
        labels=labels,
    )
