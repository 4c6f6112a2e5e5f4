"""
Input normalization for balanced ANOVA.

Every accepted observation layout is converted into one canonical tensor
whose axis 0 holds replicate measurements and whose remaining axes index
the factors in declaration order (least significant first):

    canonical.shape == (n_replicates, n_levels_1, ..., n_levels_k)

Accepted layouts:
    (a) numeric tensor with an explicit leading replicate axis
        (or without one, when has_replicates=False)
    (b) object tensor whose cells are equal-length replicate sequences
    (c) flat observation vector plus one assignment vector per factor

A design without replication simply has n_replicates == 1.
"""

from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from pyanova.core.exceptions import BalanceError, ValidationError
from pyanova.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_matching_length,
    check_min_ndim,
    check_nonempty,
)


def canonical_from_tensor(
    observations: Any,
    *,
    has_replicates: bool = True,
) -> NDArray[np.float64]:
    """
    Convert a tensor of observations into canonical form.

    Args:
        observations: Numeric array-like (layout a) or an object ndarray
            whose elements are replicate sequences (layout b)
        has_replicates: For layout (a), whether axis 0 holds replicates.
            Ignored for layout (b), whose replicates live in the cells.

    Returns:
        Canonical float64 tensor with leading replicate axis

    Raises:
        BalanceError: If cells carry different replicate counts
        ValidationError: If values are non-numeric or non-finite
    """
    if isinstance(observations, np.ndarray) and observations.dtype == object:
        return _stack_replicate_cells(observations)

    try:
        arr = np.asarray(observations)
    except ValueError as e:
        # numpy refuses ragged nesting outright
        raise BalanceError(
            f"observations: ragged nesting, all cells must have the same "
            f"number of replicates ({e})"
        ) from e

    if arr.dtype == object:
        return _stack_replicate_cells(arr)

    values = check_array(arr, "observations")
    check_nonempty(values, "observations")
    check_finite(values, "observations")

    if has_replicates:
        check_min_ndim(values, 2, "observations")
        return values.astype(np.float64, copy=False)

    check_min_ndim(values, 1, "observations")
    return values.astype(np.float64, copy=False)[np.newaxis, ...]


def _stack_replicate_cells(cells: NDArray) -> NDArray[np.float64]:
    """Lift per-cell replicate sequences into a leading replicate axis."""
    check_nonempty(cells, "observations")

    flat_cells = [check_array(np.ravel(c), "observations cell") for c in cells.ravel()]
    counts = tuple(len(c) for c in flat_cells)
    if len(set(counts)) != 1:
        raise BalanceError(
            f"observations: all cells must have the same number of replicates, "
            f"got counts {sorted(set(counts))}",
            counts=counts,
        )
    n_replicates = counts[0]
    if n_replicates == 0:
        raise ValidationError("observations: cells hold no replicate values")

    stacked = np.stack(flat_cells).astype(np.float64)    # (n_cells, n_replicates)
    check_finite(stacked, "observations")
    tensor = stacked.reshape(cells.shape + (n_replicates,))
    return np.moveaxis(tensor, -1, 0)


def canonical_from_assignments(
    observations: Any,
    factor_assignments: Sequence[Any],
) -> tuple[NDArray[np.float64], tuple[NDArray, ...]]:
    """
    Arrange a flat observation vector into canonical form.

    Factor levels may be arbitrary sortable labels, unordered and
    non-contiguous; each factor's sorted distinct levels are remapped to
    0..k-1. Observations are stably sorted cell-major, so replicates keep
    their input order within each cell.

    Args:
        observations: 1D numeric array-like of length N
        factor_assignments: One length-N label vector per factor, in
            declaration order (least significant first)

    Returns:
        (canonical tensor, per-factor sorted level labels)

    Raises:
        BalanceError: On assignment length mismatch, unequal level or cell
            counts, missing factor-level combinations, or a total count not
            divisible by the number of cells
    """
    y = check_array(observations, "observations")
    check_1d(y, "observations")
    check_nonempty(y, "observations")
    check_finite(y, "observations")
    n = y.shape[0]

    if len(factor_assignments) == 0:
        raise ValidationError("factor_assignments: at least one factor is required")

    levels: list[NDArray] = []
    codes: list[NDArray] = []
    for i, assignment in enumerate(factor_assignments):
        name = f"factor_assignments[{i}]"
        arr = np.asarray(assignment)
        check_1d(arr, name)
        check_matching_length(arr, n, name)
        try:
            factor_levels, factor_codes = np.unique(arr, return_inverse=True)
        except TypeError as e:
            raise ValidationError(f"{name}: levels are not mutually sortable ({e})") from e

        level_counts = np.bincount(factor_codes.ravel(), minlength=len(factor_levels))
        if len(set(level_counts.tolist())) != 1:
            raise BalanceError(
                f"{name}: design is unbalanced, level counts "
                f"{dict(zip(factor_levels.tolist(), level_counts.tolist()))}",
                counts=tuple(level_counts.tolist()),
            )
        levels.append(factor_levels)
        codes.append(factor_codes.ravel())

    shape = tuple(len(lv) for lv in levels)
    n_cells = int(np.prod(shape))
    if n % n_cells != 0:
        raise BalanceError(
            f"observations: {n} observations cannot fill {n_cells} cells equally; "
            f"design is unbalanced"
        )
    n_replicates = n // n_cells

    cell_index = np.ravel_multi_index(tuple(codes), shape)
    cell_counts = np.bincount(cell_index, minlength=n_cells)
    if np.any(cell_counts != n_replicates):
        n_missing = int(np.sum(cell_counts == 0))
        raise BalanceError(
            f"observations: design is unbalanced, expected {n_replicates} "
            f"observation(s) per cell but counts range "
            f"{int(cell_counts.min())}..{int(cell_counts.max())} "
            f"({n_missing} factor-level combination(s) missing)",
            counts=tuple(cell_counts.tolist()),
        )

    order = np.argsort(cell_index, kind='stable')
    tensor = y[order].astype(np.float64).reshape(shape + (n_replicates,))
    return np.moveaxis(tensor, -1, 0), tuple(levels)
