"""
Sums of squares computation for balanced ANOVA.

All quantities are computed directly from cell means of the canonical
observation tensor (axis 0 = replicates). No model fitting is involved:
in a balanced design every effect is an orthogonal partition of the cell
sum of squares.

Total:
    SS of every observation about the grand mean, df = N - 1.

Cells:
    SS of cell means about the grand mean, scaled by the replicate count,
    df = (number of cells) - 1.

Nested factors:
    Collapsed one at a time (innermost first). Each step records the SS
    among the cells that remain, then averages the nested axis away.

Crossed factors and interactions:
    Inclusion-exclusion over every subset of the crossed axes. SS(S) is the
    SS of the marginal means over S minus the SS of every strict subset of S.
"""

from dataclasses import dataclass
from itertools import combinations

import numpy as np
from numpy.typing import NDArray

from pyanova.anova._common import AnovaFactor, AnovaLabels, AnovaValue


@dataclass(frozen=True)
class CrossedTerm:
    """
    One crossed main effect or interaction.

    dims holds the tensor axes of the term (0-based, cell-mean axes), in
    the order the term was enumerated (most significant first).
    """
    dims: tuple[int, ...]
    factor: AnovaFactor

    @property
    def order(self) -> int:
        return len(self.dims)


def _sum_sq_dev(values: NDArray) -> float:
    return float(np.sum((values - values.mean()) ** 2))


def total_value(observations: NDArray, labels: AnovaLabels) -> AnovaValue:
    """SS and df of all observations about the grand mean."""
    return AnovaValue(labels.total, _sum_sq_dev(observations), observations.size - 1)


def cell_means(observations: NDArray) -> NDArray:
    """Collapse the replicate axis."""
    return observations.mean(axis=0)


def cells_value(
    means: NDArray,
    n_replicates: int,
    labels: AnovaLabels,
) -> AnovaValue:
    """SS and df among cell means, weighted by replicates per cell."""
    return AnovaValue(labels.cells, _sum_sq_dev(means) * n_replicates, means.size - 1)


def collapse_nested(
    means: NDArray,
    n_replicates: int,
    names: tuple[str, ...],
) -> tuple[list[AnovaFactor], NDArray, int]:
    """
    Strip the leading nested axes from a cell-mean tensor.

    For each nested axis (innermost first) records the variation among
    all cells still present, then averages that axis away. The first value
    therefore equals the Cells partition.

    Args:
        means: Cell-mean tensor whose first len(names) axes are nested
        n_replicates: Replicates per cell
        names: Names of the nested factors, innermost first

    Returns:
        (among-cells values innermost first, deflated cell-mean tensor,
         effective replicate count of each deflated cell)
    """
    among: list[AnovaFactor] = []
    weight = n_replicates
    for name in names:
        df = means.size - 1
        ss = _sum_sq_dev(means) * weight
        among.append(AnovaFactor(name, ss, df))
        weight *= means.shape[0]
        means = means.mean(axis=0)
    return among, means, weight


def nested_factors(
    among: list[AnovaFactor],
    crossed: list[AnovaFactor],
) -> list[AnovaFactor]:
    """
    Derive nested effects from the among-cells values.

    Works from the outermost nested factor inward: each nested effect is
    its among-cells value minus everything coarser (crossed effects and the
    nested effects already derived). Differences are not clamped.

    Returns:
        Nested effects, outermost first
    """
    coarser = sum(crossed)
    result: list[AnovaFactor] = []
    for value in reversed(among):
        nested = value - coarser
        coarser = coarser + nested
        result.append(AnovaFactor.from_value(value.name, nested))
    return result


def crossed_factors(
    means: NDArray,
    n_replicates: int,
    names: tuple[str, ...],
    labels: AnovaLabels,
) -> list[CrossedTerm]:
    """
    Enumerate all crossed main effects and interactions.

    Terms are grouped by order: every main effect, then every two-way
    interaction, and so on up to the full interaction. Within an order,
    combinations are drawn over the axes in reverse so the most
    significant factor comes first, e.g. for axes (C, B, A):

        A, B, C, A × B, A × C, B × C, A × B × C

    Args:
        means: Cell-mean tensor of crossed axes only
        n_replicates: Observations behind each cell mean
        names: Axis names, least significant first
        labels: Label configuration (interaction separator)

    Returns:
        List of CrossedTerm in enumeration order
    """
    n_dims = means.ndim
    n_total = means.size * n_replicates
    axes = tuple(reversed(range(n_dims)))

    terms: list[CrossedTerm] = []
    for order in range(1, n_dims + 1):
        for dims in combinations(axes, order):
            other = tuple(d for d in range(n_dims) if d not in dims)
            marginal = means.mean(axis=other) if other else means
            ss = n_total * float(np.var(marginal))
            ss -= sum(t.factor.ss for t in terms if set(t.dims) < set(dims))
            df = int(np.prod([means.shape[d] - 1 for d in dims]))
            name = labels.interaction(names[d] for d in dims)
            terms.append(CrossedTerm(dims, AnovaFactor(name, ss, df)))
    return terms
