"""
ANOVA design object.

Wraps the canonical observation tensor together with the validated factor
kinds and names. Factory methods handle the two input layouts (tensor and
flat vector with assignments); both share one design validator so every
configuration failure is raised before any numeric work begins.
"""

from dataclasses import dataclass
from string import ascii_uppercase
from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from pyanova.anova._common import FactorKind
from pyanova.anova._normalize import (
    canonical_from_assignments,
    canonical_from_tensor,
)
from pyanova.core.exceptions import (
    DesignError,
    UnsupportedDesignError,
)

MAX_RANDOM_CROSSED_FACTORS = 3
MAX_REPEATED_MEASURES_FACTORS = 3


@dataclass(frozen=True)
class AnovaDesign:
    """
    Validated data container for balanced ANOVA.

    Created via factory methods, not directly.

    Axis 0 of observations holds replicates; axis i (i >= 1) holds the
    levels of factor_kinds[i - 1], declared least significant first.
    """
    observations: NDArray[np.float64]
    factor_kinds: tuple[FactorKind, ...]
    factor_names: tuple[str, ...]
    factor_levels: tuple[int, ...]
    n_replicates: int
    n: int
    level_labels: tuple[NDArray, ...] | None = None

    @property
    def n_factors(self) -> int:
        return len(self.factor_kinds)

    @property
    def n_nested(self) -> int:
        return sum(1 for k in self.factor_kinds if k == FactorKind.NESTED)

    @property
    def is_repeated_measures(self) -> bool:
        return FactorKind.SUBJECT in self.factor_kinds

    @property
    def nested_names(self) -> tuple[str, ...]:
        return self.factor_names[:self.n_nested]

    @property
    def crossed_names(self) -> tuple[str, ...]:
        """Names of all non-nested dimensions (subject included)."""
        return self.factor_names[self.n_nested:]

    @property
    def crossed_kinds(self) -> tuple[FactorKind, ...]:
        return self.factor_kinds[self.n_nested:]

    @staticmethod
    def for_tensor(
        observations: Any,
        factor_kinds: Sequence[Any] = (),
        factor_names: Sequence[str] = (),
        *,
        has_replicates: bool = True,
    ) -> 'AnovaDesign':
        """
        Create design from an observation tensor.

        Args:
            observations: Numeric tensor (leading replicate axis when
                has_replicates) or object tensor of replicate sequences
            factor_kinds: One kind per factor, optionally preceded by
                FactorKind.REPLICATE; missing trailing kinds default to fixed
            factor_names: One name per factor (replicate axis excluded), or
                empty for automatic names
            has_replicates: Whether axis 0 of a numeric tensor holds replicates

        Returns:
            AnovaDesign
        """
        kinds, leading_replicate = _coerce_kinds(factor_kinds)
        canonical = canonical_from_tensor(
            observations, has_replicates=has_replicates or leading_replicate,
        )
        return _build(canonical, kinds, factor_names, level_labels=None)

    @staticmethod
    def for_assignments(
        observations: Any,
        factor_assignments: Sequence[Any],
        factor_kinds: Sequence[Any] = (),
        factor_names: Sequence[str] = (),
    ) -> 'AnovaDesign':
        """
        Create design from flat observations and per-factor assignments.

        Args:
            observations: 1D numeric array-like
            factor_assignments: One label vector per factor, same length as
                observations, declaration order (least significant first)
            factor_kinds: One kind per factor; missing trailing kinds
                default to fixed
            factor_names: One name per factor, or empty for automatic names

        Returns:
            AnovaDesign
        """
        kinds, leading_replicate = _coerce_kinds(factor_kinds)
        if leading_replicate:
            raise DesignError(
                "factor_kinds: replicate is implied by the assignments and "
                "cannot be declared for flat observations"
            )
        canonical, level_labels = canonical_from_assignments(
            observations, factor_assignments,
        )
        return _build(canonical, kinds, factor_names, level_labels=level_labels)


def _build(
    canonical: NDArray[np.float64],
    kinds: list[FactorKind],
    factor_names: Sequence[str],
    *,
    level_labels: tuple[NDArray, ...] | None,
) -> AnovaDesign:
    n_factors = canonical.ndim - 1
    factor_levels = tuple(int(s) for s in canonical.shape[1:])
    n_replicates = int(canonical.shape[0])

    full_kinds = validate_factor_kinds(kinds, n_factors)
    names = validate_factor_names(factor_names, n_factors)

    for name, n_levels in zip(names, factor_levels):
        if n_levels < 2:
            raise DesignError(f"{name}: need at least 2 levels, got {n_levels}")

    n_nested = sum(1 for k in full_kinds if k == FactorKind.NESTED)
    if n_replicates == 1 and n_nested == 0 and n_factors < 2:
        raise DesignError(
            "a single factor without replicates leaves no remainder to test "
            "against; provide replicates or a second factor",
            factor_kinds=full_kinds,
        )

    return AnovaDesign(
        observations=canonical,
        factor_kinds=full_kinds,
        factor_names=names,
        factor_levels=factor_levels,
        n_replicates=n_replicates,
        n=int(canonical.size),
        level_labels=level_labels,
    )


def _coerce_kinds(factor_kinds: Sequence[Any]) -> tuple[list[FactorKind], bool]:
    """Convert kinds to FactorKind and strip a leading replicate marker."""
    kinds: list[FactorKind] = []
    for i, kind in enumerate(factor_kinds):
        try:
            kinds.append(FactorKind(kind))
        except ValueError as e:
            valid = ", ".join(repr(k.value) for k in FactorKind)
            raise DesignError(
                f"factor_kinds[{i}]: unknown kind {kind!r}, expected one of {valid}"
            ) from e

    leading_replicate = bool(kinds) and kinds[0] == FactorKind.REPLICATE
    if leading_replicate:
        kinds = kinds[1:]
    if FactorKind.REPLICATE in kinds:
        raise DesignError("factor_kinds: replicate must be the first entry if present")
    return kinds, leading_replicate


def validate_factor_kinds(
    kinds: Sequence[FactorKind],
    n_factors: int,
) -> tuple[FactorKind, ...]:
    """
    Complete and validate the factor kinds of a design.

    Missing trailing kinds default to fixed and block is normalized to
    subject.

    Args:
        kinds: Declared kinds (replicate marker already removed)
        n_factors: Number of factor dimensions in the observations

    Returns:
        Tuple with exactly one FactorKind per factor

    Raises:
        DesignError: Too many kinds, non-leading nested entries, more than
            one or a misplaced subject, subject combined with nested or
            random factors
        UnsupportedDesignError: Four or more crossed factors with any
            random, or four or more non-subject repeated-measures factors
    """
    if len(kinds) > n_factors:
        raise DesignError(
            f"factor_kinds: got {len(kinds)} entries for {n_factors} factors; "
            f"factor_kinds must have an entry for each factor"
        )
    full = [FactorKind.SUBJECT if k == FactorKind.BLOCK else k for k in kinds]
    full.extend([FactorKind.FIXED] * (n_factors - len(full)))
    full_kinds = tuple(full)

    n_nested = full.count(FactorKind.NESTED)
    if any(k != FactorKind.NESTED for k in full[:n_nested]):
        raise DesignError(
            "factor_kinds: nested entries must come before crossed factors",
            factor_kinds=full_kinds,
        )

    n_subjects = full.count(FactorKind.SUBJECT)
    if n_subjects > 1:
        raise DesignError(
            f"factor_kinds: maximum of one subject entry, got {n_subjects}",
            factor_kinds=full_kinds,
        )

    if n_subjects == 1:
        if n_nested > 0:
            raise DesignError(
                "factor_kinds: nested factors cannot be combined with a subject factor",
                factor_kinds=full_kinds,
            )
        if FactorKind.RANDOM in full:
            raise DesignError(
                "factor_kinds: random factors cannot be combined with a subject factor",
                factor_kinds=full_kinds,
            )
        position = full.index(FactorKind.SUBJECT)
        if position not in (1, 2):
            raise DesignError(
                f"factor_kinds: subject must be the second or third factor, "
                f"got position {position + 1}",
                factor_kinds=full_kinds,
            )
        n_other = n_factors - 1
        if n_other > MAX_REPEATED_MEASURES_FACTORS:
            raise UnsupportedDesignError(
                f"More than {MAX_REPEATED_MEASURES_FACTORS} non-subject factors "
                f"are not supported, got {n_other}",
                n_factors=n_other,
                limit=MAX_REPEATED_MEASURES_FACTORS,
            )
        return full_kinds

    crossed = full[n_nested:]
    if not crossed:
        raise DesignError(
            "factor_kinds: at least one crossed (fixed or random) factor is required",
            factor_kinds=full_kinds,
        )
    if len(crossed) > MAX_RANDOM_CROSSED_FACTORS and FactorKind.RANDOM in crossed:
        raise UnsupportedDesignError(
            f"More than {MAX_RANDOM_CROSSED_FACTORS} crossed factors with any "
            f"random are not supported, got {len(crossed)}",
            n_factors=len(crossed),
            limit=MAX_RANDOM_CROSSED_FACTORS,
        )
    return full_kinds


def validate_factor_names(
    factor_names: Sequence[str],
    n_factors: int,
) -> tuple[str, ...]:
    """
    Validate explicit names or generate automatic ones.

    Automatic names are single letters in reverse alphabetical order, so
    the last (most significant) dimension is 'A'.

    Raises:
        DesignError: Wrong number of names, or too many factors to name
            automatically
    """
    if factor_names is not None and len(factor_names) > 0:
        if len(factor_names) != n_factors:
            raise DesignError(
                f"factor_names: got {len(factor_names)} names for {n_factors} "
                f"factors; factor_names must have an entry for each factor"
            )
        return tuple(str(name) for name in factor_names)

    if n_factors > len(ascii_uppercase):
        raise DesignError(
            f"Can only automatically name up to {len(ascii_uppercase)} factors, "
            f"got {n_factors}. Provide names explicitly."
        )
    return tuple(reversed(ascii_uppercase[:n_factors]))
