"""
Error-term assignment for balanced ANOVA.

Selects the denominator mean square for each crossed effect's F-test.

Crossed designs (fixed and random factors):
    The classical expected-mean-square tables for one to three crossed
    factors, encoded as lookups keyed by the factor kinds in significance
    order (factor 1 first). Where no single observed term has the right
    expectation, a pseudo mean square is synthesized with the
    Satterthwaite approximation.

Repeated-measures designs:
    Factors declared before the subject vary within subjects, factors
    declared after it vary among subjects. Every effect not involving the
    subject is tested against its interaction with the subject and all
    among-subject factors.
"""

import numpy as np

from pyanova.anova._common import AnovaFactor, FactorKind
from pyanova.anova._ss import CrossedTerm
from pyanova.core.exceptions import UnsupportedDesignError

_F = FactorKind.FIXED
_R = FactorKind.RANDOM

# Denominators for [A, B, C, A×B, A×C, B×C, A×B×C] of a three-way design.
# 'E' is the error term; a pair names the two interactions combined with
# A×B×C into a pseudo mean square.
_THREE_WAY_DENOMINATORS = {
    (_R, _R, _R): (('AB', 'AC'), ('AB', 'BC'), ('AC', 'BC'), 'ABC', 'ABC', 'ABC', 'E'),
    (_F, _F, _R): ('AC', 'BC', 'E', 'ABC', 'E', 'E', 'E'),
    (_R, _R, _F): ('AB', 'AB', ('AC', 'BC'), 'E', 'ABC', 'ABC', 'E'),
    (_F, _R, _F): ('AB', 'E', 'BC', 'E', 'ABC', 'E', 'E'),
    (_R, _F, _R): ('AC', ('AB', 'BC'), 'AC', 'ABC', 'E', 'ABC', 'E'),
    (_R, _F, _F): ('E', 'AB', 'AC', 'E', 'E', 'ABC', 'E'),
    (_F, _R, _R): (('AB', 'AC'), 'BC', 'BC', 'ABC', 'ABC', 'E', 'E'),
}


def threeway_random_error(
    interaction_1: AnovaFactor,
    interaction_2: AnovaFactor,
    interaction_123: AnovaFactor,
) -> AnovaFactor:
    """
    Satterthwaite pseudo mean square for a main effect in a random design.

    ms = MS(1) + MS(2) - MS(123)
    df = ms^2 / (MS(1)^2/DF(1) + MS(2)^2/DF(2) + MS(123)^2/DF(123))

    The result carries ss = ms * df so it can be used like any other
    denominator, and its df is generally not an integer.

    Args:
        interaction_1: First two-way interaction containing the effect
        interaction_2: Second two-way interaction containing the effect
        interaction_123: The three-way interaction

    Returns:
        AnovaFactor named after its three source terms
    """
    terms = (interaction_1, interaction_2, interaction_123)
    ms = np.float64(interaction_1.ms) + interaction_2.ms - interaction_123.ms
    with np.errstate(divide='ignore', invalid='ignore'):
        reduced = sum(np.float64(t.ms) ** 2 / np.float64(t.df) for t in terms)
        df = ms ** 2 / reduced
        ss = ms * df
    name = f"MS({interaction_1.name}) + MS({interaction_2.name}) - MS({interaction_123.name})"
    return AnovaFactor(name, float(ss), float(df), float(ms))


def crossed_error_terms(
    terms: list[CrossedTerm],
    kinds: tuple[FactorKind, ...],
    error: AnovaFactor,
) -> list[AnovaFactor]:
    """
    Assign a denominator to every crossed effect.

    Args:
        terms: Output of crossed_factors(), in enumeration order
        kinds: Kinds of the crossed factors, most significant first
        error: The error term (Error, Remainder, or the outermost nested
            effect)

    Returns:
        One denominator per term, aligned with terms

    Raises:
        UnsupportedDesignError: Four or more crossed factors with any random
    """
    factors = [t.factor for t in terms]
    n_factors = len(kinds)

    if n_factors == 1 or all(k == _F for k in kinds):
        return [error] * len(factors)

    if n_factors == 2:
        interaction = factors[2]
        if kinds[0] == kinds[1]:
            return [interaction, interaction, error]
        if kinds[0] == _F:
            return [interaction, error, error]
        return [error, interaction, error]

    if n_factors == 3:
        named = dict(zip(('AB', 'AC', 'BC', 'ABC'), factors[3:]))
        named['E'] = error

        def resolve(entry):
            if isinstance(entry, tuple):
                return threeway_random_error(named[entry[0]], named[entry[1]], named['ABC'])
            return named[entry]

        return [resolve(entry) for entry in _THREE_WAY_DENOMINATORS[tuple(kinds)]]

    raise UnsupportedDesignError(
        f"More than 3 crossed factors with any random are not supported, got {n_factors}",
        n_factors=n_factors,
        limit=3,
    )


def subject_error_terms(
    terms: list[CrossedTerm],
    subject_dim: int,
) -> list[tuple[CrossedTerm, AnovaFactor]]:
    """
    Pair each testable repeated-measures effect with its denominator.

    Effects involving the subject axis are not testable and are left out.

    Args:
        terms: Output of crossed_factors() over all axes, subject included
        subject_dim: Axis of the subject factor

    Returns:
        (term, denominator) pairs in enumeration order
    """
    n_dims = max(max(t.dims) for t in terms) + 1
    among = {d for d in range(n_dims) if d > subject_dim}
    by_dims = {frozenset(t.dims): t.factor for t in terms}

    pairs = []
    for term in terms:
        if subject_dim in term.dims:
            continue
        key = frozenset(term.dims) | among | {subject_dim}
        pairs.append((term, by_dims[key]))
    return pairs
