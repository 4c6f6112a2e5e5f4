"""
Common data types for ANOVA.

Contains the factor-kind tag, the label configuration, the effect value
types produced by the decomposition, and the frozen parameter payload that
goes inside Result[P] envelopes.

Effect values are created once per anova() call and never mutated. Derived
terms (Error, nested effects) are obtained by component-wise subtraction of
AnovaValue objects; such differences may come out slightly negative through
floating-point cancellation and are deliberately not clamped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import numpy as np


class FactorKind(str, Enum):
    """Role of one dimension of the observation tensor."""
    FIXED = 'fixed'
    RANDOM = 'random'
    NESTED = 'nested'
    SUBJECT = 'subject'
    REPLICATE = 'replicate'
    BLOCK = 'block'    # display alias, normalized to SUBJECT


@dataclass(frozen=True)
class AnovaLabels:
    """
    Display labels used for the fixed rows of an ANOVA table.

    Passed to anova() as configuration; DEFAULT_LABELS is used otherwise.
    """
    total: str = 'Total'
    cells: str = 'Cells'
    error: str = 'Error'
    remainder: str = 'Remainder'
    separator: str = ' × '

    def interaction(self, names) -> str:
        """Join factor names into an interaction name, in the order given."""
        return self.separator.join(names)


DEFAULT_LABELS = AnovaLabels()


def _mean_square(ss: float, df: float) -> float:
    # zero or negative df propagate as inf/nan rather than raising
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(ss) / np.float64(df))


@dataclass(frozen=True)
class AnovaValue:
    """
    Sum of squares and degrees of freedom of one variance partition.

    Addition and subtraction act component-wise on (ss, df) and keep the
    name of the left operand.
    """
    name: str
    ss: float
    df: float

    def __add__(self, other: 'AnovaValue') -> 'AnovaValue':
        if not isinstance(other, AnovaValue):
            return NotImplemented
        return AnovaValue(self.name, self.ss + other.ss, self.df + other.df)

    def __radd__(self, other) -> 'AnovaValue':
        # lets sum() start from its integer 0
        if isinstance(other, int) and other == 0:
            return AnovaValue(self.name, self.ss, self.df)
        return NotImplemented

    def __sub__(self, other: 'AnovaValue') -> 'AnovaValue':
        if not isinstance(other, AnovaValue):
            return NotImplemented
        return AnovaValue(self.name, self.ss - other.ss, self.df - other.df)


@dataclass(frozen=True)
class AnovaFactor(AnovaValue):
    """
    An AnovaValue with its mean square (ss / df) cached at construction.

    ms may be given explicitly for synthesized terms whose mean square is
    the primary quantity (see threeway_random_error).
    """
    ms: float = field(default=None)

    def __post_init__(self):
        if self.ms is None:
            object.__setattr__(self, 'ms', _mean_square(self.ss, self.df))

    @classmethod
    def from_value(cls, name: str, value: AnovaValue) -> 'AnovaFactor':
        return cls(name, value.ss, value.df)


@dataclass(frozen=True)
class AnovaResult:
    """
    Outcome of one F-test.

    Attributes:
        factor: The numerator effect
        f: F statistic, factor.ms / denominator.ms
        p: Upper-tail probability of F(factor.df, denominator.df) at f
        denominator: The effect used as error term
    """
    factor: AnovaFactor
    f: float
    p: float
    denominator: AnovaFactor

    @property
    def name(self) -> str:
        return self.factor.name

    @property
    def ss(self) -> float:
        return self.factor.ss

    @property
    def df(self) -> float:
        return self.factor.df

    @property
    def ms(self) -> float:
        return self.factor.ms


AnovaEffect = Union[AnovaValue, AnovaFactor, AnovaResult]


@dataclass(frozen=True)
class AnovaParams:
    """
    Parameter payload for a balanced ANOVA.

    effects is ordered: Total, each crossed factor and interaction result
    (in enumeration order), nested results (outermost first), then Error
    or Remainder.
    """
    effects: tuple[AnovaEffect, ...]
    total: AnovaValue
    cells: AnovaValue
    error: AnovaFactor                     # Error, or Remainder without replication
    factor_names: tuple[str, ...]          # declaration order, least significant first
    factor_kinds: tuple[FactorKind, ...]
    factor_levels: tuple[int, ...]
    n_replicates: int
    n_obs: int
    repeated_measures: bool
