"""
User-facing ANOVA solution type.

Wraps a Result[AnovaParams] and provides convenient accessors, lookup of
effects by name, and a formatted summary table (matching R conventions for
significance codes).
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from pyanova.core.result import Result
from pyanova.anova._common import (
    AnovaEffect,
    AnovaFactor,
    AnovaParams,
    AnovaResult,
    AnovaValue,
    FactorKind,
)


@dataclass
class AnovaSolution:
    """
    User-facing result for balanced ANOVA.

    Produced by anova() and anova_dataframe().
    """
    _result: Result[AnovaParams]

    @property
    def effects(self) -> tuple[AnovaEffect, ...]:
        """Ordered effects: Total, crossed results, nested results, Error/Remainder."""
        return self._result.params.effects

    @property
    def total(self) -> AnovaValue:
        return self._result.params.total

    @property
    def cells(self) -> AnovaValue:
        return self._result.params.cells

    @property
    def error(self) -> AnovaFactor:
        """Error term, or Remainder for designs without replication."""
        return self._result.params.error

    @property
    def results(self) -> tuple[AnovaResult, ...]:
        """All F-tested effects, in table order."""
        return tuple(e for e in self.effects if isinstance(e, AnovaResult))

    @property
    def nested(self) -> tuple[AnovaResult, ...]:
        nested_names = {
            name for name, kind in zip(self.factor_names, self.factor_kinds)
            if kind == FactorKind.NESTED
        }
        return tuple(r for r in self.results if r.name in nested_names)

    @property
    def factor_names(self) -> tuple[str, ...]:
        return self._result.params.factor_names

    @property
    def factor_kinds(self) -> tuple[FactorKind, ...]:
        return self._result.params.factor_kinds

    @property
    def factor_levels(self) -> tuple[int, ...]:
        return self._result.params.factor_levels

    @property
    def n_obs(self) -> int:
        return self._result.params.n_obs

    @property
    def n_replicates(self) -> int:
        return self._result.params.n_replicates

    @property
    def is_repeated_measures(self) -> bool:
        return self._result.params.repeated_measures

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def effect(self, name: str) -> AnovaEffect:
        """
        Look up an effect by its display name.

        Raises:
            KeyError: If no effect has that name
        """
        for e in self.effects:
            if e.name == name:
                return e
        available = [e.name for e in self.effects]
        raise KeyError(f"No effect named {name!r}; available: {available}")

    def __getitem__(self, name: str) -> AnovaEffect:
        return self.effect(name)

    def summary(self) -> str:
        """Generate R-style ANOVA summary table."""
        width = max([20] + [len(e.name) + 2 for e in self.effects])
        rule = "-" * (width + 62)
        levels = ", ".join(
            f"{name}({n})" for name, n in zip(self.factor_names, self.factor_levels)
        )
        lines = [
            "Analysis of Variance Table",
            "=" * (width + 62),
            f"Observations: {self.n_obs}   Replicates per cell: {self.n_replicates}",
            f"Factors: {levels}",
            "",
            f"{'Source':<{width}} {'Df':>8} {'Sum Sq':>14} {'Mean Sq':>14} "
            f"{'F value':>10} {'Pr(>F)':>12}",
            rule,
        ]

        for e in self.effects:
            if isinstance(e, AnovaResult):
                sig = _significance_stars(e.p)
                lines.append(
                    f"{e.name:<{width}} {_format_df(e.df):>8} {e.ss:>14.4f} "
                    f"{e.ms:>14.4f} {e.f:>10.4f} {e.p:>12.4e} {sig}"
                )
            elif isinstance(e, AnovaFactor):
                lines.append(
                    f"{e.name:<{width}} {_format_df(e.df):>8} {e.ss:>14.4f} "
                    f"{e.ms:>14.4f}"
                )
            else:
                lines.append(f"{e.name:<{width}} {_format_df(e.df):>8} {e.ss:>14.4f}")

        lines.append(rule)
        lines.append("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")

        pseudo = sorted({
            r.denominator.name for r in self.results
            if r.denominator.name.startswith("MS(")
        })
        if pseudo:
            lines.append("")
            lines.append("Approximate (Satterthwaite) error terms:")
            for name in pseudo:
                lines.append(f"  {name}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        terms = [r.name for r in self.results]
        return (
            f"AnovaSolution(n={self.n_obs}, replicates={self.n_replicates}, "
            f"terms={terms})"
        )


def _format_df(df: float) -> str:
    if float(df).is_integer():
        return str(int(df))
    return f"{df:.2f}"


def _significance_stars(p: float | None) -> str:
    """Return significance stars for a p-value."""
    if p is None or np.isnan(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""
