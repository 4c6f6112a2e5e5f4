"""
Tests for anova() on crossed designs.

Validates:
    - Textbook fixtures (one-way, two-way with and without replication)
    - Effect ordering: Total, results, Error/Remainder
    - Total and orthogonal decompositions, df product invariant
    - Symmetry under swapping factor order
    - Equivalence of the three input layouts
    - Random-factor denominators flow through to F and p
    - Balance and unsupported-design rejection
"""

import warnings

import numpy as np
import pytest
from scipy import stats as sp_stats

from pyanova import anova
from pyanova.anova import AnovaLabels, AnovaResult, AnovaValue, FactorKind
from pyanova.core.exceptions import BalanceError, UnsupportedDesignError


# =====================================================================
# Textbook fixtures
# =====================================================================


class TestOneWay:

    def test_decomposition(self, oneway_tensor):
        result = anova(oneway_tensor)
        np.testing.assert_allclose(result.total.ss, 4822.4575, rtol=1e-10)
        assert result.total.df == 19
        np.testing.assert_allclose(result['A'].ss, 4684.9975, rtol=1e-10)
        assert result['A'].df == 3
        np.testing.assert_allclose(result.error.ss, 137.46, rtol=1e-8)
        assert result.error.df == 16

    def test_f_and_p(self, oneway_tensor):
        result = anova(oneway_tensor)
        expected_f = (4684.9975 / 3) / (137.46 / 16)
        np.testing.assert_allclose(result['A'].f, expected_f, rtol=1e-8)
        np.testing.assert_allclose(
            result['A'].p, sp_stats.f.sf(expected_f, 3, 16), rtol=1e-6,
        )

    def test_matches_scipy_f_oneway(self, oneway_groups, oneway_tensor):
        result = anova(oneway_tensor)
        f, p = sp_stats.f_oneway(*oneway_groups)
        np.testing.assert_allclose(result['A'].f, f, rtol=1e-10)
        np.testing.assert_allclose(result['A'].p, p, rtol=1e-6)

    def test_effect_order(self, oneway_tensor):
        result = anova(oneway_tensor)
        assert [e.name for e in result.effects] == ['Total', 'A', 'Error']
        assert isinstance(result.effects[0], AnovaValue)
        assert isinstance(result.effects[1], AnovaResult)
        assert result.effects[1].denominator is result.error


class TestTwoWayWithoutReplication:

    def test_decomposition(self, twoway_no_replication):
        with pytest.warns(RuntimeWarning, match="0 degrees of freedom"):
            result = anova(
                twoway_no_replication, has_replicates=False,
                factor_names=['rows', 'cols'],
            )
        np.testing.assert_allclose(result.total.ss, 5594.916667, rtol=1e-8)
        assert result.total.df == 11
        np.testing.assert_allclose(result['rows'].ss, 3629.166667, rtol=1e-8)
        assert result['rows'].df == 2
        np.testing.assert_allclose(result['cols'].ss, 1116.916667, rtol=1e-8)
        assert result['cols'].df == 3
        np.testing.assert_allclose(result['Remainder'].ss, 848.833333, rtol=1e-8)
        assert result['Remainder'].df == 6

    def test_remainder_is_denominator_and_last(self, twoway_no_replication):
        with pytest.warns(RuntimeWarning):
            result = anova(twoway_no_replication, has_replicates=False)
        assert [e.name for e in result.effects] == ['Total', 'A', 'B', 'Remainder']
        assert result.error.name == 'Remainder'
        for r in result.results:
            assert r.denominator is result.error
        assert result.info['no_replication']
        assert any('Remainder' in w for w in result.warnings)

    def test_remainder_not_tested(self, twoway_no_replication):
        with pytest.warns(RuntimeWarning):
            result = anova(twoway_no_replication, has_replicates=False)
        assert not isinstance(result['Remainder'], AnovaResult)
        assert len(result.results) == 2


class TestTwoWayWithReplication:

    def test_decomposition(self, twoway_replicated):
        result = anova(twoway_replicated, factor_names=['row', 'col'])
        np.testing.assert_allclose(result.total.ss, 1827.6975, rtol=1e-10)
        np.testing.assert_allclose(result.cells.ss, 1461.3255, rtol=1e-10)
        np.testing.assert_allclose(result['row'].ss, 1386.1125, rtol=1e-10)
        np.testing.assert_allclose(result['col'].ss, 70.3125, rtol=1e-10)
        np.testing.assert_allclose(result['col × row'].ss, 4.9005, rtol=1e-8)
        np.testing.assert_allclose(result.error.ss, 366.372, rtol=1e-10)
        assert result.error.df == 16

    def test_effect_order(self, twoway_replicated):
        result = anova(twoway_replicated)
        assert [e.name for e in result.effects] == ['Total', 'A', 'B', 'A × B', 'Error']

    def test_no_warnings(self, twoway_replicated):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = anova(twoway_replicated)
        assert result.warnings == ()


# =====================================================================
# Structural properties
# =====================================================================


class TestDecompositionInvariants:

    @pytest.mark.parametrize("kinds", [
        (), ('random',), ('fixed', 'random'), ('random', 'random', 'random'),
    ])
    def test_total_decomposition(self, threeway_tensor, kinds):
        result = anova(threeway_tensor, kinds)
        np.testing.assert_allclose(
            result.cells.ss + result.error.ss, result.total.ss, rtol=1e-10,
        )
        assert result.cells.df + result.error.df == result.total.df

    def test_orthogonal_decomposition(self, threeway_tensor):
        result = anova(threeway_tensor)
        crossed_ss = sum(r.ss for r in result.results)
        np.testing.assert_allclose(crossed_ss, result.cells.ss, rtol=1e-10)

    def test_df_product(self, threeway_tensor):
        result = anova(threeway_tensor)
        main_df = {r.name: r.df for r in result.results if ' × ' not in r.name}
        for r in result.results:
            parts = r.name.split(' × ')
            if len(parts) > 1:
                assert r.df == np.prod([main_df[p] for p in parts])

    def test_four_fixed_factors(self, rng):
        data = rng.normal(size=(2, 2, 3, 2, 2))
        result = anova(data)
        assert len(result.results) == 15
        np.testing.assert_allclose(
            sum(r.ss for r in result.results), result.cells.ss, rtol=1e-10,
        )

    def test_symmetry(self, twoway_replicated):
        forward = anova(twoway_replicated, factor_names=['row', 'col'])
        swapped = anova(
            np.swapaxes(twoway_replicated, 1, 2), factor_names=['col', 'row'],
        )
        for name in ('row', 'col'):
            for attr in ('ss', 'df', 'f', 'p'):
                np.testing.assert_allclose(
                    getattr(forward[name], attr), getattr(swapped[name], attr), rtol=1e-9,
                )
        np.testing.assert_allclose(
            forward["col × row"].f, swapped["row × col"].f, rtol=1e-9,
        )


class TestInputLayouts:

    def test_object_cells_and_flat_match_tensor(self, twoway_cells, twoway_replicated):
        cells = np.empty((2, 2), dtype=object)
        y, rows, cols = [], [], []
        for (i, j), values in twoway_cells.items():
            cells[i, j] = values
            y.extend(values)
            rows.extend(['r1', 'r2'][i] for _ in values)
            cols.extend([100, 200][j] for _ in values)

        from_tensor = anova(twoway_replicated)
        from_cells = anova(cells)
        from_flat = anova(y, factor_assignments=[rows, cols])
        for other in (from_cells, from_flat):
            for a, b in zip(from_tensor.effects, other.effects):
                assert a.name == b.name
                np.testing.assert_allclose(a.ss, b.ss, rtol=1e-12)
                assert a.df == b.df

    def test_flat_records_level_labels(self):
        y = np.arange(8.0)
        result = anova(y, factor_assignments=[[1, 2] * 4], factor_names=['dose'])
        np.testing.assert_array_equal(result.info['level_labels']['dose'], [1, 2])


# =====================================================================
# Random factors
# =====================================================================


class TestRandomFactors:

    def test_two_way_mixed(self, twoway_replicated):
        # row declared first (random), col second (fixed) -> col is factor 1
        result = anova(twoway_replicated, ['random', 'fixed'], factor_names=['row', 'col'])
        assert result['col'].denominator.name == 'col × row'
        assert result['row'].denominator.name == 'Error'
        np.testing.assert_allclose(
            result['col'].f, result['col'].ms / result['col × row'].ms, rtol=1e-12,
        )

    def test_three_way_ffr(self, threeway_tensor):
        result = anova(threeway_tensor, ['random', 'fixed', 'fixed'])
        assert result['A'].denominator.name == 'A × C'
        assert result['B'].denominator.name == 'B × C'
        assert result['C'].denominator.name == 'Error'
        assert result['A × B'].denominator.name == 'A × B × C'
        np.testing.assert_allclose(
            result['A'].f, result['A'].ms / result['A × C'].ms, rtol=1e-12,
        )
        np.testing.assert_allclose(
            result['A'].p,
            sp_stats.f.sf(result['A'].f, result['A'].df, result['A × C'].df),
            rtol=1e-10,
        )

    def test_three_way_random_pseudo_term(self, threeway_tensor):
        result = anova(threeway_tensor, ['random', 'random', 'random'])
        pseudo = result['A'].denominator
        assert pseudo.name == 'MS(A × B) + MS(A × C) - MS(A × B × C)'
        expected = result['A × B'].ms + result['A × C'].ms - result['A × B × C'].ms
        np.testing.assert_allclose(pseudo.ms, expected, rtol=1e-12)
        np.testing.assert_allclose(result['A'].f, result['A'].ms / expected, rtol=1e-12)

    def test_fixed_only_design_uses_error(self, threeway_tensor):
        result = anova(threeway_tensor)
        assert all(r.denominator is result.error for r in result.results)


# =====================================================================
# Configuration
# =====================================================================


class TestConfiguration:

    def test_custom_labels(self, twoway_replicated):
        labels = AnovaLabels(total='SS total', error='Residuals', separator=':')
        result = anova(twoway_replicated, labels=labels)
        assert [e.name for e in result.effects] == ['SS total', 'A', 'B', 'A:B', 'Residuals']

    def test_enum_kinds(self, twoway_replicated):
        a = anova(twoway_replicated, [FactorKind.RANDOM])
        b = anova(twoway_replicated, ['random'])
        assert a['A'].f == b['A'].f

    def test_timing_sections(self, twoway_replicated):
        result = anova(twoway_replicated)
        assert {'total_seconds', 'normalize', 'decompose', 'error_terms', 'ftest'} <= set(result.timing)

    def test_info(self, twoway_replicated):
        result = anova(twoway_replicated)
        assert result.info['design_type'] == 'crossed'
        assert result.info['n_cells'] == 4
        assert result.backend_name == 'cpu_balanced'


# =====================================================================
# Rejection
# =====================================================================


class TestRejection:

    def test_missing_combination(self):
        y = [1.0, 2.0, 3.0, 4.0]
        with pytest.raises(BalanceError):
            anova(y, factor_assignments=[[0, 0, 1, 1], [0, 0, 1, 1]])

    def test_four_crossed_with_random(self, rng):
        data = rng.normal(size=(2, 2, 2, 2, 2))
        with pytest.raises(UnsupportedDesignError):
            anova(data, ['fixed', 'random'])
