"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d / check_min_ndim: dimensionality checks
    - check_nonempty: empty input rejection
    - check_matching_length: assignment length against observations
"""

import numpy as np
import pytest

from pyanova.core.exceptions import BalanceError, DimensionError, ValidationError
from pyanova.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_matching_length,
    check_min_ndim,
    check_ndim,
    check_nonempty,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "y")
        assert isinstance(result, np.ndarray)
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_int_array_promoted_to_float(self):
        result = check_array(np.array([1, 2, 3], dtype=np.int32), "y")
        assert np.issubdtype(result.dtype, np.floating)

    def test_nested_list_to_3d(self):
        result = check_array([[[1, 2], [3, 4]]], "y")
        assert result.shape == (1, 2, 2)

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "y")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b", "c"], "y")

    def test_rejects_bool(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array([True, False], "y")

    def test_error_message_includes_name(self):
        with pytest.raises(ValidationError, match="my_var"):
            check_array(["a", "b"], "my_var")


# ═══════════════════════════════════════════════════════════════════════
# check_finite
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0, 3.0]), "y")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan, 3.0]), "y")

    def test_inf_rejected(self):
        with pytest.raises(ValidationError, match="1 Inf"):
            check_finite(np.array([[1.0, np.inf], [2.0, 0.0]]), "y")

    def test_counts_each_kind(self):
        with pytest.raises(ValidationError, match=r"\(1 NaN, 2 Inf\)"):
            check_finite(np.array([[np.nan, np.inf], [-np.inf, 0.0]]), "y")


# ═══════════════════════════════════════════════════════════════════════
# Dimensionality
# ═══════════════════════════════════════════════════════════════════════


class TestDimensions:

    def test_check_ndim_passes(self):
        check_ndim(np.zeros((2, 3)), 2, "y")

    def test_check_ndim_fails(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_ndim(np.zeros(3), 2, "y")

    def test_check_1d_fails_on_2d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((2, 2)), "y")

    def test_check_min_ndim_passes_higher(self):
        check_min_ndim(np.zeros((2, 2, 2)), 2, "y")

    def test_check_min_ndim_fails(self):
        with pytest.raises(DimensionError, match="at least 2D"):
            check_min_ndim(np.zeros(4), 2, "observations")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            check_1d(np.zeros((2, 2)), "y")


# ═══════════════════════════════════════════════════════════════════════
# check_nonempty / check_matching_length
# ═══════════════════════════════════════════════════════════════════════


class TestNonempty:

    def test_nonempty_passes(self):
        check_nonempty(np.zeros(1), "y")

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            check_nonempty(np.zeros((0, 3)), "y")


class TestMatchingLength:

    def test_matching_passes(self):
        check_matching_length(np.arange(5), 5, "factor_assignments[0]")

    def test_mismatch_is_balance_error(self):
        with pytest.raises(BalanceError, match="length 4 doesn't match 5"):
            check_matching_length(np.arange(4), 5, "factor_assignments[0]")
