"""
Input validation utilities for PyAnova.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyanova.core.exceptions import (
    BalanceError,
    DimensionError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types, ragged nesting
    or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    # Ensure floating point for numerical stability
    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Args:
        array: Array to check
        ndim: Required number of dimensions
        name: Parameter name for error messages

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not 1D
    """
    check_ndim(array, 1, name)


def check_min_ndim(array: NDArray, min_ndim: int, name: str) -> None:
    """
    Verify array has at least min_ndim dimensions.

    Args:
        array: Array to check
        min_ndim: Smallest acceptable number of dimensions
        name: Parameter name for error messages

    Raises:
        DimensionError: If array has too few dimensions
    """
    if array.ndim < min_ndim:
        raise DimensionError(
            f"{name}: expected at least {min_ndim}D array, got {array.ndim}D "
            f"with shape {array.shape}"
        )


def check_nonempty(array: NDArray, name: str) -> None:
    """
    Verify array holds at least one element.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array is empty
    """
    if array.size == 0:
        raise ValidationError(f"{name}: empty input, shape {array.shape}")


def check_matching_length(
    array: NDArray,
    expected: int,
    name: str,
) -> None:
    """
    Verify a 1D assignment array has one entry per observation.

    Args:
        array: Array to check
        expected: Required length (number of observations)
        name: Parameter name for error messages

    Raises:
        BalanceError: If the length differs from expected
    """
    if array.shape[0] != expected:
        raise BalanceError(
            f"{name}: length {array.shape[0]} doesn't match {expected} observations; "
            f"each observation must have an assignment for each factor"
        )
