"""
Matrix Utilities for the Attention Pipeline

Every stage of the attention walkthrough shows its numbers to a human, so each
matrix multiply rounds its result before the next stage consumes it. This module
holds the shared pieces that make that possible.

Functions:
    round_half_away_from_zero: Decimal rounding that never rounds halves to even
    matmul: Rounded matrix multiplication with shape validation
    read_only: Mark an array as immutable before handing it out
"""

import numpy as np


def round_half_away_from_zero(values: np.ndarray, decimals: int) -> np.ndarray:
    """
    Round values to a fixed number of decimals, halves away from zero.

    NumPy's np.round uses banker's rounding (0.125 -> 0.12), which would make the
    displayed numbers disagree with the tutorial. Here we scale, round the
    magnitude with floor(x + 0.5) and restore the sign:

        round(x, d) = sign(x) * floor(|x| * 10^d + 0.5) / 10^d

    Args:
        values: Array (or scalar) of real numbers
        decimals: Number of decimal places to keep

    Returns:
        rounded: Array of the same shape as values

    Example:
        >>> round_half_away_from_zero(np.array([0.125, -0.125]), 2)
        array([ 0.13, -0.13])
    """
    values = np.asarray(values, dtype=np.float64)
    scale = 10.0**decimals

    scaled_magnitude = np.abs(values) * scale
    rounded = np.sign(values) * np.floor(scaled_magnitude + 0.5) / scale

    # Adding 0.0 turns -0.0 into 0.0 so small negatives print cleanly
    return rounded + 0.0


def matmul(left: np.ndarray, right: np.ndarray, decimals: int = 2) -> np.ndarray:
    """
    Multiply two matrices and round every element of the product.

    Shapes:
        (rows, inner) @ (inner, columns) -> (rows, columns)

    An empty left operand (zero rows) is valid and produces an empty
    (0, columns) product, which is how an empty sentence flows through the
    whole pipeline without special cases.

    Each product element is summed in inner-index order (k = 0, 1, ...), so
    sums that sit exactly on a rounding boundary, such as 0.845, always round
    the same way whatever BLAS library numpy is built against.

    Args:
        left: Matrix of shape (rows, inner)
        right: Matrix of shape (inner, columns)
        decimals: Decimal places to keep in the product

    Returns:
        product: Rounded matrix of shape (rows, columns)

    Raises:
        ValueError: If either operand is not 2D or the inner dimensions differ.
    """
    left = np.asarray(left, dtype=np.float64)
    right = np.asarray(right, dtype=np.float64)

    if left.ndim != 2 or right.ndim != 2:
        raise ValueError(
            f"matmul expects 2D matrices, got shapes {left.shape} and {right.shape}"
        )
    if left.shape[1] != right.shape[0]:
        raise ValueError(
            f"Cannot multiply {left.shape} by {right.shape}: "
            f"inner dimensions {left.shape[1]} and {right.shape[0]} differ"
        )

    rows, inner = left.shape
    product = np.zeros((rows, right.shape[1]))
    # Sums accumulate one inner index at a time, starting from index 0
    for k in range(inner):
        product += np.outer(left[:, k], right[k])

    return round_half_away_from_zero(product, decimals)


def read_only(array: np.ndarray) -> np.ndarray:
    """Return a float64 copy of array that cannot be modified in place."""
    frozen = np.array(array, dtype=np.float64, copy=True)
    frozen.flags.writeable = False
    return frozen
