"""
Softmax Normalization

This module turns rows of attention scores into probability distributions.

Functions:
    softmax: Converts logits to a probability distribution (full precision)
    normalize_rows: Row-wise softmax rounded for display, used by attention

Reference:
    - "Attention Is All You Need" (Vaswani et al., 2017) - Softmax in attention
"""

import numpy as np

from attention_explainer.matrix import round_half_away_from_zero


def softmax(logits: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    Compute softmax activation function.

    Converts a vector of arbitrary real values (logits) into a probability
    distribution where all values are positive and sum to 1.

    Mathematical Formula:
        softmax(x)_i = exp(x_i) / sum_j(exp(x_j))

    Numerical Stability:
        We subtract max(x) from all values before exponentiation to prevent
        overflow. This doesn't change the result because:
        exp(x_i - max) / sum(exp(x_j - max)) = exp(x_i) / sum(exp(x_j))

    Args:
        logits: Input array of any shape. Softmax is applied along the
                specified axis.
        axis: The axis along which to compute softmax. Default is -1 (last axis),
              which is standard for attention mechanisms.

    Returns:
        probabilities: Array of same shape as input, with softmax applied along
                      the specified axis. An empty axis gives an empty result.

    Example:
        >>> logits = np.array([1.0, 2.0, 3.0])
        >>> probs = softmax(logits)
        >>> print(probs)  # [0.09, 0.24, 0.67]
        >>> print(np.sum(probs))  # 1.0
    """
    logits = np.asarray(logits, dtype=np.float64)

    # Nothing to normalize (np.max has no identity for empty reductions)
    if logits.size == 0 or logits.shape[axis] == 0:
        return logits.copy()

    # Step 1: Subtract maximum for numerical stability
    max_logit = np.max(logits, axis=axis, keepdims=True)
    stable_logits = logits - max_logit

    # Step 2: Compute exponentials, exp(x - max) is always <= 1
    exponentials = np.exp(stable_logits)

    # Step 3: Normalize to get probabilities
    sum_of_exponentials = np.sum(exponentials, axis=axis, keepdims=True)
    probabilities = exponentials / sum_of_exponentials

    return probabilities


def normalize_rows(scores: np.ndarray, decimals: int = 3) -> np.ndarray:
    """
    Apply softmax independently to every row and round the probabilities.

    Rounding each entry means a row can sum to 1 +/- (row_length * 0.5 * 10^-decimals)
    rather than exactly 1.

    Args:
        scores: 1D row or 2D matrix of (scaled) attention scores
        decimals: Decimal places kept for each probability

    Returns:
        attention_weights: Same shape as scores
    """
    return round_half_away_from_zero(softmax(scores, axis=-1), decimals)
