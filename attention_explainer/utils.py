"""
Utility Functions for Inspecting Attention Results

This module provides helpers for the consumers of the engine:
- Formatting matrices as labelled text tables
- Saving and loading complete results

Functions:
    format_matrix: Render a matrix as an aligned text table
    save_result: Save every matrix of an AttentionResult to a .npz file
    load_result: Load an AttentionResult saved with save_result
"""

from typing import Optional, Sequence

import numpy as np

from attention_explainer.attention import AttentionResult
from attention_explainer.matrix import read_only

RESULT_FIELDS = (
    "embeddings",
    "queries",
    "keys",
    "values",
    "scores",
    "scaled_scores",
    "attention_weights",
    "output",
)


def format_matrix(
    matrix: np.ndarray,
    row_labels: Optional[Sequence[str]] = None,
    column_labels: Optional[Sequence[str]] = None,
    decimals: int = 2,
) -> str:
    """
    Render a matrix as a text table with fixed-precision numbers.

    Args:
        matrix: 2D array to render
        row_labels: Optional label per row (usually the tokens)
        column_labels: Optional header per column
        decimals: Digits shown after the decimal point

    Returns:
        table: Multi-line string. An empty matrix renders as "(empty)".

    Example:
        >>> print(format_matrix(np.array([[1.0, 0.5]]), row_labels=["cat"]))
        cat  1.00  0.50
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.size == 0:
        return "(empty)"

    cells = [[f"{value:.{decimals}f}" for value in row] for row in matrix]

    labels = list(row_labels) if row_labels is not None else [""] * len(cells)
    label_width = max(len(label) for label in labels)

    column_count = matrix.shape[1]
    headers = list(column_labels) if column_labels is not None else []
    column_widths = [
        max([len(row[j]) for row in cells] + ([len(headers[j])] if headers else []))
        for j in range(column_count)
    ]

    lines = []
    if headers:
        header = "  ".join(h.rjust(w) for h, w in zip(headers, column_widths))
        lines.append(" " * label_width + "  " + header)

    for label, row in zip(labels, cells):
        values = "  ".join(cell.rjust(w) for cell, w in zip(row, column_widths))
        lines.append(label.ljust(label_width) + "  " + values)

    return "\n".join(lines)


def save_result(result: AttentionResult, filepath: str) -> None:
    """
    Save an attention result.

    Saves the tokens and every intermediate matrix to a .npz file.

    Args:
        result: Result to save
        filepath: Path to save to (should end in .npz)
    """
    save_dict = {name: getattr(result, name) for name in RESULT_FIELDS}
    save_dict["tokens"] = np.array(result.tokens, dtype=str)

    np.savez(filepath, **save_dict)


def load_result(filepath: str) -> AttentionResult:
    """
    Load an attention result saved with save_result.

    Args:
        filepath: Path to the .npz file

    Returns:
        The restored AttentionResult, with read-only matrices
    """
    with np.load(filepath) as checkpoint:
        tokens = tuple(str(token) for token in checkpoint["tokens"])
        matrices = {name: read_only(checkpoint[name]) for name in RESULT_FIELDS}

    return AttentionResult(tokens=tokens, **matrices)
