"""
Single-Head Scaled Dot-Product Attention

This module implements the attention mechanism the walkthrough explains, one
stage at a time, keeping every intermediate matrix so it can be shown.

Each word asks a question (its Query), advertises what it offers (its Key) and
carries information to share (its Value). Comparing every Query with every Key
tells each word how much attention to pay to every other word, and the output
is the attention-weighted mix of Values.

Reference: "Attention Is All You Need" (Vaswani et al., 2017) Section 3.2
           https://arxiv.org/abs/1706.03762

Functions:
    compute_attention_scores: Raw and scaled Q @ K^T compatibility scores
    aggregate_values: Attention-weighted sum of Values
    scaled_dot_product_attention: Scores -> softmax -> weighted Values
    explain_attention: Run the whole pipeline on a piece of text

Classes:
    AttentionResult: Immutable record of every stage of one pass
    SingleHeadAttention: The engine, built from an AttentionConfig
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from attention_explainer.activations import normalize_rows
from attention_explainer.config import AttentionConfig
from attention_explainer.layers import FeatureEmbedding, FixedLinear
from attention_explainer.matrix import matmul, read_only, round_half_away_from_zero
from attention_explainer.tokenizer import tokenize


def compute_attention_scores(
    query: np.ndarray, key: np.ndarray, decimals: int = 2
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute raw and scaled compatibility scores between all query/key pairs.

    Step-by-step:
        1. Scores = round(Q @ K^T)          (how well each query matches each key)
        2. Scaled = round(Scores / sqrt(d_k))

    Why scaling by sqrt(d_k)?
        Dot products grow with the dimension of the vectors. Dividing by
        sqrt(d_k) keeps their spread comparable, so softmax does not collapse
        onto a single word.

    The scaled scores are computed from the *rounded* raw scores, exactly as
    they are displayed.

    Args:
        query: Query matrix of shape (seq_len, d_k)
        key: Key matrix of shape (seq_len, d_k)
        decimals: Decimal places kept at both steps

    Returns:
        scores: Raw scores of shape (seq_len, seq_len)
        scaled_scores: Scaled scores of shape (seq_len, seq_len)
    """
    d_k = query.shape[-1]
    if d_k <= 0:
        raise ValueError(f"Key dimension must be positive, got {d_k}")

    # Shape: (seq_len, d_k) @ (d_k, seq_len) -> (seq_len, seq_len)
    scores = matmul(query, np.transpose(key), decimals)

    scaling_factor = math.sqrt(d_k)
    scaled_scores = round_half_away_from_zero(scores / scaling_factor, decimals)

    return scores, scaled_scores


def aggregate_values(
    attention_weights: np.ndarray, value: np.ndarray, decimals: int = 2
) -> np.ndarray:
    """
    Compute Output = round(AttentionWeights @ V).

    Each output row is a blend of every token's Value vector, weighted by how
    much attention the token pays to each of them.

    Args:
        attention_weights: Matrix of shape (seq_len, seq_len)
        value: Value matrix of shape (seq_len, d_v)
        decimals: Decimal places kept in the output

    Returns:
        output: Matrix of shape (seq_len, d_v)
    """
    return matmul(attention_weights, value, decimals)


def scaled_dot_product_attention(
    query: np.ndarray,
    key: np.ndarray,
    value: np.ndarray,
    decimals: int = 2,
    probability_decimals: int = 3,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute Scaled Dot-Product Attention for a single sequence.

    Mathematical Formula (from the paper):
        Attention(Q, K, V) = softmax(Q @ K^T / sqrt(d_k)) @ V

    Args:
        query: Query matrix of shape (seq_len, d_k)
        key: Key matrix of shape (seq_len, d_k)
        value: Value matrix of shape (seq_len, d_v)
        decimals: Rounding for scores, scaled scores and output
        probability_decimals: Rounding for the attention weights

    Returns:
        output: Attention output of shape (seq_len, d_v)
        attention_weights: Attention weights of shape (seq_len, seq_len)

    Example:
        >>> Q = np.array([[1.0, 0.0], [0.0, 1.0]])
        >>> output, weights = scaled_dot_product_attention(Q, Q, Q)
    """
    _, scaled_scores = compute_attention_scores(query, key, decimals)
    attention_weights = normalize_rows(scaled_scores, probability_decimals)
    output = aggregate_values(attention_weights, value, decimals)

    return output, attention_weights


@dataclass(frozen=True, eq=False)
class AttentionResult:
    """
    Every intermediate result of one attention pass.

    All matrices are read-only NumPy arrays with one row per token. For an empty
    sentence every matrix is empty: (0, d) for the per-token matrices and
    (0, 0) for the score and attention matrices.

    Attributes:
        tokens: The tokens, in order
        embeddings: (seq_len, d_model) word vectors
        queries: (seq_len, d_k) "what am I looking for?"
        keys: (seq_len, d_k) "what do I offer?"
        values: (seq_len, d_v) "what do I contribute?"
        scores: (seq_len, seq_len) raw Q @ K^T
        scaled_scores: (seq_len, seq_len) scores / sqrt(d_k)
        attention_weights: (seq_len, seq_len) row-wise softmax
        output: (seq_len, d_v) attention-weighted Values
    """

    tokens: Tuple[str, ...]
    embeddings: np.ndarray
    queries: np.ndarray
    keys: np.ndarray
    values: np.ndarray
    scores: np.ndarray
    scaled_scores: np.ndarray
    attention_weights: np.ndarray
    output: np.ndarray

    @property
    def sequence_length(self) -> int:
        return len(self.tokens)

    def attention_row(self, index: int) -> np.ndarray:
        """Return the attention distribution of the token at index."""
        return self.attention_weights[index]

    def to_dict(self) -> Dict[str, Any]:
        """Return the result as plain lists, ready for json.dump."""
        return {
            "tokens": list(self.tokens),
            "embeddings": self.embeddings.tolist(),
            "queries": self.queries.tolist(),
            "keys": self.keys.tolist(),
            "values": self.values.tolist(),
            "scores": self.scores.tolist(),
            "scaled_scores": self.scaled_scores.tolist(),
            "attention_weights": self.attention_weights.tolist(),
            "output": self.output.tolist(),
        }


class SingleHeadAttention:
    """
    Single-Head Self-Attention Engine.

    Runs the whole walkthrough pipeline:

        text -> tokens -> embeddings -> Q, K, V -> scores -> scaled scores
             -> attention weights -> output

    The engine holds no state besides its configuration, so one instance can be
    shared freely and every call recomputes everything from scratch.

    Architecture:
        embedding: FeatureEmbedding
        query_projection, key_projection, value_projection: FixedLinear

    Example:
        >>> engine = SingleHeadAttention()
        >>> result = engine.run("The cat sat on the mat")
        >>> result.attention_weights.shape
        (6, 6)
    """

    def __init__(self, config: Optional[AttentionConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Engine configuration. Defaults to the standard walkthrough
                    dimensions and weights.

        Raises:
            ValueError: If d_model does not match the embedding width.
        """
        self.config = config if config is not None else AttentionConfig()

        if self.config.d_model != FeatureEmbedding.embedding_dimension:
            raise ValueError(
                f"d_model ({self.config.d_model}) must match the embedding "
                f"width ({FeatureEmbedding.embedding_dimension})"
            )

        decimals = self.config.matrix_decimals
        self.embedding = FeatureEmbedding(decimals=decimals)
        self.query_projection = FixedLinear(self.config.query_weights, decimals)
        self.key_projection = FixedLinear(self.config.key_weights, decimals)
        self.value_projection = FixedLinear(self.config.value_weights, decimals)

    def attend(
        self, embeddings: np.ndarray, tokens: Sequence[str] = ()
    ) -> AttentionResult:
        """
        Run projection, scoring, softmax and aggregation on given embeddings.

        This is the part of the pipeline after the embedding stage. Calling it
        directly lets callers study hand-made embeddings, such as two identical
        rows.

        Args:
            embeddings: Matrix of shape (seq_len, d_model)
            tokens: Optional token strings to attach to the result

        Returns:
            AttentionResult for the given embeddings

        Raises:
            ValueError: If the embedding width does not match d_model.
        """
        embeddings = np.asarray(embeddings, dtype=np.float64)
        if embeddings.ndim == 1 and embeddings.size == 0:
            embeddings = embeddings.reshape(0, self.config.d_model)

        decimals = self.config.matrix_decimals

        # Step 1: Project into Query, Key and Value spaces
        queries = self.query_projection.forward(embeddings)
        keys = self.key_projection.forward(embeddings)
        values = self.value_projection.forward(embeddings)

        # Step 2: Compatibility scores, scaled by sqrt(d_k)
        scores, scaled_scores = compute_attention_scores(queries, keys, decimals)

        # Step 3: Each row becomes a probability distribution
        attention_weights = normalize_rows(
            scaled_scores, self.config.probability_decimals
        )

        # Step 4: Gather information from the Values
        output = aggregate_values(attention_weights, values, decimals)

        return AttentionResult(
            tokens=tuple(tokens),
            embeddings=read_only(embeddings),
            queries=queries,
            keys=keys,
            values=values,
            scores=read_only(scores),
            scaled_scores=read_only(scaled_scores),
            attention_weights=read_only(attention_weights),
            output=read_only(output),
        )

    def run(self, text: str) -> AttentionResult:
        """
        Run the full pipeline on raw text.

        Args:
            text: Raw input text. Empty or whitespace-only text is valid and
                  produces empty matrices.

        Returns:
            AttentionResult with every intermediate matrix
        """
        tokens = tokenize(text)
        embeddings = self.embedding.forward(tokens)

        return self.attend(embeddings, tokens)


def explain_attention(
    text: str, config: Optional[AttentionConfig] = None
) -> AttentionResult:
    """Run the attention pipeline on text with a fresh engine."""
    return SingleHeadAttention(config).run(text)


# =============================================================================
# EDUCATIONAL DEMO
# Run with: python -m attention_explainer.attention
# =============================================================================
if __name__ == "__main__":
    print("=" * 70)
    print("SINGLE-HEAD ATTENTION DEMO")
    print("=" * 70)
    print()

    demo_result = explain_attention("The cat sat on the mat")

    print(f"Tokens: {list(demo_result.tokens)}")
    print()
    print("Attention weights (each row sums to ~1):")
    for token, row in zip(demo_result.tokens, demo_result.attention_weights):
        print(f"  {token:<5} {row}")
    print()
    print("Output (attention-weighted Values):")
    for token, row in zip(demo_result.tokens, demo_result.output):
        print(f"  {token:<5} {row}")
    print()
    print("Next step: Run 'python run_demo.py --show-math' for the full walkthrough.")
