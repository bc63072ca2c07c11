"""
Layers for the Attention Walkthrough

This module implements the two layers that feed attention: an embedding that
turns words into vectors and a linear projection with fixed weights.

Neither layer learns anything. The embedding is a hand-made formula that mixes
position and simple word features so that the numbers are deterministic and easy
to follow, and the projection weights come from the configuration.

Classes:
    FeatureEmbedding: Word + position -> 4-dimensional vector
    FixedLinear: y = x @ W with a constant weight matrix, rounded

Reference:
    - "Attention Is All You Need" (Vaswani et al., 2017) Section 3.2
"""

import math
from typing import Sequence

import numpy as np

from attention_explainer.matrix import matmul, read_only, round_half_away_from_zero


class FeatureEmbedding:
    """
    Deterministic Token Embedding.

    A real model looks embeddings up in a learned table. Here each token gets
    four hand-crafted features instead, so the same sentence always produces
    the same vectors:

        v0 = sin(i * 0.5) * 0.8 + 0.2        (position, smooth wave)
        v1 = cos(i * 0.3) * 0.6 + 0.4        (position, slower wave)
        v2 = len(token) * 0.1                (word length)
        v3 = (ord(token[0]) % 10) * 0.1      (first character)

    where i is the token's zero-based position. Each feature is rounded to two
    decimals, the precision shown in the walkthrough.

    Attributes:
        embedding_dimension: Always 4 (one column per feature above)
        decimals: Rounding applied to every feature
    """

    embedding_dimension = 4

    def __init__(self, decimals: int = 2):
        """
        Initialize the embedding.

        Args:
            decimals: Decimal places kept for each feature
        """
        self.decimals = decimals

    def embed_token(self, token: str, position: int) -> np.ndarray:
        """
        Compute the embedding of a single token.

        Args:
            token: Non-empty token string
            position: Zero-based position of the token in the sequence

        Returns:
            vector: Array of shape (4,)

        Raises:
            ValueError: If the token is empty (the tokenizer never produces one).
        """
        if not token:
            raise ValueError("Cannot embed an empty token")

        features = np.array(
            [
                math.sin(position * 0.5) * 0.8 + 0.2,
                math.cos(position * 0.3) * 0.6 + 0.4,
                len(token) * 0.1,
                (ord(token[0]) % 10) * 0.1,
            ]
        )

        return round_half_away_from_zero(features, self.decimals)

    def forward(self, tokens: Sequence[str]) -> np.ndarray:
        """
        Embed a whole token sequence.

        Args:
            tokens: Ordered token strings

        Returns:
            embeddings: Read-only array of shape (seq_len, 4). An empty sequence
                        gives shape (0, 4).
        """
        embeddings = np.zeros((len(tokens), self.embedding_dimension))

        for position, token in enumerate(tokens):
            embeddings[position] = self.embed_token(token, position)

        return read_only(embeddings)


class FixedLinear:
    """
    Linear Projection with Constant Weights.

    Computes y = x @ W and rounds the result. Used three times to turn the
    embeddings into Queries, Keys and Values:

        Q = Embeddings @ W_Q
        K = Embeddings @ W_K
        V = Embeddings @ W_V

    Unlike a trainable layer there is no bias, no gradient and no
    initialization: the weights are handed in and never change.

    Attributes:
        weights: Read-only weight matrix of shape (input_features, output_features)
        decimals: Rounding applied to every output element
    """

    def __init__(self, weights: np.ndarray, decimals: int = 2):
        """
        Initialize the projection.

        Args:
            weights: Matrix of shape (input_features, output_features)
            decimals: Decimal places kept in the output

        Raises:
            ValueError: If weights is not a 2D matrix.
        """
        weights = read_only(weights)
        if weights.ndim != 2:
            raise ValueError(f"Weights must be 2D, got shape {weights.shape}")

        self.weights = weights
        self.decimals = decimals

    @property
    def input_features(self) -> int:
        return self.weights.shape[0]

    @property
    def output_features(self) -> int:
        return self.weights.shape[1]

    def forward(self, input_matrix: np.ndarray) -> np.ndarray:
        """
        Forward pass: y = round(x @ W)

        Args:
            input_matrix: Array of shape (seq_len, input_features)

        Returns:
            output_matrix: Read-only array of shape (seq_len, output_features)
        """
        return read_only(matmul(input_matrix, self.weights, self.decimals))
