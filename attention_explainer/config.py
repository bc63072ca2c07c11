"""
Configuration for the Single-Head Attention Engine

The walkthrough engine has no learned parameters. Its weight matrices are fixed
constants chosen so the numbers stay small and readable, and every dimension is
part of the configuration rather than a runtime input.

Constants:
    D_MODEL, D_K, D_V: Default embedding, query/key and value dimensions
    WQ, WK, WV: Default (read-only) projection weights, shape (d_model, d_k/d_v)

Classes:
    AttentionConfig: All settings that define one attention engine
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

from attention_explainer.matrix import read_only

D_MODEL = 4
D_K = 2
D_V = 2

# Weight matrices (simplified for visualization, never updated)
WQ = read_only([[0.5, -0.3], [0.2, 0.8], [-0.4, 0.6], [0.7, -0.1]])
WK = read_only([[0.3, 0.9], [-0.2, 0.4], [0.8, -0.5], [0.1, 0.7]])
WV = read_only([[0.6, 0.2], [0.4, -0.8], [-0.3, 0.5], [0.9, 0.1]])


@dataclass
class AttentionConfig:
    """
    Configuration for the attention engine.

    Substituting weights is how tests build special cases (for example a zero
    query projection, which makes every score equal) without touching the
    algorithm itself.

    Attributes:
        d_model: Embedding dimension (the embedder always produces 4 features)
        d_k: Query/key dimension, also the sqrt(d_k) scaling divisor
        d_v: Value dimension, the width of the final output
        query_weights: W_Q of shape (d_model, d_k)
        key_weights: W_K of shape (d_model, d_k)
        value_weights: W_V of shape (d_model, d_v)
        matrix_decimals: Rounding applied after every matrix product and scaling
        probability_decimals: Rounding applied to attention probabilities
    """

    d_model: int = D_MODEL
    d_k: int = D_K
    d_v: int = D_V
    query_weights: np.ndarray = field(default_factory=lambda: WQ)
    key_weights: np.ndarray = field(default_factory=lambda: WK)
    value_weights: np.ndarray = field(default_factory=lambda: WV)
    matrix_decimals: int = 2
    probability_decimals: int = 3

    def __post_init__(self):
        for name in ("d_model", "d_k", "d_v"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        self.query_weights = read_only(self.query_weights)
        self.key_weights = read_only(self.key_weights)
        self.value_weights = read_only(self.value_weights)

        expected_shapes = {
            "query_weights": (self.d_model, self.d_k),
            "key_weights": (self.d_model, self.d_k),
            "value_weights": (self.d_model, self.d_v),
        }
        for name, expected in expected_shapes.items():
            actual = getattr(self, name).shape
            if actual != expected:
                raise ValueError(
                    f"{name} must have shape {expected}, got {actual}"
                )

        if self.matrix_decimals < 0 or self.probability_decimals < 0:
            raise ValueError("Rounding decimals must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as JSON-compatible Python types."""
        return {
            "d_model": self.d_model,
            "d_k": self.d_k,
            "d_v": self.d_v,
            "query_weights": self.query_weights.tolist(),
            "key_weights": self.key_weights.tolist(),
            "value_weights": self.value_weights.tolist(),
            "matrix_decimals": self.matrix_decimals,
            "probability_decimals": self.probability_decimals,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttentionConfig":
        """Build a configuration from a dict produced by to_dict()."""
        return cls(**data)

    def save(self, path: str) -> None:
        """
        Save configuration to a JSON file.

        Args:
            path: File path to save to
        """
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "AttentionConfig":
        """
        Load configuration from a JSON file.

        Args:
            path: File path to load from

        Returns:
            Loaded (and validated) AttentionConfig
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)
