"""
Single-Head Attention, Step by Step

This package implements one scaled dot-product attention head with fixed
weights and deterministic embeddings, keeping (and rounding) every intermediate
matrix so each step of the computation can be shown to a human. It uses only
NumPy.

Modules:
    tokenizer: Whitespace tokenizer
    layers: Deterministic feature embedding and fixed linear projection
    matrix: Rounding and rounded matrix multiplication
    activations: Softmax and row-wise rounded normalization
    attention: Scores, aggregation and the SingleHeadAttention engine
    story: Plain-English summaries of attention rows
    config: AttentionConfig and the default weight matrices
    utils: Text tables and saving/loading results

Reference:
    "Attention Is All You Need" (Vaswani et al., 2017)
    https://arxiv.org/abs/1706.03762
"""

from attention_explainer.attention import (
    AttentionResult,
    SingleHeadAttention,
    explain_attention,
)
from attention_explainer.config import AttentionConfig
from attention_explainer.story import attention_story

__version__ = "1.0.0"
__author__ = "Educational LLM Project"

__all__ = [
    "AttentionConfig",
    "AttentionResult",
    "SingleHeadAttention",
    "attention_story",
    "explain_attention",
]
