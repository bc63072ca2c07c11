"""
Tests for the engine configuration.

Tests cover:
- Default dimensions and weights
- Validation of weight shapes and dimensions
- Saving and loading as JSON
"""

import os
import tempfile

import numpy as np
import pytest

from attention_explainer.config import WK, WQ, WV, AttentionConfig


class TestAttentionConfig:
    """Test suite for AttentionConfig."""

    def test_defaults(self):
        """Defaults are d_model=4, d_k=2, d_v=2 with the standard weights."""
        config = AttentionConfig()

        assert (config.d_model, config.d_k, config.d_v) == (4, 2, 2)
        np.testing.assert_array_equal(config.query_weights, WQ)
        np.testing.assert_array_equal(config.key_weights, WK)
        np.testing.assert_array_equal(config.value_weights, WV)
        assert config.matrix_decimals == 2
        assert config.probability_decimals == 3

    def test_weight_values(self):
        """The default W_Q starts with [0.5, -0.3] and ends with [0.7, -0.1]."""
        np.testing.assert_array_equal(WQ[0], [0.5, -0.3])
        np.testing.assert_array_equal(WQ[-1], [0.7, -0.1])
        assert WQ.shape == WK.shape == WV.shape == (4, 2)

    def test_weights_are_read_only(self):
        """Weights cannot be changed in place."""
        config = AttentionConfig()

        with pytest.raises(ValueError):
            config.key_weights[0, 0] = 1.0
        with pytest.raises(ValueError):
            WV[0, 0] = 1.0

    def test_accepts_lists(self):
        """Nested lists are converted to arrays."""
        config = AttentionConfig(query_weights=[[0.0, 0.0]] * 4)

        assert isinstance(config.query_weights, np.ndarray)
        assert config.query_weights.shape == (4, 2)

    def test_mismatched_weight_shape(self):
        """A weight matrix of the wrong shape is rejected at construction."""
        with pytest.raises(ValueError):
            AttentionConfig(key_weights=np.ones((4, 3)))

    def test_value_dimension_must_match_weights(self):
        """d_v must agree with the value weights."""
        with pytest.raises(ValueError):
            AttentionConfig(d_v=3)

    @pytest.mark.parametrize("field_name", ["d_model", "d_k", "d_v"])
    def test_non_positive_dimension(self, field_name):
        """Zero dimensions are rejected (d_k = 0 would divide by zero)."""
        with pytest.raises(ValueError):
            AttentionConfig(**{field_name: 0})

    def test_negative_decimals(self):
        """Rounding to a negative number of decimals is not allowed."""
        with pytest.raises(ValueError):
            AttentionConfig(probability_decimals=-1)

    def test_save_and_load(self):
        """A saved configuration loads back with the same values."""
        config = AttentionConfig(query_weights=np.zeros((4, 2)))

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "attention_config.json")
            config.save(path)
            loaded = AttentionConfig.load(path)

        assert loaded.d_k == config.d_k
        np.testing.assert_array_equal(loaded.query_weights, np.zeros((4, 2)))
        np.testing.assert_array_equal(loaded.value_weights, WV)

    def test_load_invalid_file(self):
        """Loading a config with bad weights raises ValueError."""
        data = AttentionConfig().to_dict()
        data["value_weights"] = [[1.0, 2.0]]

        with pytest.raises(ValueError):
            AttentionConfig.from_dict(data)
