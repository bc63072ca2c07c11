"""
Tests for the embedding and projection layers.

Tests cover:
- FeatureEmbedding: exact formula, rounding, output shape
- FixedLinear: projection with the default weight matrices

Expected values were worked out by hand from the embedding formula
and the default W_Q, W_K, W_V.
"""

import numpy as np
import pytest

SENTENCE = ["The", "cat", "sat", "on", "the", "mat"]

# sin/cos position features plus length and first-character features
EXPECTED_EMBEDDINGS = np.array(
    [
        [0.20, 1.00, 0.30, 0.40],
        [0.58, 0.97, 0.30, 0.90],
        [0.87, 0.90, 0.30, 0.50],
        [1.00, 0.77, 0.20, 0.10],
        [0.93, 0.62, 0.30, 0.60],
        [0.68, 0.44, 0.30, 0.90],
    ]
)


class TestFeatureEmbedding:
    """
    Test suite for the deterministic embedding.

    Formula for token at position i:
        [sin(i*0.5)*0.8+0.2, cos(i*0.3)*0.6+0.4, len*0.1, (ord(first) % 10)*0.1]
    rounded to two decimals.
    """

    def test_embedding_golden_values(self):
        """The example sentence should embed to the hand-computed vectors."""
        from attention_explainer.layers import FeatureEmbedding

        embeddings = FeatureEmbedding().forward(SENTENCE)

        np.testing.assert_allclose(embeddings, EXPECTED_EMBEDDINGS, atol=1e-12)

    def test_first_token(self):
        """'The' at position 0: 'T' is 84, 84 % 10 = 4."""
        from attention_explainer.layers import FeatureEmbedding

        vector = FeatureEmbedding().embed_token("The", 0)

        np.testing.assert_allclose(vector, [0.2, 1.0, 0.3, 0.4], atol=1e-12)

    def test_embedding_dimension_is_always_four(self):
        """Any token, short or long, ASCII or not, gives 4 features."""
        from attention_explainer.layers import FeatureEmbedding

        embedding = FeatureEmbedding()
        for position, token in enumerate(["a", "extraordinarily", "naïve", "日本", "42!"]):
            assert embedding.embed_token(token, position).shape == (4,)

    def test_output_shape(self):
        """forward() should give one row per token."""
        from attention_explainer.layers import FeatureEmbedding

        embeddings = FeatureEmbedding().forward(SENTENCE)

        assert embeddings.shape == (len(SENTENCE), 4)

    def test_empty_sequence(self):
        """No tokens should give an empty (0, 4) matrix."""
        from attention_explainer.layers import FeatureEmbedding

        embeddings = FeatureEmbedding().forward([])

        assert embeddings.shape == (0, 4)

    def test_same_word_differs_by_position(self):
        """Repeated words are embedded independently per position."""
        from attention_explainer.layers import FeatureEmbedding

        embeddings = FeatureEmbedding().forward(["the", "the"])

        assert not np.array_equal(embeddings[0], embeddings[1])
        # Word features match, position features differ
        np.testing.assert_array_equal(embeddings[0, 2:], embeddings[1, 2:])

    def test_embeddings_are_read_only(self):
        """Embeddings handed out must not be modifiable."""
        from attention_explainer.layers import FeatureEmbedding

        embeddings = FeatureEmbedding().forward(SENTENCE)

        with pytest.raises(ValueError):
            embeddings[0, 0] = 1.0

    def test_empty_token_rejected(self):
        """An empty token cannot be embedded."""
        from attention_explainer.layers import FeatureEmbedding

        with pytest.raises(ValueError):
            FeatureEmbedding().embed_token("", 0)


class TestFixedLinear:
    """Test suite for the constant-weight projection."""

    def test_query_projection(self):
        """Q for the example sentence, including the half-way sums."""
        from attention_explainer.config import WQ
        from attention_explainer.layers import FixedLinear

        queries = FixedLinear(WQ).forward(EXPECTED_EMBEDDINGS)

        expected = np.array(
            [
                [0.46, 0.88],
                [0.99, 0.69],
                [0.85, 0.59],
                [0.64, 0.43],
                [0.89, 0.34],
                [0.94, 0.24],
            ]
        )
        np.testing.assert_allclose(queries, expected, atol=1e-12)

    def test_key_projection(self):
        """K for the example sentence, including the half-way sums."""
        from attention_explainer.config import WK
        from attention_explainer.layers import FixedLinear

        keys = FixedLinear(WK).forward(EXPECTED_EMBEDDINGS)

        expected = np.array(
            [
                [0.14, 0.71],
                [0.31, 1.39],
                [0.37, 1.34],
                [0.32, 1.18],
                [0.46, 1.36],
                [0.45, 1.27],
            ]
        )
        np.testing.assert_allclose(keys, expected, atol=1e-12)

    def test_value_projection(self):
        """V for the example sentence."""
        from attention_explainer.config import WV
        from attention_explainer.layers import FixedLinear

        values = FixedLinear(WV).forward(EXPECTED_EMBEDDINGS)

        expected = np.array(
            [
                [0.79, -0.57],
                [1.46, -0.42],
                [1.24, -0.35],
                [0.94, -0.31],
                [1.26, -0.10],
                [1.30, 0.02],
            ]
        )
        np.testing.assert_allclose(values, expected, atol=1e-12)

    def test_projection_of_empty_input(self):
        """Empty embeddings project to an empty (0, 2) matrix."""
        from attention_explainer.config import WQ
        from attention_explainer.layers import FixedLinear

        assert FixedLinear(WQ).forward(np.zeros((0, 4))).shape == (0, 2)

    def test_projection_dimension_mismatch(self):
        """Embeddings of the wrong width should fail fast."""
        from attention_explainer.config import WQ
        from attention_explainer.layers import FixedLinear

        with pytest.raises(ValueError):
            FixedLinear(WQ).forward(np.ones((2, 3)))

    def test_weights_must_be_2d(self):
        """A 1D weight vector is not a valid projection."""
        from attention_explainer.layers import FixedLinear

        with pytest.raises(ValueError):
            FixedLinear(np.ones(4))

    def test_weights_are_not_mutated(self):
        """Projecting must leave the shared weight constants untouched."""
        from attention_explainer.config import WQ
        from attention_explainer.layers import FixedLinear

        before = WQ.copy()
        FixedLinear(WQ).forward(EXPECTED_EMBEDDINGS)

        np.testing.assert_array_equal(WQ, before)
        assert not WQ.flags.writeable
