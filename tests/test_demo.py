"""
Tests for the console walkthrough.

The demo is a consumer of the engine; these tests check that it renders
every step and handles empty input.
"""

import os
import tempfile

from attention_explainer.attention import SingleHeadAttention
from run_demo import STEPS, run_tour


class TestRunTour:
    """Test the five-step tour."""

    def test_tour_prints_every_step(self, capsys):
        """All step titles and the attention story appear."""
        run_tour(SingleHeadAttention(), "The cat sat on the mat", selected=1, show_math=True)

        printed = capsys.readouterr().out
        for title, _ in STEPS:
            assert title in printed
        assert '"cat" is' in printed
        assert "Scaled Scores" in printed

    def test_tour_empty_text(self, capsys):
        """Empty text stops after the header with a hint."""
        result = run_tour(SingleHeadAttention(), "   ")

        printed = capsys.readouterr().out
        assert result.sequence_length == 0
        assert "Type some words to get started" in printed
        assert STEPS[0][0] not in printed

    def test_tour_out_of_range_token(self, capsys):
        """An invalid token index falls back to the first token."""
        run_tour(SingleHeadAttention(), "She loves reading books", selected=9)

        printed = capsys.readouterr().out
        assert '"She" is paying attention to:' in printed

    def test_tour_saves_result(self, capsys):
        """--save writes the result to disk."""
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "tour.npz")
            run_tour(SingleHeadAttention(), "Hello world", save_path=filepath)

            assert os.path.exists(filepath)


class TestExampleSentences:
    """Test the sentences offered by the examples mode."""

    def test_example_sentences(self):
        """The five walkthrough sentences, in order."""
        from run_demo import EXAMPLE_SENTENCES

        assert EXAMPLE_SENTENCES == [
            "The cat sat on the mat",
            "She loves reading books",
            "Coffee tastes great in morning",
            "The dog chased the ball",
            "The red car drove fast",
        ]

    def test_every_example_tours(self, capsys):
        """Each example sentence runs through the whole tour."""
        from run_demo import EXAMPLE_SENTENCES

        engine = SingleHeadAttention()
        for sentence in EXAMPLE_SENTENCES:
            result = run_tour(engine, sentence)

            assert result.sequence_length == len(sentence.split())
        assert STEPS[-1][0] in capsys.readouterr().out
