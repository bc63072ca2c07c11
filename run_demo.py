#!/usr/bin/env python3
"""
Attention Explainer Demo Script

This script walks through how a single attention head works, one step at a time:
1. Words as vectors (embeddings)
2. Three questions for each word (Query, Key, Value)
3. Measuring compatibility (scores and scaled scores)
4. Attention spotlight (softmax)
5. Gathering information (weighted sum of Values)

Usage:
    python run_demo.py [mode] [--text TEXT] [--show-math] [--token INDEX]

    Modes:
        tour        - Walk through all five steps for one sentence
        examples    - Run the tour on every example sentence
        interactive - Type sentences and read the attention stories

Example:
    python run_demo.py tour --text "The cat sat on the mat" --show-math --token 1
"""

import argparse
import os
import sys
from typing import Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from attention_explainer.attention import AttentionResult, SingleHeadAttention
from attention_explainer.config import AttentionConfig
from attention_explainer.story import (
    attention_links,
    attention_percent,
    attention_story,
)
from attention_explainer.utils import format_matrix, save_result

EXAMPLE_SENTENCES = [
    "The cat sat on the mat",
    "She loves reading books",
    "Coffee tastes great in morning",
    "The dog chased the ball",
    "The red car drove fast",
]

STEPS = [
    (
        "Step 1: Words as Vectors",
        "Every word becomes a list of numbers, like an ID card with a few "
        "numbers on it.",
    ),
    (
        "Step 2: Three Questions for Each Word",
        "Query: what am I looking for? Key: what do I offer? "
        "Value: what do I contribute?",
    ),
    (
        "Step 3: Measuring Compatibility",
        "Compare what each word is looking for with what every other word "
        "offers. Higher scores mean better matches.",
    ),
    (
        "Step 4: Attention Spotlight",
        "Turn the scores into a spotlight: each word decides how much "
        "attention to pay to every other word.",
    ),
    (
        "Step 5: Gathering Information",
        "Each word collects information from the words it pays attention to, "
        "weighted by how relevant they are.",
    ),
]


def print_header(text: str):
    """Print a formatted header."""
    print()
    print("=" * 60)
    print(text)
    print("=" * 60)
    print()


def print_section(text: str):
    """Print a formatted section header."""
    print()
    print("-" * 40)
    print(text)
    print("-" * 40)


def print_matrix(title: str, matrix, row_labels=None, column_labels=None):
    print(f"{title}:")
    print(format_matrix(matrix, row_labels=row_labels, column_labels=column_labels))
    print()


def show_embeddings(result: AttentionResult, show_math: bool):
    print("Tokens: " + " | ".join(result.tokens))
    print()
    if show_math:
        print(
            "embedding[i] = [sin(i*0.5)*0.8+0.2, cos(i*0.3)*0.6+0.4, "
            "word_length*0.1, (char_code % 10)*0.1]"
        )
        print()
        print_matrix("Word Vectors", result.embeddings, result.tokens)


def show_projections(result: AttentionResult, show_math: bool):
    if not show_math:
        return
    print("Q = Embeddings x W_Q,  K = Embeddings x W_K,  V = Embeddings x W_V")
    print()
    print_matrix("Queries (Q)", result.queries, result.tokens)
    print_matrix("Keys (K)", result.keys, result.tokens)
    print_matrix("Values (V)", result.values, result.tokens)


def show_scores(result: AttentionResult, config: AttentionConfig, show_math: bool):
    if not show_math:
        return
    print(f"Scores = Q x K^T,  Scaled = Scores / sqrt({config.d_k})")
    print()
    print_matrix("Raw Compatibility Scores", result.scores, result.tokens, result.tokens)
    print_matrix("Scaled Scores", result.scaled_scores, result.tokens, result.tokens)


def show_attention(result: AttentionResult, selected: int, show_math: bool):
    if show_math:
        print("softmax(x_i) = e^x_i / sum_j(e^x_j), every row sums to 1")
        print()
        print_matrix(
            "Attention Weights", result.attention_weights, result.tokens, result.tokens
        )

    row = result.attention_row(selected)
    word = result.tokens[selected]
    print(f'"{word}" is paying attention to:')
    for index, token in enumerate(result.tokens):
        marker = "*" if index == selected else " "
        print(f"  {marker} {token:<12} {attention_percent(row[index]):>3}%")
    print()
    print(attention_story(row, result.tokens, selected))

    links = attention_links(row, result.tokens, selected)
    if links:
        flow = ", ".join(
            f"{link.token} ({attention_percent(link.weight)}%)" for link in links
        )
        print(f'Attention flows from "{word}" to: {flow}')


def show_output(result: AttentionResult, show_math: bool):
    if not show_math:
        return
    print("Output = Attention_Weights x V")
    print()
    print_matrix("Enhanced Word Representations", result.output, result.tokens)


def run_tour(
    engine: SingleHeadAttention,
    text: str,
    selected: int = 0,
    show_math: bool = False,
    save_path: Optional[str] = None,
):
    """Walk through all five steps for one sentence."""
    result = engine.run(text)

    print_header(f'How AI Pays Attention: "{text.strip()}"')

    if result.sequence_length == 0:
        print("Type some words to get started...")
        return result

    if not 0 <= selected < result.sequence_length:
        print(f"Token index {selected} out of range, showing token 0 instead.")
        selected = 0

    for step_number, (title, description) in enumerate(STEPS):
        print_section(title)
        print(description)
        print()

        if step_number == 0:
            show_embeddings(result, show_math)
        elif step_number == 1:
            show_projections(result, show_math)
        elif step_number == 2:
            show_scores(result, engine.config, show_math)
        elif step_number == 3:
            show_attention(result, selected, show_math)
        else:
            show_output(result, show_math)

    if save_path is not None:
        save_result(result, save_path)
        print()
        print(f"Result saved to {save_path}")

    return result


def run_interactive(engine: SingleHeadAttention):
    """Type sentences and read every token's attention story."""
    print_header("Interactive Attention Stories")
    print("Enter a sentence to see where each word's attention goes.")
    print("Type 'quit' to exit.")
    print()

    while True:
        try:
            text = input("Sentence: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if text.lower() in ["quit", "exit", "q"]:
            print("Goodbye!")
            break

        result = engine.run(text)
        if result.sequence_length == 0:
            continue

        for index in range(result.sequence_length):
            print("  " + attention_story(result.attention_row(index), result.tokens, index))
        print()


def main():
    parser = argparse.ArgumentParser(description="Attention Explainer Demo")
    parser.add_argument(
        "mode",
        nargs="?",
        default="tour",
        choices=["tour", "examples", "interactive"],
        help="Demo mode to run",
    )
    parser.add_argument(
        "--text", default=EXAMPLE_SENTENCES[0], help="Sentence to explain"
    )
    parser.add_argument(
        "--token", type=int, default=0, help="Index of the token to follow"
    )
    parser.add_argument(
        "--show-math", action="store_true", help="Print every intermediate matrix"
    )
    parser.add_argument("--config", help="JSON file with an AttentionConfig")
    parser.add_argument("--save", help="Save the result of the tour to a .npz file")
    args = parser.parse_args()

    config = AttentionConfig.load(args.config) if args.config else AttentionConfig()
    engine = SingleHeadAttention(config)

    if args.mode == "tour":
        run_tour(engine, args.text, args.token, args.show_math, args.save)
    elif args.mode == "examples":
        for sentence in EXAMPLE_SENTENCES:
            run_tour(engine, sentence, args.token, args.show_math)
    elif args.mode == "interactive":
        run_interactive(engine)

    print("\nDone!")


if __name__ == "__main__":
    main()
