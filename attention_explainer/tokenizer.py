"""
Whitespace Tokenizer

The walkthrough works on whole words: whatever the user types is trimmed and
split on whitespace, and every remaining fragment becomes one token. Repeated
words ("the ... the") stay separate tokens because their positions differ.

Functions:
    tokenize: Split raw text into a list of token strings
    tokenize_with_positions: Same, but paired with zero-based positions

Classes:
    Token: Immutable (text, position) pair
"""

from typing import List, NamedTuple


class Token(NamedTuple):
    """A word together with its zero-based position in the sentence."""

    text: str
    position: int


def tokenize(text: str) -> List[str]:
    """
    Split text into non-empty, whitespace-separated tokens.

    Empty or whitespace-only text gives an empty list. This is a valid state,
    not an error: every later stage turns an empty token list into empty
    matrices.

    Args:
        text: Raw input text

    Returns:
        tokens: Ordered list of non-empty token strings

    Example:
        >>> tokenize("  The cat   sat ")
        ['The', 'cat', 'sat']
    """
    return [fragment for fragment in text.strip().split() if fragment]


def tokenize_with_positions(text: str) -> List[Token]:
    """Tokenize text and attach each token's position."""
    return [Token(word, position) for position, word in enumerate(tokenize(text))]
