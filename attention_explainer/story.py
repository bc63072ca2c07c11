"""
Attention Stories

Turns one token's attention distribution into plain English, e.g.

    "cat" is most interested in "sat" (31% of its attention), followed by "mat" (22%).

Functions:
    attention_percent: Weight -> whole percentage, as displayed
    rank_attention: Top-k (token, weight) pairs of one attention row
    attention_story: One-sentence summary of an attention row
    attention_links: Tokens receiving a noticeable share of attention

Classes:
    RankedAttention: One ranked (token, weight, index) entry
"""

import math
from typing import List, NamedTuple, Optional, Sequence

from attention_explainer.matrix import round_half_away_from_zero

PLACEHOLDER_TEMPLATE = '"{word}" is still calculating its attention patterns...'
SELF_FOCUS_TEMPLATE = (
    '"{word}" is mostly focused on itself ({top_percent}%), '
    'but also pays some attention to "{second}" ({second_percent}%).'
)
OTHER_FOCUS_TEMPLATE = (
    '"{word}" is most interested in "{top}" ({top_percent}% of its attention), '
    'followed by "{second}" ({second_percent}%).'
)


class RankedAttention(NamedTuple):
    """How much attention a token receives, and where it sits in the sentence."""

    token: str
    weight: float
    index: int


def attention_percent(weight: float) -> int:
    """Convert an attention weight in [0, 1] to a whole percentage."""
    return int(round_half_away_from_zero(weight * 100, 0))


def _clean_weight(weight: Optional[float]) -> float:
    # Missing or NaN weights count as no attention at all
    if weight is None or math.isnan(weight):
        return 0.0
    return float(weight)


def rank_attention(
    attention_row: Sequence[float], tokens: Sequence[str], top_k: int = 3
) -> List[RankedAttention]:
    """
    Rank the tokens of a sentence by the attention they receive.

    Sorting is stable, so tied weights keep sentence order (the earlier token
    wins). Row positions with no matching token are dropped.

    Args:
        attention_row: One row of the attention matrix
        tokens: All tokens of the sentence
        top_k: Number of entries to keep

    Returns:
        ranked: Up to top_k entries, highest weight first
    """
    entries = [
        RankedAttention(tokens[index], _clean_weight(weight), index)
        for index, weight in enumerate(attention_row)
        if index < len(tokens)
    ]
    entries.sort(key=lambda entry: entry.weight, reverse=True)

    return entries[:top_k]


def attention_story(
    attention_row: Sequence[float], tokens: Sequence[str], self_index: int
) -> str:
    """
    Describe in one sentence where a token's attention goes.

    Two phrasings are used, depending on whether the token's biggest share of
    attention goes to itself or to another token. When the row cannot be
    ranked (empty row, no tokens, or fewer than two entries) a placeholder
    sentence is returned instead.

    Args:
        attention_row: The token's row of the attention matrix
        tokens: All tokens of the sentence
        self_index: Position of the token being described

    Returns:
        story: A single human-readable sentence

    Example:
        >>> attention_story([0.6, 0.4], ["Hello", "world"], 0)
        '"Hello" is mostly focused on itself (60%), but also pays some attention to "world" (40%).'
    """
    word = tokens[self_index] if 0 <= self_index < len(tokens) else ""
    placeholder = PLACEHOLDER_TEMPLATE.format(word=word)

    if len(attention_row) == 0 or len(tokens) == 0:
        return placeholder

    ranked = rank_attention(attention_row, tokens, top_k=3)
    if len(ranked) < 2:
        return placeholder

    top, second = ranked[0], ranked[1]

    if top.index == self_index:
        return SELF_FOCUS_TEMPLATE.format(
            word=word,
            top_percent=attention_percent(top.weight),
            second=second.token,
            second_percent=attention_percent(second.weight),
        )

    return OTHER_FOCUS_TEMPLATE.format(
        word=word,
        top=top.token,
        top_percent=attention_percent(top.weight),
        second=second.token,
        second_percent=attention_percent(second.weight),
    )


def attention_links(
    attention_row: Sequence[float],
    tokens: Sequence[str],
    self_index: int,
    threshold: float = 0.05,
) -> List[RankedAttention]:
    """
    Find the other tokens that receive more than `threshold` of the attention.

    These are the connections drawn when attention "flows" out of a token;
    the token's attention to itself is never a link.

    Args:
        attention_row: The token's row of the attention matrix
        tokens: All tokens of the sentence
        self_index: Position of the token the links start from
        threshold: Minimum weight (exclusive) for a link

    Returns:
        links: Linked tokens in sentence order
    """
    return [
        RankedAttention(tokens[index], _clean_weight(weight), index)
        for index, weight in enumerate(attention_row)
        if index < len(tokens)
        and index != self_index
        and _clean_weight(weight) > threshold
    ]
