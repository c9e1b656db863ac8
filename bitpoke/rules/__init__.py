"""Poker rules implementations.

This module provides:
- Card and rank definitions (ranks.py)
- Hand text parsing and bitfield encoding (encoding.py)
- Category classification and comparison (hands.py)
"""

from .ranks import (
    Rank,
    Suit,
    Card,
    RANK_SYMBOLS,
    SUIT_SYMBOLS,
    HAND_SIZE,
    create_standard_deck,
    sort_cards,
    format_cards,
    deal_hands,
)

from .encoding import (
    EncodedHand,
    HandParseError,
    WHEEL_MASK,
    highest_rank,
    lowest_rank,
    iter_ranks_desc,
    parse_cards,
    encode_cards,
    encode_hand,
)

from .hands import (
    Category,
    TieBreakKey,
    HandValue,
    ClassificationError,
    LOW_STRAIGHT_KEY,
    categorize,
    tie_break_key,
    classify_encoded,
    classify,
    compare_hands,
    describe_categories,
)

__all__ = [
    # Ranks
    "Rank",
    "Suit",
    "Card",
    "RANK_SYMBOLS",
    "SUIT_SYMBOLS",
    "HAND_SIZE",
    "create_standard_deck",
    "sort_cards",
    "format_cards",
    "deal_hands",
    # Encoding
    "EncodedHand",
    "HandParseError",
    "WHEEL_MASK",
    "highest_rank",
    "lowest_rank",
    "iter_ranks_desc",
    "parse_cards",
    "encode_cards",
    "encode_hand",
    # Hands
    "Category",
    "TieBreakKey",
    "HandValue",
    "ClassificationError",
    "LOW_STRAIGHT_KEY",
    "categorize",
    "tie_break_key",
    "classify_encoded",
    "classify",
    "compare_hands",
    "describe_categories",
]
