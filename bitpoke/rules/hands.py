"""Hand classification and comparison.

Categories (weakest to strongest):
- High card, One pair, Two pair, Three of a kind, Straight, Flush,
  Full house, Four of a kind, Straight flush

Classification matches (raw_score, is_straight, is_flush) against a fixed
table. Hands of the same category are ordered by a tie-break key:
- High card / Straight / Flush / Straight flush: the rank occupancy bitmap
  (the wheel A-2-3-4-5 counts as 5-high)
- One pair: pair rank, then the remaining ranks as a bitmap
- Two pair: high pair, low pair, kicker
- Three of a kind: triple rank, then the remaining ranks as a bitmap
- Full house: triple rank, pair rank
- Four of a kind: quad rank, kicker
"""

from enum import IntEnum, auto
from typing import Dict, List, NamedTuple, Union

from .encoding import (
    EncodedHand,
    RAW_SCORE_SHAPES,
    encode_hand,
    iter_ranks_desc,
)

# Tie-break bitmap for the wheel: 2-3-4-5 with the Ace bit dropped
LOW_STRAIGHT_KEY = 0b1111


class Category(IntEnum):
    """Hand categories ordered by strength."""

    HIGH_CARD = auto()
    ONE_PAIR = auto()
    TWO_PAIR = auto()
    THREE_OF_A_KIND = auto()
    STRAIGHT = auto()
    FLUSH = auto()
    FULL_HOUSE = auto()
    FOUR_OF_A_KIND = auto()
    STRAIGHT_FLUSH = auto()


class TieBreakKey(NamedTuple):
    """Ordered key comparing hands of the same category.

    Unused trailing components are zero.
    """

    primary: int
    secondary: int = 0
    tertiary: int = 0


class HandValue(NamedTuple):
    """Category plus tie-break key; tuple ordering is hand strength."""

    category: Category
    key: TieBreakKey


class ClassificationError(RuntimeError):
    """Raised when an encoded hand matches no category.

    This means the encoder produced something that is not a valid
    five-card hand, which is a defect rather than bad input.
    """

    pass


# Category for raw scores that do not depend on straight/flush
SHAPE_CATEGORIES = {
    6: Category.ONE_PAIR,
    7: Category.TWO_PAIR,
    9: Category.THREE_OF_A_KIND,
    10: Category.FULL_HOUSE,
    16: Category.FOUR_OF_A_KIND,
}

# (is_straight, is_flush) -> category for five distinct ranks
DISTINCT_CATEGORIES = {
    (False, False): Category.HIGH_CARD,
    (True, False): Category.STRAIGHT,
    (False, True): Category.FLUSH,
    (True, True): Category.STRAIGHT_FLUSH,
}


def _ranks_with_count(encoded: EncodedHand, count: int) -> List[int]:
    """Ranks holding exactly `count` cards, highest first."""
    return [
        int(rank)
        for rank in iter_ranks_desc(encoded.rank_occupancy)
        if encoded.count_for_rank(rank) == count
    ]


def _rank_with_count(encoded: EncodedHand, count: int) -> int:
    """Highest rank holding exactly `count` cards."""
    ranks = _ranks_with_count(encoded, count)
    if ranks:
        return ranks[0]
    raise ClassificationError(
        f"No rank holds {count} cards (raw_score={encoded.raw_score})"
    )


def categorize(encoded: EncodedHand) -> Category:
    """Map an encoded hand to its category.

    Raises:
        ClassificationError: If the raw score is outside the valid set
    """
    raw_score = encoded.raw_score
    if raw_score not in RAW_SCORE_SHAPES:
        raise ClassificationError(f"Invalid raw score {raw_score}")

    if raw_score == 5:
        return DISTINCT_CATEGORIES[(encoded.is_straight, encoded.is_flush)]
    return SHAPE_CATEGORIES[raw_score]


def tie_break_key(encoded: EncodedHand, category: Category) -> TieBreakKey:
    """Build the tie-break key for a hand already known to be `category`."""
    if category in (
        Category.HIGH_CARD,
        Category.STRAIGHT,
        Category.FLUSH,
        Category.STRAIGHT_FLUSH,
    ):
        if encoded.is_low_straight and category in (
            Category.STRAIGHT,
            Category.STRAIGHT_FLUSH,
        ):
            return TieBreakKey(LOW_STRAIGHT_KEY)
        return TieBreakKey(encoded.rank_occupancy)

    if category == Category.ONE_PAIR:
        pair = _rank_with_count(encoded, 2)
        return TieBreakKey(pair, encoded.without_rank(pair))

    if category == Category.TWO_PAIR:
        pairs = _ranks_with_count(encoded, 2)
        if len(pairs) != 2:
            raise ClassificationError(f"Two pair hand holds {len(pairs)} pairs")
        high_pair, low_pair = pairs
        kicker = _rank_with_count(encoded, 1)
        return TieBreakKey(high_pair, low_pair, kicker)

    if category == Category.THREE_OF_A_KIND:
        triple = _rank_with_count(encoded, 3)
        return TieBreakKey(triple, encoded.without_rank(triple))

    if category == Category.FULL_HOUSE:
        return TieBreakKey(_rank_with_count(encoded, 3), _rank_with_count(encoded, 2))

    if category == Category.FOUR_OF_A_KIND:
        return TieBreakKey(_rank_with_count(encoded, 4), _rank_with_count(encoded, 1))

    raise ClassificationError(f"Unhandled category {category!r}")


def classify_encoded(encoded: EncodedHand) -> HandValue:
    """Classify an already encoded hand."""
    category = categorize(encoded)
    return HandValue(category, tie_break_key(encoded, category))


def classify(hand_text: str) -> HandValue:
    """Classify hand text like "4S 5H 2D 3C AH".

    Returns:
        (Category, TieBreakKey) as a HandValue

    Raises:
        HandParseError: If the text is not five distinct valid cards
        ClassificationError: If the encoding violates the raw score invariant
    """
    return classify_encoded(encode_hand(hand_text))


def compare_hands(hand1: Union[str, HandValue], hand2: Union[str, HandValue]) -> int:
    """Compare two hands.

    Args:
        hand1: First hand (text or HandValue)
        hand2: Second hand (text or HandValue)

    Returns:
        Positive if hand1 > hand2
        Negative if hand1 < hand2
        Zero if they tie
    """
    value1 = classify(hand1) if isinstance(hand1, str) else hand1
    value2 = classify(hand2) if isinstance(hand2, str) else hand2
    return (value1 > value2) - (value1 < value2)


def describe_categories() -> Dict[Category, str]:
    """Get a description of the requirement for each category."""
    return {
        Category.HIGH_CARD: "Five distinct ranks, no straight, no flush",
        Category.ONE_PAIR: "Two cards of one rank",
        Category.TWO_PAIR: "Two cards of one rank + two cards of another",
        Category.THREE_OF_A_KIND: "Three cards of one rank",
        Category.STRAIGHT: "Five consecutive ranks (A-2-3-4-5 counts, 5-high)",
        Category.FLUSH: "Five cards of one suit",
        Category.FULL_HOUSE: "Three cards of one rank + two of another",
        Category.FOUR_OF_A_KIND: "Four cards of one rank",
        Category.STRAIGHT_FLUSH: "Straight and flush at once",
    }
