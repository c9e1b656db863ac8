"""Card rank definitions and utilities.

Rank order (high to low): A > K > Q > J > T > 9 > 8 > 7 > 6 > 5 > 4 > 3 > 2

This module provides:
- Rank and suit constants (values double as bit positions)
- Card representation and text parsing
- Deck helpers for dealing test hands
"""

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional


class Rank(IntEnum):
    """Card ranks ordered by strength (higher value = stronger rank).

    The value is also the bit position of the rank in a rank occupancy bitmap.
    """

    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12  # Highest rank


class Suit(IntEnum):
    """Card suits. The value is the bit position in a suit occupancy bitmap."""

    SPADE = 0
    HEART = 1
    DIAMOND = 2
    CLUB = 3


NUM_RANKS = len(Rank)
NUM_SUITS = len(Suit)
HAND_SIZE = 5

# Canonical rank symbols
RANK_SYMBOLS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

SUIT_SYMBOLS = {
    Suit.SPADE: "S",
    Suit.HEART: "H",
    Suit.DIAMOND: "D",
    Suit.CLUB: "C",
}

# Symbol to rank mapping (for parsing); "10" is an alternate spelling of "T"
SYMBOL_TO_RANK = {v: k for k, v in RANK_SYMBOLS.items()}
SYMBOL_TO_RANK["10"] = Rank.TEN

SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


@dataclass(frozen=True, order=True)
class Card:
    """A playing card with rank and suit.

    Cards are ordered by rank first, then by suit.
    Immutable and hashable for use in sets.
    """

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{RANK_SYMBOLS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    def __repr__(self) -> str:
        return f"Card({RANK_SYMBOLS[self.rank]}{SUIT_SYMBOLS[self.suit]})"

    @property
    def index(self) -> int:
        """Deck index 0-51 (suit * 13 + rank)."""
        return self.suit.value * NUM_RANKS + self.rank.value

    @classmethod
    def from_index(cls, idx: int) -> "Card":
        """Inverse of `Card.index`."""
        return cls(rank=Rank(idx % NUM_RANKS), suit=Suit(idx // NUM_RANKS))

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse a card from string like 'TS', 'AH' or '10D'.

        Args:
            s: Card string in format "RANK+SUIT"

        Returns:
            Card object

        Raises:
            ValueError: If string cannot be parsed
        """
        if len(s) < 2:
            raise ValueError(f"Invalid card: {s!r}")

        suit_char = s[-1]
        rank_str = s[:-1]

        if suit_char not in SYMBOL_TO_SUIT:
            raise ValueError(f"Invalid suit character: {suit_char!r}")
        if rank_str not in SYMBOL_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_str!r}")

        return cls(rank=SYMBOL_TO_RANK[rank_str], suit=SYMBOL_TO_SUIT[suit_char])


def create_standard_deck() -> List[Card]:
    """Create a standard 52-card deck.

    Returns:
        List of 52 Card objects (13 ranks × 4 suits), ordered by deck index
    """
    return [Card(rank=rank, suit=suit) for suit in Suit for rank in Rank]


def sort_cards(cards: List[Card]) -> List[Card]:
    """Sort cards by rank (ascending), then by suit."""
    return sorted(cards)


def format_cards(cards: List[Card]) -> str:
    """Join cards into the canonical hand text, e.g. "2S 3H 4D 5C 6H"."""
    return " ".join(str(c) for c in cards)


def deal_hands(num_hands: int, rng: Optional[random.Random] = None) -> List[str]:
    """Deal hands of five cards as canonical hand text.

    Each hand is drawn from its own fresh deck, so different hands may share
    cards (they are compared independently).

    Args:
        num_hands: Number of hands to deal
        rng: Random source; the module-level generator is used if omitted

    Returns:
        List of hand strings
    """
    sampler = rng if rng is not None else random
    deck = create_standard_deck()
    return [format_cards(sampler.sample(deck, HAND_SIZE)) for _ in range(num_hands)]
