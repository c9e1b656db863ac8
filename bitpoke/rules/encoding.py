"""Hand encoding: text to compact bitfields.

An encoded hand carries everything the classifier needs:
- rank_occupancy: 13 bits, one per rank present
- suit_occupancy: 4 bits, one per suit present
- tally: a 4-bit counter slot per rank holding how many cards share it
- raw_score: sum of (2**count - 1) over ranks, which identifies the
  partition of the five cards across ranks (5, 6, 7, 9, 10 or 16)
- card_bits: one bit per distinct card, used to reject duplicates

All of it is produced in a single fold over the five cards.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Sequence

from .ranks import Card, Rank, HAND_SIZE

logger = logging.getLogger(__name__)

TALLY_SLOT_BITS = 4
TALLY_SLOT_MASK = (1 << TALLY_SLOT_BITS) - 1

# Five contiguous rank bits, once shifted down to the lowest set bit
RUN5_MASK = 0b11111

# A-2-3-4-5: the Ace sits on the highest bit but plays low here
WHEEL_MASK = (1 << Rank.ACE) | 0b1111

# raw_score -> partition of the five cards across ranks
RAW_SCORE_SHAPES = {
    5: (1, 1, 1, 1, 1),
    6: (2, 1, 1, 1),
    7: (2, 2, 1),
    9: (3, 1, 1),
    10: (3, 2),
    16: (4, 1),
}


class HandParseError(ValueError):
    """Raised when hand text cannot be turned into five distinct cards."""

    pass


def highest_rank(mask: int) -> Rank:
    """Highest rank set in a rank bitmap (leading-zero scan)."""
    if mask <= 0:
        raise ValueError("empty rank mask")
    return Rank(mask.bit_length() - 1)


def lowest_rank(mask: int) -> Rank:
    """Lowest rank set in a rank bitmap (trailing-zero scan)."""
    if mask <= 0:
        raise ValueError("empty rank mask")
    return Rank((mask & -mask).bit_length() - 1)


def iter_ranks_desc(mask: int) -> Iterator[Rank]:
    """Yield the ranks set in `mask` from highest to lowest."""
    while mask:
        rank = highest_rank(mask)
        yield rank
        mask &= ~(1 << rank)


@dataclass(frozen=True)
class EncodedHand:
    """Bitfield encoding of a five-card hand.

    Attributes:
        rank_occupancy: Bit r set if at least one card has rank r
        suit_occupancy: Bit s set if at least one card has suit s
        tally: Per-rank card counts, TALLY_SLOT_BITS bits per rank
        raw_score: Sum of (2**count - 1) over all ranks
        card_bits: Bit (4 * rank + suit) set for every card in the hand
    """

    rank_occupancy: int
    suit_occupancy: int
    tally: int
    raw_score: int
    card_bits: int = 0

    def count_for_rank(self, rank: int) -> int:
        """Number of cards of the given rank."""
        return (self.tally >> (rank * TALLY_SLOT_BITS)) & TALLY_SLOT_MASK

    def without_rank(self, rank: int) -> int:
        """Rank occupancy with the given rank cleared."""
        return self.rank_occupancy & ~(1 << rank)

    @property
    def is_flush(self) -> bool:
        return bin(self.suit_occupancy).count("1") == 1

    @property
    def is_low_straight(self) -> bool:
        return self.rank_occupancy == WHEEL_MASK

    @property
    def is_high_straight(self) -> bool:
        occupancy = self.rank_occupancy
        if not occupancy:
            return False
        return occupancy // (occupancy & -occupancy) == RUN5_MASK

    @property
    def is_straight(self) -> bool:
        return self.is_high_straight or self.is_low_straight


def _tokenize(hand_text: str) -> List[str]:
    tokens = hand_text.split()
    # Whitespace-free input is read as fixed two-character slots
    if len(tokens) == 1 and len(tokens[0]) == 2 * HAND_SIZE:
        word = tokens[0]
        tokens = [word[i : i + 2] for i in range(0, len(word), 2)]
    return tokens


def parse_cards(hand_text: str) -> List[Card]:
    """Parse hand text like "4S 5H 2D 3C AH" into cards.

    Args:
        hand_text: Five space-separated card tokens (or ten characters of
            fixed two-character slots)

    Returns:
        List of five Card objects in input order

    Raises:
        HandParseError: On a wrong token count or an unknown rank/suit symbol
    """
    if not isinstance(hand_text, str):
        raise HandParseError(f"Hand must be a string, got {type(hand_text).__name__}")

    tokens = _tokenize(hand_text)
    if len(tokens) != HAND_SIZE:
        raise HandParseError(
            f"Expected {HAND_SIZE} cards, got {len(tokens)} in {hand_text!r}"
        )

    cards = []
    for token in tokens:
        try:
            cards.append(Card.from_string(token))
        except ValueError as e:
            raise HandParseError(f"{e} in {hand_text!r}") from e
    return cards


def encode_cards(cards: Sequence[Card]) -> EncodedHand:
    """Fold five cards into an EncodedHand.

    The raw score is accumulated incrementally: when a rank's count grows to
    c, the rank's contribution 2**c - 1 grows by 2**(c - 1).

    Raises:
        HandParseError: If there are not exactly five cards or a card repeats
    """
    if len(cards) != HAND_SIZE:
        raise HandParseError(f"Expected {HAND_SIZE} cards, got {len(cards)}")

    rank_occupancy = 0
    suit_occupancy = 0
    tally = 0
    raw_score = 0
    card_bits = 0

    for card in cards:
        card_bit = 1 << (card.rank * 4 + card.suit)
        if card_bits & card_bit:
            raise HandParseError(f"Duplicate card {card}")
        card_bits |= card_bit

        shift = card.rank * TALLY_SLOT_BITS
        new_count = ((tally >> shift) & TALLY_SLOT_MASK) + 1
        tally += 1 << shift

        rank_occupancy |= 1 << card.rank
        suit_occupancy |= 1 << card.suit
        raw_score += 1 << (new_count - 1)

    return EncodedHand(
        rank_occupancy=rank_occupancy,
        suit_occupancy=suit_occupancy,
        tally=tally,
        raw_score=raw_score,
        card_bits=card_bits,
    )


def encode_hand(hand_text: str) -> EncodedHand:
    """Parse and encode hand text in one step."""
    encoded = encode_cards(parse_cards(hand_text))
    logger.debug(
        "encoded %r: ranks=%s suits=%s raw_score=%d",
        hand_text,
        format(encoded.rank_occupancy, "013b"),
        format(encoded.suit_occupancy, "04b"),
        encoded.raw_score,
    )
    return encoded
