"""Batched hand classification with PyTorch.

This module provides:
- Card index encoding (card_idx = suit * 13 + rank)
- A batched encoder/classifier producing the same categories and tie-break
  keys as `bitpoke.rules.hands.classify`
- Packed int64 scores and a winner mask for whole batches

Key insight: the tally, occupancy bitmaps and raw score are all reductions
over a [batch, 5] card tensor, so a batch of hands is classified with a
handful of scatter/where operations instead of a Python loop.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import torch

from bitpoke.config import ShowdownConfig
from bitpoke.rules.encoding import (
    HandParseError,
    RAW_SCORE_SHAPES,
    RUN5_MASK,
    WHEEL_MASK,
    parse_cards,
)
from bitpoke.rules.hands import (
    Category,
    ClassificationError,
    HandValue,
    LOW_STRAIGHT_KEY,
    SHAPE_CATEGORIES,
    DISTINCT_CATEGORIES,
    TieBreakKey,
)
from bitpoke.rules.ranks import Card, HAND_SIZE, NUM_RANKS, NUM_SUITS

logger = logging.getLogger(__name__)

NUM_CARDS = NUM_RANKS * NUM_SUITS

# Each key component fits in 13 bits (rank bitmap or rank index)
KEY_BITS = NUM_RANKS


def cards_to_indices(cards: Sequence[Card]) -> np.ndarray:
    """Convert cards to an int64 array of deck indices."""
    return np.array([card.index for card in cards], dtype=np.int64)


def hands_to_indices(hand_texts: Sequence[str]) -> np.ndarray:
    """Parse hand texts into a [num_hands, 5] array of deck indices."""
    if not hand_texts:
        return np.zeros((0, HAND_SIZE), dtype=np.int64)
    return np.stack([cards_to_indices(parse_cards(text)) for text in hand_texts])


@dataclass
class BatchEncoding:
    """Tensor form of EncodedHand for a batch.

    Attributes:
        rank_counts: [batch, 13] cards per rank
        rank_occupancy: [batch] 13-bit rank bitmap
        suit_occupancy: [batch] 4-bit suit bitmap
        num_suits: [batch] number of distinct suits
        raw_score: [batch] sum of (2**count - 1) over ranks
    """

    rank_counts: torch.Tensor
    rank_occupancy: torch.Tensor
    suit_occupancy: torch.Tensor
    num_suits: torch.Tensor
    raw_score: torch.Tensor


class BatchHandClassifier:
    """Classify batches of five-card hands on a torch device."""

    def __init__(self, device: Optional[Union[str, torch.device]] = None):
        self.device = torch.device(device) if device is not None else torch.device("cpu")

        self.rank_bits = 2 ** torch.arange(NUM_RANKS, dtype=torch.long, device=self.device)
        self.suit_bits = 2 ** torch.arange(NUM_SUITS, dtype=torch.long, device=self.device)
        self.rank_positions = torch.arange(NUM_RANKS, dtype=torch.long, device=self.device)
        self.valid_raw_scores = torch.tensor(
            sorted(RAW_SCORE_SHAPES), dtype=torch.long, device=self.device
        )

    def encode(self, card_idx: torch.Tensor) -> BatchEncoding:
        """Encode a [batch, 5] tensor of deck indices.

        Raises:
            HandParseError: If a row has the wrong width, an index outside
                0-51, or a repeated card
        """
        card_idx = card_idx.to(device=self.device, dtype=torch.long)
        if card_idx.dim() != 2 or card_idx.shape[1] != HAND_SIZE:
            raise HandParseError(
                f"Expected [batch, {HAND_SIZE}] card indices, got {tuple(card_idx.shape)}"
            )
        if card_idx.numel() and (card_idx.min() < 0 or card_idx.max() >= NUM_CARDS):
            raise HandParseError("Card index out of range")

        batch = card_idx.shape[0]
        ones = torch.ones_like(card_idx)

        card_counts = torch.zeros(batch, NUM_CARDS, dtype=torch.long, device=self.device)
        card_counts.scatter_add_(1, card_idx, ones)
        repeated = (card_counts > 1).any(dim=1)
        if repeated.any():
            row = int(repeated.nonzero()[0].item())
            raise HandParseError(f"Duplicate card in batch row {row}")

        ranks = card_idx % NUM_RANKS
        suits = card_idx // NUM_RANKS

        rank_counts = torch.zeros(batch, NUM_RANKS, dtype=torch.long, device=self.device)
        rank_counts.scatter_add_(1, ranks, ones)
        suit_counts = torch.zeros(batch, NUM_SUITS, dtype=torch.long, device=self.device)
        suit_counts.scatter_add_(1, suits, ones)

        rank_present = (rank_counts > 0).long()
        suit_present = (suit_counts > 0).long()

        return BatchEncoding(
            rank_counts=rank_counts,
            rank_occupancy=(rank_present * self.rank_bits).sum(dim=1),
            suit_occupancy=(suit_present * self.suit_bits).sum(dim=1),
            num_suits=suit_present.sum(dim=1),
            raw_score=(2**rank_counts - 1).sum(dim=1),
        )

    def _top_rank(self, present: torch.Tensor) -> torch.Tensor:
        """Highest rank where `present` is True, -1 if none."""
        missing = torch.full_like(self.rank_positions, -1)
        return torch.where(present, self.rank_positions, missing).max(dim=1).values

    def _bottom_rank(self, present: torch.Tensor) -> torch.Tensor:
        """Lowest rank where `present` is True, 13 if none."""
        missing = torch.full_like(self.rank_positions, NUM_RANKS)
        return torch.where(present, self.rank_positions, missing).min(dim=1).values

    def classify(self, card_idx: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
        """Classify a [batch, 5] tensor of deck indices.

        Returns:
            categories: [batch] Category values
            keys: [batch, 3] tie-break keys

        Raises:
            ClassificationError: If a row's raw score is outside the valid set
        """
        enc = self.encode(card_idx)
        occupancy = enc.rank_occupancy
        counts = enc.rank_counts
        batch = occupancy.shape[0]

        invalid = ~torch.isin(enc.raw_score, self.valid_raw_scores)
        if invalid.any():
            row = int(invalid.nonzero()[0].item())
            raise ClassificationError(
                f"Invalid raw score {int(enc.raw_score[row].item())} in batch row {row}"
            )

        # Straight: occupancy shifted to its lowest bit is five contiguous bits
        lowest_bit = (occupancy & -occupancy).clamp(min=1)
        low_straight = occupancy == WHEEL_MASK
        is_straight = (occupancy // lowest_bit == RUN5_MASK) | low_straight
        is_flush = enc.num_suits == 1

        categories = torch.zeros(batch, dtype=torch.long, device=self.device)
        distinct = enc.raw_score == 5
        for (straight, flush), category in DISTINCT_CATEGORIES.items():
            row_mask = distinct & (is_straight == straight) & (is_flush == flush)
            categories[row_mask] = int(category)
        for raw_score, category in SHAPE_CATEGORIES.items():
            categories[enc.raw_score == raw_score] = int(category)

        pair_high = self._top_rank(counts == 2)
        pair_low = self._bottom_rank(counts == 2)
        kicker = self._top_rank(counts == 1)
        triple = self._top_rank(counts == 3)
        quad = self._top_rank(counts == 4)
        zero = torch.zeros_like(occupancy)

        def without(rank: torch.Tensor) -> torch.Tensor:
            return occupancy - 2 ** rank.clamp(min=0)

        # Distinct-rank categories key on the occupancy, the wheel on 5-high
        keys = torch.zeros(batch, 3, dtype=torch.long, device=self.device)
        keys[:, 0] = torch.where(
            distinct & low_straight,
            torch.full_like(occupancy, LOW_STRAIGHT_KEY),
            occupancy,
        )

        shape_keys = {
            Category.ONE_PAIR: (pair_high, without(pair_high), zero),
            Category.TWO_PAIR: (pair_high, pair_low, kicker),
            Category.THREE_OF_A_KIND: (triple, without(triple), zero),
            Category.FULL_HOUSE: (triple, pair_high, zero),
            Category.FOUR_OF_A_KIND: (quad, kicker, zero),
        }
        for category, columns in shape_keys.items():
            rows = categories == int(category)
            keys[rows] = torch.stack(columns, dim=1)[rows]

        return categories, keys

    @staticmethod
    def pack(categories: torch.Tensor, keys: torch.Tensor) -> torch.Tensor:
        """Pack category and key into one int64 with the same ordering."""
        packed = categories.long()
        for component in range(keys.shape[1]):
            packed = packed * (2**KEY_BITS) + keys[:, component]
        return packed

    @staticmethod
    def winner_mask(packed: torch.Tensor) -> torch.Tensor:
        """Boolean mask of rows tying for the best packed score."""
        if packed.numel() == 0:
            return torch.zeros_like(packed, dtype=torch.bool)
        return packed == packed.max()

    @staticmethod
    def to_hand_values(categories: torch.Tensor, keys: torch.Tensor) -> List[HandValue]:
        """Convert batch results back to HandValue tuples."""
        return [
            HandValue(Category(int(cat)), TieBreakKey(*(int(k) for k in key)))
            for cat, key in zip(categories.tolist(), keys.tolist())
        ]


def classify_batch(
    hand_texts: Sequence[str], config: Optional[ShowdownConfig] = None
) -> List[HandValue]:
    """Classify many hand texts in one tensor pass."""
    config = config or ShowdownConfig()
    classifier = BatchHandClassifier(config.device)
    card_idx = torch.from_numpy(hands_to_indices(hand_texts))
    categories, keys = classifier.classify(card_idx)
    return classifier.to_hand_values(categories, keys)


def batch_winners(
    hand_texts: Sequence[str], config: Optional[ShowdownConfig] = None
) -> List[str]:
    """Same result as `winners`, computed with the batched classifier.

    Raises:
        HandParseError: If any hand is malformed
        ClassificationError: If any hand violates the encoding invariants
    """
    config = config or ShowdownConfig()
    hand_texts = list(hand_texts)
    if not hand_texts:
        return []

    classifier = BatchHandClassifier(config.device)
    card_idx = torch.from_numpy(hands_to_indices(hand_texts))
    categories, keys = classifier.classify(card_idx)

    mask = classifier.winner_mask(classifier.pack(categories, keys))
    logger.debug(
        "batch of %d hands on %s: %d winners",
        len(hand_texts),
        classifier.device,
        int(mask.sum().item()),
    )
    return [text for text, won in zip(hand_texts, mask.tolist()) if won]
