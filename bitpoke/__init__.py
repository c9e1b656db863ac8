"""bitpoke - five-card poker hand classification.

Classifies five-card hands from text with a bitfield encoding, orders hands
by category and tie-break key, and picks the winners among many hands.
"""

__version__ = "0.1.0"

from bitpoke.config import ShowdownConfig
from bitpoke.rules import (
    Category,
    TieBreakKey,
    HandValue,
    HandParseError,
    ClassificationError,
    classify,
    compare_hands,
    deal_hands,
)
from bitpoke.showdown import winners, winners_parallel, batch_winners
from bitpoke.utils.seeding import set_seed

__all__ = [
    "__version__",
    "ShowdownConfig",
    "Category",
    "TieBreakKey",
    "HandValue",
    "HandParseError",
    "ClassificationError",
    "classify",
    "compare_hands",
    "deal_hands",
    "winners",
    "winners_parallel",
    "batch_winners",
    "set_seed",
]
