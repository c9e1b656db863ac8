"""Winner selection over many hands.

This module provides:
- Streaming and parallel winner selection (winners.py)
- Batched tensor classification and winner masks (gpu_showdown.py)
"""

from .winners import (
    WinnerSet,
    winners,
    winners_parallel,
)

from .gpu_showdown import (
    BatchEncoding,
    BatchHandClassifier,
    cards_to_indices,
    hands_to_indices,
    classify_batch,
    batch_winners,
)

__all__ = [
    # Streaming / parallel
    "WinnerSet",
    "winners",
    "winners_parallel",
    # Batched
    "BatchEncoding",
    "BatchHandClassifier",
    "cards_to_indices",
    "hands_to_indices",
    "classify_batch",
    "batch_winners",
]
