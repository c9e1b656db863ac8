"""Winner selection over a collection of hands.

`winners` is a single streaming max-scan with ties. `WinnerSet` is the same
reduction expressed as an associative combine, which lets `winners_parallel`
fold chunks independently and merge the partial results; ties are put back
in input order by index.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from bitpoke.config import ShowdownConfig
from bitpoke.rules.hands import HandValue, classify

logger = logging.getLogger(__name__)


def winners(hand_texts: Sequence[str]) -> List[str]:
    """Return the hands that tie for best, in input order.

    The returned strings are the input objects themselves.

    Raises:
        HandParseError: If any hand is malformed
        ClassificationError: If any hand violates the encoding invariants
    """
    best: Optional[HandValue] = None
    result: List[str] = []

    for hand_text in hand_texts:
        value = classify(hand_text)
        if best is None or value > best:
            logger.debug("new best %s from %r", value.category.name, hand_text)
            best = value
            result = [hand_text]
        elif value == best:
            result.append(hand_text)

    return result


@dataclass(frozen=True)
class WinnerSet:
    """Best hand value seen so far and the (index, text) pairs achieving it.

    Attributes:
        best: Best HandValue, or None for the empty set
        entries: (input index, hand text) pairs sorted by index
    """

    best: Optional[HandValue] = None
    entries: Tuple[Tuple[int, str], ...] = ()

    @classmethod
    def empty(cls) -> "WinnerSet":
        return cls()

    @classmethod
    def of(cls, index: int, hand_text: str) -> "WinnerSet":
        """Winner set holding one classified hand."""
        return cls(best=classify(hand_text), entries=((index, hand_text),))

    def combine(self, other: "WinnerSet") -> "WinnerSet":
        """Merge two winner sets (associative; empty is the identity)."""
        if other.best is None:
            return self
        if self.best is None:
            return other
        if self.best > other.best:
            return self
        if other.best > self.best:
            return other
        merged = tuple(sorted(self.entries + other.entries))
        return WinnerSet(best=self.best, entries=merged)

    @property
    def texts(self) -> List[str]:
        return [text for _, text in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


def _reduce_chunk(start: int, chunk: Sequence[str]) -> WinnerSet:
    result = WinnerSet.empty()
    for offset, hand_text in enumerate(chunk):
        result = result.combine(WinnerSet.of(start + offset, hand_text))
    return result


def winners_parallel(
    hand_texts: Sequence[str], config: Optional[ShowdownConfig] = None
) -> List[str]:
    """Same result as `winners`, with chunks reduced on a thread pool.

    Args:
        hand_texts: Hands to compare
        config: Chunk size and worker count; defaults if omitted

    Returns:
        Winning hand texts in input order
    """
    config = config or ShowdownConfig()
    hand_texts = list(hand_texts)
    starts = range(0, len(hand_texts), config.chunk_size)
    logger.debug(
        "reducing %d hands in %d chunks on %d workers",
        len(hand_texts),
        len(starts),
        config.max_workers,
    )

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        partials = list(
            pool.map(
                lambda start: _reduce_chunk(start, hand_texts[start : start + config.chunk_size]),
                starts,
            )
        )

    result = WinnerSet.empty()
    for partial in partials:
        result = result.combine(partial)
    return result.texts
