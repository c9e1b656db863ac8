"""Deterministic seeding utilities for reproducibility.

Provides a single function to set seeds across all random number generators
used in the project: Python's random (hand dealing), NumPy, and PyTorch.
"""

import random
from typing import Optional

import numpy as np
import torch


def set_seed(seed: Optional[int] = None) -> int:
    """Set random seeds for reproducibility across all RNGs.

    Args:
        seed: The seed value to use. If None, a random seed will be generated
              and returned for later reproducibility.

    Returns:
        The seed value that was used (useful when seed=None was passed).

    Example:
        >>> from bitpoke import set_seed, deal_hands
        >>> set_seed(42)
        42
        >>> hands = deal_hands(8)  # same hands on every run
    """
    if seed is None:
        seed = random.randint(0, 2**32 - 1)

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)

    return seed
