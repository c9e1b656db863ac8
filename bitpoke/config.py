"""Showdown configuration."""

from dataclasses import dataclass


@dataclass
class ShowdownConfig:
    """Settings for parallel and batched winner selection."""

    # Batched tensor classifier
    device: str = "cpu"

    # Parallel reduction
    chunk_size: int = 256
    max_workers: int = 4

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
