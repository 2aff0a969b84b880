"""
Seeded sampling of tiling offsets.

Tilings only need one thing from a random source: a uniform draw per
dimension inside a symmetric interval. Keeping that behind ``OffsetSampler``
lets the indexing code stay deterministic and testable.
"""

from typing import Protocol, Sequence
import numpy as np


class OffsetSampler(Protocol):
    """Anything that can draw one offset per dimension."""

    def sample(self, bounds: np.ndarray, seed: int) -> np.ndarray:
        ...


class UniformOffsetSampler:
    """
    Draws offsets from ``U[-bounds[i], bounds[i]]`` for every dimension i.

    A fresh ``numpy.random.Generator`` is created from the seed on every call,
    so identical bounds and seeds always give identical offsets.
    """

    def sample(self, bounds: np.ndarray, seed: int) -> np.ndarray:
        bounds = np.asarray(bounds, dtype=np.float64)
        if bounds.ndim != 1:
            raise ValueError(f"Offset bounds must be 1D, got shape {bounds.shape}")
        if np.any(bounds < 0):
            raise ValueError("Offset bounds must be non-negative")

        rng = np.random.default_rng(seed)
        return rng.uniform(low=-bounds, high=bounds)


def offset_bounds(bin_lengths: Sequence[float], offset_div: float) -> np.ndarray:
    """Half-width of the offset interval along each dimension."""
    return np.asarray(bin_lengths, dtype=np.float64) / offset_div


default_sampler = UniformOffsetSampler()
