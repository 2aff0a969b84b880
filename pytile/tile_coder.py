"""
Tile coding of vectors and batches of vectors.

Tile coding turns a low-dimensional vector into a large, sparse vector of 0's
and 1's. Each 1 marks the tile the vector falls into in one of several
overlapping tilings, for example::

    [0.5, 0.1] -> [0, 0, 0, 1, 0, 0, 1, 0]

Every dimension of the bounded input space is fully tiled by every tiling;
hashing is not used. The feature space is the concatenation of all tilings in
configuration order, optionally preceded by one always-active bias unit.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar
import logging
import os

import numpy as np

from .errors import DimensionMismatch, InvalidConfiguration, InvalidEncodedVector
from .tiling import OFFSET_DIV, Tiling

logger = logging.getLogger(__name__)

T = TypeVar('T')


class TileCoder:
    """
    Tile coder over a fixed, ordered set of tilings.

    Attributes:
        tilings: Tilings in configuration order
        include_bias: Whether feature 0 is an always-active bias unit
        max_workers: Upper bound on tilings evaluated concurrently
    """

    def __init__(self,
                 min_dims: Sequence[float],
                 max_dims: Sequence[float],
                 bins: Sequence[Sequence[int]],
                 seed: int = 0,
                 include_bias: bool = False,
                 offset_div: float = OFFSET_DIV,
                 max_workers: Optional[int] = None):
        """
        Create one tiling per entry of ``bins``.

        ``bins`` decides both the number of tilings and the tiles of each. With
        ``bins=[[2, 2], [4, 3]]`` there are two tilings: a 2x2 grid and a grid
        with 4 tiles along the first dimension and 3 along the second. Every
        entry must have one bin count per dimension of ``min_dims``. All
        tilings share the bounds and the seed.

        Args:
            min_dims: Lower bound of every input dimension
            max_dims: Upper bound of every input dimension
            bins: Bin counts per dimension, one sequence per tiling
            seed: Seed for the tiling offsets
            include_bias: Reserve feature 0 as an always-active bias unit
            offset_div: Offset divisor passed to every tiling
            max_workers: Most tilings to index concurrently (default: CPU count)

        Raises:
            DimensionMismatch: If a tiling disagrees with the bounds
            InvalidConfiguration: If no tilings are given or a tiling is invalid
        """
        if len(bins) == 0:
            raise InvalidConfiguration("A tile coder needs at least one tiling")
        if max_workers is not None and max_workers < 1:
            raise InvalidConfiguration(f"max_workers must be at least 1, got {max_workers}")

        tilings = []
        for i, tiling_bins in enumerate(bins):
            try:
                tilings.append(Tiling(min_dims, max_dims, tiling_bins, seed, offset_div))
            except (DimensionMismatch, InvalidConfiguration) as e:
                raise type(e)(f"Could not create tiling {i}: {e}") from e

        self._tilings: Tuple[Tiling, ...] = tuple(tilings)
        self.include_bias = bool(include_bias)
        self.max_workers = max_workers or os.cpu_count() or 1

        counts = [t.tile_count() for t in self._tilings]
        self._tile_counts = tuple(counts)
        # Feature offset of every tiling, not counting the bias unit
        self._features_before = tuple(int(sum(counts[:i])) for i in range(len(counts)))

        logger.debug("Built tile coder with %d tilings, %d features, bias=%s, up to %d workers",
                     self.num_tilings(), self.total_features(), self.include_bias,
                     min(self.num_tilings(), self.max_workers))

    @classmethod
    def from_config(cls, config) -> 'TileCoder':
        """Create a tile coder from a ``TileCoderConfig``."""
        config.validate()
        return cls(config.min_dims, config.max_dims, config.bins,
                   seed=config.seed,
                   include_bias=config.include_bias,
                   offset_div=config.offset_div,
                   max_workers=config.max_workers)

    @property
    def tilings(self) -> Tuple[Tiling, ...]:
        return self._tilings

    @property
    def ndim(self) -> int:
        """Dimensionality of the vectors this coder encodes."""
        return self._tilings[0].ndim

    @property
    def _bias(self) -> int:
        return 1 if self.include_bias else 0

    def num_tilings(self) -> int:
        """Number of tilings used to encode a vector."""
        return len(self._tilings)

    def tile_counts(self) -> Tuple[int, ...]:
        """Number of tiles in every tiling."""
        return self._tile_counts

    def total_features(self) -> int:
        """Length of a tile-coded vector."""
        return sum(self._tile_counts) + self._bias

    def features_before_tiling(self, tiling: int) -> int:
        """Number of tiling features that precede tiling number ``tiling``."""
        if not 0 <= tiling < self.num_tilings():
            raise IndexError(f"Tiling {tiling} out of range [0, {self.num_tilings()})")
        return self._features_before[tiling]

    # == Concurrent evaluation =========================================================================================

    def _map_tilings(self, func: Callable[[int], T]) -> List[T]:
        """
        Evaluate ``func`` for every tiling number and return results in tiling order.

        Each task writes to its own slot of a pre-sized result list, so the order
        of completion does not matter. The call returns only once every task has
        finished; the first failure is re-raised.
        """
        n = self.num_tilings()
        workers = min(n, self.max_workers)
        if workers <= 1:
            return [func(i) for i in range(n)]

        results: List[Optional[T]] = [None] * n

        def run(i: int) -> None:
            results[i] = func(i)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(run, i) for i in range(n)]
            for future in as_completed(futures):
                future.result()

        return results

    def _encode_with_tiling(self, vector: np.ndarray, tiling: int) -> int:
        index = self._tilings[tiling].index(vector)
        return self._features_before[tiling] + index + self._bias

    def _encode_batch_with_tiling(self, batch: np.ndarray, tiling: int) -> np.ndarray:
        index = self._tilings[tiling].index_batch(batch)
        return index + (self._features_before[tiling] + self._bias)

    def _check_vector(self, vector) -> np.ndarray:
        v = np.asarray(vector, dtype=np.float64)
        if v.ndim != 1 or len(v) != self.ndim:
            raise DimensionMismatch(
                f"Expected a vector with {self.ndim} elements, got shape {v.shape}")
        return v

    def _check_batch(self, batch) -> np.ndarray:
        b = np.asarray(batch, dtype=np.float64)
        if b.ndim != 2 or b.shape[0] != self.ndim:
            raise DimensionMismatch(
                f"Expected a batch with {self.ndim} rows (one per feature), got shape {b.shape}")
        return b

    # == Encoding ======================================================================================================

    def encode_indices(self, vector) -> np.ndarray:
        """
        Non-zero indices of the tile-coded ``vector``.

        Entry k is the active feature of tiling k. With a bias unit the last
        entry is the bias feature, which is always 0.

        Returns:
            Integer array of length ``num_tilings() + include_bias``
        """
        v = self._check_vector(vector)
        indices = self._map_tilings(lambda tiling: self._encode_with_tiling(v, tiling))
        if self.include_bias:
            indices.append(0)
        return np.array(indices, dtype=np.int64)

    def encode_indices_batch(self, batch) -> np.ndarray:
        """
        Non-zero indices of every tile-coded sample in a batch.

        ``batch`` holds one sample per column and one feature per row. Column c
        of the result holds the indices of column c of ``batch``; row k comes
        from tiling k, and the last row is the (all zero) bias row if a bias
        unit is used.

        Returns:
            Integer array of shape ``(num_tilings() + include_bias, num_samples)``
        """
        b = self._check_batch(batch)
        rows = self._map_tilings(lambda tiling: self._encode_batch_with_tiling(b, tiling))
        if self.include_bias:
            rows.append(np.zeros(b.shape[1], dtype=np.int64))
        return np.vstack(rows).astype(np.int64)

    def encode(self, vector) -> np.ndarray:
        """Tile-coded representation of a single vector."""
        return self.to_vector(self.encode_indices(vector))

    def encode_batch(self, batch) -> np.ndarray:
        """
        Tile-coded representation of every sample in a batch.

        Returns:
            Array of shape ``(total_features(), num_samples)`` whose column c is
            ``encode(batch[:, c])``
        """
        indices = self.encode_indices_batch(batch)
        num_samples = indices.shape[1]
        tile_coded = np.zeros((self.total_features(), num_samples))
        columns = np.broadcast_to(np.arange(num_samples), indices.shape)
        tile_coded[indices, columns] = 1.0
        return tile_coded

    # == Conversion ====================================================================================================

    def to_vector(self, indices) -> np.ndarray:
        """
        Convert non-zero indices to a tile-coded vector.

        Raises:
            InvalidEncodedVector: If an index lies outside the feature space
        """
        indices = np.asarray(indices).ravel()
        if indices.size and not np.issubdtype(indices.dtype, np.integer):
            if not np.all(np.equal(np.mod(indices, 1), 0)):
                raise InvalidEncodedVector(f"Indices must be whole numbers, got {indices.tolist()}")
        indices = indices.astype(np.int64)

        size = self.total_features()
        if np.any((indices < 0) | (indices >= size)):
            raise InvalidEncodedVector(f"Indices {indices.tolist()} out of range [0, {size})")

        tile_coded = np.zeros(size)
        tile_coded[indices] = 1.0
        return tile_coded

    def to_indices(self, vector) -> np.ndarray:
        """
        Convert a tile-coded vector to its non-zero indices.

        Raises:
            DimensionMismatch: If the vector length is not ``total_features()``
            InvalidEncodedVector: If the vector holds anything but 0.0 and 1.0
        """
        v = np.asarray(vector, dtype=np.float64)
        if v.ndim != 1 or len(v) != self.total_features():
            raise DimensionMismatch(
                f"Expected a tile-coded vector of length {self.total_features()}, got shape {v.shape}")

        ones = v == 1.0
        if not np.all(ones | (v == 0.0)):
            raise InvalidEncodedVector("Vector is not a tile-coded vector")
        return np.flatnonzero(ones).astype(np.int64)

    def __str__(self) -> str:
        bins = [t.bins.tolist() for t in self._tilings]
        return f"Tilings {self.num_tilings()}  |  Tiles: {bins}"

    def __repr__(self) -> str:
        first = self._tilings[0]
        return (f"TileCoder(min_dims={first.min_dims.tolist()}, max_dims={first.max_dims.tolist()}, "
                f"bins={[t.bins.tolist() for t in self._tilings]}, seed={first.seed}, "
                f"include_bias={self.include_bias}, offset_div={first.offset_div})")
