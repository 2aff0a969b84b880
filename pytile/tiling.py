"""
A single tiling: one randomly offset grid over a bounded region of R^n.

A coordinate is shifted by the tiling's offset, binned independently along
every dimension, clipped into the grid, and the per-dimension bins are
flattened into one tile index with row-major strides (the last dimension
varies fastest).
"""

from typing import List, Optional, Sequence, Tuple
import logging
import math

import numpy as np

from .errors import DimensionMismatch, InvalidConfiguration, TileCodingError
from .sampling import OffsetSampler, default_sampler, offset_bounds

logger = logging.getLogger(__name__)

# Default divisor for the offset interval, see Tiling.
OFFSET_DIV = 1.5


def _read_only(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def row_major_strides(lengths: Sequence[int]) -> List[int]:
    """
    Strides of a packed row-major grid.

    Example:
        row_major_strides([4, 5, 6]) -> [30, 6, 1]
    """
    strides = [1]
    for i in range(len(lengths) - 1, 0, -1):
        strides.insert(0, strides[0] * int(lengths[i]))
    return strides


class Tiling:
    """
    A grid of tiles over ``[min_dims, max_dims]``.

    Dimension i is split into ``bins[i]`` bins of equal length. The whole grid
    is shifted by an offset drawn once, at construction, from
    ``U[-bin_length / offset_div, bin_length / offset_div]`` on every
    dimension. Coordinates outside the bounds are clipped into the boundary
    tiles instead of being rejected.

    Attributes:
        min_dims: Lower bound of every dimension
        max_dims: Upper bound of every dimension
        bins: Number of bins along every dimension
        bin_lengths: Width of a bin along every dimension
        offset: Offset added to coordinates before binning
        strides: Row-major strides used to flatten bin indices
        seed: Seed the offset was drawn with
        offset_div: Divisor bounding the offset interval
    """

    def __init__(self,
                 min_dims: Sequence[float],
                 max_dims: Sequence[float],
                 bins: Sequence[int],
                 seed: int = 0,
                 offset_div: float = OFFSET_DIV,
                 sampler: Optional[OffsetSampler] = None):
        """
        Build a tiling and draw its offset.

        Args:
            min_dims: Inclusive lower bound per dimension
            max_dims: Inclusive upper bound per dimension
            bins: Number of tiles per dimension
            seed: Seed for the offset draw
            offset_div: Offsets lie within one bin length divided by this
            sampler: Source of offsets (defaults to a numpy uniform sampler)

        Raises:
            DimensionMismatch: If bounds and bins differ in length
            InvalidConfiguration: If bins is empty, a bin count is not a
                positive integer, offset_div is not a positive number, a
                bound is not finite, or a lower bound is not below its
                upper bound
        """
        min_arr = np.asarray(min_dims, dtype=np.float64).ravel()
        max_arr = np.asarray(max_dims, dtype=np.float64).ravel()
        bins_arr = np.asarray(bins).ravel()

        if len(min_arr) != len(max_arr):
            raise DimensionMismatch(
                f"Minimum has {len(min_arr)} dimensions but maximum has {len(max_arr)}")
        if len(bins_arr) == 0:
            raise InvalidConfiguration("Cannot have less than 1 bin per dimension")
        if len(bins_arr) != len(min_arr):
            raise DimensionMismatch(
                f"There should be one bin count per dimension: have {len(bins_arr)}, want {len(min_arr)}")
        if not np.issubdtype(bins_arr.dtype, np.integer):
            raise InvalidConfiguration(f"Bin counts must be integers, got {list(bins)}")
        if np.any(bins_arr < 1):
            raise InvalidConfiguration(f"Bin counts must be positive, got {bins_arr.tolist()}")
        if not (np.isfinite(offset_div) and offset_div > 0):
            raise InvalidConfiguration(f"offset_div must be positive and finite, got {offset_div}")
        if not (np.all(np.isfinite(min_arr)) and np.all(np.isfinite(max_arr))):
            raise InvalidConfiguration(
                f"Bounds must be finite: {min_arr.tolist()} vs {max_arr.tolist()}")
        if not np.all(min_arr < max_arr):
            raise InvalidConfiguration(
                f"Every minimum must be below its maximum: {min_arr.tolist()} vs {max_arr.tolist()}")

        self.seed = seed
        self.offset_div = float(offset_div)
        self._min_dims = _read_only(min_arr)
        self._max_dims = _read_only(max_arr)
        self._bins = _read_only(bins_arr.astype(np.int64))
        self._bin_lengths = _read_only((max_arr - min_arr) / self._bins)
        self._strides = _read_only(np.array(row_major_strides(self._bins), dtype=np.int64))

        sampler = sampler or default_sampler
        offset = np.asarray(
            sampler.sample(offset_bounds(self._bin_lengths, self.offset_div), seed),
            dtype=np.float64).ravel()
        if len(offset) != self.ndim:
            raise DimensionMismatch(
                f"Sampler returned {len(offset)} offsets for {self.ndim} dimensions")
        self._offset = _read_only(offset.copy())

        logger.debug("Built tiling bins=%s seed=%s offset=%s",
                     self._bins.tolist(), seed, self._offset.tolist())

    @property
    def ndim(self) -> int:
        """Dimensionality of the tiled space."""
        return len(self._min_dims)

    @property
    def min_dims(self) -> np.ndarray:
        return self._min_dims

    @property
    def max_dims(self) -> np.ndarray:
        return self._max_dims

    @property
    def bins(self) -> np.ndarray:
        return self._bins

    @property
    def bin_lengths(self) -> np.ndarray:
        return self._bin_lengths

    @property
    def offset(self) -> np.ndarray:
        return self._offset

    @property
    def strides(self) -> np.ndarray:
        return self._strides

    def tile_count(self) -> int:
        """Number of tiles in the tiling."""
        return math.prod(int(b) for b in self._bins)

    def _bin(self, data: np.ndarray) -> np.ndarray:
        """
        Clipped bin index of every coordinate.

        ``data`` has one row per dimension and any number of trailing sample
        columns. Single vectors and batches go through the same arithmetic so
        that both paths agree bit for bit.
        """
        if np.isnan(data).any():
            raise TileCodingError("Cannot tile code NaN coordinates")

        shape = (-1,) + (1,) * (data.ndim - 1)
        shifted = data + self._offset.reshape(shape)
        tiles = np.floor((shifted - self._min_dims.reshape(shape)) / self._bin_lengths.reshape(shape))

        # Out-of-bounds coordinates saturate to the boundary tiles
        tiles = np.clip(tiles, 0, (self._bins - 1).reshape(shape))
        return tiles.astype(np.int64)

    def _as_vector(self, vector) -> np.ndarray:
        v = np.asarray(vector, dtype=np.float64)
        if v.ndim != 1 or len(v) != self.ndim:
            raise DimensionMismatch(
                f"Expected a vector with {self.ndim} elements, got shape {v.shape}")
        return v

    def _as_batch(self, batch) -> np.ndarray:
        b = np.asarray(batch, dtype=np.float64)
        if b.ndim != 2 or b.shape[0] != self.ndim:
            raise DimensionMismatch(
                f"Expected a batch with {self.ndim} rows (one per feature), got shape {b.shape}")
        return b

    def tile_coordinates(self, vector) -> np.ndarray:
        """Per-dimension bin indices of ``vector`` before flattening."""
        return self._bin(self._as_vector(vector))

    def index(self, vector) -> int:
        """
        Index of the tile within which ``vector`` falls.

        Args:
            vector: Coordinate with one element per dimension

        Returns:
            Tile index in ``[0, tile_count() - 1]``
        """
        tiles = self._bin(self._as_vector(vector))
        return int(np.dot(tiles, self._strides))

    def index_batch(self, batch) -> np.ndarray:
        """
        Tile index of every sample in a batch.

        The batch holds one sample per column and one feature per row::

            B = [v_1  v_2  ...  v_m]

        Element c of the result equals ``index(B[:, c])``.

        Args:
            batch: Array of shape ``(ndim, num_samples)``

        Returns:
            Integer array of length ``num_samples``
        """
        tiles = self._bin(self._as_batch(batch))
        return self._strides @ tiles

    def unravel(self, index: int) -> Tuple[int, ...]:
        """Per-dimension bin indices of a flattened tile index."""
        index = int(index)
        if index < 0 or index >= self.tile_count():
            raise IndexError(f"Tile index {index} out of range [0, {self.tile_count()})")

        coords = []
        for stride in self._strides:
            coords.append(index // int(stride))
            index = index % int(stride)
        return tuple(coords)

    def tile_bounds(self, index: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Region of input space covered by a tile.

        The region is the nominal grid cell shifted back by the offset. Boundary
        tiles additionally receive every clipped coordinate beyond the grid.

        Returns:
            Tuple of (low, high) arrays, one element per dimension
        """
        coords = np.array(self.unravel(index), dtype=np.float64)
        low = self._min_dims + coords * self._bin_lengths - self._offset
        return low, low + self._bin_lengths

    def __repr__(self) -> str:
        return (f"Tiling(min_dims={self._min_dims.tolist()}, max_dims={self._max_dims.tolist()}, "
                f"bins={self._bins.tolist()}, seed={self.seed}, offset_div={self.offset_div})")
