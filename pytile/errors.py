"""
Exception types raised by pytile.

All errors derive from ``TileCodingError``, which is itself a ``ValueError``,
so callers that already guard configuration code with ``except ValueError``
keep working.
"""


class TileCodingError(ValueError):
    """Base class for tile coding errors."""


class DimensionMismatch(TileCodingError):
    """Bounds, bin counts or inputs disagree on dimensionality."""


class InvalidConfiguration(TileCodingError):
    """A tiling or tile coder was configured with invalid parameters."""


class InvalidEncodedVector(TileCodingError):
    """A vector or index collection is not a valid tile-coded representation."""
