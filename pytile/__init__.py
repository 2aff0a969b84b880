"""
pytile - dense tile coding of bounded real vectors.

A vector is binned by several randomly offset grids ("tilings"); the active
tile of every tiling becomes one non-zero feature of a large sparse vector.
"""

import logging

# Errors
from .errors import (
    TileCodingError,
    DimensionMismatch,
    InvalidConfiguration,
    InvalidEncodedVector
)

# Offset sampling
from .sampling import (
    OffsetSampler,
    UniformOffsetSampler,
    offset_bounds
)

# Tilings
from .tiling import (
    OFFSET_DIV,
    Tiling,
    row_major_strides
)

# Tile coders
from .tile_coder import TileCoder

# Configuration
from .config import (
    TileCoderConfig,
    setup_logging
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    'TileCodingError',
    'DimensionMismatch',
    'InvalidConfiguration',
    'InvalidEncodedVector',
    
    # Offset sampling
    'OffsetSampler',
    'UniformOffsetSampler',
    'offset_bounds',
    
    # Tilings
    'OFFSET_DIV',
    'Tiling',
    'row_major_strides',
    
    # Tile coders
    'TileCoder',
    
    # Configuration
    'TileCoderConfig',
    'setup_logging',
]
