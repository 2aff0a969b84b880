"""
Matplotlib drawings of tilings.

Only two input dimensions can be drawn at once; ``dims`` picks which.
"""

from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as patches
import numpy as np

from .errors import DimensionMismatch
from .tile_coder import TileCoder
from .tiling import Tiling


def _grid_lines(tiling: Tiling, dim: int) -> np.ndarray:
    """Positions of the tile edges along one dimension, in input coordinates."""
    edges = np.arange(tiling.bins[dim] + 1) * tiling.bin_lengths[dim]
    return tiling.min_dims[dim] + edges - tiling.offset[dim]


def plot_tilings(coder: TileCoder,
                 dims: Tuple[int, int] = (0, 1),
                 ax: Optional[plt.Axes] = None,
                 point: Optional[Sequence[float]] = None,
                 colors: Optional[Sequence[str]] = None) -> plt.Axes:
    """
    Draw the grid of every tiling of ``coder`` over two input dimensions.

    Args:
        coder: Tile coder to draw
        dims: The two input dimensions to use as x and y axes
        ax: Axes to draw on (a new figure is created if None)
        point: Optional input vector; its active tile in every tiling is shaded
        colors: One colour per tiling (defaults to the matplotlib cycle)

    Returns:
        The axes drawn on
    """
    x_dim, y_dim = dims
    for d in dims:
        if d < 0 or d >= coder.ndim:
            raise DimensionMismatch(f"Dimension {d} out of range for {coder.ndim}-D tile coder")
    if point is not None and len(point) != coder.ndim:
        raise DimensionMismatch(f"Point has {len(point)} elements, tile coder has {coder.ndim} dimensions")

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))
    if colors is None:
        colors = [f"C{i % 10}" for i in range(coder.num_tilings())]

    first = coder.tilings[0]
    x_min, x_max = first.min_dims[x_dim], first.max_dims[x_dim]
    y_min, y_max = first.min_dims[y_dim], first.max_dims[y_dim]

    for i, tiling in enumerate(coder.tilings):
        color = colors[i]
        xs = _grid_lines(tiling, x_dim)
        ys = _grid_lines(tiling, y_dim)
        ax.vlines(xs, ys[0], ys[-1], colors=color, linewidth=1, alpha=0.8, label=f"Tiling {i}")
        ax.hlines(ys, xs[0], xs[-1], colors=color, linewidth=1, alpha=0.8)

        if point is not None:
            low, high = tiling.tile_bounds(tiling.index(point))
            rect = patches.Rectangle((low[x_dim], low[y_dim]),
                                     high[x_dim] - low[x_dim],
                                     high[y_dim] - low[y_dim],
                                     facecolor=color, alpha=0.2, edgecolor='none')
            ax.add_patch(rect)

    # Bounds of the tiled space
    ax.add_patch(patches.Rectangle((x_min, y_min), x_max - x_min, y_max - y_min,
                                   fill=False, edgecolor='black', linewidth=2))
    if point is not None:
        ax.plot(point[x_dim], point[y_dim], 'k*', markersize=12)

    ax.set_xlabel(f"x[{x_dim}]")
    ax.set_ylabel(f"x[{y_dim}]")
    ax.set_title(str(coder))
    ax.legend(loc='upper right', fontsize=8)
    ax.set_aspect('equal', adjustable='datalim')
    return ax
