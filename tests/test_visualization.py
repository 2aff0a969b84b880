"""
Tests for visualization module.
"""

import matplotlib
matplotlib.use('Agg')

import pytest
import matplotlib.pyplot as plt

from pytile.errors import DimensionMismatch
from pytile.tile_coder import TileCoder
from pytile.visualization import plot_tilings


@pytest.fixture(autouse=True)
def close_figures():
    """Close every figure a test opens."""
    yield
    plt.close('all')


class TestPlotTilings:
    """Test cases for plot_tilings."""

    def test_plot_returns_axes(self, small_coder):
        """Test drawing the grid lines of every tiling."""
        ax = plot_tilings(small_coder)
        assert isinstance(ax, plt.Axes)
        # One vertical and one horizontal line collection per tiling
        assert len(ax.collections) == 2 * small_coder.num_tilings()
        assert ax.get_title() == str(small_coder)

    def test_plot_point(self, small_coder):
        """Test shading the active tile of a point."""
        ax = plot_tilings(small_coder, point=[1, 3])
        # One shaded tile per tiling plus the bounding box
        assert len(ax.patches) == small_coder.num_tilings() + 1
        assert len(ax.lines) == 1

    def test_plot_on_existing_axes(self, coder_3d):
        """Test drawing two chosen dimensions on given axes."""
        _, ax = plt.subplots()
        assert plot_tilings(coder_3d, dims=(0, 2), ax=ax) is ax
        assert ax.get_xlabel() == "x[0]"
        assert ax.get_ylabel() == "x[2]"

    def test_plot_invalid_dims(self, small_coder):
        """Test dimensions the coder does not have."""
        with pytest.raises(DimensionMismatch, match="Dimension 2 out of range"):
            plot_tilings(small_coder, dims=(0, 2))
        with pytest.raises(DimensionMismatch, match="Point has 3 elements"):
            plot_tilings(small_coder, point=[1, 2, 3])

    def test_plot_single_dimension_coder(self):
        """Test drawing a 1-D coder against itself."""
        coder = TileCoder([0], [1], [[4], [3]], seed=2)
        ax = plot_tilings(coder, dims=(0, 0))
        assert len(ax.collections) == 4
