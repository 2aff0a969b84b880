"""
Common test fixtures and configuration for pytile tests.
"""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add the project root to Python path for imports
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pytile import TileCoder, Tiling


class ZeroOffsetSampler:
    """Sampler that never shifts a tiling, so expected tiles can be worked out by hand."""

    def __init__(self):
        self.calls = []

    def sample(self, bounds, seed):
        self.calls.append((np.array(bounds), seed))
        return np.zeros(len(bounds))


@pytest.fixture
def zero_sampler():
    """A sampler that returns zero offsets and records its calls."""
    return ZeroOffsetSampler()


@pytest.fixture
def grid_tiling(zero_sampler):
    """Unshifted 2x3x4 tiling with unit bins over [0, 2] x [0, 3] x [0, 4]."""
    return Tiling([0, 0, 0], [2, 3, 4], [2, 3, 4], seed=0, sampler=zero_sampler)


@pytest.fixture
def small_coder():
    """Two tilings (2x3 and 2x2) over [0, 5]^2 with a bias unit, seed 1."""
    return TileCoder([0, 0], [5, 5], [[2, 3], [2, 2]], seed=1, include_bias=True)


@pytest.fixture
def coder_3d():
    """Four tilings over a 3-D box with unequal bounds and no bias unit."""
    return TileCoder([-1.0, 0.0, 10.0], [1.0, 2.0, 20.0],
                     [[4, 4, 4], [3, 5, 2], [8, 2, 3], [2, 2, 2]],
                     seed=7, max_workers=4)


@pytest.fixture
def rng():
    """Seeded generator for test inputs."""
    return np.random.default_rng(12345)


@pytest.fixture
def batch_3d(rng):
    """Batch of 3-D samples, one per column, some outside the bounds."""
    low = np.array([-2.0, -1.0, 5.0])[:, None]
    high = np.array([2.0, 3.0, 25.0])[:, None]
    return low + (high - low) * rng.random((3, 64))


# Pytest configuration hooks
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test names."""
    for item in items:
        if any(keyword in item.nodeid for keyword in ["large", "concurrent"]):
            item.add_marker(pytest.mark.slow)
