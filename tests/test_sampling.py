"""
Tests for sampling module.
"""

import pytest
import numpy as np

from pytile.sampling import UniformOffsetSampler, offset_bounds


class TestUniformOffsetSampler:
    """Test cases for UniformOffsetSampler."""

    def test_within_bounds(self):
        """Test that draws stay inside the symmetric interval."""
        sampler = UniformOffsetSampler()
        bounds = np.array([0.5, 2.0, 10.0])
        for seed in range(50):
            offset = sampler.sample(bounds, seed)
            assert offset.shape == (3,)
            assert np.all(np.abs(offset) <= bounds)

    def test_deterministic(self):
        """Test that a seed always gives the same draw."""
        sampler = UniformOffsetSampler()
        bounds = np.array([1.0, 1.0])
        assert np.array_equal(sampler.sample(bounds, 3), sampler.sample(bounds, 3))
        assert not np.array_equal(sampler.sample(bounds, 3), sampler.sample(bounds, 4))

    def test_zero_bounds(self):
        """Test that zero-width intervals give zero offsets."""
        offset = UniformOffsetSampler().sample(np.zeros(4), 0)
        assert np.array_equal(offset, np.zeros(4))

    def test_invalid_bounds(self):
        """Test negative and non-vector bounds."""
        sampler = UniformOffsetSampler()
        with pytest.raises(ValueError, match="non-negative"):
            sampler.sample(np.array([1.0, -1.0]), 0)
        with pytest.raises(ValueError, match="must be 1D"):
            sampler.sample(np.ones((2, 2)), 0)


def test_offset_bounds():
    """Test offset interval half-widths."""
    assert np.allclose(offset_bounds([3.0, 1.5], 1.5), [2.0, 1.0])
    assert np.allclose(offset_bounds([1.0], 4), [0.25])
