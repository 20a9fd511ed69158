"""
Tests for histogram-equalization contrast normalization
"""

import cv2
import numpy as np
import pytest

from color_normalizer import normalize
from errors import UnsupportedChannelLayout


@pytest.fixture
def low_contrast_gray():
    rng = np.random.RandomState(0)
    return rng.randint(100, 151, size=(120, 160)).astype(np.uint8)


def test_grayscale_spreads_histogram(low_contrast_gray):
    out = normalize(low_contrast_gray)
    assert out.shape == low_contrast_gray.shape
    assert out.dtype == np.uint8
    assert out.min() == 0
    assert out.max() == 255


def test_single_channel_axis_is_accepted(low_contrast_gray):
    out = normalize(low_contrast_gray[..., np.newaxis])
    assert out.shape == low_contrast_gray.shape
    assert np.array_equal(out, normalize(low_contrast_gray))


def test_double_normalization_is_near_fixed_point(low_contrast_gray):
    once = normalize(low_contrast_gray)
    twice = normalize(once)

    hist_once = np.bincount(once.ravel(), minlength=256)
    hist_twice = np.bincount(twice.ravel(), minlength=256)
    moved = np.abs(hist_once - hist_twice).sum() / (2 * once.size)
    assert moved < 0.05
    assert np.abs(once.astype(int) - twice.astype(int)).mean() < 1.0


def test_color_channels_equalized_independently():
    rng = np.random.RandomState(1)
    rgb = np.dstack([
        rng.randint(0, 60, size=(80, 100)),
        rng.randint(100, 200, size=(80, 100)),
        rng.randint(200, 256, size=(80, 100)),
    ]).astype(np.uint8)

    out = normalize(rgb)
    assert out.shape == rgb.shape
    for c in range(3):
        assert np.array_equal(out[..., c], cv2.equalizeHist(np.ascontiguousarray(rgb[..., c])))


def test_rgba_drops_alpha():
    rng = np.random.RandomState(2)
    rgba = rng.randint(0, 256, size=(40, 50, 4)).astype(np.uint8)
    out = normalize(rgba)
    assert out.shape == (40, 50, 3)
    assert np.array_equal(out, normalize(np.ascontiguousarray(rgba[..., :3])))


def test_does_not_mutate_input(low_contrast_gray):
    before = low_contrast_gray.copy()
    normalize(low_contrast_gray)
    assert np.array_equal(before, low_contrast_gray)


@pytest.mark.parametrize("image", [
    np.zeros((10, 10, 2), dtype=np.uint8),
    np.zeros((10, 10, 5), dtype=np.uint8),
    np.zeros((10, 10, 3), dtype=np.float32),
    np.zeros((2, 10, 10, 3), dtype=np.uint8),
])
def test_unsupported_layouts(image):
    with pytest.raises(UnsupportedChannelLayout):
        normalize(image)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
