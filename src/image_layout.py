"""
Channel layout helpers shared by the pipeline stages

Images are numpy uint8 arrays: (H, W) grayscale, (H, W, 3) RGB or
(H, W, 4) RGBA. A trailing singleton axis (H, W, 1) counts as grayscale.
"""

import cv2
import numpy as np

from errors import UnsupportedChannelLayout

SUPPORTED_CHANNELS = (1, 3, 4)


def channel_count(image: np.ndarray) -> int:
    """Return 1, 3 or 4, raising UnsupportedChannelLayout otherwise."""
    if not isinstance(image, np.ndarray):
        raise UnsupportedChannelLayout(f"Expected numpy array, got {type(image).__name__}")
    if image.dtype != np.uint8:
        raise UnsupportedChannelLayout(f"Expected uint8 samples, got {image.dtype}")
    if image.ndim == 2:
        channels = 1
    elif image.ndim == 3:
        channels = image.shape[2]
    else:
        raise UnsupportedChannelLayout(f"Unsupported image shape: {image.shape}")

    if channels not in SUPPORTED_CHANNELS:
        raise UnsupportedChannelLayout(
            f"Unsupported channel count: {channels} (allowed: {SUPPORTED_CHANNELS})"
        )
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise UnsupportedChannelLayout(f"Empty image: {image.shape}")
    return channels


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Single-channel copy of an RGB / RGBA / grayscale image."""
    channels = channel_count(image)
    if channels == 1:
        return image.reshape(image.shape[0], image.shape[1]).copy()
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)


def drop_alpha(image: np.ndarray) -> np.ndarray:
    """RGB copy of an RGBA image; other layouts are copied unchanged."""
    if channel_count(image) == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
    return image.copy()
