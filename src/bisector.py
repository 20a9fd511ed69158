"""
Split a two-panel picture into its left and right halves
"""

from dataclasses import dataclass

import numpy as np

from image_layout import channel_count


@dataclass
class ImagePair:
    left: np.ndarray
    right: np.ndarray


def split(image: np.ndarray) -> ImagePair:
    """
    Cut at floor(width / 2). The right half takes the extra column of an
    odd width. Both halves are independent copies of the source pixels.
    """
    channel_count(image)
    midpoint = image.shape[1] // 2
    return ImagePair(
        left=image[:, :midpoint].copy(),
        right=image[:, midpoint:].copy(),
    )
