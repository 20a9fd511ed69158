"""
Contrast normalization by histogram equalization

Color images are equalized channel by channel. This can shift the color
balance of saturated pictures slightly, but it is the reproducible
behavior the comparison view is tuned for.
"""

import cv2
import numpy as np

from image_layout import channel_count, drop_alpha


def normalize(image: np.ndarray) -> np.ndarray:
    """
    Histogram-equalize an image.

    Args:
        image: Grayscale, RGB or RGBA uint8 array (not modified)

    Returns:
        New equalized image; grayscale stays (H, W), color becomes (H, W, 3)
    """
    if channel_count(image) == 1:
        gray = image.reshape(image.shape[0], image.shape[1])
        return cv2.equalizeHist(gray)

    rgb = drop_alpha(image)
    planes = [cv2.equalizeHist(plane) for plane in cv2.split(rgb)]
    return cv2.merge(planes)
