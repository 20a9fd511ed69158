"""
Edge contour extraction

Turns a photo into the outer boundaries of its connected edge regions:
grayscale → 5x5 Gaussian blur → Canny → external contour tracing.
The tracer's CHAIN_APPROX_SIMPLE already merges straight runs of points,
so contours come back as compact polygons.
"""

from typing import List

import cv2
import numpy as np

from image_layout import to_grayscale

BLUR_KERNEL = (5, 5)


def prepare_for_edges(image: np.ndarray) -> np.ndarray:
    """
    Grayscale + Gaussian blur to suppress sensor noise.

    Sigma 0 lets OpenCV derive it from the kernel size.
    """
    gray = to_grayscale(image)
    return cv2.GaussianBlur(gray, BLUR_KERNEL, 0)


def trace_contours(blurred: np.ndarray, canny_low: int, canny_high: int) -> List[np.ndarray]:
    """Canny with the given hysteresis thresholds, then outermost contours only."""
    edges = cv2.Canny(blurred, canny_low, canny_high)
    contours, _ = cv2.findContours(edges, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    return list(contours)


def extract_contours(image: np.ndarray, canny_low: int, canny_high: int) -> List[np.ndarray]:
    """
    Closed boundary curves of an image.

    Args:
        image:      RGB, RGBA or grayscale uint8 array (not modified)
        canny_low:  Lower hysteresis threshold
        canny_high: Upper hysteresis threshold

    Returns:
        List of (N, 1, 2) int32 contours
    """
    return trace_contours(prepare_for_edges(image), canny_low, canny_high)
