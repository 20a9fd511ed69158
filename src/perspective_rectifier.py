"""
Perspective rectification

Flattens a skewed photo of a planar page into an upright rectangle.
The output size comes from the corner geometry: each dimension uses the
longer of its two parallel edges so a skewed page is never cropped.
"""

import math
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from errors import DegenerateGeometryError
from geometry import Point, distance, points_to_array
from image_layout import channel_count
from utils import load_config

INTERPOLATION_FLAGS = {
    'nearest': cv2.INTER_NEAREST,
    'linear':  cv2.INTER_LINEAR,
    'cubic':   cv2.INTER_CUBIC,
    'lanczos': cv2.INTER_LANCZOS4,
}


def target_size(corners: Sequence[Point]) -> Tuple[float, float]:
    """
    Rectangle dimensions for ordered corners [TL, TR, BR, BL].

    Returns:
        (target_width, target_height) as floats
    """
    if len(corners) != 4:
        raise ValueError(f"Expected 4 corners, got {len(corners)}")
    tl, tr, br, bl = corners

    width_bottom = distance(br, bl)
    width_top    = distance(tr, tl)
    height_right = distance(tr, br)
    height_left  = distance(tl, bl)

    return max(width_bottom, width_top), max(height_right, height_left)


def perspective_matrix(corners: Sequence[Point], width: float, height: float) -> np.ndarray:
    """Homography taking the ordered corners onto the (width x height) rectangle."""
    src = points_to_array(corners)
    if abs(cv2.contourArea(src)) < 1.0:
        raise DegenerateGeometryError(f"Corners enclose no area: {corners}")

    dst = np.array([
        [0,         0         ],
        [width - 1, 0         ],
        [width - 1, height - 1],
        [0,         height - 1],
    ], dtype=np.float32)

    M = cv2.getPerspectiveTransform(src, dst)
    if not np.all(np.isfinite(M)) or abs(np.linalg.det(M)) < 1e-12:
        raise DegenerateGeometryError(f"Singular perspective transform for corners {corners}")
    return M


def rectify(
    image: np.ndarray,
    corners: List[Point],
    interpolation: str = 'linear',
    border_value: int = 0,
) -> np.ndarray:
    """
    Warp the quadrilateral bounded by `corners` onto an upright rectangle.

    Args:
        image:         Source image (not modified)
        corners:       Ordered [TL, TR, BR, BL]
        interpolation: 'nearest', 'linear', 'cubic' or 'lanczos'
        border_value:  Fill for pixels that map outside the source

    Returns:
        New image of size ceil(target_width) x ceil(target_height)

    Raises:
        DegenerateGeometryError: corners collapse to zero width or height
    """
    channels = channel_count(image)
    width, height = target_size(corners)

    if round(width) == 0 or round(height) == 0:
        raise DegenerateGeometryError(
            f"Degenerate corners: target size {width:.2f}x{height:.2f}"
        )

    out_w = max(1, math.ceil(width))
    out_h = max(1, math.ceil(height))

    M = perspective_matrix(corners, width, height)
    border = (border_value,) * channels if channels > 1 else border_value

    warped = cv2.warpPerspective(
        image, M, (out_w, out_h),
        flags=INTERPOLATION_FLAGS[interpolation],
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=border,
    )

    logger.info(f"[Rectifier] {image.shape[1]}x{image.shape[0]} → {out_w}x{out_h}")
    return warped


class PerspectiveRectifier:
    """rectify() bound to the `rectification:` config section."""

    def __init__(self, config_path: Optional[str] = None):
        config = {'interpolation': 'linear', 'border_value': 0}
        config.update(load_config(config_path, 'rectification') or {})

        if config['interpolation'] not in INTERPOLATION_FLAGS:
            raise ValueError(
                f"Unknown interpolation: {config['interpolation']}. "
                f"Allowed: {sorted(INTERPOLATION_FLAGS)}"
            )
        self.interpolation = config['interpolation']
        self.border_value = int(config['border_value'])

    def rectify(self, image: np.ndarray, corners: List[Point]) -> np.ndarray:
        return rectify(image, corners, self.interpolation, self.border_value)
