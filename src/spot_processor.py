"""
Integrated Spot-the-Difference Pipeline
Combines page detection, rectification, contrast normalization and
bisection into a unified workflow

Workflow:
  1. detect_corners()  → page quadrilateral or None
  2. (caller lets the user adjust the four corners)
  3. process()         → rectify (if corners) → normalize → split
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from bisector import ImagePair, split
from color_normalizer import normalize
from errors import DegenerateGeometryError
from geometry import Point, PointLike, clamp_corners, order_corners
from image_io import load_image
from image_layout import channel_count
from perspective_rectifier import PerspectiveRectifier
from quad_selector import QuadrilateralSelector
from utils import validate_image_file


@dataclass
class ProcessResult:
    """Output of one pipeline run."""
    pair: ImagePair
    rectified: bool
    corners: Optional[List[Point]]
    source_width: int
    source_height: int
    processing_time_ms: int = 0
    applied: List[str] = field(default_factory=list)  # log of what was done


class SpotProcessor:
    """
    End-to-end pipeline for two-panel comparison pictures

    Every step returns a fresh array, so the caller's image is never
    modified and one processor can serve concurrent requests.
    """

    def __init__(self, config_path: Optional[str] = None):
        logger.info("Initializing Spot Processor Pipeline")
        self.selector = QuadrilateralSelector(config_path)
        self.rectifier = PerspectiveRectifier(config_path)
        logger.success("Spot Processor ready")

    def detect_corners(self, image: np.ndarray) -> Optional[List[Point]]:
        """
        Find the page in a photo.

        Returns:
            [TL, TR, BR, BL] or None when no page boundary was found
        """
        channel_count(image)
        return self.selector.select_best_quadrilateral(image)

    def process(
        self,
        image: np.ndarray,
        corners: Optional[Sequence[PointLike]] = None,
    ) -> ProcessResult:
        """
        Rectify (when corners are given), normalize and split.

        Args:
            image:   Decoded photo (not modified)
            corners: Four page corners, e.g. detected and then adjusted by
                     the user. They are clamped into the image and put back
                     into [TL, TR, BR, BL] order. None skips rectification.

        Returns:
            ProcessResult with the left/right halves
        """
        start_time = time.time()
        channel_count(image)
        h, w = image.shape[:2]

        applied: List[str] = []
        used_corners: Optional[List[Point]] = None
        working = image

        if corners is not None:
            used_corners = order_corners(clamp_corners(corners, w, h))
            try:
                working = self.rectifier.rectify(image, used_corners)
                applied.append("perspective_correction")
            except DegenerateGeometryError as e:
                logger.warning(f"[SpotProcessor] {e}; using the photo as-is")
                applied.append("rectification_skipped")
                used_corners = None
        else:
            logger.info("[SpotProcessor] No corners provided, using original image")

        corrected = normalize(working)
        applied.append("histogram_equalization")

        pair = split(corrected)
        applied.append("split")

        processing_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"[SpotProcessor] {w}x{h} → left {pair.left.shape[1]}x{pair.left.shape[0]}, "
            f"right {pair.right.shape[1]}x{pair.right.shape[0]} "
            f"({', '.join(applied)}) in {processing_time}ms"
        )

        return ProcessResult(
            pair=pair,
            rectified=used_corners is not None,
            corners=used_corners,
            source_width=w,
            source_height=h,
            processing_time_ms=processing_time,
            applied=applied,
        )

    def process_auto(self, image: np.ndarray) -> ProcessResult:
        """Detect and process without a manual adjustment step."""
        corners = self.detect_corners(image)
        return self.process(image, corners)

    def process_file(
        self,
        image_path: str,
        corners: Optional[Sequence[PointLike]] = None,
        auto_detect: bool = True,
    ) -> ProcessResult:
        """
        Process an image file.

        Args:
            image_path:  Path to the photo
            corners:     Explicit corners; overrides detection
            auto_detect: Detect corners when none are given
        """
        logger.info(f"Processing image: {image_path}")

        is_valid, msg = validate_image_file(image_path)
        if not is_valid:
            if msg == "File not found":
                raise FileNotFoundError(f"Image not found: {image_path}")
            raise ValueError(f"Invalid image: {msg}")

        image = load_image(image_path)
        if corners is None and auto_detect:
            corners = self.detect_corners(image)
        return self.process(image, corners)


# ── Self-test ─────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import sys

    from image_io import save_image
    from utils import ensure_directory, format_processing_time, sanitize_filename

    if len(sys.argv) < 2:
        print("Usage: python spot_processor.py <image_path> [output_dir]")
        sys.exit(1)

    path = sys.argv[1]
    out_dir = ensure_directory(sys.argv[2] if len(sys.argv) > 2 else "data/output")
    stem = Path(sanitize_filename(path)).stem

    result = SpotProcessor().process_file(path)
    left = save_image(result.pair.left, Path(out_dir) / f"{stem}_left.png")
    right = save_image(result.pair.right, Path(out_dir) / f"{stem}_right.png")

    print(f"Rectified: {result.rectified}  corners: {result.corners}")
    print(f"Applied:   {', '.join(result.applied)}")
    print(f"Time:      {format_processing_time(result.processing_time_ms)}")
    print(f"Left:      {left}")
    print(f"Right:     {right}")
