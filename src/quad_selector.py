"""
Page Quadrilateral Detection

Finds the boundary of the photographed page as the largest clean
4-corner polygon among the image's edge contours.

STRATEGY:
  Photos vary in contrast and lighting, so a single Canny threshold pair
  misses many real page borders. We sweep three pairs from strict to
  permissive and stop as soon as a large candidate exists:

    (30, 100) → (50, 150) → (75, 200)

  For every contour covering at least 5% of the image we try polygon
  approximation at 2%, 3% and 4% of the perimeter. Four vertices means
  a candidate. The largest contour area wins; a later candidate must be
  strictly larger to replace the current best, so ties keep the first.

  Once a pass finishes with a best candidate above 20% of the image we
  accept it and skip the remaining, more permissive passes.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from contour_extractor import prepare_for_edges, trace_contours
from geometry import Point, array_to_points, order_corners
from utils import load_config


@dataclass
class Candidate:
    """A 4-vertex approximation and the area of the contour it came from."""
    area: float
    quad: np.ndarray   # (4, 1, 2) int32, unordered
    canny: Tuple[int, int]
    epsilon: float


class QuadrilateralSelector:
    """
    Page boundary detector.

    Constants mirror the tuned values of the phone-photo workflow; the
    `detection:` section of the YAML config can override them.
    """

    CANNY_THRESHOLD_PAIRS = [(30, 100), (50, 150), (75, 200)]
    APPROX_EPSILONS       = [0.02, 0.03, 0.04]
    MIN_AREA_RATIO        = 0.05   # contours below this share of the image are noise
    EARLY_STOP_AREA_RATIO = 0.20   # best candidate above this ends the sweep

    def __init__(self, config_path: Optional[str] = None):
        config = self._load_config(config_path)
        self.canny_pairs = [tuple(pair) for pair in config['canny_threshold_pairs']]
        self.epsilons = list(config['approx_epsilons'])
        self.min_area_ratio = float(config['min_area_ratio'])
        self.early_stop_area_ratio = float(config['early_stop_area_ratio'])
        self.parallel_sweep = bool(config.get('parallel_sweep', False))

        logger.info(
            f"[Detector] initialized: canny={self.canny_pairs} eps={self.epsilons} "
            f"min_area={self.min_area_ratio:.0%} early_stop={self.early_stop_area_ratio:.0%} "
            f"parallel={self.parallel_sweep}"
        )

    def _load_config(self, config_path: Optional[str] = None) -> dict:
        defaults = self._default_config()
        section = load_config(config_path, 'detection') or {}
        defaults.update(section)
        return defaults

    def _default_config(self) -> dict:
        return {
            'canny_threshold_pairs': list(self.CANNY_THRESHOLD_PAIRS),
            'approx_epsilons': list(self.APPROX_EPSILONS),
            'min_area_ratio': self.MIN_AREA_RATIO,
            'early_stop_area_ratio': self.EARLY_STOP_AREA_RATIO,
            'parallel_sweep': False,
        }

    # ── Public API ────────────────────────────────────────────────────────────

    def select_best_quadrilateral(self, image: np.ndarray) -> Optional[List[Point]]:
        """
        Detect the page quadrilateral.

        Args:
            image: RGB, RGBA or grayscale uint8 array (not modified)

        Returns:
            Corners ordered [TL, TR, BR, BL], or None when no 4-vertex
            contour cleared the minimum area
        """
        best = self.find_best_candidate(image)
        if best is None:
            logger.info("[Detector] No page quadrilateral found")
            return None

        corners = order_corners(array_to_points(best.quad))
        logger.info(
            f"[Detector] Page found: area={best.area:.0f} canny={best.canny} "
            f"eps={best.epsilon} corners={[(round(p.x), round(p.y)) for p in corners]}"
        )
        return corners

    def find_best_candidate(self, image: np.ndarray) -> Optional[Candidate]:
        """Run the threshold sweep and return the winning candidate (unordered)."""
        blurred = prepare_for_edges(image)
        h, w = blurred.shape[:2]
        image_area = float(w * h)

        if self.parallel_sweep:
            with ThreadPoolExecutor(max_workers=len(self.canny_pairs)) as pool:
                pass_results = list(pool.map(
                    lambda pair: self._scan_pass(blurred, pair, image_area),
                    self.canny_pairs,
                ))
        else:
            # Lazy so the early exit below also skips the work
            pass_results = (
                self._scan_pass(blurred, pair, image_area) for pair in self.canny_pairs
            )

        return self._reduce(pass_results, image_area)

    # ── Sweep internals ───────────────────────────────────────────────────────

    def _scan_pass(
        self,
        blurred: np.ndarray,
        canny_pair: Tuple[int, int],
        image_area: float,
    ) -> Optional[Candidate]:
        """Best candidate of one threshold pair, first-seen on ties."""
        low, high = canny_pair
        contours = trace_contours(blurred, low, high)
        min_area = image_area * self.min_area_ratio

        best: Optional[Candidate] = None
        kept = 0
        for contour in contours:
            area = cv2.contourArea(contour)
            if area < min_area:
                continue
            kept += 1

            peri = cv2.arcLength(contour, True)
            for eps in self.epsilons:
                approx = cv2.approxPolyDP(contour, eps * peri, True)
                if len(approx) == 4 and (best is None or area > best.area):
                    best = Candidate(area=area, quad=approx, canny=(low, high), epsilon=eps)

        logger.debug(
            f"[Detector] canny=({low},{high}) contours={len(contours)} "
            f"large={kept} best_area={best.area if best else 0:.0f}"
        )
        return best

    def _reduce(
        self,
        pass_results: Iterable[Optional[Candidate]],
        image_area: float,
    ) -> Optional[Candidate]:
        """
        Fold per-pass winners in sweep order.

        Replacement needs strictly greater area, and the fold stops after
        the first pass that leaves the best above the early-stop ratio, so
        sequential and parallel sweeps agree.
        """
        best: Optional[Candidate] = None
        early_stop_area = image_area * self.early_stop_area_ratio

        for candidate in pass_results:
            if candidate is not None and (best is None or candidate.area > best.area):
                best = candidate
            if best is not None and best.area > early_stop_area:
                logger.debug(f"[Detector] Early stop after canny={best.canny}")
                break

        return best
