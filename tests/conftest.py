"""
Shared fixtures: synthetic photos of pages on a dark background
"""

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

# Add src (pipeline modules) and the project root (main.py) to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


SKEWED_PAGE = [(100, 50), (1100, 80), (1150, 750), (80, 720)]


def draw_page(width, height, corners, channels=3, background=30, page=230):
    """Dark canvas with a filled bright quadrilateral."""
    shape = (height, width) if channels == 1 else (height, width, channels)
    img = np.full(shape, background, dtype=np.uint8)
    if channels == 4:
        img[..., 3] = 255
        color = (page, page, page, 255)
    elif channels == 3:
        color = (page, page, page)
    else:
        color = page
    cv2.fillPoly(img, [np.array(corners, dtype=np.int32)], color)
    return img


@pytest.fixture
def white_rectangle():
    """400x300 black canvas with a white rectangle covering 55% of it."""
    img = np.zeros((300, 400, 3), dtype=np.uint8)
    cv2.rectangle(img, (50, 40), (349, 259), (255, 255, 255), thickness=-1)
    return img


@pytest.fixture
def uniform_image():
    return np.full((300, 400, 3), 128, dtype=np.uint8)


@pytest.fixture
def skewed_photo():
    """1200x800 RGBA photo of a skewed page."""
    return draw_page(1200, 800, SKEWED_PAGE, channels=4)


@pytest.fixture
def two_panel_photo():
    """640x480 photo of a page holding two different panels."""
    corners = [(60, 40), (590, 60), (600, 440), (50, 420)]
    img = draw_page(640, 480, corners)
    cv2.circle(img, (200, 240), 60, (200, 40, 40), thickness=-1)
    cv2.rectangle(img, (380, 180), (480, 300), (40, 40, 200), thickness=-1)
    return img


@pytest.fixture
def gradient_image():
    """200x150 grayscale ramp; smooth enough to compare after resampling."""
    ys, xs = np.mgrid[0:150, 0:200]
    return ((xs + ys) // 2).astype(np.uint8)
