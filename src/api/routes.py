"""
API Routes - All API endpoints
"""

import json
import time
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, UploadFile, File, Form, HTTPException
from loguru import logger

from api.models import DetectResponse, ProcessResponse, ErrorResponse, PointModel
from errors import DecodeError, UnsupportedChannelLayout
from geometry import Point, to_point
from image_io import decode_image, to_data_url
from spot_processor import SpotProcessor
from utils import load_config

# Create router
router = APIRouter()

# Initialize pipeline
processor = SpotProcessor()

_api_config = load_config(section='api') or {}

# Allowed extensions and max file size
ALLOWED_EXTENSIONS = set(_api_config.get('allowed_extensions', ['.jpg', '.jpeg', '.png', '.webp', '.bmp']))
MAX_FILE_SIZE = int(_api_config.get('max_file_size_mb', 15)) * 1024 * 1024

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid upload or corners"},
    413: {"model": ErrorResponse, "description": "Upload too large"},
    422: {"model": ErrorResponse, "description": "Unsupported image layout"},
    500: {"model": ErrorResponse, "description": "Unexpected processing failure"},
}


# ==================== UTILITY FUNCTIONS ====================

def validate_file(file: UploadFile):
    """Validate uploaded file"""
    if not file.filename:
        raise HTTPException(400, detail="No filename provided")

    ext = Path(file.filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            400,
            detail=f"Invalid file type: {ext}. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )


async def read_upload(file: UploadFile):
    """Validate, read and decode an upload into an image array"""
    validate_file(file)
    data = await file.read()
    if len(data) > MAX_FILE_SIZE:
        raise HTTPException(413, detail=f"File too large (max {MAX_FILE_SIZE // (1024 * 1024)}MB)")
    try:
        return decode_image(data)
    except DecodeError as e:
        raise HTTPException(400, detail=str(e))


def parse_corners(raw: Optional[str]) -> Optional[List[Point]]:
    """
    Parse the `corners` form field.

    Accepts a JSON list of four {"x": .., "y": ..} objects or [x, y] pairs.
    """
    if raw is None or not raw.strip():
        return None
    try:
        values = json.loads(raw)
        if not isinstance(values, list) or len(values) != 4:
            raise ValueError("expected a list of 4 points")
        return [to_point(v) for v in values]
    except (ValueError, TypeError, KeyError) as e:
        raise HTTPException(400, detail=f"Invalid corners: {e}")


def to_models(points: Optional[List[Point]]) -> Optional[List[PointModel]]:
    if points is None:
        return None
    return [PointModel(x=p.x, y=p.y) for p in points]


# ==================== API ENDPOINTS ====================

@router.post("/spot/detect", response_model=DetectResponse, responses=ERROR_RESPONSES, tags=["Spot"])
async def detect_page(
    file: UploadFile = File(..., description="Photo of a two-panel picture")
):
    """
    **Detect the page corners in a photo**

    Returns the four corners (top-left, top-right, bottom-right,
    bottom-left) for the user to adjust, or `detected: false`.

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/spot/detect \\
      -F "file=@puzzle.jpg"
    ```
    """
    start_time = time.time()
    try:
        image = await read_upload(file)
        logger.info(f"Detecting page: {file.filename}")

        corners = processor.detect_corners(image)

        return DetectResponse(
            status="success",
            filename=file.filename,
            detected=corners is not None,
            corners=to_models(corners),
            image_width=image.shape[1],
            image_height=image.shape[0],
            processing_time_ms=int((time.time() - start_time) * 1000)
        )

    except HTTPException:
        raise
    except UnsupportedChannelLayout as e:
        raise HTTPException(422, str(e))
    except Exception as e:
        logger.error(f"Error detecting {file.filename}: {e}")
        logger.exception("Full traceback:")
        raise HTTPException(500, str(e))


@router.post("/spot/process", response_model=ProcessResponse, responses=ERROR_RESPONSES, tags=["Spot"])
async def process_picture(
    file: UploadFile = File(..., description="Photo of a two-panel picture"),
    corners: Optional[str] = Form(None, description="JSON list of 4 corner points"),
    auto_detect: bool = Form(True, description="Detect corners when none are given")
):
    """
    **Flatten, equalize and split a picture**

    **Parameters:**
    - `file`: Photo (JPG, PNG, WebP, BMP)
    - `corners`: Optional adjusted corners, e.g. `[{"x":100,"y":50}, ...]`
    - `auto_detect`: Detect the page when `corners` is omitted (default: True)

    **Returns:**
    - Left and right halves as PNG data URLs

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/spot/process \\
      -F "file=@puzzle.jpg" \\
      -F 'corners=[[100,50],[1100,80],[1150,750],[80,720]]'
    ```
    """
    start_time = time.time()
    try:
        points = parse_corners(corners)
        image = await read_upload(file)
        logger.info(f"Processing: {file.filename} (corners={'given' if points else 'none'})")

        if points is None and auto_detect:
            points = processor.detect_corners(image)

        result = processor.process(image, points)
        left, right = result.pair.left, result.pair.right

        return ProcessResponse(
            status="success",
            filename=file.filename,
            rectified=result.rectified,
            corners_used=to_models(result.corners),
            left_image=to_data_url(left),
            right_image=to_data_url(right),
            left_width=left.shape[1],
            right_width=right.shape[1],
            height=left.shape[0],
            applied=result.applied,
            processing_time_ms=int((time.time() - start_time) * 1000)
        )

    except HTTPException:
        raise
    except UnsupportedChannelLayout as e:
        raise HTTPException(422, str(e))
    except Exception as e:
        logger.error(f"Error processing {file.filename}: {e}")
        logger.exception("Full traceback:")
        raise HTTPException(500, str(e))
