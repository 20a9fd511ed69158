"""
Image decoding and encoding at the pipeline boundary

Arrays handed to the pipeline are RGB / RGBA / grayscale in that channel
order (Pillow's order, not OpenCV's BGR), so nothing here needs cvtColor.
"""

import base64
import io
from pathlib import Path
from typing import Union

import numpy as np
from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError

from errors import DecodeError
from image_layout import channel_count

# Pillow modes that map directly onto a supported array layout
_DIRECT_MODES = {'L', 'RGB', 'RGBA'}

# 16-bit / 32-bit grayscale ('I;16', 'I;16B', 'I', 'F')
_HIGH_DEPTH_MODES = ('I', 'F')


def _scale_to_8bit(img: Image.Image) -> np.ndarray:
    """Map 16-bit sample range onto 0-255 grayscale; convert('L') would clip instead."""
    samples = np.asarray(img, dtype=np.float64) / 256.0
    return np.clip(samples, 0, 255).astype(np.uint8)


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode raw file bytes (JPEG, PNG, WebP, ...) into a uint8 array.

    EXIF orientation is applied so phone photos come out upright.

    Raises:
        DecodeError: bytes are empty or not a readable image
    """
    if not data:
        raise DecodeError("Empty image data")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            mode = img.mode
            if mode.startswith(_HIGH_DEPTH_MODES):
                array = _scale_to_8bit(img)
            else:
                if mode not in _DIRECT_MODES:
                    has_alpha = mode in ('LA', 'PA', 'RGBa') or 'transparency' in img.info
                    img = img.convert('RGBA' if has_alpha else 'RGB')
                array = np.array(img, dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Cannot decode image: {e}") from e

    logger.debug(f"[ImageIO] Decoded {array.shape[1]}x{array.shape[0]} ({mode})")
    return array


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Read and decode an image file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    return decode_image(path.read_bytes())


def to_pil(image: np.ndarray) -> Image.Image:
    channels = channel_count(image)
    if channels == 1:
        return Image.fromarray(image.reshape(image.shape[0], image.shape[1]))
    return Image.fromarray(np.ascontiguousarray(image))


def encode_png(image: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    to_pil(image).save(buffer, format='PNG')
    return buffer.getvalue()


def to_data_url(image: np.ndarray) -> str:
    """PNG data URL, ready for an <img src=...> on the comparison page."""
    encoded = base64.b64encode(encode_png(image)).decode('ascii')
    return f"data:image/png;base64,{encoded}"


def save_image(image: np.ndarray, path: Union[str, Path]) -> str:
    """Write an image; the format follows the file extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_pil(image).save(path)
    return str(path)
