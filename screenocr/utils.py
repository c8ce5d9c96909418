"""
Utility functions for image loading and geometric operations.
"""

from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .config import SUPPORTED_EXTENSIONS
from .errors import ImageLoadError


def load_image(image_path):
    """
    Load and decode an image file as RGB.

    Args:
        image_path: Path to the image file

    Returns:
        PIL Image in RGB mode

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded
    """
    image_path = Path(image_path)
    if not image_path.is_file():
        raise ImageLoadError(f"Could not load image at {image_path}")

    try:
        with Image.open(image_path) as pil_img:
            # Force a full decode so truncated files fail here, not in the engine
            pil_img.load()
            if pil_img.mode != "RGB":
                return pil_img.convert("RGB")
            return pil_img.copy()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Could not decode image at {image_path}: {e}") from e


def has_supported_extension(image_path):
    """Check whether the path looks like an image we know how to read."""
    return Path(image_path).suffix.lower() in SUPPORTED_EXTENSIONS


def to_bgr_array(image):
    """Convert a PIL RGB image to an OpenCV BGR array."""
    image_rgb = np.array(image)
    return cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR)


def box_top(box):
    """Smallest y of a box given as points or as an (N, 2) array."""
    return float(np.asarray(box, dtype=float).reshape(-1, 2)[:, 1].min())
