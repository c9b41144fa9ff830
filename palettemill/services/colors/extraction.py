"""
Color extraction from images.

Acquires pixel samples from an image (sampling stride, alpha and near-white
rejection) and hands them to the quantization engine. Also provides the
plain average color of an image.
"""

import io
import os
from typing import BinaryIO, List, Optional, Tuple, Union

import numpy as np
from loguru import logger
from PIL import Image, UnidentifiedImageError

from ...config import config
from ..quantization import quantize

ImageSource = Union[str, os.PathLike, bytes, BinaryIO, Image.Image]
RGB = Tuple[int, int, int]


def load_image(source: ImageSource) -> Image.Image:
    """
    Open an image from a path, raw bytes, a file object or a Pillow image.

    Returns:
        Pillow image in RGBA mode

    Raises:
        ValueError: If the data cannot be decoded as an image
    """
    if isinstance(source, Image.Image):
        image = source
    else:
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        try:
            image = Image.open(source)
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Failed to decode image: {e}")

    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return image


def image_to_rgba_array(image: ImageSource) -> np.ndarray:
    """Flatten an image to an (H*W, 4) uint8 array in row-major order."""
    return np.asarray(load_image(image), dtype=np.uint8).reshape(-1, 4)


def sample_pixels(image: ImageSource,
                  quality: int = 10,
                  alpha_threshold: Optional[int] = None,
                  white_threshold: Optional[int] = None) -> np.ndarray:
    """
    Sample and filter image pixels for quantization.

    Args:
        image: Image source accepted by load_image
        quality: Sampling stride; every quality-th pixel is considered
        alpha_threshold: Minimum alpha for a pixel to be kept (default from config)
        white_threshold: Pixels with all channels above this are dropped
            (default from config)

    Returns:
        Filtered RGB pixels array (N, 3) uint8
    """
    if alpha_threshold is None:
        alpha_threshold = config.ALPHA_THRESHOLD
    if white_threshold is None:
        white_threshold = config.WHITE_THRESHOLD

    rgba = image_to_rgba_array(image)
    sampled = rgba[::max(1, int(quality))]

    opaque = sampled[:, 3] >= alpha_threshold
    near_white = np.all(sampled[:, :3] > white_threshold, axis=1)
    pixels = sampled[opaque & ~near_white, :3]

    logger.debug(f"Sampled {len(sampled)} of {len(rgba)} pixels, kept {len(pixels)}")
    return pixels


def _clamp(value, lower: int, upper: int) -> int:
    return max(lower, min(upper, int(np.floor(value))))


def get_palette(image: ImageSource,
                color_count: int = 10,
                quality: int = 10) -> Optional[List[RGB]]:
    """
    Extract a palette of representative colors from an image.

    Args:
        image: Image source accepted by load_image
        color_count: Requested number of colors, clamped to 2..20
        quality: Sampling stride, clamped to 1..10 (1 is slowest and most precise)

    Returns:
        List of RGB tuples, most dominant first, or None when the image could
        not be read or has no usable pixels
    """
    color_count = _clamp(color_count, config.MIN_COLOR_COUNT, config.MAX_COLOR_COUNT)
    quality = _clamp(quality, config.MIN_QUALITY, config.MAX_QUALITY)

    try:
        pixels = sample_pixels(image, quality=quality)
    except ValueError as e:
        logger.warning(f"Unable to read image pixels: {e}")
        return None

    if len(pixels) == 0:
        logger.info("No usable pixels after filtering")
        return None

    cmap = quantize(pixels, color_count)
    return cmap.palette() if cmap is not None else None


def get_dominant_color(image: ImageSource, quality: int = 10) -> Optional[RGB]:
    """Most dominant color of an image, or None."""
    palette = get_palette(image, 5, quality)
    return palette[0] if palette else None


def get_average_color(image: ImageSource, sample_size: int = 10) -> Optional[RGB]:
    """
    Mean color of every sample_size-th pixel with alpha above
    config.ALPHA_THRESHOLD.
    Each channel is floored.
    """
    try:
        rgba = image_to_rgba_array(image)
    except ValueError as e:
        logger.warning(f"Unable to read image pixels: {e}")
        return None

    sampled = rgba[::max(1, int(sample_size))]
    visible = sampled[sampled[:, 3] > config.ALPHA_THRESHOLD, :3]
    if len(visible) == 0:
        return None

    totals = visible.astype(np.int64).sum(axis=0)
    return tuple(int(t) // len(visible) for t in totals)
