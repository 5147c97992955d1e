"""
Edge-preserving bilateral filtering of 8-bit RGB images.

Every neighbour in the window around a pixel is weighted by

    w = exp(-|p - q|^2 / (2 s^2) - intensity(I(p) - I(q))^2 / (2 b^2))

where a zero sigma disables the corresponding term.
"""

from __future__ import annotations

import logging
from typing import Tuple, Union

import numpy as np

from imfilter.core.config import check_sigma, window_support
from imfilter.core.errors import DecodeError, InvariantViolation
from imfilter.utils.color import intensity

logger = logging.getLogger(__name__)

# Slack for float accumulation error when truncating back to 8 bits
QUANTIZE_TOLERANCE = 1e-6


def check_image(image: np.ndarray) -> np.ndarray:
    """
    Ensure ``image`` is an H×W×3 uint8 array.
    """

    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise DecodeError(f"Expected H×W×3 image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise DecodeError(f"Expected uint8 samples, got {image.dtype}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise DecodeError(f"Image has no pixels: shape {image.shape}")
    return image


def window_bounds(x: int, y: int, support: int, width: int, height: int) -> Tuple[int, int, int, int]:
    """
    Inclusive window ``(x1, x2, y1, y2)`` around ``(x, y)`` clipped to the image.
    """

    x1 = max(x - support, 0)
    x2 = min(x + support, width - 1)
    y1 = max(y - support, 0)
    y2 = min(y + support, height - 1)
    return x1, x2, y1, y2


def quantize(weighted: np.ndarray, weight_sum: Union[float, np.ndarray]) -> np.ndarray:
    """
    Normalize accumulated colors and truncate them to 8-bit samples.

    Parameters
    ----------
    weighted : np.ndarray
        Weighted sum of normalized colors, shape (..., 3)
    weight_sum : float or np.ndarray
        Sum of weights, shape ``weighted.shape[:-1]``
    """

    weight_sum = np.asarray(weight_sum, dtype=np.float64)
    if not np.all(np.isfinite(weight_sum)) or np.any(weight_sum <= 0.0):
        raise InvariantViolation("Filter window has a zero or non-finite weight sum")

    levels = np.floor(255.0 * weighted / weight_sum[..., np.newaxis] + QUANTIZE_TOLERANCE)
    return np.clip(levels, 0, 255).astype(np.uint8)


def filter_pixel(image: np.ndarray, x: int, y: int, s: float, b: float) -> np.ndarray:
    """
    Compute the color of one pixel by applying a bilateral filter.

    Parameters
    ----------
    image : np.ndarray
        Input image, shape (H, W, 3), uint8. Only read.
    x, y : int
        Column and row of the pixel to filter
    s : float
        Spatial standard deviation (pixels), >= 0
    b : float
        Brightness standard deviation, >= 0

    Returns
    -------
    np.ndarray
        Filtered color, shape (3,), uint8
    """

    s = check_sigma("spatial_sigma", s)
    b = check_sigma("brightness_sigma", b)
    height, width = image.shape[:2]
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) outside {width}x{height} image")

    support = window_support(s)
    x1, x2, y1, y2 = window_bounds(x, y, support, width, height)

    center = image[y, x].astype(np.float64) / 255.0
    window = image[y1:y2 + 1, x1:x2 + 1].astype(np.float64) / 255.0

    # Spatial blur factor
    d1 = np.zeros(window.shape[:2])
    if s > 0:
        ys, xs = np.mgrid[y1:y2 + 1, x1:x2 + 1]
        d1 = ((xs - x) ** 2 + (ys - y) ** 2) / (2.0 * s * s)

    # Intensity blur factor
    d2 = np.zeros(window.shape[:2])
    if b > 0:
        diff_i = intensity(center - window)
        d2 = diff_i * diff_i / (2.0 * b * b)

    weights = np.exp(-d1 - d2)
    weighted = np.sum(weights[:, :, np.newaxis] * window, axis=(0, 1))

    return quantize(weighted, np.sum(weights))


def filter_rows(
    src: np.ndarray,
    dst: np.ndarray,
    y_start: int,
    y_stop: int,
    s: float,
    b: float,
) -> None:
    """
    Filter rows ``y_start <= y < y_stop`` of ``src`` into ``dst``.

    ``dst`` must not alias ``src``; only the given rows of ``dst`` are written.
    """

    width = src.shape[1]
    for y in range(y_start, y_stop):
        for x in range(width):
            dst[y, x] = filter_pixel(src, x, y, s, b)


def bilateral_filter_vectorized(image: np.ndarray, s: float, b: float) -> np.ndarray:
    """
    Apply the bilateral filter to a whole image at once.

    Loops over window offsets instead of pixels. For each offset the image is
    shifted by slicing, so neighbours outside the image never contribute.
    Matches :func:`filter_pixel` up to float summation order.
    """

    image = check_image(image)
    s = check_sigma("spatial_sigma", s)
    b = check_sigma("brightness_sigma", b)
    height, width = image.shape[:2]
    src = image.astype(np.float64) / 255.0
    luma = intensity(src)

    support = window_support(s)
    weighted = np.zeros_like(src)
    weight_sum = np.zeros((height, width))

    logger.debug("Vectorized bilateral: %dx%d, support=%d", width, height, support)

    for dy in range(-support, support + 1):
        ty0, ty1 = max(0, -dy), min(height, height - dy)
        if ty0 >= ty1:
            continue
        for dx in range(-support, support + 1):
            tx0, tx1 = max(0, -dx), min(width, width - dx)
            if tx0 >= tx1:
                continue

            neighbour = src[ty0 + dy:ty1 + dy, tx0 + dx:tx1 + dx]

            d1 = (dx * dx + dy * dy) / (2.0 * s * s) if s > 0 else 0.0
            d2 = np.zeros((ty1 - ty0, tx1 - tx0))
            if b > 0:
                # intensity() is linear, so the difference of intensities
                # equals the intensity of the color difference
                diff_i = luma[ty0:ty1, tx0:tx1] - luma[ty0 + dy:ty1 + dy, tx0 + dx:tx1 + dx]
                d2 = diff_i * diff_i / (2.0 * b * b)

            weights = np.exp(-d1 - d2)
            weighted[ty0:ty1, tx0:tx1] += weights[:, :, np.newaxis] * neighbour
            weight_sum[ty0:ty1, tx0:tx1] += weights

    return quantize(weighted, weight_sum)
