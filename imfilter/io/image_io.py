"""
Image file decode/encode backed by Pillow.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from imfilter.core.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into an H×W×3 uint8 array.

    Palette, grayscale and alpha images are converted to RGB; alpha is dropped.
    """

    path = Path(path)
    if not path.is_file():
        raise DecodeError(f"Image not found: {path}")

    try:
        with PILImage.open(path) as img:
            pixels = np.array(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(f"Cannot decode image {path}: {exc}") from exc

    logger.debug("Loaded %s: %dx%d", path, pixels.shape[1], pixels.shape[0])
    return pixels


def save_image(image: np.ndarray, path: Union[str, Path]) -> None:
    """
    Encode an H×W×3 uint8 array to ``path``; the format follows the extension.
    """

    path = Path(path)
    fmt = PILImage.registered_extensions().get(path.suffix.lower())
    if fmt is None or fmt not in PILImage.SAVE:
        raise EncodeError(f"Unsupported output extension {path.suffix!r}: {path}")

    pixels = np.asarray(image)
    if pixels.ndim != 3 or pixels.shape[2] != 3 or pixels.dtype != np.uint8:
        raise EncodeError(
            f"Expected H×W×3 uint8 image, got shape {pixels.shape} dtype {pixels.dtype}"
        )

    try:
        PILImage.fromarray(np.ascontiguousarray(pixels)).save(path, format=fmt)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Cannot write image {path}: {exc}") from exc

    logger.debug("Wrote %s (%s)", path, fmt)
