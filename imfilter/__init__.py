"""imfilter: edge-preserving bilateral filtering of RGB images.

Repeated bilateral smoothing with per-pixel, vectorized numpy and optional
PyTorch backends, plus Pillow-based image I/O and a command line tool.
"""

from imfilter.core.config import Backend, FilterConfig, FilterParameters
from imfilter.core.errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    ImFilterError,
    InvariantViolation,
)
from imfilter.core.pipeline import BilateralImageFilter, bilateral_filter
from imfilter.filters.bilateral import filter_pixel
from imfilter.io.image_io import load_image, save_image
from imfilter.utils.color import intensity

__all__ = [
    "Backend",
    "BilateralImageFilter",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "FilterConfig",
    "FilterParameters",
    "ImFilterError",
    "InvariantViolation",
    "bilateral_filter",
    "filter_pixel",
    "intensity",
    "load_image",
    "save_image",
]

try:  # Optional PyTorch backend
    from imfilter.torch import TorchBilateralFilter  # type: ignore

    __all__.append("TorchBilateralFilter")
except Exception:  # pragma: no cover - torch not installed
    TorchBilateralFilter = None  # type: ignore

__version__ = "1.0.0"
