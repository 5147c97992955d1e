"""
Configuration primitives for imfilter.

Defines the backend enum, the immutable filter parameters handed to the
driver, and a dataclass collecting execution options.
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from imfilter.core.errors import ConfigurationError


def check_sigma(name: str, value) -> float:
    """Return ``value`` as a float, or raise if it is not a finite number >= 0."""

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} {value} must be finite and >= 0")
    return float(value)


def check_count(name: str, value, minimum: int = 1) -> int:
    """Return ``value`` as an int, or raise if it is not an integer >= ``minimum``."""

    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} {value} must be >= {minimum}")
    return int(value)


def window_support(spatial_sigma: float) -> int:
    """Half-width of the filter window, ``floor(3 s)``."""

    return int(math.floor(3.0 * spatial_sigma))


class Backend(Enum):
    """Filtering backend selection."""

    REFERENCE = "reference"    # Per-pixel windows, optional thread pool
    VECTORIZED = "vectorized"  # numpy, loops over window offsets
    TORCH = "torch"            # unfold-based, needs PyTorch


@dataclass(frozen=True)
class FilterParameters:
    """
    Bilateral filter parameters.

    Constructed once from configuration and never modified afterwards.
    """

    spatial_sigma: float = 0.0  # s, pixels
    brightness_sigma: float = 0.0  # b, normalized intensity units
    reps: int = 1  # passes over the whole image

    @property
    def support(self) -> int:
        """Half-width of the filter window."""

        return window_support(self.spatial_sigma)

    def validate(self) -> None:
        """Validate filter parameters."""

        check_sigma("spatial_sigma", self.spatial_sigma)
        check_sigma("brightness_sigma", self.brightness_sigma)
        check_count("reps", self.reps)


@dataclass
class FilterConfig:
    """
    Execution options for the filter driver.

    All options have defaults matching a plain single-threaded run.
    """

    backend: Backend = Backend.REFERENCE
    nthreads: int = 1  # worker threads for the reference backend

    # Intermediate artifacts, written after every non-final repetition
    write_intermediate: bool = True
    intermediate_dir: Union[str, Path] = "."
    intermediate_pattern: str = "rep{rep}.png"

    def validate(self) -> None:
        """Validate execution options."""

        if not isinstance(self.backend, Backend):
            raise ConfigurationError(f"Unknown backend {self.backend!r}")

        check_count("nthreads", self.nthreads)

        if "{rep" not in self.intermediate_pattern:
            raise ConfigurationError(
                f"intermediate_pattern {self.intermediate_pattern!r} must contain a {{rep}} field"
            )

    def intermediate_path(self, rep: int) -> Path:
        """Path of the artifact written after repetition ``rep``."""

        return Path(self.intermediate_dir) / self.intermediate_pattern.format(rep=rep)
