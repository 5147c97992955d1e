"""
Luminance-like intensity of RGB colors.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

# Rec. 709 style luma weights
LUMA_WEIGHTS = np.array([0.2125, 0.7154, 0.0721])


def intensity(rgb: Union[np.ndarray, Sequence[float]]) -> Union[float, np.ndarray]:
    """
    Compute the intensity of a color, or of a color difference.

    Parameters
    ----------
    rgb : array_like
        Red, green, blue values, shape (3,) or (..., 3). Values are usually
        in [0, 1] but any real values are accepted.

    Returns
    -------
    float or np.ndarray
        Scalar for a single color, otherwise an array of shape ``rgb.shape[:-1]``.
    """

    rgb = np.asarray(rgb, dtype=np.float64)
    if rgb.ndim == 0 or rgb.shape[-1] != 3:
        raise ValueError(f"Expected trailing axis of length 3, got shape {rgb.shape}")

    value = rgb @ LUMA_WEIGHTS
    if rgb.ndim == 1:
        return float(value)
    return value
