"""
Bilateral filter on PyTorch tensors.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import torch
import torch.nn.functional as F

from imfilter.core.config import check_sigma, window_support
from imfilter.core.errors import InvariantViolation
from imfilter.filters.bilateral import QUANTIZE_TOLERANCE, check_image
from imfilter.torch.common import ensure_tensor, from_nchw, to_nchw
from imfilter.utils.color import LUMA_WEIGHTS

logger = logging.getLogger(__name__)


class TorchBilateralFilter:
    """
    Bilateral filter using torch unfold, on CPU or GPU.

    Neighbours outside the image are masked out rather than zero padded,
    so border windows are clipped exactly like the per-pixel filter.
    """

    def __init__(
        self,
        spatial_sigma: float = 0.0,
        brightness_sigma: float = 0.0,
        device: Optional[torch.device] = None,
        dtype: torch.dtype = torch.float64,
    ) -> None:
        self.spatial_sigma = check_sigma("spatial_sigma", spatial_sigma)
        self.brightness_sigma = check_sigma("brightness_sigma", brightness_sigma)
        self.kernel_radius = window_support(self.spatial_sigma)
        self.kernel_size = 2 * self.kernel_radius + 1
        self.device = device or torch.device("cpu")
        self.dtype = dtype
        self._spatial_weights = None

    def _prepare_spatial_weights(self, device: torch.device, dtype: torch.dtype) -> torch.Tensor:
        if self._spatial_weights is not None and self._spatial_weights.device == device and self._spatial_weights.dtype == dtype:
            return self._spatial_weights

        coords = torch.arange(-self.kernel_radius, self.kernel_radius + 1, device=device, dtype=dtype)
        yy, xx = torch.meshgrid(coords, coords, indexing="ij")
        if self.spatial_sigma > 0:
            spatial = torch.exp(-(xx**2 + yy**2) / (2.0 * self.spatial_sigma**2))
        else:
            spatial = torch.ones_like(xx)
        self._spatial_weights = spatial.reshape(1, -1, 1)
        return self._spatial_weights

    def filter(self, img: torch.Tensor) -> torch.Tensor:
        """
        Filter an NCHW tensor of normalized RGB colors.

        Returns the weighted mean color per pixel, still in [0, 1].
        """

        if img.dim() != 4 or img.shape[1] != 3:
            raise ValueError("TorchBilateralFilter expects an N×3×H×W tensor.")

        n, _, h, w = img.shape
        k = self.kernel_size
        pad = self.kernel_radius

        spatial = self._prepare_spatial_weights(img.device, img.dtype)
        luma_weights = torch.as_tensor(LUMA_WEIGHTS, device=img.device, dtype=img.dtype).reshape(1, 3, 1, 1)
        luma = (img * luma_weights).sum(dim=1, keepdim=True)

        patches = F.unfold(img, kernel_size=k, padding=pad).reshape(n, 3, k * k, h * w)
        luma_patches = F.unfold(luma, kernel_size=k, padding=pad)
        inside = F.unfold(torch.ones_like(luma), kernel_size=k, padding=pad)

        if self.brightness_sigma > 0:
            center = luma.reshape(n, 1, -1)
            range_weights = torch.exp(-((center - luma_patches) ** 2) / (2.0 * self.brightness_sigma**2))
        else:
            range_weights = torch.ones_like(luma_patches)

        weights = spatial * range_weights * inside
        weight_sum = weights.sum(dim=1)
        if not bool(torch.all(weight_sum > 0)) or not bool(torch.isfinite(weight_sum).all()):
            raise InvariantViolation("Filter window has a zero or non-finite weight sum")

        weighted = (patches * weights.unsqueeze(1)).sum(dim=2)
        filtered = weighted / weight_sum.unsqueeze(1)
        return filtered.reshape(n, 3, h, w)

    def filter_image(self, image: np.ndarray) -> np.ndarray:
        """
        Filter an H×W×3 uint8 array and quantize the result back to uint8.
        """

        image = check_image(image)
        tensor = ensure_tensor(image, device=self.device, dtype=self.dtype) / 255.0
        nchw, fmt = to_nchw(tensor)

        logger.debug(
            "Torch bilateral on %s: %dx%d, kernel=%d",
            self.device,
            image.shape[1],
            image.shape[0],
            self.kernel_size,
        )

        filtered = from_nchw(self.filter(nchw), fmt)
        levels = torch.floor(255.0 * filtered + QUANTIZE_TOLERANCE).clamp(0, 255)
        return levels.to(torch.uint8).cpu().numpy()
