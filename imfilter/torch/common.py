"""
Shared helpers for the torch-based filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import torch


@dataclass(frozen=True)
class TensorFormat:
    """Bookkeeping for converting an H×W×3 array to NCHW and back."""

    original_shape: Tuple[int, ...]


def ensure_tensor(
    data,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float64,
) -> torch.Tensor:
    """
    Convert input data to a torch tensor on the requested device.
    """

    if isinstance(data, torch.Tensor):
        tensor = data.to(dtype=dtype)
        if device is not None:
            tensor = tensor.to(device)
        return tensor

    return torch.as_tensor(np.asarray(data), dtype=dtype, device=device)


def to_nchw(img: torch.Tensor) -> Tuple[torch.Tensor, TensorFormat]:
    """
    Reshape an H×W×3 image tensor to 1×3×H×W.
    """

    if img.dim() != 3 or img.shape[2] != 3:
        raise ValueError(f"Expected H×W×3 tensor, got shape {tuple(img.shape)}")

    fmt = TensorFormat(original_shape=tuple(img.shape))
    return img.permute(2, 0, 1).unsqueeze(0), fmt


def from_nchw(img: torch.Tensor, fmt: TensorFormat) -> torch.Tensor:
    """
    Convert a 1×3×H×W tensor back to H×W×3.
    """

    if img.dim() != 4:
        raise ValueError("Expected NCHW tensor with a batch dimension.")

    if img.shape[0] != 1:
        raise ValueError("Batch size > 1 is not supported.")

    out = img.squeeze(0).permute(1, 2, 0)
    if tuple(out.shape) != fmt.original_shape:
        raise ValueError(f"Shape {tuple(out.shape)} does not match {fmt.original_shape}")
    return out
