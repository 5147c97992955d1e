"""Shared fixtures for imfilter tests."""

from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def noisy_image(rng: np.random.Generator) -> np.ndarray:
    return rng.integers(0, 256, size=(7, 9, 3), dtype=np.uint8)
