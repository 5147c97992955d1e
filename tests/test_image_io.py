"""Tests for Pillow-backed image loading and saving."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from imfilter import DecodeError, EncodeError, load_image, save_image


def test_png_round_trip(tmp_path: Path, noisy_image: np.ndarray) -> None:
    path = tmp_path / "noisy.png"
    save_image(noisy_image, path)
    loaded = load_image(path)
    assert loaded.dtype == np.uint8
    np.testing.assert_array_equal(loaded, noisy_image)


def test_grayscale_and_alpha_are_converted_to_rgb(tmp_path: Path) -> None:
    gray = tmp_path / "gray.png"
    PILImage.fromarray(np.full((3, 5), 77, dtype=np.uint8)).save(gray)
    loaded = load_image(gray)
    assert loaded.shape == (3, 5, 3)
    assert np.all(loaded == 77)

    rgba = tmp_path / "rgba.png"
    PILImage.new("RGBA", (2, 2), (10, 20, 30, 40)).save(rgba)
    np.testing.assert_array_equal(load_image(rgba)[0, 0], [10, 20, 30])


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DecodeError):
        load_image(tmp_path / "missing.png")


def test_garbage_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(DecodeError):
        load_image(path)


def test_unsupported_extension_raises(tmp_path: Path, noisy_image: np.ndarray) -> None:
    with pytest.raises(EncodeError):
        save_image(noisy_image, tmp_path / "out.notanimage")


def test_unwritable_location_raises(tmp_path: Path, noisy_image: np.ndarray) -> None:
    with pytest.raises(EncodeError):
        save_image(noisy_image, tmp_path / "no" / "such" / "dir" / "out.png")


def test_wrong_array_raises(tmp_path: Path) -> None:
    with pytest.raises(EncodeError):
        save_image(np.zeros((4, 4), dtype=np.uint8), tmp_path / "out.png")
    with pytest.raises(EncodeError):
        save_image(np.zeros((4, 4, 3), dtype=np.float32), tmp_path / "out.png")
