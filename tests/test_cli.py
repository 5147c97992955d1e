"""End-to-end tests for the command line tool."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from imfilter import bilateral_filter, load_image, save_image
from imfilter.cli import main


@pytest.fixture
def input_png(tmp_path: Path, noisy_image: np.ndarray) -> Path:
    path = tmp_path / "in.png"
    save_image(noisy_image, path)
    return path


def test_filter_file(tmp_path: Path, input_png: Path, noisy_image: np.ndarray) -> None:
    out = tmp_path / "out.png"
    code = main(["--in", str(input_png), "--out", str(out), "--s", "1.0", "--b", "0.2"])
    assert code == 0
    expected = bilateral_filter(noisy_image, spatial_sigma=1.0, brightness_sigma=0.2)
    np.testing.assert_array_equal(load_image(out), expected)


def test_white_image_stays_white(tmp_path: Path) -> None:
    src = tmp_path / "white.png"
    out = tmp_path / "white_out.png"
    save_image(np.full((4, 4, 3), 255, dtype=np.uint8), src)
    assert main(["--in", str(src), "--out", str(out), "--s", "1", "--b", "1", "--reps", "1"]) == 0
    assert np.all(load_image(out) == 255)


def test_repetitions_write_intermediates(tmp_path: Path, input_png: Path) -> None:
    out = tmp_path / "out.png"
    inter = tmp_path / "steps"
    inter.mkdir()
    code = main(
        [
            "--in", str(input_png),
            "--out", str(out),
            "--s", "0.5",
            "--b", "0.1",
            "--reps", "3",
            "--nthreads", "2",
            "--intermediate-dir", str(inter),
        ]
    )
    assert code == 0
    assert sorted(p.name for p in inter.iterdir()) == ["rep0.png", "rep1.png"]
    assert out.exists()


def test_no_intermediate_flag(tmp_path: Path, input_png: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    code = main(["--in", "in.png", "--out", "out.png", "--s", "0.5", "--reps", "2", "--no-intermediate"])
    assert code == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["in.png", "out.png"]


def test_vectorized_backend(tmp_path: Path, input_png: Path) -> None:
    out = tmp_path / "out.png"
    assert main(["--in", str(input_png), "--out", str(out), "--s", "1", "--backend", "vectorized"]) == 0
    assert out.exists()


def test_missing_input_option_fails(tmp_path: Path) -> None:
    assert main(["--out", str(tmp_path / "out.png")]) == 1


def test_missing_input_file_fails(tmp_path: Path) -> None:
    assert main(["--in", str(tmp_path / "nope.png"), "--out", str(tmp_path / "out.png")]) == 1


def test_invalid_reps_fails(tmp_path: Path, input_png: Path) -> None:
    assert main(["--in", str(input_png), "--out", str(tmp_path / "out.png"), "--reps", "0"]) == 1


def test_unsupported_output_fails(tmp_path: Path, input_png: Path) -> None:
    assert main(["--in", str(input_png), "--out", str(tmp_path / "out.notanimage")]) == 1


def test_unknown_backend_is_usage_error(tmp_path: Path, input_png: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--in", str(input_png), "--out", str(tmp_path / "out.png"), "--backend", "gpu"])
    assert excinfo.value.code == 2
