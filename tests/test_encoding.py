"""Tests for PNG output of finished buffers."""

import numpy as np
import pytest
from PIL import Image

from mandelbrot.encoding import read_image, write_image
from mandelbrot.errors import EncodingFailure, InvalidDimension, RenderError
from mandelbrot.execution import render_bands
from mandelbrot.geometry import Bounds


def test_written_png_matches_buffer(tmp_path, dyadic_bounds, dyadic_window):
    report = render_bands(dyadic_bounds, dyadic_window, 4)
    path = write_image(tmp_path / "mandel.png", report.image, dyadic_bounds)

    with Image.open(path) as raster:
        assert raster.mode == "L"
        assert raster.size == (64, 48)

    pixels, bounds = read_image(path)
    assert bounds == dyadic_bounds
    np.testing.assert_array_equal(pixels, report.image)


def test_write_accepts_bytes(tmp_path):
    data = bytes(range(12))
    path = write_image(tmp_path / "ramp.png", data, Bounds(4, 3))
    pixels, bounds = read_image(path)
    assert bounds == Bounds(4, 3)
    assert pixels.tobytes() == data


def test_write_leaves_buffer_untouched(tmp_path):
    pixels = np.arange(6, dtype=np.uint8)
    pixels.flags.writeable = False
    write_image(tmp_path / "small.png", pixels, Bounds(3, 2))
    assert pixels.tolist() == [0, 1, 2, 3, 4, 5]


@pytest.mark.parametrize("length", [0, 5, 7])
def test_length_mismatch_rejected(tmp_path, length):
    with pytest.raises(InvalidDimension):
        write_image(tmp_path / "bad.png", np.zeros(length, dtype=np.uint8), Bounds(2, 3))
    assert not (tmp_path / "bad.png").exists()


def test_missing_directories_are_created(tmp_path):
    target = write_image(tmp_path / "missing" / "dir" / "mandel.png", np.zeros(4, dtype=np.uint8), Bounds(2, 2))
    assert target.exists()


def test_unwritable_destination_raises_encoding_failure(tmp_path):
    (tmp_path / "blocker").write_text("not a directory")
    target = tmp_path / "blocker" / "mandel.png"
    with pytest.raises(EncodingFailure) as excinfo:
        write_image(target, np.zeros(4, dtype=np.uint8), Bounds(2, 2))
    assert not isinstance(excinfo.value, RenderError)
    assert isinstance(excinfo.value, OSError)


def test_read_missing_file(tmp_path):
    with pytest.raises(EncodingFailure):
        read_image(tmp_path / "nope.png")


@pytest.mark.parametrize("dtype", [np.float64, np.int32, np.uint16])
def test_non_byte_buffers_rejected(tmp_path, dtype):
    with pytest.raises(InvalidDimension):
        write_image(tmp_path / "wide.png", np.full(6, 300, dtype=dtype), Bounds(3, 2))
    assert not (tmp_path / "wide.png").exists()
