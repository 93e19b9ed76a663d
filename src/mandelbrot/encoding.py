"""Grayscale PNG output for finished pixel buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from .errors import EncodingFailure, InvalidDimension
from .geometry import Bounds

__all__ = ["write_image", "read_image"]


def write_image(filename: str | Path, pixels: np.ndarray | bytes, bounds: Bounds) -> Path:
    """Write ``pixels`` as an 8-bit single-channel PNG of size ``bounds``.

    The buffer is only read. Missing parent directories are created. Failures
    while creating them or writing the file are reported as ``EncodingFailure``.
    """
    bounds.validate()
    data = np.frombuffer(pixels, dtype=np.uint8) if isinstance(pixels, (bytes, bytearray)) else pixels
    if data.dtype != np.uint8:
        raise InvalidDimension(f"buffer must hold uint8 pixels, got {data.dtype}")
    if data.size != bounds.size:
        raise InvalidDimension(f"buffer holds {data.size} pixels but {bounds} needs {bounds.size}")

    path = Path(filename)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        raster = Image.frombytes("L", (bounds.width, bounds.height), np.ascontiguousarray(data).tobytes())
        raster.save(path, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodingFailure(f"error writing PNG file {path}: {exc}") from exc
    return path


def read_image(filename: str | Path) -> Tuple[np.ndarray, Bounds]:
    """Load a grayscale image back into a flat ``uint8`` buffer."""
    path = Path(filename)
    try:
        with Image.open(path) as raster:
            gray = raster.convert("L")
            width, height = gray.size
            pixels = np.asarray(gray, dtype=np.uint8).reshape(-1).copy()
    except OSError as exc:
        raise EncodingFailure(f"error reading image file {path}: {exc}") from exc
    return pixels, Bounds(width, height)
