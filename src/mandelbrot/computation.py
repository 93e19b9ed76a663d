from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numba import njit

from .errors import InvalidDimension
from .geometry import Bounds, Window, _map_pixel

__all__ = ["ESCAPE_LIMIT", "allocate_image", "escape_time", "render"]

# Iteration cap chosen so that every escape count fits in one byte.
ESCAPE_LIMIT = 255


def allocate_image(bounds: Bounds) -> np.ndarray:
    return np.zeros(bounds.size, dtype=np.uint8)


@njit(nogil=True)
def _escape_count(c_re: float, c_im: float, limit: int) -> int:
    z_re = 0.0
    z_im = 0.0
    for i in range(limit):
        if z_re * z_re + z_im * z_im > 4.0:
            return i
        temp = z_re * z_re - z_im * z_im + c_re
        z_im = 2.0 * z_re * z_im + c_im
        z_re = temp
    return limit


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Return the iteration at which ``c`` leaves the radius-2 disk.

    ``None`` means ``c`` stayed inside for ``limit`` iterations and is assumed
    to belong to the Mandelbrot set.
    """
    count = _escape_count(float(c.real), float(c.imag), int(limit))
    if count >= limit:
        return None
    return count


@njit(nogil=True)
def _render(
    pixels: np.ndarray,
    width: int,
    height: int,
    top: int,
    plane_height: int,
    ul_re: float,
    ul_im: float,
    lr_re: float,
    lr_im: float,
    limit: int,
) -> None:
    for row in range(height):
        for column in range(width):
            re, im = _map_pixel(width, plane_height, column, top + row, ul_re, ul_im, lr_re, lr_im)
            count = _escape_count(re, im, limit)
            if count >= limit:
                pixels[row * width + column] = 0
            else:
                pixels[row * width + column] = 255 - count


def render(
    pixels: np.ndarray,
    bounds: Bounds,
    window: Window,
    top: int = 0,
    plane: Optional[Tuple[Bounds, Window]] = None,
) -> None:
    """Fill ``pixels`` in place with the grayscale escape image of ``window``.

    ``pixels`` is a flat ``uint8`` buffer of ``bounds.width * bounds.height``
    bytes, row-major. Fast escapes are bright, points that never escape are 0.

    When ``plane = (full_bounds, full_window)`` is given, ``pixels`` holds rows
    ``top .. top + bounds.height`` of that larger raster and every pixel is
    mapped against the full raster, so a band gets exactly the bytes a single
    full render would put there. ``window`` then only describes the band.
    """
    bounds.validate()
    if pixels.ndim != 1 or pixels.shape[0] != bounds.size:
        raise InvalidDimension(
            f"buffer holds {pixels.size} pixels but {bounds} needs {bounds.size}"
        )
    if plane is None:
        plane_bounds, plane_window = bounds, window
        if top != 0:
            raise InvalidDimension("a row offset needs the full raster bounds and window")
    else:
        plane_bounds, plane_window = plane
        plane_bounds.validate()
        if plane_bounds.width != bounds.width or top < 0 or top + bounds.height > plane_bounds.height:
            raise InvalidDimension(
                f"rows {top}:{top + bounds.height} of width {bounds.width} do not fit in {plane_bounds}"
            )
    _render(
        pixels,
        bounds.width,
        bounds.height,
        int(top),
        plane_bounds.height,
        float(plane_window.upper_left.real),
        float(plane_window.upper_left.imag),
        float(plane_window.lower_right.real),
        float(plane_window.lower_right.imag),
        ESCAPE_LIMIT,
    )
