"""Pixel and complex-plane geometry for Mandelbrot renders."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Tuple

from numba import njit

from .errors import InvalidDimension

__all__ = ["Bounds", "Window", "pixel_to_point"]


@dataclass(frozen=True)
class Bounds:
    """Pixel dimensions of an output raster."""

    width: int
    height: int

    @property
    def size(self) -> int:
        return self.width * self.height

    def validate(self) -> "Bounds":
        for name, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidDimension(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidDimension(f"{name} must be positive, got {value}")
        return self

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class Window:
    """Rectangle of the complex plane covered by a raster.

    The imaginary axis points up while pixel rows grow downwards, so
    ``upper_left.imag`` must be the larger of the two imaginary parts.
    """

    upper_left: complex
    lower_right: complex

    def validate(self) -> "Window":
        if not self.upper_left.real < self.lower_right.real:
            raise InvalidDimension(
                f"window real range is empty: {self.upper_left.real} >= {self.lower_right.real}"
            )
        if not self.upper_left.imag > self.lower_right.imag:
            raise InvalidDimension(
                f"window imaginary range is empty: {self.upper_left.imag} <= {self.lower_right.imag}"
            )
        return self


@njit(nogil=True)
def _map_pixel(
    width: int,
    height: int,
    column: int,
    row: int,
    ul_re: float,
    ul_im: float,
    lr_re: float,
    lr_im: float,
) -> Tuple[float, float]:
    re = ul_re + column * (lr_re - ul_re) / width
    im = ul_im - row * (ul_im - lr_im) / height
    return re, im


def pixel_to_point(bounds: Bounds, pixel: Tuple[int, int], window: Window) -> complex:
    """Map ``pixel = (column, row)`` to the complex plane.

    Endpoints are inclusive: ``(0, 0)`` maps to ``window.upper_left`` and
    ``(bounds.width, bounds.height)`` maps to ``window.lower_right``.
    """
    if bounds.width <= 0 or bounds.height <= 0:
        raise InvalidDimension(f"cannot map pixels of a {bounds} raster")
    column, row = pixel
    re, im = _map_pixel(
        int(bounds.width),
        int(bounds.height),
        int(column),
        int(row),
        float(window.upper_left.real),
        float(window.upper_left.imag),
        float(window.lower_right.real),
        float(window.lower_right.imag),
    )
    return complex(re, im)
