"""Row-band partitioning of the output raster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .errors import InvalidDimension
from .geometry import Bounds, Window, pixel_to_point

__all__ = ["DEFAULT_WORKERS", "Band", "BandPartitioner", "check_partition", "partition"]

DEFAULT_WORKERS = 8


@dataclass(frozen=True)
class Band:
    """Contiguous rows ``[top, top + height)`` and the plane window they cover."""

    index: int
    top: int
    height: int
    bounds: Bounds
    window: Window

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def rows(self) -> range:
        return range(self.top, self.bottom)

    def slice(self, width: int) -> slice:
        """Flat index range of this band inside a row-major buffer."""
        return slice(self.top * width, self.bottom * width)


@dataclass
class BandPartitioner:
    """Static partition of a raster into one band per worker."""

    bounds: Bounds
    window: Window
    workers: int = DEFAULT_WORKERS
    bands: List[Band] = field(init=False)

    def __post_init__(self) -> None:
        self.bounds.validate()
        self.window.validate()
        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers <= 0:
            raise InvalidDimension(f"worker count must be a positive integer, got {self.workers!r}")

        width, height = self.bounds.width, self.bounds.height
        count = min(self.workers, height)
        rows_per_band = height // count

        self.bands = []
        for index in range(count):
            top = index * rows_per_band
            bottom = height if index == count - 1 else top + rows_per_band
            self.bands.append(
                Band(
                    index=index,
                    top=top,
                    height=bottom - top,
                    bounds=Bounds(width, bottom - top),
                    window=Window(
                        pixel_to_point(self.bounds, (0, top), self.window),
                        pixel_to_point(self.bounds, (width, bottom), self.window),
                    ),
                )
            )
        check_partition(self.bands, height)

    @property
    def rows_per_band(self) -> int:
        return self.bounds.height // len(self.bands)


def partition(bounds: Bounds, window: Window, workers: int = DEFAULT_WORKERS) -> List[Band]:
    """Split ``bounds`` into at most ``workers`` disjoint row bands.

    The band count is capped at the number of rows so no band is empty, and
    the last band absorbs the rows left over by the integer division.
    """
    return BandPartitioner(bounds, window, workers).bands


def check_partition(bands: List[Band], height: int) -> None:
    """Raise ``InvalidDimension`` unless ``bands`` tile ``[0, height)`` exactly."""
    if not bands:
        raise InvalidDimension(f"no bands cover a raster of height {height}")
    expected = 0
    for band in sorted(bands, key=lambda b: b.top):
        if band.height <= 0:
            raise InvalidDimension(f"band {band.index} is empty")
        if band.top != expected:
            kind = "overlaps" if band.top < expected else "leaves a gap before"
            raise InvalidDimension(f"band {band.index} {kind} row {band.top}")
        if band.bounds.height != band.height:
            raise InvalidDimension(f"band {band.index} bounds disagree with its row count")
        expected = band.bottom
    if expected != height:
        raise InvalidDimension(f"bands cover rows [0, {expected}) but the raster has {height}")
