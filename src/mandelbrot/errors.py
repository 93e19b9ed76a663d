"""Error taxonomy for band rendering and image encoding."""

from __future__ import annotations

from typing import List, Tuple

__all__ = ["RenderError", "InvalidDimension", "WorkerFailure", "EncodingFailure"]


class RenderError(Exception):
    """Base class for failures inside the rendering engine."""


class InvalidDimension(RenderError, ValueError):
    """Zero, negative or inconsistent dimensions detected before partitioning."""


class WorkerFailure(RenderError):
    """One or more band workers failed; raised once every worker has joined."""

    def __init__(self, failures: List[Tuple[int, BaseException]]):
        self.failures = list(failures)
        bands = ", ".join(str(index) for index, _ in self.failures)
        first = self.failures[0][1] if self.failures else None
        super().__init__(f"{len(self.failures)} band worker(s) failed (bands {bands}): {first!r}")

    @property
    def band_indices(self) -> List[int]:
        return [index for index, _ in self.failures]


class EncodingFailure(OSError):
    """Writing the finished buffer to disk failed."""
