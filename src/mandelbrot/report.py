"""Structured results returned from a band render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np

from .geometry import Bounds


@dataclass(frozen=True)
class RenderReport:
    """Container for outputs produced by ``render_bands``."""

    image: np.ndarray
    bounds: Bounds
    timing: Dict[str, Any]
    bands: List[Dict[str, Any]]

    def copy_bands(self) -> List[Dict[str, Any]]:
        return [record.copy() for record in self.bands]

    def as_rows(self) -> np.ndarray:
        """Read-only ``(height, width)`` view of the flat buffer."""
        return self.image.reshape(self.bounds.height, self.bounds.width)

    def tobytes(self) -> bytes:
        return self.image.tobytes()
