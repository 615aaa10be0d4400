"""Structured results returned from a threaded render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np


@dataclass(frozen=True)
class RenderReport:
    """Container for outputs produced by ``render``."""

    pixels: np.ndarray
    bounds: Tuple[int, int]
    timing: Dict[str, Any]
    bands: List[Dict[str, Any]]

    @property
    def image(self) -> np.ndarray:
        width, height = self.bounds
        return self.pixels.reshape(height, width)

    def copy_bands(self) -> List[Dict[str, Any]]:
        return [record.copy() for record in self.bands]
