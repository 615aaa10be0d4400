"""Static partitioning of the pixel buffer into horizontal bands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .computation import pixel_to_point


@dataclass(frozen=True)
class Band:
    """A contiguous run of image rows together with its slice of the plane."""

    band_id: int
    top: int
    rows: int
    width: int
    upper_left: complex
    lower_right: complex

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.rows

    @property
    def start(self) -> int:
        return self.top * self.width

    @property
    def end(self) -> int:
        return (self.top + self.rows) * self.width


def rows_per_band(height: int, workers: int) -> int:
    """Rows assigned to every band but the last (ceiling division)."""
    if height <= 0 or workers <= 0:
        raise ValueError(f"height and workers must be positive, got {height} and {workers}")
    return (height + workers - 1) // workers


def partition_bands(
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    workers: int,
) -> List[Band]:
    """Split ``bounds`` into at most ``workers`` bands covering every row once.

    The last band holds whatever rows remain; rows past the image produce no
    band at all, so fewer than ``workers`` bands may come back.
    """
    width, height = bounds
    step = rows_per_band(height, workers)

    bands: List[Band] = []
    top = 0
    while top < height:
        rows = min(step, height - top)
        bands.append(
            Band(
                band_id=len(bands),
                top=top,
                rows=rows,
                width=width,
                upper_left=pixel_to_point(bounds, (0, top), upper_left, lower_right),
                lower_right=pixel_to_point(bounds, (width, top + rows), upper_left, lower_right),
            )
        )
        top += rows
    return bands


def split_buffer(pixels: np.ndarray, bands: List[Band]) -> List[np.ndarray]:
    """Hand out one writable view of ``pixels`` per band.

    The bands must tile the buffer exactly: each starts where the previous
    one ended, none is empty and the last ends at ``pixels.size``.
    """
    views: List[np.ndarray] = []
    expected_start = 0
    for band in bands:
        assert band.rows > 0, f"band {band.band_id} is empty"
        assert band.start == expected_start, (
            f"band {band.band_id} starts at {band.start}, expected {expected_start}"
        )
        views.append(pixels[band.start:band.end])
        expected_start = band.end
    assert expected_start == pixels.size, (
        f"bands cover {expected_start} of {pixels.size} pixels"
    )
    return views
