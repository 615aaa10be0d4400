"""Baseline serial Mandelbrot implementation."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .computation import ESCAPE_LIMIT, escape_time, pixel_to_point


def compute_mandelbrot(bounds: Tuple[int, int], upper_left: complex, lower_right: complex) -> np.ndarray:
    """Compute the grayscale buffer for ``bounds`` one pixel at a time."""
    width, height = bounds
    pixels = np.zeros(width * height, dtype=np.uint8)

    for row in range(height):
        for column in range(width):
            point = pixel_to_point(bounds, (column, row), upper_left, lower_right)
            steps = escape_time(point, ESCAPE_LIMIT)
            pixels[row * width + column] = 0 if steps is None else ESCAPE_LIMIT - steps

    return pixels
