from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numba import njit

__all__ = ["ESCAPE_LIMIT", "allocate_pixels", "pixel_to_point", "escape_time", "render_band"]

ESCAPE_LIMIT = 255


def allocate_pixels(bounds: Tuple[int, int]) -> np.ndarray:
    width, height = bounds
    return np.zeros(width * height, dtype=np.uint8)


@njit(nogil=True)
def _pixel_to_point(
    width: int,
    height: int,
    column: int,
    row: int,
    ul_re: float,
    ul_im: float,
    lr_re: float,
    lr_im: float,
) -> Tuple[float, float]:
    plane_width = lr_re - ul_re
    plane_height = ul_im - lr_im
    # rows grow downwards, the imaginary axis grows upwards
    return ul_re + column * plane_width / width, ul_im - row * plane_height / height


def pixel_to_point(
    bounds: Tuple[int, int],
    pixel: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Map ``pixel = (column, row)`` inside ``bounds`` to a point of the plane.

    ``pixel`` may sit on the right or bottom edge (``column == width``), which
    is how band corners are derived.
    """
    re, im = _pixel_to_point(
        bounds[0],
        bounds[1],
        pixel[0],
        pixel[1],
        upper_left.real,
        upper_left.imag,
        lower_right.real,
        lower_right.imag,
    )
    return complex(re, im)


@njit(nogil=True)
def _escape_time(c_re: float, c_im: float, limit: int) -> int:
    z_re = 0.0
    z_im = 0.0
    for i in range(limit):
        if z_re * z_re + z_im * z_im > 4.0:
            return i
        z_re, z_im = z_re * z_re - z_im * z_im + c_re, z_re * z_im + z_im * z_re + c_im
    return -1


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Return the step at which ``c`` escapes radius 2, or None within ``limit``."""
    steps = _escape_time(c.real, c.imag, limit)
    return None if steps < 0 else int(steps)


@njit(nogil=True, boundscheck=True)
def _render_band(
    pixels: np.ndarray,
    width: int,
    height: int,
    ul_re: float,
    ul_im: float,
    lr_re: float,
    lr_im: float,
) -> None:
    for row in range(height):
        for column in range(width):
            re, im = _pixel_to_point(width, height, column, row, ul_re, ul_im, lr_re, lr_im)
            steps = _escape_time(re, im, ESCAPE_LIMIT)
            if steps < 0:
                pixels[row * width + column] = 0
            else:
                pixels[row * width + column] = ESCAPE_LIMIT - steps


def render_band(
    pixels: np.ndarray,
    band_bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> None:
    """Fill ``pixels`` (row-major, ``width * height`` bytes) with escape intensities.

    Points that never escape are 0, a point escaping at step ``t`` is
    ``255 - t``.
    """
    width, height = band_bounds
    assert pixels.size == width * height, (
        f"band buffer holds {pixels.size} pixels, bounds {width}x{height} need {width * height}"
    )
    _render_band(
        pixels,
        width,
        height,
        upper_left.real,
        upper_left.imag,
        lower_right.real,
        lower_right.imag,
    )
