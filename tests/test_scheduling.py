"""Test band partitioning and the disjoint split of the pixel buffer."""

import itertools

import numpy as np
import pytest

from mandelbands.computation import allocate_pixels, pixel_to_point
from mandelbands.scheduling import Band, partition_bands, rows_per_band, split_buffer

UPPER_LEFT = complex(-2.0, 1.5)
LOWER_RIGHT = complex(1.0, -1.5)

HEIGHTS = [1, 2, 7, 8, 9, 63, 64, 100, 1080]
WORKERS = [1, 2, 3, 7, 8, 13, 200]


@pytest.mark.parametrize(
    "height, workers, expected",
    [(8, 8, 1), (9, 8, 2), (1080, 8, 135), (1081, 8, 136), (3, 8, 1), (100, 1, 100)],
)
def test_rows_per_band(height, workers, expected):
    assert rows_per_band(height, workers) == expected


@pytest.mark.parametrize("height, workers", [(0, 8), (10, 0)])
def test_rows_per_band_rejects_non_positive(height, workers):
    with pytest.raises(ValueError):
        rows_per_band(height, workers)


@pytest.mark.parametrize(
    "height, workers",
    list(itertools.product(HEIGHTS, WORKERS)),
    ids=lambda v: str(v),
)
def test_bands_cover_every_row_once(height, workers):
    bands = partition_bands((5, height), UPPER_LEFT, LOWER_RIGHT, workers)

    assert 0 < len(bands) <= workers
    assert all(band.rows > 0 for band in bands)
    covered = [row for band in bands for row in range(band.top, band.top + band.rows)]
    assert covered == list(range(height))
    assert len({band.rows for band in bands[:-1]}) <= 1
    assert bands[-1].rows <= bands[0].rows


def test_band_corners_follow_full_region():
    bounds = (40, 30)
    bands = partition_bands(bounds, UPPER_LEFT, LOWER_RIGHT, 4)

    assert bands[0].upper_left == UPPER_LEFT
    assert bands[-1].lower_right == LOWER_RIGHT
    for band in bands:
        assert band.upper_left == pixel_to_point(bounds, (0, band.top), UPPER_LEFT, LOWER_RIGHT)
        assert band.lower_right == pixel_to_point(bounds, (40, band.top + band.rows), UPPER_LEFT, LOWER_RIGHT)
    for upper, lower in zip(bands, bands[1:]):
        assert upper.lower_right.imag == lower.upper_left.imag


def test_short_final_band():
    bands = partition_bands((3, 10), UPPER_LEFT, LOWER_RIGHT, 4)
    assert [band.rows for band in bands] == [3, 3, 3, 1]
    assert [band.top for band in bands] == [0, 3, 6, 9]


def test_split_buffer_hands_out_disjoint_views():
    bounds = (6, 11)
    pixels = allocate_pixels(bounds)
    bands = partition_bands(bounds, UPPER_LEFT, LOWER_RIGHT, 3)
    views = split_buffer(pixels, bands)

    assert [view.size for view in views] == [band.width * band.rows for band in bands]
    for view in views:
        assert np.shares_memory(view, pixels)
    for first, second in itertools.combinations(views, 2):
        assert not np.shares_memory(first, second)

    for index, view in enumerate(views):
        view[:] = index + 1
    assert pixels.reshape(11, 6)[:, 0].tolist() == [1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3]


def _band(band_id, top, rows, width=4):
    return Band(band_id, top, rows, width, UPPER_LEFT, LOWER_RIGHT)


@pytest.mark.parametrize(
    "bands",
    [
        [_band(0, 0, 2), _band(1, 3, 1)],
        [_band(0, 0, 2), _band(1, 1, 3)],
        [_band(0, 0, 2), _band(1, 2, 1)],
        [_band(0, 0, 2), _band(1, 2, 0), _band(2, 2, 2)],
    ],
    ids=["gap", "overlap", "short", "empty"],
)
def test_split_buffer_rejects_bad_partition(bands):
    with pytest.raises(AssertionError):
        split_buffer(allocate_pixels((4, 4)), bands)
