"""Thread-pool driver rendering bands of one shared pixel buffer."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

import numpy as np

from .computation import allocate_pixels, render_band
from .config import RenderConfig
from .report import RenderReport
from .scheduling import Band, partition_bands, split_buffer

__all__ = ["render"]


def _band_log(band_id: int, message: str, verbose: bool) -> None:
    """Emit a progress message from a given band worker."""
    if verbose:
        print(f"[Band {band_id}] {message}", flush=True)


def _band_record(band: Band, comp_time: float) -> Dict[str, Any]:
    """Create a uniform band metadata record."""
    return {
        "band_id": band.band_id,
        "top": band.top,
        "rows": band.rows,
        "comp_time": comp_time,
        "thread": threading.current_thread().name,
    }


def _render_band_timed(band: Band, pixels: np.ndarray, verbose: bool) -> Dict[str, Any]:
    """Render one band into its view and return its record."""
    comp_start = time.perf_counter()
    render_band(pixels, band.bounds, band.upper_left, band.lower_right)
    comp_time = time.perf_counter() - comp_start
    _band_log(
        band.band_id,
        f"Rendering rows {band.top}:{band.top + band.rows} took {comp_time:.4f}s",
        verbose,
    )
    return _band_record(band, comp_time)


def render(config: RenderConfig, *, verbose: bool = True) -> RenderReport:
    """Render ``config`` with ``config.workers`` threads, one band each.

    Every band is joined before returning. The first exception raised by any
    band is re-raised here, so a failed render never yields a report.
    """
    bounds = config.bounds
    pixels = allocate_pixels(bounds)
    bands = partition_bands(bounds, config.upper_left, config.lower_right, config.workers)
    views = split_buffer(pixels, bands)

    start_time = time.perf_counter()
    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="band") as pool:
        futures = [
            pool.submit(_render_band_timed, band, view, verbose)
            for band, view in zip(bands, views)
        ]
        records: List[Dict[str, Any]] = [future.result() for future in futures]
    total_time = time.perf_counter() - start_time

    timing = {
        "wall_time": float(total_time),
        "comp_total": float(sum(record["comp_time"] for record in records)),
        "total_bands": len(records),
        "workers": config.workers,
    }
    return RenderReport(pixels, bounds, timing, records)
