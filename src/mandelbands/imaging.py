"""Grayscale image output."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
import PIL.Image

DEFAULT_FORMAT = "PNG"


class ImageWriteError(Exception):
    """Raised when the rendered buffer cannot be written to disk."""


def _pil_format_name(path: Path) -> str:
    pil_format = PIL.Image.registered_extensions().get(path.suffix.lower(), DEFAULT_FORMAT)
    # some registered extensions (PSD, FLI, CUR) are read-only in Pillow
    if pil_format not in PIL.Image.SAVE:
        return DEFAULT_FORMAT
    return pil_format


def write_image(filename: str | Path, pixels: np.ndarray, bounds: Tuple[int, int]) -> Path:
    """Write ``pixels`` as an 8-bit grayscale image of size ``bounds``."""

    width, height = bounds
    if pixels.size != width * height:
        raise ImageWriteError(f"buffer holds {pixels.size} pixels, expected {width}x{height}")

    output_path = Path(filename)
    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8).reshape(height, width))
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(str(output_path), format=_pil_format_name(output_path))
    except (OSError, ValueError, KeyError) as exc:
        raise ImageWriteError(f"could not write {output_path}: {exc}") from exc
    return output_path
