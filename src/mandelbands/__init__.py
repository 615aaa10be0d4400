"""Mandelbrot bands - threaded grayscale renderer with optional MLflow tracking."""

__version__ = "1.0.0"

# Core computation and config - lightweight, no tracking stack
from .computation import escape_time, pixel_to_point, render_band
from .config import RenderConfig, default_render_config, load_render_configs, parse_complex, parse_pair
from .report import RenderReport
from .threads import render


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "track_render":
        from .tracking import track_render

        return track_render
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "RenderConfig",
    "RenderReport",
    "default_render_config",
    "escape_time",
    "load_render_configs",
    "parse_complex",
    "parse_pair",
    "pixel_to_point",
    "render",
    "render_band",
    "track_render",
]
