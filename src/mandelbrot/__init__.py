"""Parallel row-band renderer for the Mandelbrot set."""

__version__ = "1.0.0"

# Core engine - lightweight, no tracking dependencies
from .computation import ESCAPE_LIMIT, escape_time, render
from .config import RenderConfig, default_render_config, load_sweep_configs
from .encoding import write_image
from .errors import EncodingFailure, InvalidDimension, RenderError, WorkerFailure
from .execution import render_bands, render_sequential
from .geometry import Bounds, Window, pixel_to_point
from .report import RenderReport
from .scheduling import Band, partition


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "log_to_mlflow":
        from .logging import log_to_mlflow

        return log_to_mlflow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ESCAPE_LIMIT",
    "Band",
    "Bounds",
    "EncodingFailure",
    "InvalidDimension",
    "RenderConfig",
    "RenderError",
    "RenderReport",
    "WorkerFailure",
    "Window",
    "default_render_config",
    "escape_time",
    "load_sweep_configs",
    "log_to_mlflow",
    "partition",
    "pixel_to_point",
    "render",
    "render_bands",
    "render_sequential",
    "write_image",
]
