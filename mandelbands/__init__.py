"""Public API for parallel Mandelbrot band rendering."""

from .buffer import Tile, as_pixel_buffer, new_pixel_buffer, tile_view
from .coloring import COLOR_POLICIES, PALETTE, GradientPolicy, PalettePolicy, get_color_policy
from .errors import (
    ConfigurationError,
    MandelbandsError,
    PartitionOverrunError,
    RenderCancelled,
    RenderError,
)
from .escape import MAX_ITERATIONS, escape_time, escape_time_grid
from .geometry import DEFAULT_WINDOW, Bounds, ComplexPoint, PlaneWindow, map_pixel, pixel_grid
from .output import to_image, write_image
from .parallel import (
    check_partition,
    default_workers,
    plan_partition,
    render_image,
    render_parallel,
    render_serial,
)
from .tiles import KERNELS, render_tile

__all__ = [
    "Bounds",
    "COLOR_POLICIES",
    "ComplexPoint",
    "ConfigurationError",
    "DEFAULT_WINDOW",
    "GradientPolicy",
    "KERNELS",
    "MAX_ITERATIONS",
    "MandelbandsError",
    "PALETTE",
    "PalettePolicy",
    "PartitionOverrunError",
    "PlaneWindow",
    "RenderCancelled",
    "RenderError",
    "Tile",
    "as_pixel_buffer",
    "check_partition",
    "default_workers",
    "escape_time",
    "escape_time_grid",
    "get_color_policy",
    "map_pixel",
    "new_pixel_buffer",
    "pixel_grid",
    "plan_partition",
    "render_image",
    "render_parallel",
    "render_serial",
    "render_tile",
    "tile_view",
    "to_image",
    "write_image",
]
