"""Render one rectangular tile of the image into its slice of the buffer."""

from __future__ import annotations

import threading
from typing import Optional

import numpy as np

from .buffer import Tile
from .coloring import DEFAULT_POLICY
from .errors import ConfigurationError, PartitionOverrunError, RenderCancelled
from .escape import MAX_ITERATIONS, escape_time, escape_time_grid
from .geometry import Bounds, PlaneWindow, map_pixel, pixel_grid

KERNELS = ("tensorflow", "python")
DEFAULT_KERNEL = "tensorflow"


def validate_kernel(kernel: str) -> str:
    if kernel not in KERNELS:
        raise ConfigurationError(f"Unknown kernel {kernel!r}. Valid choices: {', '.join(KERNELS)}.")
    return kernel


def _check_cancel(cancel_event: Optional[threading.Event], tile: Tile) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RenderCancelled(f"Rendering of {tile} was cancelled.")


def _check_target(tile: Tile, target: np.ndarray) -> None:
    if tile.byte_count > target.size:
        raise PartitionOverrunError(
            f"{tile} needs {tile.byte_count} bytes but its slice holds {target.size}."
        )
    if target.ndim != 1 and target.shape != (tile.height, tile.width, 3):
        raise PartitionOverrunError(
            f"{tile} does not match its target of shape {target.shape}."
        )


def _render_python(tile, bounds, window, rows, max_iterations, policy, cancel_event):
    for h in range(tile.height):
        _check_cancel(cancel_event, tile)
        row = rows[h]
        for w in range(tile.width):
            point = map_pixel((tile.x + w, tile.y + h), bounds, window)
            count = escape_time(point, max_iterations)
            row[w] = policy.color(count, point)


def _render_tensorflow(tile, bounds, window, rows, max_iterations, policy, cancel_event):
    re, im = pixel_grid(tile.origin, tile.extent, bounds, window)
    counts = escape_time_grid(re, im, max_iterations)
    rgb = policy.colorize(counts, re, im)
    _check_cancel(cancel_event, tile)
    rows[...] = rgb


_KERNEL_FUNCTIONS = {
    "python": _render_python,
    "tensorflow": _render_tensorflow,
}


def render_tile(
    tile: Tile,
    bounds: Bounds,
    window: PlaneWindow,
    target: np.ndarray,
    *,
    max_iterations: int = MAX_ITERATIONS,
    policy=None,
    kernel: str = DEFAULT_KERNEL,
    cancel_event: Optional[threading.Event] = None,
) -> None:
    """Fill ``target`` with the colors of the pixels covered by ``tile``.

    Pixels are mapped with the image-wide ``bounds`` and ``window``, not the
    tile's own extent. ``target`` is either the tile's ``(height, width, 3)``
    view of the image or a flat byte slice filled sequentially from offset 0.
    Nothing is written when the tile does not fit ``target``.
    """

    render = _KERNEL_FUNCTIONS[validate_kernel(kernel)]
    policy = DEFAULT_POLICY if policy is None else policy
    _check_target(tile, target)
    _check_cancel(cancel_event, tile)

    if target.ndim == 1:
        rows = target[:tile.byte_count].reshape(tile.height, tile.width, 3)
    else:
        rows = target
    render(tile, bounds, window, rows, max_iterations, policy, cancel_event)
