"""Split an image into tiles and render them concurrently."""

from __future__ import annotations

import os
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Optional

import numpy as np

from .buffer import Tile, as_pixel_buffer, new_pixel_buffer, tile_view
from .coloring import DEFAULT_POLICY
from .errors import ConfigurationError, PartitionOverrunError, RenderCancelled, RenderError
from .escape import MAX_ITERATIONS, validate_max_iterations
from .geometry import Bounds, PlaneWindow
from .tiles import DEFAULT_KERNEL, render_tile, validate_kernel


def _validate_workers(num_workers: int, bounds: Bounds) -> int:
    if isinstance(num_workers, bool) or not isinstance(num_workers, (int, np.integer)):
        raise ConfigurationError(f"num_workers must be an integer, got {num_workers!r}.")
    if num_workers <= 0:
        raise ConfigurationError(f"num_workers must be positive, got {num_workers}.")
    if num_workers > bounds.width or num_workers > bounds.height:
        raise ConfigurationError(
            f"{num_workers} workers on a {bounds.width}x{bounds.height} image "
            "would leave tiles with zero width or height."
        )
    return int(num_workers)


def plan_partition(num_workers: int, bounds: Bounds) -> list[Tile]:
    """Lay out a ``num_workers`` x ``num_workers`` grid of tiles over ``bounds``.

    Tile ``i`` starts at ``((i % n) * tile_w, (i // n) * tile_h)``. The last
    column and row of tiles absorb any remainder, so the plan always covers
    the whole image.
    """

    n = _validate_workers(num_workers, bounds)
    tile_w = bounds.width // n
    tile_h = bounds.height // n

    tiles = []
    for i in range(n * n):
        col = i % n
        row = i // n
        width = bounds.width - col * tile_w if col == n - 1 else tile_w
        height = bounds.height - row * tile_h if row == n - 1 else tile_h
        tiles.append(Tile(col * tile_w, row * tile_h, width, height))
    return tiles


def check_partition(tiles: list[Tile], bounds: Bounds) -> None:
    """Raise :class:`PartitionOverrunError` unless ``tiles`` exactly cover ``bounds``."""

    owners = np.zeros((bounds.height, bounds.width), dtype=np.int32)
    for tile in tiles:
        if tile.width <= 0 or tile.height <= 0:
            raise PartitionOverrunError(f"{tile} is empty.")
        if tile.x < 0 or tile.y < 0 or tile.x + tile.width > bounds.width or tile.y + tile.height > bounds.height:
            raise PartitionOverrunError(f"{tile} lies outside a {bounds.width}x{bounds.height} image.")
        owners[tile.y:tile.y + tile.height, tile.x:tile.x + tile.width] += 1

    if np.any(owners > 1):
        raise PartitionOverrunError("Tiles overlap.")
    if np.any(owners == 0):
        missing = int(np.count_nonzero(owners == 0))
        raise PartitionOverrunError(f"Tiles leave {missing} pixels uncovered.")


def default_workers(bounds: Bounds) -> int:
    """Available parallelism, capped so that no tile is empty."""

    return max(1, min(os.cpu_count() or 1, bounds.width, bounds.height))


def render_parallel(
    num_workers: int,
    bounds: Bounds,
    window: PlaneWindow,
    buffer,
    *,
    max_iterations: int = MAX_ITERATIONS,
    policy=None,
    kernel: str = DEFAULT_KERNEL,
    cancel_event: Optional[threading.Event] = None,
):
    """Render the image into ``buffer`` with one task per tile.

    The pool is created for this call and joined before returning. When a
    tile fails, the others are cancelled and :class:`RenderError` is raised;
    the buffer contents are then undefined. Setting ``cancel_event`` from
    another thread aborts the render with :class:`RenderCancelled`.
    """

    num_workers = _validate_workers(num_workers, bounds)
    window.validate()
    max_iterations = validate_max_iterations(max_iterations)
    validate_kernel(kernel)
    pixels = as_pixel_buffer(buffer, bounds)
    policy = DEFAULT_POLICY if policy is None else policy

    tiles = plan_partition(num_workers, bounds)
    check_partition(tiles, bounds)
    views = [tile_view(pixels, bounds, tile) for tile in tiles]

    cancel = cancel_event if cancel_event is not None else threading.Event()
    with ThreadPoolExecutor(max_workers=num_workers, thread_name_prefix="mandelbands") as executor:
        futures = {
            executor.submit(
                render_tile,
                tile,
                bounds,
                window,
                view,
                max_iterations=max_iterations,
                policy=policy,
                kernel=kernel,
                cancel_event=cancel,
            ): tile
            for tile, view in zip(tiles, views)
        }
        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [future for future in done if not future.cancelled() and future.exception() is not None]
        if failed:
            cancel.set()
            for future in not_done:
                future.cancel()
            wait(not_done)

    if failed:
        errors = [future.exception() for future in failed]
        first = next((exc for exc in errors if not isinstance(exc, RenderCancelled)), None)
        if first is None:
            raise RenderCancelled("Render was cancelled before all tiles finished.") from errors[0]
        tile = next(futures[future] for future in failed if future.exception() is first)
        raise RenderError(f"Rendering failed in {tile}: {first}", failed_tile=tile) from first

    return buffer


def render_serial(
    bounds: Bounds,
    window: PlaneWindow,
    buffer,
    *,
    max_iterations: int = MAX_ITERATIONS,
    policy=None,
    kernel: str = DEFAULT_KERNEL,
):
    """Render the whole image as a single tile on the calling thread."""

    window.validate()
    max_iterations = validate_max_iterations(max_iterations)
    pixels = as_pixel_buffer(buffer, bounds)
    tile = Tile(0, 0, bounds.width, bounds.height)
    render_tile(
        tile,
        bounds,
        window,
        tile_view(pixels, bounds, tile),
        max_iterations=max_iterations,
        policy=policy,
        kernel=kernel,
    )
    return buffer


def render_image(
    bounds: Bounds,
    window: PlaneWindow,
    *,
    num_workers: Optional[int] = None,
    max_iterations: int = MAX_ITERATIONS,
    policy=None,
    kernel: str = DEFAULT_KERNEL,
    cancel_event: Optional[threading.Event] = None,
) -> np.ndarray:
    """Allocate a buffer for ``bounds`` and render into it."""

    if num_workers is None:
        num_workers = default_workers(bounds)
    buffer = new_pixel_buffer(bounds)
    return render_parallel(
        num_workers,
        bounds,
        window,
        buffer,
        max_iterations=max_iterations,
        policy=policy,
        kernel=kernel,
        cancel_event=cancel_event,
    )
