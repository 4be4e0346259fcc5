"""Flat RGB pixel buffers and the tile views carved out of them."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError, PartitionOverrunError
from .geometry import Bounds


@dataclass(frozen=True)
class Tile:
    """Rectangle of pixels rendered by one worker."""

    x: int
    y: int
    width: int
    height: int

    @property
    def origin(self) -> tuple[int, int]:
        return self.x, self.y

    @property
    def extent(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def byte_count(self) -> int:
        return self.width * self.height * 3


def new_pixel_buffer(bounds: Bounds) -> np.ndarray:
    return np.zeros(bounds.buffer_size, dtype=np.uint8)


def as_pixel_buffer(buffer, bounds: Bounds) -> np.ndarray:
    """Return a writable flat ``uint8`` view of ``buffer`` sized for ``bounds``.

    Accepts numpy arrays and writable buffer-protocol objects such as
    ``bytearray``. Nothing is copied: writes through the view land in
    ``buffer``.
    """

    if isinstance(buffer, np.ndarray):
        array = buffer
        if array.dtype != np.uint8:
            raise ConfigurationError(f"Pixel buffer must hold uint8 values, got {array.dtype}.")
        if not array.flags.c_contiguous:
            raise ConfigurationError("Pixel buffer must be C-contiguous.")
        array = array.reshape(-1)
    else:
        try:
            array = np.frombuffer(memoryview(buffer).cast("B"), dtype=np.uint8)
        except TypeError as exc:
            raise ConfigurationError(f"Pixel buffer does not support the buffer protocol: {exc}") from exc

    if not array.flags.writeable:
        raise ConfigurationError("Pixel buffer is read-only.")
    if array.size != bounds.buffer_size:
        raise ConfigurationError(
            f"Pixel buffer holds {array.size} bytes, expected {bounds.buffer_size} "
            f"for a {bounds.width}x{bounds.height} image."
        )
    return array


def image_view(buffer: np.ndarray, bounds: Bounds) -> np.ndarray:
    return buffer.reshape(bounds.height, bounds.width, 3)


def tile_view(buffer: np.ndarray, bounds: Bounds, tile: Tile) -> np.ndarray:
    """The ``(height, width, 3)`` region of ``buffer`` owned by ``tile``."""

    if tile.x < 0 or tile.y < 0 or tile.x + tile.width > bounds.width or tile.y + tile.height > bounds.height:
        raise PartitionOverrunError(f"{tile} does not fit a {bounds.width}x{bounds.height} image.")
    return image_view(buffer, bounds)[tile.y:tile.y + tile.height, tile.x:tile.x + tile.width]
