"""Pixel grid and complex-plane geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class Bounds:
    """Pixel dimensions of the output image."""

    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}.")

    @property
    def pixels(self) -> int:
        return int(self.width) * int(self.height)

    @property
    def buffer_size(self) -> int:
        return self.pixels * 3


@dataclass(frozen=True)
class ComplexPoint:
    re: float
    im: float

    def norm_sqr(self) -> float:
        return self.re * self.re + self.im * self.im

    def as_complex(self) -> complex:
        return complex(self.re, self.im)


@dataclass(frozen=True)
class PlaneWindow:
    """Region of the complex plane mapped onto the pixel grid.

    ``top_left`` lands on pixel ``(0, 0)``; the real part grows with the
    column index and the imaginary part shrinks with the row index.
    """

    top_left: ComplexPoint
    bottom_right: ComplexPoint

    @classmethod
    def from_corners(cls, left: float, top: float, right: float, bottom: float) -> "PlaneWindow":
        return cls(ComplexPoint(float(left), float(top)), ComplexPoint(float(right), float(bottom)))

    @property
    def x_span(self) -> float:
        return self.bottom_right.re - self.top_left.re

    @property
    def y_span(self) -> float:
        return self.top_left.im - self.bottom_right.im

    def validate(self) -> "PlaneWindow":
        corners = (self.top_left.re, self.top_left.im, self.bottom_right.re, self.bottom_right.im)
        if not all(math.isfinite(value) for value in corners):
            raise ConfigurationError(f"Plane window corners must be finite, got {corners}.")
        if self.x_span == 0.0 or self.y_span == 0.0:
            raise ConfigurationError("Plane window has zero width or height.")
        return self


DEFAULT_WINDOW = PlaneWindow.from_corners(-2.0, 2.0, 1.0, -2.0)


def _steps(bounds: Bounds, window: PlaneWindow) -> tuple[float, float]:
    x_step = window.x_span / bounds.width
    y_step = window.y_span / bounds.height
    return x_step, y_step


def map_pixel(pixel: tuple[int, int], bounds: Bounds, window: PlaneWindow) -> ComplexPoint:
    """Map pixel ``(x, y)`` to its point in the complex plane."""

    x, y = pixel
    x_step, y_step = _steps(bounds, window)
    return ComplexPoint(
        window.top_left.re + x * x_step,
        window.top_left.im - y * y_step,
    )


def pixel_grid(
    origin: tuple[int, int],
    extent: tuple[int, int],
    bounds: Bounds,
    window: PlaneWindow,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized :func:`map_pixel` over a rectangle of pixels.

    Returns ``(re, im)`` arrays of shape ``(height, width)``. The arithmetic
    is the same as the scalar mapper, so both agree bit for bit.
    """

    x0, y0 = origin
    width, height = extent
    x_step, y_step = _steps(bounds, window)
    xs = np.arange(x0, x0 + width, dtype=np.float64)
    ys = np.arange(y0, y0 + height, dtype=np.float64)
    re = np.float64(window.top_left.re) + xs * np.float64(x_step)
    im = np.float64(window.top_left.im) - ys * np.float64(y_step)
    re_grid, im_grid = np.meshgrid(re, im)
    return re_grid, im_grid
