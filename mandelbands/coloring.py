"""Iteration-count to RGB color policies."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError
from .geometry import ComplexPoint

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)

PALETTE = np.array(
    [
        (66, 30, 15),
        (25, 7, 26),
        (9, 1, 47),
        (4, 4, 73),
        (0, 7, 100),
        (12, 44, 138),
        (24, 82, 177),
        (57, 125, 209),
        (134, 181, 229),
        (211, 236, 248),
        (241, 233, 191),
        (248, 201, 95),
        (255, 170, 0),
        (204, 128, 0),
        (153, 87, 0),
        (0, 0, 0),
    ],
    dtype=np.uint8,
)
PALETTE.setflags(write=False)


@dataclass(frozen=True)
class PalettePolicy:
    """Fixed 16-entry lookup indexed by ``count % 16``; ``0`` is black."""

    name: str = "palette"

    def color(self, count: int, point: ComplexPoint) -> RGB:
        if count == 0:
            return BLACK
        r, g, b = PALETTE[int(count) % len(PALETTE)]
        return int(r), int(g), int(b)

    def colorize(self, counts: np.ndarray, re: np.ndarray, im: np.ndarray) -> np.ndarray:
        counts = np.asarray(counts)
        rgb = PALETTE[counts % len(PALETTE)]
        rgb[counts == 0] = 0
        return rgb


@dataclass(frozen=True)
class GradientPolicy:
    """Continuous color derived from the count and ``|c|**2``.

    Channels are saturated to ``[0, 255]`` before narrowing to a byte.
    """

    name: str = "gradient"

    @staticmethod
    def _channels(counts, norm):
        return (
            255.0 * norm * counts,
            255.0 * counts,
            20.0 * norm * counts,
        )

    def color(self, count: int, point: ComplexPoint) -> RGB:
        channels = self._channels(float(count), point.norm_sqr())
        return tuple(int(min(max(value, 0.0), 255.0)) for value in channels)

    def colorize(self, counts: np.ndarray, re: np.ndarray, im: np.ndarray) -> np.ndarray:
        counts = np.asarray(counts, dtype=np.float64)
        re = np.asarray(re, dtype=np.float64)
        im = np.asarray(im, dtype=np.float64)
        norm = re * re + im * im
        rgb = np.stack(self._channels(counts, norm), axis=-1)
        return np.clip(rgb, 0.0, 255.0).astype(np.uint8)


COLOR_POLICIES = {
    "palette": PalettePolicy(),
    "gradient": GradientPolicy(),
}

DEFAULT_POLICY = COLOR_POLICIES["palette"]


def get_color_policy(name: str):
    try:
        return COLOR_POLICIES[name.lower()]
    except (KeyError, AttributeError):
        raise ConfigurationError(
            f"Unknown color policy {name!r}. Valid choices: {', '.join(sorted(COLOR_POLICIES))}."
        ) from None
