import numpy as np
import pytest

from mandelbands import Bounds, PlaneWindow


@pytest.fixture
def window():
    return PlaneWindow.from_corners(-2.0, 2.0, 1.0, -2.0)


@pytest.fixture
def small_bounds():
    return Bounds(4, 4)


def pixel_at(buffer, bounds, x, y):
    """RGB triple of pixel ``(x, y)`` in a flat row-major buffer."""
    offset = (y * bounds.width + x) * 3
    return tuple(int(v) for v in np.asarray(buffer)[offset:offset + 3])


@pytest.fixture
def pixel():
    return pixel_at
