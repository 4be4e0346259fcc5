import math

import numpy as np
import pytest

from mandelbands import Bounds, ComplexPoint, ConfigurationError, escape_time, escape_time_grid, pixel_grid
from mandelbands.escape import validate_max_iterations


def test_origin_never_escapes():
    assert escape_time(0j) == 255
    assert escape_time(0j, 40) == 40


@pytest.mark.parametrize("c", [2.0, -2.0, 2j, complex(1.5, 1.5), complex(-2.0, 2.0), complex(1e300, 0.0)])
def test_points_outside_radius_two_escape_immediately(c):
    assert escape_time(c) == 0


@pytest.mark.parametrize("c, expected", [(1.0, 1), (0.5, 4), (-1.0, 255), (-0.5, 255)])
def test_known_escape_counts(c, expected):
    assert escape_time(c) == expected


def test_accepts_point_types():
    assert escape_time(ComplexPoint(0.5, 0.0)) == escape_time((0.5, 0.0)) == escape_time(0.5 + 0j)


def test_nan_terminates_loop():
    assert escape_time(complex(math.nan, 0.0)) == 0


def test_result_is_bounded():
    for re in np.linspace(-2.5, 1.5, 21):
        for im in np.linspace(-1.5, 1.5, 13):
            assert 0 <= escape_time(complex(re, im), 50) <= 50


def test_grid_matches_scalar(window):
    bounds = Bounds(12, 10)
    re, im = pixel_grid((0, 0), (12, 10), bounds, window)
    counts = escape_time_grid(re, im, 64)
    assert counts.shape == (10, 12)
    expected = np.array(
        [[escape_time((re[h, w], im[h, w]), 64) for w in range(12)] for h in range(10)]
    )
    np.testing.assert_array_equal(counts, expected)


def test_grid_edge_cases():
    counts = escape_time_grid(np.array([0.0, 2.0, 1.0]), np.array([0.0, 0.0, 0.0]))
    assert counts.tolist() == [255, 0, 1]
    assert escape_time_grid(np.zeros((0, 3)), np.zeros((0, 3))).shape == (0, 3)
    with pytest.raises(ValueError):
        escape_time_grid(np.zeros(3), np.zeros(4))


@pytest.mark.parametrize("value", [0, -3, 65536, 2.0, True])
def test_max_iterations_validation(value):
    with pytest.raises(ConfigurationError):
        validate_max_iterations(value)


def test_max_iterations_limits_are_inclusive():
    assert validate_max_iterations(1) == 1
    assert validate_max_iterations(65535) == 65535
