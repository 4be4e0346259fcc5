"""Escape-time evaluation of the Mandelbrot recurrence ``z <- z**2 + c``."""

from __future__ import annotations

from typing import Union

import numpy as np
import tensorflow as tf

from .errors import ConfigurationError
from .geometry import ComplexPoint

MAX_ITERATIONS = 255
ITERATION_LIMIT = 65535
ESCAPE_RADIUS_SQR = 4.0

PointLike = Union[ComplexPoint, complex, tuple]


def validate_max_iterations(max_iterations: int) -> int:
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
        raise ConfigurationError(f"max_iterations must be an integer, got {max_iterations!r}.")
    if not 1 <= max_iterations <= ITERATION_LIMIT:
        raise ConfigurationError(
            f"max_iterations must be between 1 and {ITERATION_LIMIT}, got {max_iterations}."
        )
    return int(max_iterations)


def _split(c: PointLike) -> tuple[float, float]:
    if isinstance(c, ComplexPoint):
        return float(c.re), float(c.im)
    if isinstance(c, tuple):
        re, im = c
        return float(re), float(im)
    c = complex(c)
    return c.real, c.imag


def escape_time(c: PointLike, max_iterations: int = MAX_ITERATIONS) -> int:
    """Count the iterations the orbit of ``c`` stays inside radius 2.

    ``0`` means the first iterate already escaped; ``max_iterations`` means
    the orbit never escaped within the bound.
    """

    c_re, c_im = _split(c)
    z_re = 0.0
    z_im = 0.0
    for count in range(max_iterations):
        z_re, z_im = z_re * z_re - z_im * z_im + c_re, 2.0 * z_re * z_im + c_im
        if not z_re * z_re + z_im * z_im < ESCAPE_RADIUS_SQR:
            return count
    return max_iterations


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every orbit that has not escaped yet by one iteration."""

    z_re = tf.math.real(zs)
    z_im = tf.math.imag(zs)
    c_re = tf.math.real(cs)
    c_im = tf.math.imag(cs)
    new_re = z_re * z_re - z_im * z_im + c_re
    new_im = tf.constant(2.0, dtype=z_re.dtype) * z_re * z_im + c_im
    bounded = tf.less(new_re * new_re + new_im * new_im, tf.constant(ESCAPE_RADIUS_SQR, dtype=z_re.dtype))
    survived = tf.logical_and(active, bounded)
    zs = tf.where(active, tf.complex(new_re, new_im), zs)
    ns = ns + tf.cast(survived, tf.int32)
    return zs, ns, survived


@tf.function(reduce_retracing=True)
def _escape_run(cs: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Iterate all points with a TensorFlow while loop until they escape or hit the cap."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
    active = tf.ones(tf.shape(cs), dtype=tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _escape_step(zs, cs, ns, active)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def escape_time_grid(re: np.ndarray, im: np.ndarray, max_iterations: int = MAX_ITERATIONS) -> np.ndarray:
    """Vectorized :func:`escape_time` over matching arrays of coordinates."""

    re = np.asarray(re, dtype=np.float64)
    im = np.asarray(im, dtype=np.float64)
    if re.shape != im.shape:
        raise ValueError(f"Coordinate arrays differ in shape: {re.shape} vs {im.shape}.")
    if re.size == 0:
        return np.zeros(re.shape, dtype=np.int32)

    with tf.device("/CPU:0"):
        cs = tf.complex(tf.convert_to_tensor(re), tf.convert_to_tensor(im))
        ns = _escape_run(cs, tf.constant(max_iterations, dtype=tf.int32))
    return ns.numpy()
