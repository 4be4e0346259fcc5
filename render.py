import os
import sys
import time
import warnings
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

from mandelbands import (
    COLOR_POLICIES,
    KERNELS,
    MAX_ITERATIONS,
    Bounds,
    ConfigurationError,
    MandelbandsError,
    PlaneWindow,
    default_workers,
    get_color_policy,
    render_image,
    write_image,
)

log("TensorFlow version: %s" % tf.__version__)


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set with a pool of worker threads.")

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the output image in pixels',
                        metavar='WIDTH', default=1000)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the output image in pixels',
                        metavar='HEIGHT', default=1000)

    parser.add_argument('--top-left', type=float, nargs=2,
                        dest='top_left', help='complex-plane point shown at the top-left pixel',
                        metavar=('RE', 'IM'), default=[-2.0, 2.0])

    parser.add_argument('--bottom-right', type=float, nargs=2,
                        dest='bottom_right', help='complex-plane point shown at the bottom-right corner',
                        metavar=('RE', 'IM'), default=[1.0, -2.0])

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration cap of the escape-time loop',
                        metavar='MAX_ITERATIONS', default=MAX_ITERATIONS)

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of worker threads; the image is split into WORKERS x WORKERS tiles. '
                                             'Defaults to the available parallelism.',
                        metavar='WORKERS', default=None)

    parser.add_argument('--coloring', choices=sorted(COLOR_POLICIES), default='palette',
                        help='Color policy: "palette" uses the fixed 16-color table, "gradient" a continuous formula.')

    parser.add_argument('--kernel', choices=KERNELS, default='tensorflow',
                        help='Escape-time kernel: vectorized TensorFlow loop or per-pixel Python loop.')

    parser.add_argument('--output', type=str,
                        dest='output', help='destination image file',
                        metavar='OUTPUT', default='output.png')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for the image. Any extension supported by Pillow. '
                                            'Defaults to the extension of --output, else "png".',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_format(output: Path, image_format):
    if image_format:
        return image_format.lower().lstrip(".")
    suffix = output.suffix.lower().lstrip(".")
    return suffix or "png"


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    now = time.perf_counter()

    try:
        bounds = Bounds(opt.width, opt.height)
        window = PlaneWindow.from_corners(opt.top_left[0], opt.top_left[1], opt.bottom_right[0], opt.bottom_right[1])
        policy = get_color_policy(opt.coloring)
    except ConfigurationError as exc:
        parser.error(str(exc))

    workers = opt.workers if opt.workers is not None else default_workers(bounds)
    output_path = Path(opt.output).expanduser()
    image_format = resolve_format(output_path, opt.format)

    log("Num workers: %d" % workers)
    log("Num tiles: %d" % (workers * workers))
    log("Window: %s .. %s" % (window.top_left, window.bottom_right))

    try:
        pixels = render_image(
            bounds,
            window,
            num_workers=workers,
            max_iterations=opt.max_iterations,
            policy=policy,
            kernel=opt.kernel,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))
    except MandelbandsError as exc:
        print(f"Render failed: {exc}", file=sys.stderr)
        return 1

    written = write_image(pixels, bounds, output_path, image_format)
    log("Wrote %s" % written)

    print("Elapsed: {:.2f}s".format(time.perf_counter() - now))
    return 0


if __name__ == '__main__':
    sys.exit(main())
