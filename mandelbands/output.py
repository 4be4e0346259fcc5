"""Encode finished pixel buffers as image files with Pillow."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import PIL.Image

from .errors import ConfigurationError
from .geometry import Bounds


def _pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(buffer, bounds: Bounds) -> PIL.Image.Image:
    """Wrap a row-major RGB buffer in a Pillow image."""

    data = np.ascontiguousarray(np.asarray(buffer, dtype=np.uint8)).reshape(-1)
    if data.size != bounds.buffer_size:
        raise ConfigurationError(
            f"Pixel buffer holds {data.size} bytes, expected {bounds.buffer_size}."
        )
    return PIL.Image.frombytes("RGB", (bounds.width, bounds.height), data.tobytes())


def write_image(buffer, bounds: Bounds, output_path, image_format: str = "png") -> Path:
    """Write ``buffer`` to ``output_path`` using the provided format."""

    output_path = Path(output_path)
    image = to_image(buffer, bounds)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))
    return output_path
