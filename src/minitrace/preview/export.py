"""Image export utilities for rendered images.

This module serializes encoded images (integer RGB channels, shape
(H, W, 3)) to files or streams.

Supported formats:
    - Plain-text PPM ("P3"): header "P3", "<width> <height>", "255", then one
      "r g b" line per pixel, rows top to bottom, columns left to right.
    - PNG (8-bit RGB via Pillow)

PPM output writes channel values exactly as given. PNG is an 8-bit
container, so values are clipped to [0, 255] there.

Example:
    >>> from minitrace.preview.export import save_ppm
    >>> save_ppm(renderer.get_image_bytes(), "image.ppm")
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Maximum channel value written in the PPM header
PPM_MAX_VALUE = 255


def _check_rgb(image: npt.NDArray[np.integer]) -> npt.NDArray[np.int64]:
    array = np.asarray(image)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
    return array.astype(np.int64)


def ppm_header(width: int, height: int) -> str:
    """Return the three-line plain PPM header, newline terminated."""
    return f"P3\n{width} {height}\n{PPM_MAX_VALUE}\n"


def write_ppm(image: npt.NDArray[np.integer], stream: TextIO) -> None:
    """Write an encoded image to a text stream as plain PPM.

    Args:
        image: Integer channel values of shape (H, W, 3).
        stream: Writable text stream.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    pixels = _check_rgb(image)
    height, width, _ = pixels.shape

    stream.write(ppm_header(width, height))
    for row in pixels:
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row.tolist()))


def format_ppm(image: npt.NDArray[np.integer]) -> str:
    """Return the plain PPM text for an encoded image."""
    buffer = io.StringIO()
    write_ppm(image, buffer)
    return buffer.getvalue()


def save_ppm(image: npt.NDArray[np.integer], filepath: str | Path) -> Path:
    """Save an encoded image as a plain PPM file.

    Args:
        image: Integer channel values of shape (H, W, 3).
        filepath: Output file path.

    Returns:
        The path written.
    """
    path = Path(filepath)
    with path.open("w", encoding="ascii", newline="\n") as f:
        write_ppm(image, f)
    return path


def save_png(image: npt.NDArray[np.integer], filepath: str | Path) -> Path:
    """Save an encoded image as an 8-bit RGB PNG.

    Args:
        image: Integer channel values of shape (H, W, 3). Values are clipped
            to [0, 255].
        filepath: Output file path.

    Returns:
        The path written.
    """
    pixels = _check_rgb(image)
    image_uint8 = np.clip(pixels, 0, 255).astype(np.uint8)

    path = Path(filepath)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(path)
    return path


def save_image(image: npt.NDArray[np.integer], filepath: str | Path) -> Path:
    """Save an encoded image, choosing the format from the file extension.

    Raises:
        ValueError: If the extension is not .ppm or .png.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix == ".ppm":
        return save_ppm(image, path)
    if suffix == ".png":
        return save_png(image, path)
    raise ValueError(f"Unsupported output format: {path.suffix!r} (expected .ppm or .png)")


def read_ppm(filepath: str | Path) -> npt.NDArray[np.int64]:
    """Read a plain PPM file back into an integer array of shape (H, W, 3).

    Raises:
        ValueError: If the file is not a well-formed plain PPM.
    """
    tokens = Path(filepath).read_text(encoding="ascii").split()
    if not tokens or tokens[0] != "P3":
        raise ValueError("Not a plain PPM (P3) file")
    width, height, _max_value = (int(t) for t in tokens[1:4])
    values = tokens[4:]
    if len(values) != width * height * 3:
        raise ValueError(
            f"Expected {width * height * 3} channel values, found {len(values)}"
        )
    return np.array([int(v) for v in values], dtype=np.int64).reshape(height, width, 3)
