"""Color representation and 8-bit encoding.

Colors are plain vec3 values whose components are conventionally in [0, 1]
(red, green, blue). Nothing enforces the range. Encoding to 8-bit channels is
a deterministic truncation:

    channel = floor(255.999 * component)

No clamping is applied unless explicitly requested, so components outside
[0, 1] produce channel values outside [0, 255].

The in-kernel encoder is color_to_bytes(); host-side code works on NumPy
arrays with encode_image() or on single colors with encode_color().
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti

from minitrace.core.vec import vec3

# Scale factor mapping [0, 1] onto the 256 channel values by truncation
CHANNEL_SCALE = 255.999

# Integer RGB triple used by the in-kernel encoder
rgb8 = ti.types.vector(3, ti.i32)

WHITE = (1.0, 1.0, 1.0)
SKY_BLUE = (0.5, 0.7, 1.0)


@ti.func
def color_to_bytes(color: vec3) -> rgb8:
    """Encode a color to integer channel values inside a kernel.

    Args:
        color: RGB color, components nominally in [0, 1].

    Returns:
        Integer vector (r, g, b) with each channel floor(255.999 * component).
    """
    scaled = ti.floor(CHANNEL_SCALE * color)
    return rgb8(ti.cast(scaled.x, ti.i32), ti.cast(scaled.y, ti.i32), ti.cast(scaled.z, ti.i32))


def encode_color(color: Sequence[float], *, clamp: bool = False) -> tuple[int, int, int]:
    """Encode a single RGB color to three integer channel values.

    Args:
        color: The (r, g, b) components.
        clamp: Clamp components to [0, 1] before encoding. Off by default.

    Returns:
        Tuple (r, g, b) of channel values.

    Example:
        >>> encode_color((1.0, 0.0, 0.5))
        (255, 0, 127)
    """
    encoded = encode_image(np.asarray(color, dtype=np.float64).reshape(1, 1, 3), clamp=clamp)
    r, g, b = (int(c) for c in encoded[0, 0])
    return r, g, b


def encode_image(
    image: npt.NDArray[np.floating],
    *,
    clamp: bool = False,
) -> npt.NDArray[np.int64]:
    """Encode a float image of shape (H, W, 3) to integer channel values.

    Args:
        image: Linear color array with components nominally in [0, 1].
        clamp: Clamp components to [0, 1] before encoding. Off by default.

    Returns:
        int64 array of the same shape.

    Raises:
        ValueError: If the last dimension is not 3.
    """
    image = np.asarray(image, dtype=np.float64)
    if image.ndim == 0 or image.shape[-1] != 3:
        raise ValueError(f"Expected RGB data with a trailing dimension of 3, got {image.shape}")

    if clamp:
        image = np.clip(image, 0.0, 1.0)

    return np.floor(CHANNEL_SCALE * image).astype(np.int64)


def format_color(color: Sequence[float], *, clamp: bool = False) -> str:
    """Format a color as the "r g b" text used by plain PPM output."""
    r, g, b = encode_color(color, clamp=clamp)
    return f"{r} {g} {b}"
