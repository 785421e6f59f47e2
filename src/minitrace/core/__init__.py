"""Core rendering module.

Components:
    vec: 3D vector type and arithmetic
    ray: Ray data structure and evaluation
    color: Color encoding to 8-bit channels
    integrator: Per-pixel shader, render target and render kernels
    frame: FrameRenderer driving a full render

All per-pixel work runs in Taichi kernels in double precision.
"""

from .color import CHANNEL_SCALE, color_to_bytes, encode_color, encode_image, format_color
from .ray import Ray, make_ray, ray_at
from .vec import (
    add,
    cross,
    div,
    dot,
    format_vector,
    hadamard,
    length,
    length_squared,
    lerp,
    near_zero,
    negate,
    normalize,
    normalize_host,
    scale,
    sub,
    vec3,
)

# Note: integrator and frame are NOT imported here to avoid circular imports.
# Import directly from minitrace.core.integrator or minitrace.core.frame.

__all__ = [
    "vec3",
    "add",
    "sub",
    "negate",
    "hadamard",
    "scale",
    "div",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "near_zero",
    "lerp",
    "normalize_host",
    "format_vector",
    "Ray",
    "ray_at",
    "make_ray",
    "CHANNEL_SCALE",
    "color_to_bytes",
    "encode_color",
    "encode_image",
    "format_color",
]
