"""Viewport camera mapping image pixels to world-space rays.

The camera sits at `center` and looks down the -z axis. A rectangular
viewport is placed one focal length in front of it; the image grid is
projected onto that viewport and each pixel gets one ray through its center.

Image space has pixel (0, 0) at the top-left, i increasing to the right and
j increasing downward. World space has y pointing up, so the viewport's
vertical edge vector points down (-y).

The viewport width is derived from the integral pixel dimensions
(image_width / image_height) rather than the nominal aspect ratio, so pixels
stay square even when the height was rounded.

The geometry is computed once on the host (compute_camera_geometry) and
written to Taichi fields (setup_camera); get_ray() then only does the
per-pixel center and ray construction inside the kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from minitrace.camera.viewport import ViewportCamera, setup_camera, get_ray
    >>>
    >>> camera = ViewportCamera(image_width=400, aspect_ratio=16.0 / 9.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0)  # Ray through the top-left pixel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from minitrace.core.ray import Ray, make_ray
from minitrace.core.vec import add, scale, sub, to_tuple, vec3

DEFAULT_VIEWPORT_HEIGHT = 2.0

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ViewportCamera:
    """Configuration for the viewport camera.

    Attributes:
        image_width: Output image width in pixels (>= 1).
        aspect_ratio: Nominal width / height ratio of the image (> 0).
        focal_length: Distance from the camera center to the viewport.
        viewport_height: Height of the viewport in world units.
        center: Camera position in world space.
    """

    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    focal_length: float = 1.0
    viewport_height: float = DEFAULT_VIEWPORT_HEIGHT
    center: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if isinstance(self.image_width, bool) or int(self.image_width) != self.image_width:
            raise ValueError(f"Image width must be an integer, got {self.image_width!r}")
        if self.image_width < 1:
            raise ValueError(f"Image width must be positive, got {self.image_width}")
        if not (math.isfinite(self.aspect_ratio) and self.aspect_ratio > 0.0):
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if not (math.isfinite(self.focal_length) and self.focal_length > 0.0):
            raise ValueError(f"Focal length must be positive, got {self.focal_length}")
        if not (math.isfinite(self.viewport_height) and self.viewport_height > 0.0):
            raise ValueError(f"Viewport height must be positive, got {self.viewport_height}")
        self.image_width = int(self.image_width)

    @property
    def image_height(self) -> int:
        """Image height in pixels derived from width and aspect ratio."""
        return compute_image_height(self.image_width, self.aspect_ratio)


@dataclass(frozen=True)
class CameraGeometry:
    """Derived viewport geometry, computed once per render.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        viewport_width: Viewport width in world units.
        viewport_height: Viewport height in world units.
        center: Camera position.
        viewport_u: Vector across the viewport's horizontal edge (left to right).
        viewport_v: Vector down the viewport's vertical edge (top to bottom).
        pixel_delta_u: Horizontal offset between adjacent pixel centers.
        pixel_delta_v: Vertical offset between adjacent pixel centers.
        viewport_upper_left: World position of the viewport's top-left corner.
        pixel00: World position of the center of pixel (0, 0).
    """

    image_width: int
    image_height: int
    viewport_width: float
    viewport_height: float
    center: tuple[float, float, float]
    viewport_u: tuple[float, float, float]
    viewport_v: tuple[float, float, float]
    pixel_delta_u: tuple[float, float, float]
    pixel_delta_v: tuple[float, float, float]
    viewport_upper_left: tuple[float, float, float]
    pixel00: tuple[float, float, float]


def compute_image_height(image_width: int, aspect_ratio: float) -> int:
    """Compute the image height for a width and aspect ratio.

    Args:
        image_width: Image width in pixels (>= 1).
        aspect_ratio: Width / height ratio (> 0).

    Returns:
        max(1, floor(image_width / aspect_ratio + 0.5)); halves round up.

    Raises:
        ValueError: If width or aspect ratio are not positive.
    """
    if image_width < 1:
        raise ValueError(f"Image width must be positive, got {image_width}")
    if not aspect_ratio > 0.0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
    return max(1, math.floor(image_width / aspect_ratio + 0.5))


def compute_camera_geometry(camera: ViewportCamera) -> CameraGeometry:
    """Compute the viewport geometry for a camera configuration.

    Args:
        camera: Camera configuration.

    Returns:
        The derived CameraGeometry.
    """
    image_width = camera.image_width
    image_height = compute_image_height(image_width, camera.aspect_ratio)

    viewport_height = camera.viewport_height
    viewport_width = viewport_height * (image_width / image_height)

    center = np.array(camera.center, dtype=np.float64)

    # v points down because image rows increase downward
    viewport_u = np.array([viewport_width, 0.0, 0.0])
    viewport_v = np.array([0.0, -viewport_height, 0.0])

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = (
        center - np.array([0.0, 0.0, camera.focal_length]) - viewport_u / 2.0 - viewport_v / 2.0
    )
    pixel00 = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        center=to_tuple(center),
        viewport_u=to_tuple(viewport_u),
        viewport_v=to_tuple(viewport_v),
        pixel_delta_u=to_tuple(pixel_delta_u),
        pixel_delta_v=to_tuple(pixel_delta_v),
        viewport_upper_left=to_tuple(viewport_upper_left),
        pixel00=to_tuple(pixel00),
    )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel00 = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f64, shape=())
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: ViewportCamera) -> CameraGeometry:
    """Initialize camera state from configuration.

    Computes the viewport geometry and stores the parts needed for ray
    generation in Taichi fields. Must be called before rendering.

    Args:
        camera: Camera configuration.

    Returns:
        The computed CameraGeometry.
    """
    geometry = compute_camera_geometry(camera)

    _camera_center[None] = list(geometry.center)
    _pixel00[None] = list(geometry.pixel00)
    _pixel_delta_u[None] = list(geometry.pixel_delta_u)
    _pixel_delta_v[None] = list(geometry.pixel_delta_v)
    _image_width[None] = geometry.image_width
    _image_height[None] = geometry.image_height

    return geometry


def get_image_size() -> tuple[int, int]:
    """Image (width, height) of the most recently configured camera."""
    return int(_image_width[None]), int(_image_height[None])


def get_image_height() -> int:
    """Image height of the most recently configured camera."""
    return int(_image_height[None])


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_pixel_center(i: ti.i32, j: ti.i32) -> vec3:
    """World position of the center of pixel (i, j).

    Args:
        i: Column, 0 at the left edge.
        j: Row, 0 at the top edge.
    """
    offset = add(
        scale(_pixel_delta_u[None], ti.cast(i, ti.f64)),
        scale(_pixel_delta_v[None], ti.cast(j, ti.f64)),
    )
    return add(_pixel00[None], offset)


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate the ray through the center of pixel (i, j).

    The ray starts at the camera center. Its direction points at the pixel
    center and is not normalized.

    Args:
        i: Column in [0, image_width), left to right.
        j: Row in [0, image_height), top to bottom.

    Returns:
        The primary ray for the pixel.
    """
    origin = _camera_center[None]
    return make_ray(origin, sub(get_pixel_center(i, j), origin))


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, pixel00, pixel_delta_u and pixel_delta_v.
    """
    return {
        "center": to_tuple(_camera_center[None]),
        "pixel00": to_tuple(_pixel00[None]),
        "pixel_delta_u": to_tuple(_pixel_delta_u[None]),
        "pixel_delta_v": to_tuple(_pixel_delta_v[None]),
    }
