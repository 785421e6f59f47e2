"""Per-pixel color resolution and render kernels.

This module implements the shader that maps a primary ray to a color and the
kernels that evaluate it for every pixel of the render target.

Shading model:
    - If the ray hits the scene's sphere in front of the camera (t > 0), the
      surface normal at the hit point is visualized as a color by mapping each
      component from [-1, 1] to [0, 1].
    - Otherwise the background is a vertical gradient between white (a = 0)
      and sky blue (a = 1), with a = 0.5 * (unit_direction.y + 1).

There is no recursion, no secondary rays and no sampling: one ray per pixel.
The pixel loop is serialized, and since every pixel depends only on its
coordinates and the fixed camera/scene fields the result is deterministic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from minitrace.camera.viewport import ViewportCamera, setup_camera
    >>> from minitrace.core.integrator import render_image, setup_render_target
    >>> from minitrace.scene.scene import default_scene, setup_scene
    >>>
    >>> geometry = setup_camera(ViewportCamera(image_width=400))
    >>> setup_scene(default_scene())
    >>> setup_render_target(geometry.image_width, geometry.image_height)
    >>> render_image()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from minitrace.camera.viewport import get_ray
from minitrace.core.color import SKY_BLUE, WHITE
from minitrace.core.ray import Ray, ray_at
from minitrace.core.vec import lerp, normalize, sub, vec3
from minitrace.geometry.sphere import hit_sphere
from minitrace.scene.scene import get_scene_sphere, scene_has_sphere

# Background gradient end points (a = 0 at the bottom, a = 1 at the top)
BACKGROUND_BOTTOM = vec3(*WHITE)
BACKGROUND_TOP = vec3(*SKY_BLUE)

# =============================================================================
# Shading
# =============================================================================


@ti.func
def background_color(ray: Ray) -> vec3:
    """Vertical sky gradient for rays that miss the scene.

    The blend factor depends only on the y component of the normalized ray
    direction: white for rays pointing straight down, sky blue straight up.
    """
    unit_direction = normalize(ray.direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return lerp(BACKGROUND_BOTTOM, BACKGROUND_TOP, a)


@ti.func
def normal_color(normal: vec3) -> vec3:
    """Map a unit normal from [-1, 1] per component to a [0, 1] color."""
    return 0.5 * (normal + 1.0)


@ti.func
def ray_color(ray: Ray) -> vec3:
    """Resolve the color seen along a primary ray.

    Args:
        ray: The primary ray.

    Returns:
        RGB color with components in [0, 1].
    """
    color = background_color(ray)

    if scene_has_sphere():
        sphere = get_scene_sphere()
        record = hit_sphere(sphere, ray)
        # Roots behind the ray origin are treated as background
        if record.hit and record.t > 0.0:
            point = ray_at(ray, record.t)
            color = normal_color(normalize(sub(point, sphere.center)))

    return color


# =============================================================================
# Render Target
# =============================================================================

# Kernel argument type of the render target: a 2D array of colors
color_buffer_type = ti.types.ndarray(dtype=vec3, ndim=2)

# Color buffer indexed [i, j] with j = 0 at the top row, sized to the image.
# None until setup_render_target() is called.
_color_buffer = None


def setup_render_target(width: int, height: int) -> None:
    """Allocate the render target buffer for an image size.

    The buffer is a Taichi ndarray passed to the render kernels, so any
    image size can be rendered without recompiling them.

    Args:
        width: Image width in pixels (>= 1).
        height: Image height in pixels (>= 1).

    Raises:
        ValueError: If dimensions are not positive.
    """
    global _color_buffer

    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    if _color_buffer is None or tuple(_color_buffer.shape) != (width, height):
        _color_buffer = ti.Vector.ndarray(3, dtype=ti.f64, shape=(width, height))

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to black."""
    if _color_buffer is not None:
        _clear_buffer(_color_buffer)


def reset_render_target() -> None:
    """Release the render target; rendering requires setup again."""
    global _color_buffer
    _color_buffer = None


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    if _color_buffer is None:
        return 0, 0
    width, height = _color_buffer.shape
    return int(width), int(height)


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _color_buffer is None:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _clear_buffer(buffer: color_buffer_type):
    for i, j in ti.ndrange(buffer.shape[0], buffer.shape[1]):
        buffer[i, j] = vec3(0.0, 0.0, 0.0)


@ti.kernel
def _render_rows(buffer: color_buffer_type, row_start: ti.i32, row_end: ti.i32):
    """Shade rows [row_start, row_end) of the render target, one ray per pixel."""
    ti.loop_config(serialize=True)
    for j, i in ti.ndrange((row_start, row_end), buffer.shape[0]):
        buffer[i, j] = ray_color(get_ray(i, j))


@ti.kernel
def _render_pattern_rows(buffer: color_buffer_type, row_start: ti.i32, row_end: ti.i32):
    """Fill rows with the red/green test gradient."""
    width = buffer.shape[0]
    height = buffer.shape[1]
    ti.loop_config(serialize=True)
    for j, i in ti.ndrange((row_start, row_end), width):
        r = ti.cast(i, ti.f64) / ti.cast(ti.max(width - 1, 1), ti.f64)
        g = ti.cast(j, ti.f64) / ti.cast(ti.max(height - 1, 1), ti.f64)
        buffer[i, j] = vec3(r, g, 0.0)


@ti.kernel
def _render_single_pixel(i: ti.i32, j: ti.i32) -> vec3:
    """Shade a single pixel without touching the render target."""
    return ray_color(get_ray(i, j))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(i: int, j: int) -> tuple[float, float, float]:
    """Shade one pixel of the configured camera.

    Args:
        i: Column (0 = left).
        j: Row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _render_single_pixel(i, j)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_rows(row_start: int, row_end: int) -> None:
    """Shade a band of rows into the render target.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()
    _, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image of height {height}")
    _render_rows(_color_buffer, row_start, row_end)


def render_image() -> None:
    """Shade every pixel of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    _, height = get_image_dimensions()
    _render_rows(_color_buffer, 0, height)


def render_test_pattern_rows(row_start: int, row_end: int) -> None:
    """Fill a band of rows with the test gradient (r = i/(w-1), g = j/(h-1)).

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()
    _, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image of height {height}")
    _render_pattern_rows(_color_buffer, row_start, row_end)


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the rendered image as a NumPy array.

    Values are returned as computed, without clamping.

    Returns:
        float64 array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(_color_buffer.to_numpy(), (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float64)
