"""Ray data structure for the ray tracing core.

A ray is a half-line defined by an origin point and a direction vector,
parameterized as origin + t * direction. Rays are built once per pixel by the
camera, consumed by the shader and never mutated.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti

from minitrace.core.vec import add, scale, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; the camera emits un-normalized directions.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin,
            negative values behind it. No bounds are applied.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return add(ray.origin, scale(ray.direction, t))


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction.

    This is a convenience function for creating rays within Taichi kernels.
    """
    return Ray(origin=origin, direction=direction)
