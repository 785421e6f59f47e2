"""Sphere primitive with closed-form ray-sphere intersection.

The intersection is found by solving

    |ray.origin + t * ray.direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + b*t + c = 0 with:

    oc = center - ray.origin
    a = dot(direction, direction)
    b = -2 * dot(direction, oc)
    c = dot(oc, oc) - radius^2

A negative discriminant means the ray misses the sphere, as does a ray with
a zero-length direction (a == 0). Otherwise the smaller root is reported, which
is the nearest point along the ray. That root can be negative when the sphere
lies behind the ray origin; it is reported as a hit and callers decide whether
to accept it (the shader only accepts t > 0).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from minitrace.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from minitrace.core.ray import Ray
from minitrace.core.vec import dot, sub, vec3

# Hit parameter reported when the ray misses
NO_HIT_T = -1.0


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Result of a ray-sphere intersection test.

    Attributes:
        hit: 1 if the ray's line intersects the sphere, 0 if it misses.
        t: The nearest root along the ray. May be negative when the sphere is
            behind the ray origin. Equal to NO_HIT_T when hit == 0.
    """

    hit: ti.i32
    t: ti.f64


@ti.func
def hit_sphere(sphere: Sphere, ray: Ray) -> HitRecord:
    """Test a ray against a sphere.

    Args:
        sphere: The sphere to test against.
        ray: The ray. Its direction need not be normalized.

    Returns:
        A HitRecord. On a miss, hit is 0 and t is NO_HIT_T. A zero-length
        direction never hits.
    """
    oc = sub(sphere.center, ray.origin)
    a = dot(ray.direction, ray.direction)
    b = -2.0 * dot(ray.direction, oc)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    did_hit = 0
    hit_t = ti.cast(NO_HIT_T, ti.f64)
    if a > 0.0 and discriminant >= 0.0:
        did_hit = 1
        hit_t = (-b - ti.sqrt(discriminant)) / (2.0 * a)

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def hit_sphere_t(sphere: Sphere, ray: Ray) -> ti.f64:
    """Scalar form of hit_sphere(): the hit parameter, or NO_HIT_T on a miss."""
    return hit_sphere(sphere, ray).t


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
