"""Geometry module for the sphere primitive.

Ray-object intersection follows the pattern:
    record = hit_sphere(sphere, ray)  # record.hit, record.t
"""

from .sphere import NO_HIT_T, HitRecord, Sphere, hit_sphere, hit_sphere_t, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "NO_HIT_T",
    "hit_sphere",
    "hit_sphere_t",
    "make_sphere",
]
