"""Vector algebra for the ray tracing core.

This module provides the 3D vector type and the canonical arithmetic API used
by every other part of the renderer. All functions are Taichi functions
(@ti.func) and are meant to be called from within Taichi kernels.

vec3 is a Taichi value type: operations return new vectors, and assigning a
vector to a new local copies it. Compound assignment (+=, *=, /=) therefore
only mutates the receiving local variable and is never observable through
another name.

Zero-length vectors:
    normalize() returns the zero vector for a zero-length input, since
    kernels cannot raise. Host-side code should use normalize_host(), which
    raises ValueError instead.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from minitrace.core.vec import cross, vec3
    >>> @ti.kernel
    ... def up() -> vec3:
    ...     return cross(vec3(0.0, 0.0, -1.0), vec3(1.0, 0.0, 0.0))
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Double precision 3D vector used for points, directions and colors
vec3 = ti.types.vector(3, ti.f64)

# Threshold used by near_zero()
NEAR_ZERO_EPSILON = 1e-8


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum a + b."""
    return vec3(a.x + b.x, a.y + b.y, a.z + b.z)


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return vec3(a.x - b.x, a.y - b.y, a.z - b.z)


@ti.func
def negate(v: vec3) -> vec3:
    """Return -v."""
    return vec3(-v.x, -v.y, -v.z)


@ti.func
def hadamard(a: vec3, b: vec3) -> vec3:
    """Component-wise (Hadamard) product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The vector (a.x * b.x, a.y * b.y, a.z * b.z).
    """
    return vec3(a.x * b.x, a.y * b.y, a.z * b.z)


@ti.func
def scale(v: vec3, s: ti.f64) -> vec3:
    """Multiply a vector by a scalar.

    The operator form works in both operand orders (s * v and v * s).
    """
    return vec3(v.x * s, v.y * s, v.z * s)


@ti.func
def div(v: vec3, s: ti.f64) -> vec3:
    """Divide a vector by a scalar.

    Defined as multiplication by the reciprocal. Dividing by exactly zero
    follows IEEE-754 and produces infinities or NaNs rather than an error.

    Args:
        v: The vector to divide.
        s: The divisor.

    Returns:
        v * (1 / s).
    """
    return scale(v, 1.0 / s)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        a.x * b.x + a.y * b.y + a.z * b.z.
    """
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product a x b.

    cross(a, a) is zero and cross(a, b) == -cross(b, a).
    """
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes, as it avoids the
    square root.
    """
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. If v has zero length the
        zero vector is returned.
    """
    magnitude = length(v)
    result = vec3(0.0, 0.0, 0.0)
    if magnitude > 0.0:
        result = div(v, magnitude)
    return result


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Returns:
        1 if every component is below NEAR_ZERO_EPSILON in magnitude, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def lerp(start: vec3, end: vec3, a: ti.f64) -> vec3:
    """Linear interpolation (1 - a) * start + a * end."""
    return tm.mix(start, end, a)


# =============================================================================
# Host-side helpers (plain Python / NumPy)
# =============================================================================


def as_array(v: Sequence[float]) -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a float64 NumPy vector.

    Raises:
        ValueError: If v does not have exactly three components.
    """
    array = np.asarray(v, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {array.shape}")
    return array


def normalize_host(v: Sequence[float]) -> npt.NDArray[np.float64]:
    """Normalize a vector on the host.

    Unlike the kernel-side normalize(), a zero-length input is an error.

    Raises:
        ValueError: If v has zero length.
    """
    array = as_array(v)
    magnitude = float(np.linalg.norm(array))
    if magnitude == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return array / magnitude


def format_vector(v: Sequence[float]) -> str:
    """Format a vector as space-separated components, e.g. "1.0 2.0 3.0"."""
    x, y, z = (float(c) for c in as_array(v))
    return f"{x} {y} {z}"


def to_tuple(v) -> tuple[float, float, float]:
    """Convert a Taichi vector (or any 3-sequence) to a Python tuple."""
    return (float(v[0]), float(v[1]), float(v[2]))
