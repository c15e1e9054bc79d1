"""Ray data structure and point/vector algebra for the ray caster.

This module provides the Ray dataclass and the vector utility functions
every other component is built on. Points and vectors share one Taichi type
(``vec3``, double precision); which one a value is follows from the function
contract, e.g. ``vector_to`` takes two points and returns a vector.

All helpers are ``@ti.func`` and can only be called from inside Taichi
kernels. Taichi must be initialised with ``default_fp=ti.f64`` so that float
literals inside the kernels match the field precision.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> @ti.kernel
    ... def distance() -> ti.f64:
    ...     a = vec3(0.0, 0.0, 0.0)
    ...     b = vec3(3.0, 4.0, 0.0)
    ...     return length(vector_to(a, b))  # 5.0
"""

import taichi as ti

# Double precision 3-vector used for points, vectors and colors
vec3 = ti.types.vector(3, ti.f64)


class DegenerateVectorError(RuntimeError):
    """Raised when a render needed to normalize a zero-length vector.

    This happens when the eye coincides with a projected screen point or a
    hit point coincides with the light position. The scene or viewport is
    malformed; retrying gives the same result.
    """


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            unit length but not enforced; intersection math divides by
            dot(direction, direction) and holds for any non-zero direction.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point translate(ray.origin, scale(ray.direction, t)).
    """
    return translate(ray.origin, scale(ray.direction, t))


# =============================================================================
# Point Operations
# =============================================================================


@ti.func
def vector_to(a: vec3, b: vec3) -> vec3:
    """Displacement from point a to point b (b - a)."""
    return vec3(b.x - a.x, b.y - a.y, b.z - a.z)


@ti.func
def vector_from(a: vec3, b: vec3) -> vec3:
    """Displacement from point b to point a.

    Exactly vector_to(b, a); exists so call sites read in the direction the
    displacement points.
    """
    return vector_to(b, a)


@ti.func
def translate(p: vec3, v: vec3) -> vec3:
    """Move point p by vector v."""
    return vec3(p.x + v.x, p.y + v.y, p.z + v.z)


# =============================================================================
# Vector Operations
# =============================================================================


@ti.func
def scale(v: vec3, s: ti.f64) -> vec3:
    """Multiply every component of v by the scalar s."""
    return vec3(v.x * s, v.y * s, v.z * s)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def length(v: vec3) -> ti.f64:
    """Euclidean length of a vector, always >= 0."""
    return ti.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b of two vectors."""
    return vec3(a.x - b.x, a.y - b.y, a.z - b.z)


@ti.func
def is_zero_vector(v: vec3) -> ti.i32:
    """Check whether a vector has zero length.

    Callers use this before normalize() to detect the degenerate case.

    Args:
        v: The vector to check.

    Returns:
        1 if the vector has zero length, 0 otherwise.
    """
    result = 0
    if v.x == 0.0 and v.y == 0.0 and v.z == 0.0:
        result = 1
    return result


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Precondition: length(v) != 0. A zero vector produces non-finite
    components; check with is_zero_vector() first and report the violation
    instead of letting NaN reach the framebuffer.

    Args:
        v: The input vector.

    Returns:
        scale(v, 1 / length(v)).
    """
    return scale(v, 1.0 / length(v))
