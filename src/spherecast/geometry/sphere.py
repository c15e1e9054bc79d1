"""Sphere primitive with closed-form ray-sphere intersection.

This module provides the Sphere and Finish dataclasses, the HitRecord
returned by intersection queries, and the intersection and normal functions.

The intersection solves the quadratic

    a*t^2 + b*t + c = 0

for the ray parameter t, where:
    a = dot(direction, direction)
    b = 2 * dot(center_to_origin, direction)
    c = dot(center_to_origin, center_to_origin) - radius^2
    center_to_origin = vector_to(center, origin)

The discriminant is checked explicitly before taking the square root, so a
miss never relies on NaN propagation.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spherecast.geometry.sphere import make_finish, make_sphere, intersect_sphere
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti

from spherecast.core.ray import Ray, dot, normalize, scale, translate, vec3, vector_to


@ti.dataclass
class Finish:
    """Material reflectance parameters.

    Stored with every sphere but not consumed by the current shading law,
    which only uses the base color.

    Attributes:
        ambient: Ambient reflectance.
        diffuse: Diffuse reflectance.
        specular: Specular reflectance.
        roughness: Surface roughness.
    """

    ambient: ti.f64
    diffuse: ti.f64
    specular: ti.f64
    roughness: ti.f64


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius, with its surface color.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        color: The base RGB color of the surface (vec3).
        finish: The material reflectance parameters.
    """

    center: vec3
    radius: ti.f64
    color: vec3
    finish: Finish


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: The ray parameter of the chosen root. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3


@ti.func
def _choose_root(t1: ti.f64, t2: ti.f64):
    """Pick the visible root of the quadratic.

    Args:
        t1: The smaller-sign root, (-b - sqrt(delta)) / 2a.
        t2: The larger-sign root, (-b + sqrt(delta)) / 2a.

    Returns:
        A tuple (found, t) where found is 1 when at least one root is
        non-negative. With two non-negative roots the smaller wins; with
        both negative the sphere is entirely behind the ray origin.
    """
    found = 0
    t = 0.0
    if t1 >= 0.0 and t2 >= 0.0:
        found = 1
        t = ti.min(t1, t2)
    elif t1 >= 0.0:
        found = 1
        t = t1
    elif t2 >= 0.0:
        found = 1
        t = t2
    return found, t


@ti.func
def intersect_sphere(sphere: Sphere, ray: Ray) -> HitRecord:
    """Find the nearest visible intersection of a ray with a sphere.

    Args:
        sphere: The sphere to test.
        ray: The ray to trace. The direction need not be normalized but
            must be non-zero.

    Returns:
        A HitRecord; hit == 0 when the ray misses the sphere (negative
        discriminant) or the sphere lies entirely behind the ray origin.
    """
    center_to_origin = vector_to(sphere.center, ray.origin)

    a = dot(ray.direction, ray.direction)
    b = 2.0 * dot(center_to_origin, ray.direction)
    c = dot(center_to_origin, center_to_origin) - sphere.radius * sphere.radius

    delta = b * b - 4.0 * a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    if delta >= 0.0:
        sqrt_delta = ti.sqrt(delta)
        t1 = (-b - sqrt_delta) / (2.0 * a)
        t2 = (-b + sqrt_delta) / (2.0 * a)

        found, t = _choose_root(t1, t2)
        if found == 1:
            did_hit = 1
            hit_t = t
            hit_point = translate(ray.origin, scale(ray.direction, t))

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point)


@ti.func
def normal_at(sphere: Sphere, point: vec3) -> vec3:
    """Unit surface normal pointing from the sphere center to point.

    The point is not checked to lie on the sphere.
    """
    return normalize(vector_to(sphere.center, point))


@ti.func
def make_finish(ambient: ti.f64, diffuse: ti.f64, specular: ti.f64, roughness: ti.f64) -> Finish:
    """Create a Finish inside a Taichi kernel."""
    return Finish(ambient=ambient, diffuse=diffuse, specular=specular, roughness=roughness)


@ti.func
def make_sphere(center: vec3, radius: ti.f64, color: vec3, finish: Finish) -> Sphere:
    """Create a sphere inside a Taichi kernel.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        color: The base RGB color of the surface.
        finish: The material reflectance parameters.

    Returns:
        A new Sphere instance.
    """
    return Sphere(center=center, radius=radius, color=color, finish=finish)
