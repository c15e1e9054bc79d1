"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere and Finish dataclasses, ray-sphere intersection and
        surface normals

All intersection routines are Taichi functions (@ti.func). A query returns a
HitRecord whose hit flag stands in for an optional intersection point:

    record = intersect_sphere(sphere, ray)
    if record.hit == 1:
        normal = normal_at(sphere, record.point)
"""

from .sphere import (
    Finish,
    HitRecord,
    Sphere,
    intersect_sphere,
    make_finish,
    make_sphere,
    normal_at,
)

__all__ = [
    "Sphere",
    "Finish",
    "HitRecord",
    "intersect_sphere",
    "normal_at",
    "make_sphere",
    "make_finish",
]
