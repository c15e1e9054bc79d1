"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    ray: Ray data structure and point/vector algebra
    caster: Shading engine (primary hit, shadow ray) and the viewport render

The shading law is a single-bounce Lambertian approximation with hard
shadows from one point light. Every pixel is independent, so the render
kernel parallelises over the whole image.
"""

from .ray import (
    DegenerateVectorError,
    Ray,
    dot,
    is_zero_vector,
    length,
    make_ray,
    normalize,
    ray_at,
    scale,
    subtract,
    translate,
    vec3,
    vector_from,
    vector_to,
)

# Note: caster is NOT imported here to avoid circular imports.
# Import directly from spherecast.core.caster when needed.

__all__ = [
    "DegenerateVectorError",
    "Ray",
    "make_ray",
    "ray_at",
    "vec3",
    "vector_to",
    "vector_from",
    "translate",
    "scale",
    "dot",
    "length",
    "subtract",
    "is_zero_vector",
    "normalize",
]
