"""Taichi-based ray caster for sphere scenes under a single point light.

This package renders still images of spheres using ray casting from a pinhole
eye point, with support for:
- Closed-form ray-sphere intersection in double precision
- Lambertian-style shading with hard shadows from one point light
- A configurable hit policy (first surface in scene order, or nearest)
- Parallel per-pixel rendering in a single Taichi kernel

Subpackages:
    core: Point/vector algebra, rays, and the shading engine
    geometry: The sphere primitive and its intersection queries
    scene: Scene storage, construction, presets and scene files
    camera: Viewport projector mapping pixels to primary rays
    preview: Image export, text rendering and Matplotlib preview

Taichi must be initialised with ``default_fp=ti.f64`` before importing the
subpackages, since they declare Taichi fields at import time.
"""

__version__ = "0.1.0"
