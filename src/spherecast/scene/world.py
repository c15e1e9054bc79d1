"""Scene storage and scene-level ray queries.

This module holds the renderable world in Taichi fields: an ordered list of
spheres and a single point light. It provides the scene-level intersection
used for primary rays (honoring the configured HitPolicy) and the any-hit
query used for shadow rays.

Spheres are stored in a Structure of Arrays layout. Insertion order is
significant: under HitPolicy.FIRST_HIT the first sphere in that order whose
intersection test succeeds is the visible one, even when a later sphere is
closer to the ray origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spherecast.scene.world import add_sphere, clear_scene, set_light
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 0.0), 2.0, (1.0, 0.2, 0.2), (0.0, 0.0, 0.0, 0.0))
    >>> set_light((100.0, 100.0, -100.0), (1.0, 1.0, 1.0))
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti

from spherecast.core.ray import Ray, vec3
from spherecast.geometry.sphere import Finish, Sphere, intersect_sphere


class HitPolicy(IntEnum):
    """Which surface a primary ray reports when several spheres are hit.

    FIRST_HIT: the first sphere in scene order whose intersection succeeds.
        Visual correctness with overlapping spheres depends on scene order.
    NEAREST_HIT: the sphere with the smallest ray parameter; ties go to the
        earlier sphere.
    """

    FIRST_HIT = 0
    NEAREST_HIT = 1


@ti.dataclass
class Light:
    """A point light source.

    Attributes:
        position: The light position in scene space (vec3).
        color: The RGB color of the light (vec3).
    """

    position: vec3
    color: vec3


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        t: The ray parameter of the hit. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        sphere_index: Index of the sphere that was hit, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    sphere_index: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 256

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
# (ambient, diffuse, specular, roughness)
sphere_finishes = ti.Vector.field(4, dtype=ti.f64, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Light storage (one light per scene)
light_position = ti.Vector.field(3, dtype=ti.f64, shape=())
light_color = ti.Vector.field(3, dtype=ti.f64, shape=())
light_enabled = ti.field(dtype=ti.i32, shape=())

# Active HitPolicy for intersect_scene
hit_policy = ti.field(dtype=ti.i32, shape=())
_NEAREST_HIT = int(HitPolicy.NEAREST_HIT)


def clear_scene() -> None:
    """Clear all spheres and the light, and restore the default hit policy.

    Resets the counts to zero. The field data is not cleared but will be
    overwritten when new spheres are added.
    """
    num_spheres[None] = 0
    light_enabled[None] = 0
    hit_policy[None] = int(HitPolicy.FIRST_HIT)


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
    finish: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0),
) -> int:
    """Add a sphere to the end of the scene order.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        color: The base RGB color of the surface.
        finish: (ambient, diffuse, specular, roughness).

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_colors[idx] = color
    sphere_finishes[idx] = finish
    num_spheres[None] = idx + 1
    return idx


def set_light(
    position: tuple[float, float, float],
    color: tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> None:
    """Set the scene's point light, replacing any previous one."""
    light_position[None] = position
    light_color[None] = color
    light_enabled[None] = 1


def clear_light() -> None:
    """Remove the scene's light."""
    light_enabled[None] = 0


def has_light() -> bool:
    """Check if the scene has a light."""
    return bool(light_enabled[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def set_hit_policy(policy: HitPolicy) -> None:
    """Select how intersect_scene chooses between several hit spheres."""
    hit_policy[None] = int(HitPolicy(policy))


def get_hit_policy() -> HitPolicy:
    """Get the active hit policy."""
    return HitPolicy(int(hit_policy[None]))


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Assemble the Sphere stored at index."""
    f = sphere_finishes[index]
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        color=sphere_colors[index],
        finish=Finish(ambient=f[0], diffuse=f[1], specular=f[2], roughness=f[3]),
    )


@ti.func
def get_light() -> Light:
    """Get the scene's point light."""
    return Light(position=light_position[None], color=light_color[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        sphere_index=-1,
    )


@ti.func
def intersect_scene(ray: Ray) -> SceneHitRecord:
    """Test a ray against every sphere in the scene.

    Under HitPolicy.FIRST_HIT the scan stops at the first sphere, in scene
    order, whose intersection succeeds. Under HitPolicy.NEAREST_HIT the hit
    with the smallest t is kept.

    Args:
        ray: The ray to trace.

    Returns:
        A SceneHitRecord for the chosen sphere, or a miss record.
    """
    result = _make_miss_record()
    nearest = hit_policy[None] == _NEAREST_HIT

    n = num_spheres[None]
    for i in range(n):
        # Taichi funcs cannot break out of the loop, so later spheres are skipped
        if result.hit == 0 or nearest:
            rec = intersect_sphere(get_sphere(i), ray)
            if rec.hit == 1:
                if result.hit == 0 or rec.t < result.t:
                    result = SceneHitRecord(hit=1, t=rec.t, point=rec.point, sphere_index=i)

    return result


@ti.func
def intersect_scene_any(ray: Ray) -> ti.i32:
    """Test if a ray hits any sphere in the scene (shadow ray query).

    Args:
        ray: The ray to trace.

    Returns:
        1 if any sphere was hit, 0 otherwise.
    """
    hit_any = 0

    n = num_spheres[None]
    for i in range(n):
        if hit_any == 0:
            rec = intersect_sphere(get_sphere(i), ray)
            if rec.hit == 1:
                hit_any = 1

    return hit_any
