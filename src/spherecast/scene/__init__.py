"""Scene module for scene storage, construction and presets.

This module handles scene representation and ray-scene queries:

Components:
    world: Taichi field storage for spheres and the light, HitPolicy, and
        the scene-level intersection queries
    manager: SceneManager validating and serializing scenes
    default_scene: The default single-sphere scene and JSON scene files

Scene data is organized for Taichi kernels:
    - Structure-of-Arrays layout for sphere data
    - One point light in scalar fields
    - Linear scan over all spheres per ray (no acceleration structure)
"""

from .default_scene import (
    DefaultSceneParams,
    create_default_scene,
    load_scene_file,
    save_scene_file,
)
from .manager import (
    FinishParams,
    LightInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)
from .world import (
    MAX_SPHERES,
    HitPolicy,
    Light,
    SceneHitRecord,
    add_sphere,
    clear_light,
    clear_scene,
    get_hit_policy,
    get_light,
    get_sphere,
    get_sphere_count,
    has_light,
    intersect_scene,
    intersect_scene_any,
    set_hit_policy,
    set_light,
)

__all__ = [
    # World module
    "HitPolicy",
    "Light",
    "SceneHitRecord",
    "add_sphere",
    "set_light",
    "clear_light",
    "clear_scene",
    "has_light",
    "get_sphere_count",
    "set_hit_policy",
    "get_hit_policy",
    "get_sphere",
    "get_light",
    "intersect_scene",
    "intersect_scene_any",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "SphereInfo",
    "LightInfo",
    "FinishParams",
    # Default scene module
    "DefaultSceneParams",
    "create_default_scene",
    "load_scene_file",
    "save_scene_file",
]
