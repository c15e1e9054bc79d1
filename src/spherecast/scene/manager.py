"""Scene manager for building and serializing sphere scenes.

This module provides a high-level scene API on top of the Taichi field
storage in spherecast.scene.world. It validates configuration at
construction time (the render kernels trust their inputs), keeps Python-side
records of what was added, and converts scenes to and from plain
dictionaries for JSON scene files.

The SceneManager maintains:
- An ordered list of SphereInfo records mirroring the sphere fields
- The single LightInfo for the scene
- The HitPolicy used for primary rays

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spherecast.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere(center=(0, 0, 0), radius=2.0, color=(0.9, 0.2, 0.2))
    >>> scene.set_light(position=(100, 100, -100))
"""

import math
from dataclasses import dataclass, field
from typing import Any

from spherecast.scene.world import (
    MAX_SPHERES,
    HitPolicy,
    add_sphere,
    clear_scene,
    get_sphere_count,
    set_hit_policy,
    set_light,
)

Color = tuple[float, float, float]


@dataclass(frozen=True)
class FinishParams:
    """Material reflectance parameters for a sphere.

    These are stored and serialized with the scene but not consumed by the
    current shading law.

    Attributes:
        ambient: Ambient reflectance.
        diffuse: Diffuse reflectance.
        specular: Specular reflectance.
        roughness: Surface roughness.
    """

    ambient: float = 0.0
    diffuse: float = 0.0
    specular: float = 0.0
    roughness: float = 0.0

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return (ambient, diffuse, specular, roughness)."""
        return (self.ambient, self.diffuse, self.specular, self.roughness)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        color: The base RGB color of the surface.
        finish: The material reflectance parameters.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    color: Color
    finish: FinishParams


@dataclass
class LightInfo:
    """Information about the scene's point light.

    Attributes:
        position: The light position.
        color: The RGB color of the light.
    """

    position: tuple[float, float, float]
    color: Color


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations, in scene order.
        light: The light configuration, or None if no light is set.
        hit_policy: Name of the HitPolicy ("first_hit" or "nearest_hit").
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)
    light: dict[str, Any] | None = None
    hit_policy: str = "first_hit"


def _as_triple(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a sequence of three numbers to a float tuple.

    Raises:
        ValueError: If values does not hold three finite numbers.
    """
    try:
        x, y, z = (float(v) for v in values)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be three numbers, got {values!r}") from e
    if not all(math.isfinite(v) for v in (x, y, z)):
        raise ValueError(f"{name} must be finite, got {values!r}")
    return (x, y, z)


def _validate_color(color: Any, name: str = "color") -> Color:
    """Check that every color component is in [0, 1]."""
    rgb = _as_triple(color, name)
    if not all(0.0 <= c <= 1.0 for c in rgb):
        raise ValueError(f"{name} components must be in [0, 1], got {rgb}")
    return rgb


class SceneManager:
    """Scene manager coordinating sphere and light storage.

    The SceneManager is the construction step for the ray caster: it rejects
    malformed configuration (non-positive radius, colors outside [0, 1],
    non-finite coordinates) so the render kernels can assume well-formed
    input. The scene is read-only while a render runs.

    Only one scene is live at a time because the storage is module-level
    Taichi fields; creating a SceneManager clears the previous scene. load()
    makes a scene live again, and cast_viewport() calls it before rendering.

    Attributes:
        spheres: List of SphereInfo for all spheres, in scene order.
        light: LightInfo for the light, or None if no light is set.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((0, 0, 0), 2.0, (0.9, 0.2, 0.2))
        0
        >>> scene.add_sphere((3, 0, 2), 1.0, (0.2, 0.9, 0.2), FinishParams(diffuse=0.8))
        1
        >>> scene.set_light((100, 100, -100))
    """

    def __init__(self, hit_policy: HitPolicy = HitPolicy.FIRST_HIT) -> None:
        """Initialize an empty scene.

        Args:
            hit_policy: How primary rays choose between several hit spheres.
        """
        self.spheres: list[SphereInfo] = []
        self.light: LightInfo | None = None
        self._hit_policy = HitPolicy(hit_policy)
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        set_hit_policy(self._hit_policy)
        self.spheres.clear()
        self.light = None

    def clear(self) -> None:
        """Clear the entire scene (spheres and light).

        The hit policy is kept.
        """
        self._clear_all()

    # =========================================================================
    # Scene Contents
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: Color,
        finish: FinishParams | None = None,
    ) -> int:
        """Add a sphere to the end of the scene order.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            color: The base RGB color, each component in [0, 1].
            finish: The material reflectance parameters. Defaults to all zeros.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius is not positive or a value is malformed.
        """
        center_xyz = _as_triple(center, "center")
        radius = float(radius)
        if not (math.isfinite(radius) and radius > 0.0):
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        rgb = _validate_color(color)
        finish = finish if finish is not None else FinishParams()

        sphere_index = add_sphere(center_xyz, radius, rgb, finish.as_tuple())

        info = SphereInfo(
            sphere_index=sphere_index,
            center=center_xyz,
            radius=radius,
            color=rgb,
            finish=finish,
        )
        self.spheres.append(info)

        return sphere_index

    def set_light(
        self,
        position: tuple[float, float, float],
        color: Color = (1.0, 1.0, 1.0),
    ) -> None:
        """Set the scene's point light, replacing any previous one.

        Args:
            position: The light position as (x, y, z).
            color: The RGB color of the light, each component in [0, 1].

        Raises:
            ValueError: If a value is malformed.
        """
        position_xyz = _as_triple(position, "light position")
        rgb = _validate_color(color, "light color")
        set_light(position_xyz, rgb)
        self.light = LightInfo(position=position_xyz, color=rgb)

    @property
    def hit_policy(self) -> HitPolicy:
        """The policy primary rays use to choose between hit spheres."""
        return self._hit_policy

    @hit_policy.setter
    def hit_policy(self, policy: HitPolicy) -> None:
        self._hit_policy = HitPolicy(policy)
        set_hit_policy(self._hit_policy)

    def load(self) -> None:
        """Write this scene into the Taichi fields read by the render kernels.

        The fields are shared by every SceneManager, so a scene built earlier
        may have been replaced since. Reloading rebuilds the fields from this
        manager's records: spheres in scene order, the light, the hit policy.
        """
        clear_scene()
        set_hit_policy(self._hit_policy)
        for sphere in self.spheres:
            add_sphere(sphere.center, sphere.radius, sphere.color, sphere.finish.as_tuple())
        if self.light is not None:
            set_light(self.light.position, self.light.color)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def has_light(self) -> bool:
        """Check if the scene has a light."""
        return self.light is not None

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing the spheres, light and hit policy.
        """
        config = SceneConfig(hit_policy=self._hit_policy.name.lower())

        for sphere in self.spheres:
            sphere_config = {
                "center": list(sphere.center),
                "radius": sphere.radius,
                "color": list(sphere.color),
                "finish": {
                    "ambient": sphere.finish.ambient,
                    "diffuse": sphere.finish.diffuse,
                    "specular": sphere.finish.specular,
                    "roughness": sphere.finish.roughness,
                },
            }
            config.spheres.append(sphere_config)

        if self.light is not None:
            config.light = {
                "position": list(self.light.position),
                "color": list(self.light.color),
            }

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        try:
            policy = HitPolicy[config.hit_policy.upper()]
        except KeyError as e:
            raise ValueError(f"Unknown hit policy: {config.hit_policy}") from e

        self._hit_policy = policy
        self.clear()

        for sphere_config in config.spheres:
            if "radius" not in sphere_config:
                raise ValueError(f"Sphere configuration missing radius: {sphere_config}")
            finish_config = sphere_config.get("finish", {})
            finish = FinishParams(
                ambient=float(finish_config.get("ambient", 0.0)),
                diffuse=float(finish_config.get("diffuse", 0.0)),
                specular=float(finish_config.get("specular", 0.0)),
                roughness=float(finish_config.get("roughness", 0.0)),
            )
            self.add_sphere(
                sphere_config.get("center", [0.0, 0.0, 0.0]),
                sphere_config["radius"],
                sphere_config.get("color", [1.0, 1.0, 1.0]),
                finish,
            )

        if config.light is not None:
            if "position" not in config.light:
                raise ValueError(f"Light configuration missing position: {config.light}")
            self.set_light(
                config.light["position"],
                config.light.get("color", [1.0, 1.0, 1.0]),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "spheres": config.spheres,
            "light": config.light,
            "hit_policy": config.hit_policy,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'spheres', 'light' and 'hit_policy' keys.
        """
        config = SceneConfig(
            spheres=data.get("spheres", []),
            light=data.get("light"),
            hit_policy=data.get("hit_policy", "first_hit"),
        )
        self.from_config(config)

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    def __repr__(self) -> str:
        """Return a string representation of the scene."""
        return (
            f"SceneManager(spheres={len(self.spheres)}, light={self.has_light()}, "
            f"hit_policy={self._hit_policy.name})"
        )
