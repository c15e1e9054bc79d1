"""Preset scenes and JSON scene files.

This module provides the factory for the default scene (a single sphere at
the origin lit from the upper right, seen from an eye ten units in front of
the image plane) and functions to load and save scenes as JSON documents.

Scene file format:

    {
        "viewport": {
            "eye": [0.0, 0.0, -10.0],
            "eye_width": 10.0,
            "eye_height": 10.0,
            "image_width": 400,
            "image_height": 400
        },
        "scene": {
            "spheres": [
                {"center": [0, 0, 0], "radius": 2.0, "color": [0.9, 0.2, 0.2],
                 "finish": {"ambient": 0.1, "diffuse": 0.9}}
            ],
            "light": {"position": [100, 100, -100], "color": [1, 1, 1]},
            "hit_policy": "first_hit"
        }
    }

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spherecast.scene.default_scene import create_default_scene
    >>>
    >>> scene, viewport = create_default_scene()
    >>> # Now render using the scene and viewport
"""

import json
from dataclasses import dataclass
from pathlib import Path

from spherecast.camera.viewport import Viewport
from spherecast.scene.manager import FinishParams, SceneManager

# =============================================================================
# Default Scene Parameters
# =============================================================================


@dataclass
class DefaultSceneParams:
    """Parameters for configuring the default scene.

    The geometry and light position match the classic single-sphere setup.
    The classic setup also painted the sphere and the light black, which
    renders a flat black disc on white. The defaults here use a red sphere
    under a white light so the shading is visible; pass (0, 0, 0) for both
    colors to get the classic image.

    Attributes:
        image_width: Image width in pixels. Default is 400.
        image_height: Image height in pixels. Default is 400.
        sphere_color: RGB color of the sphere. Default is a warm red.
        light_position: Position of the point light.
            Default is (100, 100, -100), above and to the right of the eye.
        light_color: RGB color of the light. Default is white.

    Example:
        >>> params = DefaultSceneParams(image_width=80, image_height=40)
        >>> scene, viewport = create_default_scene(params)
    """

    image_width: int = 400
    image_height: int = 400
    sphere_color: tuple[float, float, float] = (0.85, 0.25, 0.2)
    light_position: tuple[float, float, float] = (100.0, 100.0, -100.0)
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)


# =============================================================================
# Default Scene Constants
# =============================================================================

# Eye ten units in front of the image plane, looking toward +z
EYE_POSITION = (0.0, 0.0, -10.0)

# Physical extent of the image plane
EYE_WIDTH = 10.0
EYE_HEIGHT = 10.0

# Sphere at the origin
SPHERE_CENTER = (0.0, 0.0, 0.0)
SPHERE_RADIUS = 2.0


# =============================================================================
# Scene Factories
# =============================================================================


def create_default_scene(
    params: DefaultSceneParams | None = None,
) -> tuple[SceneManager, Viewport]:
    """Create the default single-sphere scene.

    Args:
        params: Optional DefaultSceneParams for customizing resolution and
            colors. If None, uses default DefaultSceneParams().

    Returns:
        A tuple of (SceneManager, Viewport) where:
        - SceneManager holds the sphere and the light
        - Viewport is configured for the standard view

    Example:
        >>> scene, viewport = create_default_scene()
        >>> scene.get_sphere_count()
        1
    """
    if params is None:
        params = DefaultSceneParams()

    scene = SceneManager()
    scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, params.sphere_color, FinishParams())
    scene.set_light(params.light_position, params.light_color)

    viewport = Viewport(
        eye=EYE_POSITION,
        eye_width=EYE_WIDTH,
        eye_height=EYE_HEIGHT,
        image_width=params.image_width,
        image_height=params.image_height,
    )

    return scene, viewport


def load_scene_file(path: str | Path) -> tuple[SceneManager, Viewport]:
    """Load a scene and viewport from a JSON scene file.

    Args:
        path: Path to the JSON document.

    Returns:
        A tuple of (SceneManager, Viewport).

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the document is not valid JSON or describes an
            invalid scene.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid scene file {path}: {e}") from e

    if "viewport" not in data or "scene" not in data:
        raise ValueError(f"Scene file {path} needs 'viewport' and 'scene' sections")

    viewport = Viewport.from_dict(data["viewport"])
    scene = SceneManager()
    scene.from_dict(data["scene"])

    return scene, viewport


def save_scene_file(path: str | Path, scene: SceneManager, viewport: Viewport) -> None:
    """Write a scene and viewport to a JSON scene file.

    Args:
        path: Output file path.
        scene: The scene to save.
        viewport: The viewport to save.
    """
    data = {"viewport": viewport.to_dict(), "scene": scene.to_dict()}
    Path(path).write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
