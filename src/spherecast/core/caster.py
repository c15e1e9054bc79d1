"""Ray caster: per-pixel shading with hard shadows from one point light.

This module implements the shading engine. For every pixel the viewport
projector produces a primary ray; the ray is intersected with the scene, the
visible point is lit by the scene's point light, and a shadow ray decides
whether the light actually reaches it.

Shading law for a hit point p on sphere s:
    normal = normal_at(s, p)
    to_light = normalize(vector_to(p, light.position))
    brightness = (dot(normal, to_light) + 1) / 2
    color = black if the shadow ray hits any sphere, else s.color * brightness

Rays that hit nothing return the white background. Colors are not clamped;
that is left to the encoders in spherecast.preview.

The shadow ray starts at p offset by SHADOW_EPSILON along the surface normal,
so a lit point never shadows itself through rounding error.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spherecast.camera.viewport import Viewport
    >>> from spherecast.core.caster import cast_viewport
    >>> from spherecast.scene.manager import SceneManager
    >>>
    >>> scene = SceneManager()
    >>> scene.add_sphere((0, 0, 0), 2.0, (0.9, 0.2, 0.2))
    >>> scene.set_light((100, 100, -100))
    >>> viewport = Viewport((0, 0, -10), 10.0, 10.0, 400, 400)
    >>> framebuffer = cast_viewport(viewport, scene)  # shape (400, 400, 3)
"""

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti

from spherecast.camera.viewport import Viewport, get_ray, setup_viewport
from spherecast.core.ray import (
    DegenerateVectorError,
    Ray,
    dot,
    is_zero_vector,
    make_ray,
    normalize,
    scale,
    translate,
    vec3,
    vector_to,
)
from spherecast.geometry.sphere import normal_at
from spherecast.scene.world import (
    get_light,
    get_sphere,
    has_light,
    intersect_scene,
    intersect_scene_any,
)

if TYPE_CHECKING:
    from spherecast.scene.manager import SceneManager

# Row-major (image_height, image_width, 3) grid of RGB colors
Framebuffer = npt.NDArray[np.float64]

# =============================================================================
# Shading Constants
# =============================================================================

# Color of rays that hit nothing
BACKGROUND_COLOR = vec3(1.0, 1.0, 1.0)

# Color of points the light cannot reach
SHADOW_COLOR = vec3(0.0, 0.0, 0.0)

# Offset of the shadow ray origin along the surface normal
SHADOW_EPSILON = 1e-6

# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Color buffer indexed [y, x]
_framebuffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Row-major index of the first pixel that needed a zero-length normalization
_NO_DEGENERATE_PIXEL = MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT
_first_degenerate_pixel = ti.field(dtype=ti.i32, shape=())

# Result of a single ray cast from Python
_single_ray_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_single_ray_degenerate = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Shading Core
# =============================================================================


@ti.func
def cast_vector(ray: Ray):
    """Resolve the color seen along one ray.

    Args:
        ray: The ray to trace against the loaded scene.

    Returns:
        A tuple (color, degenerate). degenerate is 1 when the hit point
        coincides with the light position, so the light direction cannot be
        normalized; color is then black and must be discarded.
    """
    color = BACKGROUND_COLOR
    degenerate = 0

    rec = intersect_scene(ray)
    if rec.hit == 1:
        sphere = get_sphere(rec.sphere_index)
        light = get_light()
        point = rec.point

        normal = normal_at(sphere, point)
        to_light_raw = vector_to(point, light.position)

        if is_zero_vector(to_light_raw) == 1:
            degenerate = 1
            color = SHADOW_COLOR
        else:
            to_light = normalize(to_light_raw)
            brightness = (dot(normal, to_light) + 1.0) / 2.0

            shadow_origin = translate(point, scale(normal, SHADOW_EPSILON))
            if intersect_scene_any(make_ray(shadow_origin, to_light)) == 1:
                color = SHADOW_COLOR
            else:
                color = scale(sphere.color, brightness)

    return color, degenerate


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _cast_viewport_kernel(width: ti.i32, height: ti.i32):
    """Cast one primary ray per pixel into the framebuffer.

    Pixels are independent; Taichi parallelizes this loop and each
    framebuffer cell is written exactly once.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
    """
    for y, x in ti.ndrange(height, width):
        ray, ray_degenerate = get_ray(x, y)
        color, light_degenerate = cast_vector(ray)

        if ray_degenerate == 1 or light_degenerate == 1:
            ti.atomic_min(_first_degenerate_pixel[None], y * width + x)
            color = SHADOW_COLOR

        _framebuffer[y, x] = color


@ti.kernel
def _cast_single_ray(origin: vec3, direction: vec3):
    """Cast a single ray and store the result.

    Used for testing and debugging individual rays.
    """
    # Single-iteration outer loop keeps the scene scans serial
    for _ in range(1):
        color, degenerate = cast_vector(make_ray(origin, direction))
        _single_ray_color[None] = color
        _single_ray_degenerate[None] = degenerate


# =============================================================================
# Public Rendering API
# =============================================================================


def _check_light() -> None:
    """Raise if the loaded scene has no light."""
    if not has_light():
        raise RuntimeError("Scene has no light. Call SceneManager.set_light() first.")


def cast_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Cast one ray against the loaded scene.

    This is a Python-callable function for testing. For rendering, use
    cast_viewport() which processes all pixels in parallel.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z); need not be unit length but
            must be non-zero.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If the scene has no light.
        DegenerateVectorError: If the hit point coincides with the light.
    """
    _check_light()

    _cast_single_ray(vec3(*origin), vec3(*direction))

    if _single_ray_degenerate[None] == 1:
        raise DegenerateVectorError(
            f"Ray from {tuple(origin)} hits the scene at the light position; "
            "the light direction cannot be normalized"
        )

    color = _single_ray_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def cast_viewport(viewport: Viewport, scene: "SceneManager") -> Framebuffer:
    """Render the scene through the viewport.

    Args:
        viewport: The viewport to project through.
        scene: The scene to render. It is reloaded into the shared scene
            fields first, so it stays the loaded scene after the call.

    Returns:
        A read-only float64 array of shape (image_height, image_width, 3),
        indexed [y, x]. Row y = 0 is the bottom of the image plane.

    Raises:
        ValueError: If the image exceeds MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.
        RuntimeError: If the scene has no light.
        DegenerateVectorError: If any pixel needed a zero-length
            normalization (the eye lies on a screen point, or a hit point
            coincides with the light).
    """
    width = viewport.image_width
    height = viewport.image_height
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    scene.load()
    _check_light()

    setup_viewport(viewport)
    _first_degenerate_pixel[None] = _NO_DEGENERATE_PIXEL

    _cast_viewport_kernel(width, height)

    first = int(_first_degenerate_pixel[None])
    if first != _NO_DEGENERATE_PIXEL:
        y, x = divmod(first, width)
        raise DegenerateVectorError(
            f"Pixel ({x}, {y}) needed a zero-length normalization: the eye lies on "
            "its screen point or its hit point coincides with the light"
        )

    # Extract active region
    framebuffer = _framebuffer.to_numpy()[:height, :width, :].copy()
    framebuffer.setflags(write=False)
    return framebuffer
