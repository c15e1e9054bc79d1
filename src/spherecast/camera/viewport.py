"""Viewport projector mapping image pixels to primary rays.

The viewport is a fixed image plane at z = 0, centered on the z axis, with a
physical extent of eye_width x eye_height scene units sampled at
image_width x image_height pixels. The eye is placed off the plane by
configuration (for example at negative z), and every primary ray starts at
the eye and passes through the pixel's screen point:

    screen.x = x * eye_width / image_width - eye_width / 2
    screen.y = y * eye_height / image_height - eye_height / 2
    screen.z = 0

Pixel (0, 0) maps to the lower-left corner (-eye_width/2, -eye_height/2) of
the image plane; screen y grows with the pixel row index.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spherecast.camera.viewport import Viewport, setup_viewport, get_ray
    >>>
    >>> viewport = Viewport(
    ...     eye=(0.0, 0.0, -10.0),
    ...     eye_width=10.0,
    ...     eye_height=10.0,
    ...     image_width=400,
    ...     image_height=400,
    ... )
    >>> setup_viewport(viewport)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray, degenerate = get_ray(200, 200)  # Ray through the image center
"""

import math
from dataclasses import asdict, dataclass
from typing import Any

import taichi as ti

from spherecast.core.ray import Ray, is_zero_vector, make_ray, normalize, vec3, vector_to


def _is_finite_number(value: Any) -> bool:
    """Check for a finite int or float (bool excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


# =============================================================================
# Viewport Data Structure
# =============================================================================


@dataclass(frozen=True)
class Viewport:
    """Configuration for the pinhole viewport.

    Attributes:
        eye: Eye position in scene space (x, y, z). Must not lie on the
            image plane at a pixel's screen point.
        eye_width: Physical width of the image plane in scene units.
        eye_height: Physical height of the image plane in scene units.
        image_width: Image width in pixels (> 0).
        image_height: Image height in pixels (> 0).

    Raises:
        ValueError: If a dimension is not positive, or a value is not finite
            or has the wrong type.
    """

    eye: tuple[float, float, float]
    eye_width: float
    eye_height: float
    image_width: int
    image_height: int

    def __post_init__(self) -> None:
        try:
            eye = tuple(self.eye)
        except TypeError as e:
            raise ValueError(f"eye must be three finite numbers, got {self.eye!r}") from e
        if len(eye) != 3 or not all(_is_finite_number(c) for c in eye):
            raise ValueError(f"eye must be three finite numbers, got {self.eye!r}")
        object.__setattr__(self, "eye", tuple(float(c) for c in eye))
        for name in ("eye_width", "eye_height"):
            value = getattr(self, name)
            if not (_is_finite_number(value) and value > 0.0):
                raise ValueError(f"{name} must be positive, got {value!r}")
            object.__setattr__(self, name, float(value))
        for name in ("image_width", "image_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @property
    def pixel_count(self) -> int:
        """Number of pixels in the image."""
        return self.image_width * self.image_height

    def to_dict(self) -> dict[str, Any]:
        """Export the viewport to a dictionary (for JSON serialization)."""
        data = asdict(self)
        data["eye"] = list(self.eye)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Viewport":
        """Create a viewport from a dictionary.

        Args:
            data: Dictionary with 'eye', 'eye_width', 'eye_height',
                'image_width' and 'image_height' keys.

        Raises:
            ValueError: If a key is missing or a value is invalid.
        """
        try:
            return cls(
                eye=data["eye"],
                eye_width=data["eye_width"],
                eye_height=data["eye_height"],
                image_width=data["image_width"],
                image_height=data["image_height"],
            )
        except KeyError as e:
            raise ValueError(f"Viewport configuration missing {e}") from e


# =============================================================================
# Taichi Fields for Viewport State
# =============================================================================

_eye = ti.Vector.field(3, dtype=ti.f64, shape=())
_eye_width = ti.field(dtype=ti.f64, shape=())
_eye_height = ti.field(dtype=ti.f64, shape=())
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())


def setup_viewport(viewport: Viewport) -> None:
    """Load the viewport into the fields read by the projector.

    Must be called before rendering. Called from Python, not from within a
    Taichi kernel.

    Args:
        viewport: The viewport to project through.
    """
    _eye[None] = list(viewport.eye)
    _eye_width[None] = viewport.eye_width
    _eye_height[None] = viewport.eye_height
    _image_width[None] = viewport.image_width
    _image_height[None] = viewport.image_height


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def screen_point(x: ti.i32, y: ti.i32) -> vec3:
    """Map a pixel coordinate to its point on the image plane (z = 0).

    Args:
        x: Pixel column, 0 <= x < image_width.
        y: Pixel row, 0 <= y < image_height.

    Returns:
        The screen point in scene space.
    """
    width = _eye_width[None]
    height = _eye_height[None]
    sx = ti.cast(x, ti.f64) * width / ti.cast(_image_width[None], ti.f64) - width / 2.0
    sy = ti.cast(y, ti.f64) * height / ti.cast(_image_height[None], ti.f64) - height / 2.0
    return vec3(sx, sy, 0.0)


@ti.func
def get_ray(x: ti.i32, y: ti.i32):
    """Generate the primary ray for a pixel.

    Args:
        x: Pixel column.
        y: Pixel row.

    Returns:
        A tuple (ray, degenerate). The ray starts at the eye with a unit
        direction toward the pixel's screen point. degenerate is 1 when the
        eye coincides with the screen point; the direction is then not
        normalized and the ray must not be used.
    """
    eye = _eye[None]
    to_screen = vector_to(eye, screen_point(x, y))

    degenerate = is_zero_vector(to_screen)
    direction = to_screen
    if degenerate == 0:
        direction = normalize(to_screen)

    return make_ray(eye, direction), degenerate


# =============================================================================
# Utility Functions
# =============================================================================


def get_viewport_info() -> dict[str, Any]:
    """Get the loaded viewport state for debugging.

    Returns:
        Dictionary with eye, eye_width, eye_height, image_width, image_height.
    """
    eye_vec = _eye[None]
    return {
        "eye": (float(eye_vec[0]), float(eye_vec[1]), float(eye_vec[2])),
        "eye_width": float(_eye_width[None]),
        "eye_height": float(_eye_height[None]),
        "image_width": int(_image_width[None]),
        "image_height": int(_image_height[None]),
    }
