"""Camera module for primary ray generation.

Components:
    viewport: Pinhole viewport projecting pixels through a fixed image plane

Ray generation uses integer pixel coordinates:
    x in [0, image_width): left to right across the image plane
    y in [0, image_height): bottom to top across the image plane

Primary rays are created inside the render kernel, one per pixel, in
parallel across the whole image.
"""

from .viewport import (
    Viewport,
    get_ray,
    get_viewport_info,
    screen_point,
    setup_viewport,
)

__all__ = [
    "Viewport",
    "setup_viewport",
    "screen_point",
    "get_ray",
    "get_viewport_info",
]
