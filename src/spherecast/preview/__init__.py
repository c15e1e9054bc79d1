"""Preview module for output and visualization.

This module turns framebuffers into something a person can look at:

Components:
    display: Clamping/gamma/orientation pipeline and Matplotlib preview
    export: 8-bit image export through Pillow (BMP, PNG, ...)
    terminal: Two-characters-per-pixel text rendering for the console

The ray caster leaves colors unclamped and stores the bottom row of the image
plane first; the functions here clamp to [0, 1] and flip rows so that scene
+y points up.

Example:
    >>> from spherecast.preview import save_image, print_framebuffer
    >>> framebuffer = cast_viewport(viewport, scene)
    >>> save_image(framebuffer, "spheres.bmp")
    >>> print_framebuffer(framebuffer)
"""

from spherecast.preview.display import (
    apply_gamma,
    process_image_for_display,
    show_preview,
)
from spherecast.preview.export import (
    image_to_uint8,
    save_image,
)
from spherecast.preview.terminal import (
    print_framebuffer,
    render_text,
)

__all__ = [
    # Display functions
    "show_preview",
    "apply_gamma",
    "process_image_for_display",
    # Export functions
    "save_image",
    "image_to_uint8",
    # Terminal functions
    "render_text",
    "print_framebuffer",
]
