"""Image export utilities for rendered framebuffers.

This module converts framebuffers to 8-bit RGB and saves them with Pillow.
The file format follows the extension of the output path (BMP, PNG, ...).

Quantization truncates: a channel value c in [0, 1] becomes floor(c * 255),
so only an exact 1.0 maps to 255.

Example:
    >>> from spherecast.preview.export import save_image
    >>> framebuffer = cast_viewport(viewport, scene)
    >>> save_image(framebuffer, "spheres.bmp")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from spherecast.preview.display import process_image_for_display


def image_to_uint8(
    framebuffer: npt.NDArray[np.floating],
    *,
    gamma: float = 1.0,
    flip_vertical: bool = True,
) -> npt.NDArray[np.uint8]:
    """Convert a framebuffer to uint8 for display/export.

    Args:
        framebuffer: Color array of shape (H, W, 3) indexed [y, x].
        gamma: Gamma correction value (default 1.0, linear).
        flip_vertical: Put framebuffer row 0 at the bottom of the image.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8, top row first.
    """
    processed = process_image_for_display(
        framebuffer,
        gamma=gamma,
        flip_vertical=flip_vertical,
    )

    return np.floor(processed * 255.0).astype(np.uint8)


def save_image(
    framebuffer: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
    flip_vertical: bool = True,
) -> Path:
    """Save a framebuffer as an image file.

    Args:
        framebuffer: Color array of shape (H, W, 3) indexed [y, x].
        filepath: Output file path; the extension selects the format.
        gamma: Gamma correction value (default 1.0, linear).
        flip_vertical: Put framebuffer row 0 at the bottom of the image.

    Returns:
        The path the image was written to.

    Raises:
        ValueError: If the extension is not a format Pillow can write.
    """
    path = Path(filepath)
    image_uint8 = image_to_uint8(framebuffer, gamma=gamma, flip_vertical=flip_vertical)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(path)

    return path
