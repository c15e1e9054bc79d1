"""Matplotlib-based preview display for rendered framebuffers.

This module provides the display pipeline shared by the encoders (clamping,
gamma correction, orientation) and a Matplotlib preview window.

The ray caster does not clamp colors and stores row y = 0 at the bottom of
the image plane; both are fixed here, before anything is shown or saved.

Example:
    >>> from spherecast.preview.display import show_preview
    >>> framebuffer = cast_viewport(viewport, scene)
    >>> show_preview(framebuffer)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float64]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (2.2 for sRGB). 1.0 leaves values unchanged.

    Returns:
        Gamma corrected image, clamped to [0, 1].
    """
    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)

    if gamma == 1.0:
        return image.astype(np.float64)

    # Apply gamma encoding: out = in^(1/gamma)
    result = np.power(image, 1.0 / gamma)

    return result.astype(np.float64)


def process_image_for_display(
    framebuffer: npt.NDArray[np.floating],
    gamma: float = 1.0,
    flip_vertical: bool = True,
) -> npt.NDArray[np.float64]:
    """Process a framebuffer for display or export.

    Applies the full display pipeline:
    1. Clamping to [0, 1]
    2. Gamma correction (optional)
    3. Vertical flip so that scene +y points up in the image

    Args:
        framebuffer: Color array of shape (H, W, 3) indexed [y, x].
        gamma: Gamma correction value (default 1.0, linear).
        flip_vertical: Put framebuffer row 0 at the bottom of the image.

    Returns:
        Processed image in [0, 1] range, top row first.

    Raises:
        ValueError: If the array is not of shape (H, W, 3) or gamma is not
            positive.
    """
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(f"Framebuffer must have shape (H, W, 3), got {framebuffer.shape}")
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")

    result = apply_gamma(framebuffer, gamma)

    if flip_vertical:
        result = np.flipud(result)

    return np.ascontiguousarray(result)


def show_preview(
    framebuffer: npt.NDArray[np.floating],
    *,
    gamma: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a framebuffer as a Matplotlib figure.

    Args:
        framebuffer: Color array of shape (H, W, 3) indexed [y, x].
        gamma: Gamma correction value (default 1.0, linear).
        title: Custom title (default shows the resolution).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(framebuffer, gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = framebuffer.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
