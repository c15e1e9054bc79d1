"""Text rendering of framebuffers for the console.

Each pixel becomes two characters so that square pixels stay roughly square
in a terminal: "##" for a bright pixel and two spaces for a dark one. A pixel
is bright when r + g + b reaches the threshold.
"""

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np
import numpy.typing as npt

BRIGHT_CELL = "##"
DARK_CELL = "  "


def render_text(
    framebuffer: npt.NDArray[np.floating],
    *,
    threshold: float = 0.5,
    flip_vertical: bool = False,
) -> str:
    """Render a framebuffer as lines of text.

    Args:
        framebuffer: Color array of shape (H, W, 3) indexed [y, x].
        threshold: Minimum r + g + b for a pixel to print as bright.
        flip_vertical: Print the last framebuffer row first, so that
            scene +y points up on screen.

    Returns:
        One line per framebuffer row, each terminated by a newline.
    """
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(f"Framebuffer must have shape (H, W, 3), got {framebuffer.shape}")

    bright = framebuffer.sum(axis=2) >= threshold
    if flip_vertical:
        bright = bright[::-1]

    lines = ["".join(BRIGHT_CELL if cell else DARK_CELL for cell in row) for row in bright]
    return "".join(line + "\n" for line in lines)


def print_framebuffer(
    framebuffer: npt.NDArray[np.floating],
    *,
    threshold: float = 0.5,
    flip_vertical: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Write the text rendering of a framebuffer to a stream (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    out.write(render_text(framebuffer, threshold=threshold, flip_vertical=flip_vertical))
    out.flush()
