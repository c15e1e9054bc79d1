#!/usr/bin/env python3
"""Render a sphere scene to an image file.

This script renders either the default single-sphere scene or a scene loaded
from a JSON scene file, saves the framebuffer as an image and optionally
prints a text rendering to the console.

Usage:
    python examples/render_spheres.py [options]

Options:
    --scene FILE        JSON scene file (default: built-in single-sphere scene)
    --width WIDTH       Image width in pixels, overrides the scene (default: 400)
    --height HEIGHT     Image height in pixels, overrides the scene (default: 400)
    --output OUTPUT     Output file path (default: spheres.bmp)
    --gamma GAMMA       Gamma correction for the saved image (default: 1.0)
    --text              Also print the image as text
    --nearest-hit       Use the nearest hit instead of the first hit in scene order
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python examples/render_spheres.py --width 80 --height 40 --text
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in single-sphere scene)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: 400, or the scene file's)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: 400, or the scene file's)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.bmp",
        help="Output file path (default: spheres.bmp)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma correction for the saved image (default: 1.0)",
    )
    parser.add_argument(
        "--text",
        action="store_true",
        help="Also print the image as text",
    )
    parser.add_argument(
        "--nearest-hit",
        action="store_true",
        help="Use the nearest hit instead of the first hit in scene order",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    scene_path: str | None = None,
    width: int | None = None,
    height: int | None = None,
    output_path: str = "spheres.bmp",
    gamma: float = 1.0,
    text: bool = False,
    nearest_hit: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        scene_path: JSON scene file, or None for the default scene.
        width: Image width in pixels, overriding the scene's.
        height: Image height in pixels, overriding the scene's.
        output_path: Output file path; the extension selects the format.
        gamma: Gamma correction for the saved image.
        text: If True, also print the image as text.
        nearest_hit: If True, use HitPolicy.NEAREST_HIT.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from spherecast.core.caster import cast_viewport
    from spherecast.preview.export import save_image
    from spherecast.preview.terminal import print_framebuffer
    from spherecast.scene.default_scene import create_default_scene, load_scene_file
    from spherecast.scene.world import HitPolicy

    if scene_path is None:
        if not quiet:
            print("Creating default scene...")
        scene, viewport = create_default_scene()
    else:
        if not quiet:
            print(f"Loading scene from {scene_path}...")
        scene, viewport = load_scene_file(scene_path)

    if width is not None:
        viewport = dataclasses.replace(viewport, image_width=width)
    if height is not None:
        viewport = dataclasses.replace(viewport, image_height=height)

    if nearest_hit:
        scene.hit_policy = HitPolicy.NEAREST_HIT

    if not quiet:
        print(
            f"Rendering {scene.get_sphere_count()} sphere(s) at "
            f"{viewport.image_width}x{viewport.image_height} ({scene.hit_policy.name})..."
        )

    start_time = time.time()
    framebuffer = cast_viewport(viewport, scene)
    render_time = time.time() - start_time

    output_file = save_image(framebuffer, output_path, gamma=gamma)

    if text:
        print_framebuffer(framebuffer)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Render time: {render_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu, default_fp=ti.f64)
    else:
        try:
            ti.init(arch=ti.gpu, default_fp=ti.f64)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu, default_fp=ti.f64)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_spheres(
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            output_path=args.output,
            gamma=args.gamma,
            text=args.text,
            nearest_hit=args.nearest_hit,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
