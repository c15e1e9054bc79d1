"""Integration tests for the full render pipeline.

Tests cover:
- Framebuffer shape, dtype and read-only result
- Deterministic rendering
- Background, shading and shadow colors across a whole image
- Viewport and scene errors surfaced by cast_viewport
- Rendering to an image file and to text
"""

import os
import tempfile

import numpy as np
import pytest


def _small_default_scene(width=40, height=30):
    from spherecast.scene.default_scene import DefaultSceneParams, create_default_scene

    return create_default_scene(DefaultSceneParams(image_width=width, image_height=height))


class TestCastViewport:
    """Tests for cast_viewport on the default scene."""

    def test_framebuffer_shape_and_dtype(self):
        """Test that the result has shape (H, W, 3) in float64."""
        from spherecast.core.caster import cast_viewport

        scene, viewport = _small_default_scene(40, 30)
        framebuffer = cast_viewport(viewport, scene)

        assert framebuffer.shape == (30, 40, 3)
        assert framebuffer.dtype == np.float64

    def test_framebuffer_is_read_only(self):
        """Test that the returned framebuffer cannot be modified."""
        from spherecast.core.caster import cast_viewport

        scene, viewport = _small_default_scene()
        framebuffer = cast_viewport(viewport, scene)

        with pytest.raises(ValueError):
            framebuffer[0, 0, 0] = 0.5

    def test_rendering_is_deterministic(self):
        """Test that two renders of the same scene are bit-identical."""
        from spherecast.core.caster import cast_viewport

        scene, viewport = _small_default_scene()
        first = cast_viewport(viewport, scene)
        second = cast_viewport(viewport, scene)

        assert np.array_equal(first, second)

    def test_corners_are_background_and_center_is_sphere(self):
        """Test that the sphere fills the middle of the image and misses the corners."""
        from spherecast.core.caster import cast_viewport

        scene, viewport = _small_default_scene(40, 40)
        framebuffer = cast_viewport(viewport, scene)

        for y, x in [(0, 0), (0, 39), (39, 0), (39, 39)]:
            assert framebuffer[y, x].tolist() == [1.0, 1.0, 1.0]
        assert framebuffer[20, 20].tolist() != [1.0, 1.0, 1.0]

    def test_pixels_are_background_shadow_or_shaded(self):
        """Test that every pixel is white, black, or the sphere color scaled by [0, 1]."""
        from spherecast.core.caster import cast_viewport

        scene, viewport = _small_default_scene(32, 32)
        color = np.array(scene.spheres[0].color)
        framebuffer = cast_viewport(viewport, scene)

        for pixel in framebuffer.reshape(-1, 3):
            if np.all(pixel == 1.0) or np.all(pixel == 0.0):
                continue
            brightness = pixel[0] / color[0]
            assert 0.0 <= brightness <= 1.0
            assert np.allclose(pixel, color * brightness, atol=1e-12)

    def test_lit_side_faces_light(self):
        """Test that the side of the sphere toward the light is brighter."""
        from spherecast.core.caster import cast_viewport

        scene, viewport = _small_default_scene(40, 40)
        framebuffer = cast_viewport(viewport, scene)

        # Light is at +x, +y; row index grows with screen y
        toward_light = framebuffer[23, 23]
        away_from_light = framebuffer[17, 17]
        assert toward_light.sum() > away_from_light.sum()

    def test_occluder_shadows_sphere(self):
        """Test that a sphere between the light and the main sphere blacks out pixels."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 0.0), 2.0, (0.85, 0.25, 0.2))
        scene.add_sphere((0.0, 0.0, -50.0), 1.0, (0.2, 0.2, 0.9))
        scene.set_light((0.0, 0.0, -100.0))
        viewport = Viewport((0.0, 0.0, -10.0), 10.0, 10.0, 20, 20)

        framebuffer = cast_viewport(viewport, scene)

        assert framebuffer[10, 10].tolist() == [0.0, 0.0, 0.0]

    def test_nearest_hit_changes_overlapping_scene(self):
        """Test that the hit policy matters when a farther sphere is listed first."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.scene.manager import SceneManager
        from spherecast.scene.world import HitPolicy

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 5.0), 3.0, (0.0, 0.0, 1.0))
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, (1.0, 0.0, 0.0))
        scene.set_light((0.0, 50.0, -100.0))
        viewport = Viewport((0.0, 0.0, -10.0), 10.0, 10.0, 20, 20)

        first = cast_viewport(viewport, scene)
        scene.hit_policy = HitPolicy.NEAREST_HIT
        nearest = cast_viewport(viewport, scene)

        assert first[10, 10, 0] == 0.0
        assert nearest[10, 10, 0] > 0.0

    def test_renders_given_scene_after_another_was_built(self):
        """Test that the scene passed in is drawn, not the one built last."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.scene.manager import SceneManager

        red = SceneManager()
        red.add_sphere((0.0, 0.0, 0.0), 2.0, (1.0, 0.0, 0.0))
        red.set_light((0.0, 0.0, -100.0))

        green = SceneManager()
        green.add_sphere((0.0, 0.0, 0.0), 2.0, (0.0, 1.0, 0.0))
        green.set_light((0.0, 0.0, -100.0))

        viewport = Viewport((0.0, 0.0, -10.0), 10.0, 10.0, 5, 5)

        r, g, b = cast_viewport(viewport, red)[2, 2]
        assert r > 0.0 and g == 0.0 and b == 0.0

        r, g, b = cast_viewport(viewport, green)[2, 2]
        assert g > 0.0 and r == 0.0 and b == 0.0

    def test_renders_given_scene_light_and_policy(self):
        """Test that the light and hit policy of the scene passed in are used."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.scene.manager import SceneManager
        from spherecast.scene.world import HitPolicy, get_hit_policy

        nearest = SceneManager(hit_policy=HitPolicy.NEAREST_HIT)
        nearest.add_sphere((0.0, 0.0, 5.0), 3.0, (0.0, 0.0, 1.0))
        nearest.add_sphere((0.0, 0.0, 0.0), 1.0, (1.0, 0.0, 0.0))
        nearest.set_light((0.0, 0.0, -100.0))

        # Same sphere count, default policy, light behind the spheres
        other = SceneManager()
        other.add_sphere((0.0, 0.0, 5.0), 3.0, (0.0, 0.0, 1.0))
        other.add_sphere((0.0, 0.0, 0.0), 1.0, (1.0, 0.0, 0.0))
        other.set_light((0.0, 0.0, 100.0))

        viewport = Viewport((0.0, 0.0, -10.0), 10.0, 10.0, 20, 20)
        framebuffer = cast_viewport(viewport, nearest)

        assert framebuffer[10, 10].tolist() == [1.0, 0.0, 0.0]
        assert get_hit_policy() == HitPolicy.NEAREST_HIT


class TestCastViewportErrors:
    """Tests for errors reported by cast_viewport."""

    def test_eye_on_screen_point_raises(self):
        """Test that an eye on the image plane at a pixel's screen point is reported."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.core.ray import DegenerateVectorError

        scene, _ = _small_default_scene()
        viewport = Viewport((0.0, 0.0, 0.0), 10.0, 10.0, 4, 4)

        with pytest.raises(DegenerateVectorError, match=r"Pixel \(2, 2\)"):
            cast_viewport(viewport, scene)

    def test_light_on_surface_raises(self):
        """Test that a hit point coinciding with the light is reported."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.core.ray import DegenerateVectorError

        scene, _ = _small_default_scene()
        scene.set_light((0.0, 0.0, -2.0))
        viewport = Viewport((0.0, 0.0, -10.0), 10.0, 10.0, 4, 4)

        with pytest.raises(DegenerateVectorError):
            cast_viewport(viewport, scene)

    def test_no_light_raises(self):
        """Test that rendering without a light raises RuntimeError."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import cast_viewport
        from spherecast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 0.0), 2.0, (1.0, 1.0, 1.0))

        with pytest.raises(RuntimeError, match="no light"):
            cast_viewport(Viewport((0.0, 0.0, -10.0), 10.0, 10.0, 4, 4), scene)

    def test_image_too_large_raises(self):
        """Test that images beyond the framebuffer capacity are rejected."""
        from spherecast.camera.viewport import Viewport
        from spherecast.core.caster import MAX_IMAGE_WIDTH, cast_viewport

        scene, _ = _small_default_scene()
        viewport = Viewport((0.0, 0.0, -10.0), 10.0, 10.0, MAX_IMAGE_WIDTH + 1, 4)

        with pytest.raises(ValueError, match="exceed maximum"):
            cast_viewport(viewport, scene)


class TestRenderToOutputs:
    """Tests for rendering through to files and text."""

    def test_render_and_save_bmp(self):
        """Test saving a render as BMP with the top row first."""
        from PIL import Image as PILImage

        from spherecast.core.caster import cast_viewport
        from spherecast.preview.export import save_image

        scene, viewport = _small_default_scene(40, 30)
        framebuffer = cast_viewport(viewport, scene)

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "spheres.bmp")
            save_image(framebuffer, path)
            with PILImage.open(path) as img:
                assert img.size == (40, 30)
                pixels = np.array(img)

        expected = np.floor(np.clip(framebuffer[::-1], 0.0, 1.0) * 255.0).astype(np.uint8)
        assert np.array_equal(pixels, expected)

    def test_render_text(self):
        """Test the text rendering of a render has one line per row."""
        from spherecast.core.caster import cast_viewport
        from spherecast.preview.terminal import render_text

        scene, viewport = _small_default_scene(20, 10)
        text = render_text(cast_viewport(viewport, scene))

        lines = text.splitlines()
        assert len(lines) == 10
        assert all(len(line) == 40 for line in lines)
        # Background is white, so the corners are bright
        assert lines[0].startswith("##")

    def test_example_script(self):
        """Test the example script renders the default scene to a file."""
        import importlib.util

        script = os.path.join(os.path.dirname(__file__), "..", "examples", "render_spheres.py")
        spec = importlib.util.spec_from_file_location("render_spheres", script)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "out.png")
            result = module.render_spheres(width=16, height=12, output_path=path, quiet=True)

            assert os.path.exists(result)
