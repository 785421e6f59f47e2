"""Tests for FrameRenderer.

Tests cover:
- End-to-end render of the reference scene
- Determinism across renders
- Progress reporting and progressive rendering
- Test pattern output
- Error handling before rendering
"""

import io

import numpy as np
import pytest


class TestFrameRenderer:
    """Tests for whole-frame rendering."""

    def test_reference_render(self, reference_camera):
        """Test the reference scene renders a 400x225 image with the sphere in the middle."""
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(reference_camera)
        renderer.render()
        image = renderer.get_image_numpy()
        encoded = renderer.get_image_bytes()

        assert (renderer.width, renderer.height) == (400, 225)
        assert image.shape == (225, 400, 3)
        assert encoded.min() >= 0
        assert encoded.max() <= 255
        # Front of the sphere faces the camera: normal close to +z
        assert image[112, 200] == pytest.approx((0.5, 0.5, 1.0), abs=0.02)
        # Corner pixels see the sky, which always has full blue
        assert image[0, 0, 2] == pytest.approx(1.0)
        assert image[224, 399, 2] == pytest.approx(1.0)

    def test_top_of_background_is_bluer_than_bottom(self):
        """Test the sky gradient runs from sky blue at the top to white at the bottom."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer
        from minitrace.scene.scene import empty_scene

        renderer = FrameRenderer(ViewportCamera(image_width=8, aspect_ratio=1.0), empty_scene())
        renderer.render()
        red = renderer.get_image_numpy()[:, 0, 0]

        assert np.all(np.diff(red) > 0.0)

    def test_render_is_deterministic(self, reference_camera):
        """Test two renders produce byte-identical PPM output."""
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(reference_camera)
        first = io.StringIO()
        renderer.render()
        renderer.write_ppm(first)

        second = io.StringIO()
        renderer.render(rows_per_batch=7)
        renderer.write_ppm(second)

        assert first.getvalue() == second.getvalue()

    def test_renderers_keep_their_own_image(self):
        """Test a second renderer does not overwrite the first one's result."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer
        from minitrace.scene.scene import empty_scene

        with_sphere = FrameRenderer(ViewportCamera(image_width=16, aspect_ratio=1.0))
        with_sphere.render()
        before = with_sphere.get_image_numpy()

        background = FrameRenderer(ViewportCamera(image_width=16, aspect_ratio=1.0), empty_scene())
        background.render()

        np.testing.assert_array_equal(with_sphere.get_image_numpy(), before)
        assert not np.array_equal(background.get_image_numpy(), before)

    def test_progress_callback(self, reference_camera):
        """Test the callback receives (rows_done, total_rows) after each band."""
        from minitrace.core.frame import FrameRenderer

        calls = []
        renderer = FrameRenderer(reference_camera)
        renderer.render(rows_per_batch=100, callback=lambda done, total: calls.append((done, total)))

        assert calls == [(100, 225), (200, 225), (225, 225)]

    def test_render_progressive(self):
        """Test the generator form yields one update per band."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(ViewportCamera(image_width=8, aspect_ratio=2.0))
        updates = list(renderer.render_progressive(rows_per_batch=1))

        assert updates == [(1, 4), (2, 4), (3, 4), (4, 4)]
        assert renderer.rendered

    def test_invalid_rows_per_batch(self, reference_camera):
        """Test a non-positive band size raises ValueError."""
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(reference_camera)

        with pytest.raises(ValueError, match="rows_per_batch"):
            renderer.render(rows_per_batch=0)

    def test_image_before_render_raises(self, reference_camera):
        """Test accessing the image before rendering raises RuntimeError."""
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(reference_camera)

        assert not renderer.rendered
        with pytest.raises(RuntimeError, match="not been rendered"):
            renderer.get_image_numpy()

    def test_wide_image_renders(self):
        """Test an image wider than 1024 pixels renders at full size."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer
        from minitrace.scene.scene import empty_scene

        renderer = FrameRenderer(ViewportCamera(image_width=1100, aspect_ratio=16.0), empty_scene())
        renderer.render()
        image = renderer.get_image_numpy()

        assert image.shape == (69, 1100, 3)
        # Every pixel is shaded: the sky always has full blue
        assert np.all(np.abs(image[:, :, 2] - 1.0) < 1e-12)

    def test_tall_image_renders(self):
        """Test an image taller than 1024 pixels renders at full size."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer
        from minitrace.scene.scene import empty_scene

        renderer = FrameRenderer(ViewportCamera(image_width=4, aspect_ratio=0.003), empty_scene())
        renderer.render()

        assert renderer.get_image_numpy().shape == (1333, 4, 3)

    def test_single_pixel_image(self):
        """Test a 1x1 image renders one ray straight ahead."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(ViewportCamera(image_width=1, aspect_ratio=1.0))
        renderer.render()

        assert renderer.get_image_numpy()[0, 0] == pytest.approx((0.5, 0.5, 1.0))

    def test_repr(self, reference_camera):
        """Test the string representation."""
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(reference_camera)

        assert repr(renderer) == "FrameRenderer(width=400, height=225, rendered=False)"


class TestTestPattern:
    """Tests for the red/green test gradient."""

    def test_pattern_values(self):
        """Test the corners of the test gradient."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(ViewportCamera(image_width=3, aspect_ratio=1.5))
        renderer.render_test_pattern()
        encoded = renderer.get_image_bytes()

        assert encoded.shape == (2, 3, 3)
        assert tuple(encoded[0, 0]) == (0, 0, 0)
        assert tuple(encoded[0, 1]) == (127, 0, 0)
        assert tuple(encoded[1, 2]) == (255, 255, 0)

    def test_pattern_ppm(self):
        """Test the exact PPM text of a small test gradient."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(ViewportCamera(image_width=2, aspect_ratio=1.0))
        renderer.render_test_pattern()
        stream = io.StringIO()
        renderer.write_ppm(stream)

        assert stream.getvalue() == (
            "P3\n2 2\n255\n"
            "0 0 0\n255 0 0\n"
            "0 255 0\n255 255 0\n"
        )


class TestSave:
    """Tests for saving rendered frames."""

    def test_save_ppm(self, tmp_path):
        """Test saving and reading back a PPM file."""
        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer
        from minitrace.preview.export import read_ppm

        renderer = FrameRenderer(ViewportCamera(image_width=16, aspect_ratio=2.0))
        renderer.render()
        path = renderer.save(tmp_path / "frame.ppm")

        np.testing.assert_array_equal(read_ppm(path), renderer.get_image_bytes())

    def test_save_png(self, tmp_path):
        """Test saving a PNG file."""
        from PIL import Image

        from minitrace.camera.viewport import ViewportCamera
        from minitrace.core.frame import FrameRenderer

        renderer = FrameRenderer(ViewportCamera(image_width=16, aspect_ratio=2.0))
        renderer.render()
        path = renderer.save(tmp_path / "frame.png")

        with Image.open(path) as image:
            assert image.size == (16, 8)
            assert image.mode == "RGB"
            np.testing.assert_array_equal(np.asarray(image), renderer.get_image_bytes())
