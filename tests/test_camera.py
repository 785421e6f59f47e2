"""Tests for the viewport camera.

Tests cover:
- Image height derivation
- Viewport geometry for the reference camera
- Validation of camera parameters
- Ray generation inside kernels
"""

import numpy as np
import pytest
import taichi as ti


class TestImageHeight:
    """Tests for compute_image_height."""

    def test_reference_height(self):
        """Test a 400-wide 16:9 image is 225 rows tall."""
        from minitrace.camera.viewport import compute_image_height

        assert compute_image_height(400, 16.0 / 9.0) == 225

    @pytest.mark.parametrize(
        "width, aspect_ratio, expected",
        [
            (256, 1.0, 256),
            (1, 16.0 / 9.0, 1),
            (10, 100.0, 1),
            (3, 2.0, 2),
            (9, 2.0, 5),
            (8, 16.0 / 9.0, 5),
            (7, 2.0, 4),
        ],
    )
    def test_height_is_at_least_one(self, width, aspect_ratio, expected):
        """Test rounding (halves round up) and the minimum height of one row."""
        from minitrace.camera.viewport import compute_image_height

        assert compute_image_height(width, aspect_ratio) == expected

    def test_camera_property(self, reference_camera):
        """Test the dataclass exposes the derived height."""
        assert reference_camera.image_height == 225


class TestCameraValidation:
    """Tests for ViewportCamera parameter checks."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"image_width": 0},
            {"image_width": -5},
            {"image_width": 2.5},
            {"aspect_ratio": 0.0},
            {"aspect_ratio": float("nan")},
            {"focal_length": -1.0},
            {"viewport_height": 0.0},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        """Test invalid parameters raise ValueError."""
        from minitrace.camera.viewport import ViewportCamera

        with pytest.raises(ValueError):
            ViewportCamera(**kwargs)


class TestCameraGeometry:
    """Tests for compute_camera_geometry."""

    def test_reference_geometry(self, reference_camera):
        """Test the viewport of the reference camera."""
        from minitrace.camera.viewport import compute_camera_geometry

        geometry = compute_camera_geometry(reference_camera)

        viewport_width = 2.0 * 400 / 225
        assert geometry.image_width == 400
        assert geometry.image_height == 225
        assert geometry.viewport_width == pytest.approx(viewport_width)
        np.testing.assert_allclose(geometry.pixel_delta_u, (viewport_width / 400, 0.0, 0.0))
        np.testing.assert_allclose(geometry.pixel_delta_v, (0.0, -2.0 / 225, 0.0))
        np.testing.assert_allclose(
            geometry.viewport_upper_left, (-viewport_width / 2.0, 1.0, -1.0)
        )
        np.testing.assert_allclose(
            geometry.pixel00,
            (-viewport_width / 2.0 + viewport_width / 800, 1.0 - 1.0 / 225, -1.0),
        )

    def test_geometry_follows_camera_center(self):
        """Test the viewport moves with the camera."""
        from minitrace.camera.viewport import ViewportCamera, compute_camera_geometry

        at_origin = compute_camera_geometry(ViewportCamera(image_width=64, aspect_ratio=1.0))
        moved = compute_camera_geometry(
            ViewportCamera(image_width=64, aspect_ratio=1.0, center=(1.0, 2.0, 3.0))
        )

        np.testing.assert_allclose(
            np.subtract(moved.pixel00, at_origin.pixel00), (1.0, 2.0, 3.0)
        )

    def test_focal_length_moves_viewport(self):
        """Test the viewport sits one focal length down -z."""
        from minitrace.camera.viewport import ViewportCamera, compute_camera_geometry

        geometry = compute_camera_geometry(ViewportCamera(image_width=8, focal_length=2.5))

        assert geometry.viewport_upper_left[2] == -2.5


class TestRayGeneration:
    """Tests for setup_camera and get_ray."""

    def test_setup_camera_stores_fields(self, reference_camera):
        """Test the computed geometry is written to the camera fields."""
        from minitrace.camera.viewport import get_camera_info, get_image_size, setup_camera

        geometry = setup_camera(reference_camera)
        info = get_camera_info()

        assert get_image_size() == (400, 225)
        np.testing.assert_allclose(info["pixel00"], geometry.pixel00)
        np.testing.assert_allclose(info["pixel_delta_u"], geometry.pixel_delta_u)
        np.testing.assert_allclose(info["pixel_delta_v"], geometry.pixel_delta_v)
        assert info["center"] == (0.0, 0.0, 0.0)

    def test_get_ray_through_pixel_centers(self, reference_camera):
        """Test rays start at the camera and point at the pixel centers."""
        from minitrace.camera.viewport import get_ray, setup_camera

        geometry = setup_camera(reference_camera)
        origins = ti.Vector.field(3, dtype=ti.f64, shape=2)
        directions = ti.Vector.field(3, dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            top_left = get_ray(0, 0)
            bottom_right = get_ray(399, 224)
            origins[0] = top_left.origin
            directions[0] = top_left.direction
            origins[1] = bottom_right.origin
            directions[1] = bottom_right.direction

        test_kernel()

        expected_last = (
            np.array(geometry.pixel00)
            + 399 * np.array(geometry.pixel_delta_u)
            + 224 * np.array(geometry.pixel_delta_v)
        )
        np.testing.assert_allclose(origins.to_numpy(), np.zeros((2, 3)))
        np.testing.assert_allclose(directions.to_numpy()[0], geometry.pixel00)
        np.testing.assert_allclose(directions.to_numpy()[1], expected_last, atol=1e-12)

    def test_image_is_symmetric_about_the_axis(self):
        """Test opposite corner rays mirror each other in x and y."""
        from minitrace.camera.viewport import ViewportCamera, get_ray, setup_camera

        setup_camera(ViewportCamera(image_width=10, aspect_ratio=2.0))
        directions = ti.Vector.field(3, dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            directions[0] = get_ray(0, 0).direction
            directions[1] = get_ray(9, 4).direction

        test_kernel()
        first, last = directions.to_numpy()
        np.testing.assert_allclose(first[:2], -last[:2], atol=1e-12)
        assert first[2] == last[2] == -1.0
