"""Unit tests for the pinhole camera.

Tests cover:
- Camera setup and image plane vectors
- Setup validation
- Tent filter values
- Primary ray generation
"""

import math

import numpy as np
import pytest
import taichi as ti


@pytest.fixture
def reference_camera():
    """The reference camera set up for a 100x100 image."""
    from src.smallpt.camera.pinhole import PinholeCamera, setup_camera

    camera = PinholeCamera(position=(50.0, 52.0, 295.6), direction=(0.0, -0.042612, -1.0))
    setup_camera(camera, 100, 100)
    return camera


class TestCameraSetup:
    """Tests for setup_camera and get_camera_info."""

    def test_setup_marks_initialized(self, reference_camera):
        """setup_camera marks the camera as ready."""
        from src.smallpt.camera.pinhole import is_camera_initialized

        assert is_camera_initialized()

    def test_reset_camera(self, reference_camera):
        """reset_camera clears the ready flag."""
        from src.smallpt.camera.pinhole import is_camera_initialized, reset_camera

        reset_camera()
        assert not is_camera_initialized()

    def test_image_plane_vectors(self, reference_camera):
        """cx spans the width, cy is perpendicular with length fov_scale."""
        from src.smallpt.camera.pinhole import get_camera_info

        info = get_camera_info()
        d = np.array(info["direction"])
        cx = np.array(info["cx"])
        cy = np.array(info["cy"])

        assert np.linalg.norm(d) == pytest.approx(1.0, abs=1e-12)
        assert tuple(cx) == pytest.approx((100 * 0.5135 / 100, 0.0, 0.0), abs=1e-15)
        assert np.linalg.norm(cy) == pytest.approx(0.5135, abs=1e-12)
        assert abs(np.dot(cy, d)) < 1e-12
        assert abs(np.dot(cy, cx)) < 1e-12
        # cy points up for a camera looking down -z
        assert cy[1] > 0.0

    def test_aspect_ratio(self):
        """cx scales with width / height."""
        from src.smallpt.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        setup_camera(PinholeCamera(position=(0, 0, 0), direction=(0, 0, -1)), 200, 100)
        assert get_camera_info()["cx"][0] == pytest.approx(2 * 0.5135, abs=1e-15)

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 5)])
    def test_bad_dimensions(self, size):
        """Non-positive dimensions are rejected."""
        from src.smallpt.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="dimensions"):
            setup_camera(PinholeCamera(position=(0, 0, 0), direction=(0, 0, -1)), *size)

    def test_zero_direction(self):
        """A zero direction is rejected."""
        from src.smallpt.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="non-zero"):
            setup_camera(PinholeCamera(position=(0, 0, 0), direction=(0, 0, 0)), 10, 10)

    def test_direction_along_x(self):
        """A direction parallel to cx leaves cy undefined."""
        from src.smallpt.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="parallel"):
            setup_camera(PinholeCamera(position=(0, 0, 0), direction=(1, 0, 0)), 10, 10)

    def test_bad_fov(self):
        """fov_scale must be positive."""
        from src.smallpt.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match="fov_scale"):
            setup_camera(PinholeCamera(position=(0, 0, 0), direction=(0, 0, -1), fov_scale=0.0), 10, 10)


class TestTentFilter:
    """Tests for tent_filter."""

    def test_tent_values(self):
        """Known points of the tent mapping."""
        from src.smallpt.camera.pinhole import tent_filter

        inputs = [0.0, 0.25, 1.0, 1.75, 1.999999]
        n = len(inputs)
        out = ti.field(dtype=ti.f64, shape=n)
        src = ti.field(dtype=ti.f64, shape=n)
        src.from_numpy(np.array(inputs))

        @ti.kernel
        def test_kernel():
            for i in range(n):
                out[i] = tent_filter(src[i])

        test_kernel()
        values = out.to_numpy()
        assert values[0] == -1.0
        assert values[1] == pytest.approx(-0.5, abs=1e-15)
        assert values[2] == 0.0
        assert values[3] == pytest.approx(0.5, abs=1e-15)
        assert values[4] == pytest.approx(1.0, abs=2e-3)
        assert values[4] < 1.0


class TestCameraRays:
    """Tests for primary ray generation."""

    def test_ray_before_setup(self):
        """Probing rays without a camera raises RuntimeError."""
        from src.smallpt.camera.pinhole import get_camera_ray

        with pytest.raises(RuntimeError, match="setup_camera"):
            get_camera_ray(0, 0, width=1, height=1)

    def test_center_ray_follows_direction(self):
        """The exact image center maps to the viewing direction."""
        from src.smallpt.camera.pinhole import PinholeCamera, get_camera_ray, setup_camera

        setup_camera(PinholeCamera(position=(50.0, 52.0, 295.6), direction=(0.0, -0.042612, -1.0)), 1, 1)
        # Sub-pixel 0 with offset 0.5 lands on the center of a 1x1 image
        origin, direction = get_camera_ray(0, 0, 0, 0, 0.5, 0.5, width=1, height=1)

        expected_d = np.array([0.0, -0.042612, -1.0])
        expected_d /= np.linalg.norm(expected_d)
        assert direction == pytest.approx(tuple(expected_d), abs=1e-12)
        expected_o = np.array([50.0, 52.0, 295.6]) + expected_d * 140.0
        assert origin == pytest.approx(tuple(expected_o), abs=1e-9)

    def test_rays_are_unit_length(self, reference_camera):
        """Every generated direction is normalized."""
        from src.smallpt.camera.pinhole import get_camera_ray

        for x, y, sx, sy, dx, dy in [(0, 0, 0, 0, -1.0, -1.0), (99, 99, 1, 1, 0.99, 0.99), (10, 70, 1, 0, 0.0, -0.3)]:
            _, d = get_camera_ray(x, y, sx, sy, dx, dy, width=100, height=100)
            assert math.sqrt(sum(c * c for c in d)) == pytest.approx(1.0, abs=1e-12)

    def test_orientation(self, reference_camera):
        """Larger x looks right, larger y looks up."""
        from src.smallpt.camera.pinhole import get_camera_ray

        _, left = get_camera_ray(0, 50, width=100, height=100)
        _, right = get_camera_ray(99, 50, width=100, height=100)
        _, bottom = get_camera_ray(50, 0, width=100, height=100)
        _, top = get_camera_ray(50, 99, width=100, height=100)
        assert right[0] > left[0]
        assert top[1] > bottom[1]
