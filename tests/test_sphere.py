"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far root)
- Sphere entirely behind the ray
- Self-intersection guard for rays leaving a surface
"""

import math

import pytest
import taichi as ti


def _intersect(origin, direction, center, radius):
    """Run intersect_sphere in a kernel and return the distance."""
    from src.smallpt.core.ray import Ray, normalize, vec3
    from src.smallpt.geometry.sphere import Sphere, intersect_sphere

    result = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f64):
        sphere = Sphere(
            radius=r,
            center=c,
            emission=vec3(0.0, 0.0, 0.0),
            albedo=vec3(0.5, 0.5, 0.5),
            material=0,
        )
        result[None] = intersect_sphere(sphere, Ray(origin=o, direction=normalize(d)))

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius)
    return result[None]


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """A ray toward the center hits at |c - o| - r."""
        t = _intersect((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 2.0)
        assert t == pytest.approx(8.0, abs=1e-12)

    def test_oblique_hit(self):
        """An off-center ray hits at the nearer root."""
        # Line x = 1 through a unit-2 sphere enters at z = sqrt(3)
        t = _intersect((1.0, 0.0, 10.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 2.0)
        assert t == pytest.approx(10.0 - math.sqrt(3.0), abs=1e-12)

    def test_miss(self):
        """A ray passing beside the sphere returns 0."""
        t = _intersect((5.0, 0.0, 10.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 2.0)
        assert t == 0.0

    def test_sphere_behind(self):
        """A sphere entirely behind the origin is not hit."""
        t = _intersect((0.0, 0.0, 10.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 2.0)
        assert t == 0.0

    def test_inside_returns_far_root(self):
        """A ray starting at the center exits at distance r."""
        t = _intersect((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 3.0)
        assert t == pytest.approx(3.0, abs=1e-12)

    def test_leaving_surface_is_not_a_hit(self):
        """A ray starting on the surface and pointing outward misses."""
        t = _intersect((0.0, 0.0, 2.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 2.0)
        assert t == 0.0

    def test_entering_from_surface_hits_far_side(self):
        """A ray starting on the surface and pointing inward hits the far side."""
        t = _intersect((0.0, 0.0, 2.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 2.0)
        assert t == pytest.approx(4.0, abs=1e-12)

    def test_huge_wall_sphere(self):
        """Large wall spheres are hit at the expected distance in double precision."""
        t = _intersect((50.0, 40.8, 295.6), (0.0, 0.0, -1.0), (50.0, 40.8, -1e5 + 170.0), 1e5)
        assert t == pytest.approx(125.6, abs=1e-6)


class TestSphereNormal:
    """Tests for the outward normal."""

    def test_normal_is_unit_and_outward(self):
        """The normal points from the center through the surface point."""
        from src.smallpt.core.ray import vec3
        from src.smallpt.geometry.sphere import Sphere, sphere_normal

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(
                radius=2.0,
                center=vec3(1.0, 1.0, 1.0),
                emission=vec3(0.0, 0.0, 0.0),
                albedo=vec3(0.0, 0.0, 0.0),
                material=0,
            )
            result[None] = sphere_normal(sphere, vec3(1.0, 3.0, 1.0))

        test_kernel()
        n = result[None]
        assert (n[0], n[1], n[2]) == (0.0, 1.0, 0.0)
