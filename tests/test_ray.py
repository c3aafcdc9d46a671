"""Unit tests for the ray structure and vector utilities."""

import math

import taichi as ti


class TestRay:
    """Tests for Ray creation and evaluation."""

    def test_ray_at(self):
        """ray_at returns origin + t * direction."""
        from src.smallpt.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        p = result[None]
        assert (p[0], p[1], p[2]) == (1.0, 2.0, 0.5)


class TestVectorFunctions:
    """Tests for dot, cross, normalize and friends."""

    def test_dot_and_cross(self):
        """Dot and cross products of basis vectors."""
        from src.smallpt.core.ray import cross, dot, vec3

        d = ti.field(dtype=ti.f64, shape=())
        c = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            d[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            c[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert d[None] == 12.0
        v = c[None]
        assert (v[0], v[1], v[2]) == (0.0, 0.0, 1.0)

    def test_normalize_and_length(self):
        """normalize returns a unit vector in the same direction."""
        from src.smallpt.core.ray import length, normalize, vec3

        n = ti.Vector.field(3, dtype=ti.f64, shape=())
        ln = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            v = normalize(vec3(3.0, 0.0, 4.0))
            n[None] = v
            ln[None] = length(v)

        test_kernel()
        v = n[None]
        assert math.isclose(v[0], 0.6, rel_tol=1e-12)
        assert v[1] == 0.0
        assert math.isclose(v[2], 0.8, rel_tol=1e-12)
        assert math.isclose(ln[None], 1.0, rel_tol=1e-12)

    def test_mult_and_max_component(self):
        """Component-wise product and largest component."""
        from src.smallpt.core.ray import max_component, mult, vec3

        m = ti.Vector.field(3, dtype=ti.f64, shape=())
        mx = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            m[None] = mult(vec3(1.0, 2.0, 3.0), vec3(0.5, 0.25, 2.0))
            mx[None] = max_component(vec3(0.25, 0.75, 0.5))

        test_kernel()
        v = m[None]
        assert (v[0], v[1], v[2]) == (0.5, 0.5, 6.0)
        assert mx[None] == 0.75

    def test_reflect_ignores_normal_side(self):
        """Reflecting about n or -n gives the same direction."""
        from src.smallpt.core.ray import normalize, reflect, vec3

        a = ti.Vector.field(3, dtype=ti.f64, shape=())
        b = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            d = normalize(vec3(1.0, -1.0, 0.0))
            a[None] = reflect(d, vec3(0.0, 1.0, 0.0))
            b[None] = reflect(d, vec3(0.0, -1.0, 0.0))

        test_kernel()
        s = 1.0 / math.sqrt(2.0)
        for r in (a[None], b[None]):
            assert math.isclose(r[0], s, rel_tol=1e-12)
            assert math.isclose(r[1], s, rel_tol=1e-12)
            assert r[2] == 0.0
