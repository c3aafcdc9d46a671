"""Unit tests for diffuse and specular scattering.

Tests cover:
- Orthonormal basis construction
- Cosine-weighted direction mapping
- Diffuse sampling draws and hemisphere containment
- Mirror reflection
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestOrthonormalBasis:
    """Tests for build_onb."""

    @pytest.mark.parametrize(
        "w",
        [(0.0, 0.0, 1.0), (1.0, 0.0, 0.0), (0.0, -1.0, 0.0), (0.6, 0.0, 0.8), (0.05, 0.99, 0.1)],
    )
    def test_basis_is_orthonormal(self, w):
        """u, v and w are unit length and mutually perpendicular."""
        from src.smallpt.core.ray import normalize, vec3
        from src.smallpt.materials.diffuse import build_onb

        out = ti.Vector.field(3, dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel(wv: vec3):
            u, v, ww = build_onb(normalize(wv))
            out[0] = u
            out[1] = v
            out[2] = ww

        test_kernel(vec3(*w))
        basis = out.to_numpy()
        np.testing.assert_allclose(basis @ basis.T, np.eye(3), atol=1e-12)


class TestCosineDirection:
    """Tests for cosine_direction."""

    def test_zero_radius_returns_normal(self):
        """r2 = 0 maps to the normal itself."""
        from src.smallpt.core.ray import vec3
        from src.smallpt.materials.diffuse import cosine_direction

        out = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            out[None] = cosine_direction(vec3(0.0, 1.0, 0.0), 1.234, 0.0)

        test_kernel()
        d = out[None]
        assert (d[0], d[1], d[2]) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)


class TestSampleDiffuse:
    """Tests for sample_diffuse."""

    def test_samples_in_hemisphere(self):
        """Samples are unit length and on the side of the normal."""
        from src.smallpt.core.ray import dot, length, normalize, vec3
        from src.smallpt.core.rng import seed_state
        from src.smallpt.materials.diffuse import sample_diffuse

        n = 2000
        cosines = ti.field(dtype=ti.f64, shape=n)
        lengths = ti.field(dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                nl = normalize(vec3(0.3, -0.5, 0.8))
                s = seed_state(ti.u32(2024))
                for i in range(n):
                    d, s = sample_diffuse(nl, s)
                    cosines[i] = dot(d, nl)
                    lengths[i] = length(d)

        test_kernel()
        c = cosines.to_numpy()
        np.testing.assert_allclose(lengths.to_numpy(), 1.0, atol=1e-12)
        assert c.min() >= -1e-12
        # Cosine-weighted sampling has E[cos] = 2/3
        assert abs(c.mean() - 2.0 / 3.0) < 0.03

    def test_consumes_two_draws_in_order(self):
        """The azimuth uses the first draw and the radius the second."""
        from src.smallpt.core.ray import vec3
        from src.smallpt.core.rng import XorShift, seed_state
        from src.smallpt.materials.diffuse import sample_diffuse

        out = ti.Vector.field(3, dtype=ti.f64, shape=())
        state_out = ti.Vector.field(4, dtype=ti.u32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                d, s = sample_diffuse(vec3(0.0, 0.0, 1.0), seed_state(ti.u32(7)))
                out[None] = d
                state_out[None] = s

        test_kernel()
        host = XorShift(7)
        u1 = host.next_uniform()
        u2 = host.next_uniform()
        assert tuple(int(v) for v in state_out.to_numpy()) == host.state

        # w = (0, 0, 1) uses the (1, 0, 0) helper axis: u = (0, -1, 0), v = (1, 0, 0)
        r1 = 2.0 * math.pi * u1
        r2s = math.sqrt(u2)
        expected = (math.sin(r1) * r2s, -math.cos(r1) * r2s, math.sqrt(1.0 - u2))
        d = out[None]
        assert (d[0], d[1], d[2]) == pytest.approx(expected, abs=1e-12)


class TestSpecular:
    """Tests for scatter_specular."""

    def test_mirror_reflection(self):
        """A 45 degree ray reflects about the normal."""
        from src.smallpt.core.ray import normalize, vec3
        from src.smallpt.materials.specular import scatter_specular

        out = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            out[None] = scatter_specular(normalize(vec3(1.0, 0.0, -1.0)), vec3(0.0, 0.0, 1.0))

        test_kernel()
        s = 1.0 / math.sqrt(2.0)
        d = out[None]
        assert (d[0], d[1], d[2]) == pytest.approx((s, 0.0, s), abs=1e-12)

    def test_head_on_reverses(self):
        """A ray hitting head-on comes straight back."""
        from src.smallpt.core.ray import vec3
        from src.smallpt.materials.specular import scatter_specular

        out = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            out[None] = scatter_specular(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        d = out[None]
        assert (d[0], d[1], d[2]) == (0.0, 1.0, 0.0)
