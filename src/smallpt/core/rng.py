"""Deterministic xorshift128 random number generator.

The generator state is four unsigned 32-bit integers packed into a
``uvec4``. Every draw returns the advanced state alongside the value, so the
state is threaded explicitly through the sampling code instead of living in
a shared global. Identical seeds always reproduce identical streams, which
makes renders byte-for-byte reproducible.

Uniform values are produced as ``next_uint32() / 0xFFFFFFF0``. The divisor is
slightly smaller than 2^32; it is kept as-is so streams match the reference
renderer exactly.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> @ti.kernel
    ... def draw() -> ti.f64:
    ...     state = seed_state(ti.u32(12345))
    ...     state, u = next_uniform(state)
    ...     return u
"""

import taichi as ti

# Generator state (x, y, z, w)
uvec4 = ti.types.vector(4, ti.u32)

# Fixed initial words for x and y
SEED_X = 521288629
SEED_Y = 341235113

# Divisor used to map raw outputs into [0, 1)
UNIFORM_DIVISOR = 0xFFFFFFF0

# Multiplier used to spread pixel indices across the seed space
PIXEL_SEED_MULTIPLIER = 1812433253

_MASK32 = 0xFFFFFFFF
_UNIFORM_SCALE = float(UNIFORM_DIVISOR)


@ti.func
def seed_state(seed: ti.u32) -> uvec4:
    """Initialise generator state from a 32-bit seed.

    Args:
        seed: Any unsigned 32-bit value.

    Returns:
        State (x, y, z, w) with z = seed and w = x xor z.
    """
    x = ti.u32(SEED_X)
    y = ti.u32(SEED_Y)
    z = ti.cast(seed, ti.u32)
    return uvec4(x, y, z, x ^ z)


@ti.func
def next_uint32(state: uvec4):
    """Advance the generator by one step.

    Args:
        state: Current generator state.

    Returns:
        A tuple (new_state, value) where value is the new w word.
    """
    x = state[0]
    t = x ^ (x << ti.u32(11))
    w = state[3]
    w_next = (w ^ ti.bit_shr(w, 19)) ^ (t ^ ti.bit_shr(t, 8))
    return uvec4(state[1], state[2], w, w_next), w_next


@ti.func
def next_uniform(state: uvec4):
    """Draw a uniform value in [0, 1).

    Args:
        state: Current generator state.

    Returns:
        A tuple (new_state, value).
    """
    new_state, raw = next_uint32(state)
    return new_state, ti.cast(raw, ti.f64) / _UNIFORM_SCALE


@ti.func
def pixel_seed(seed: ti.u32, index: ti.i32) -> ti.u32:
    """Derive an independent seed for a single pixel.

    Used by the parallel render path so that every pixel owns its own
    stream and workers never share generator state.

    Args:
        seed: The render seed.
        index: Flat pixel index.

    Returns:
        seed xor (index * PIXEL_SEED_MULTIPLIER), modulo 2^32.
    """
    return seed ^ (ti.cast(index, ti.u32) * ti.u32(PIXEL_SEED_MULTIPLIER))


# =============================================================================
# Host-side reference generator
# =============================================================================


class XorShift:
    """Pure Python xorshift128 generator producing the kernel stream.

    Useful for checking kernel output and for drawing reproducible values
    outside of Taichi scope.

    Example:
        >>> rng = XorShift(12345)
        >>> a = rng.next_uint32()
        >>> u = rng.next_uniform()
    """

    def __init__(self, seed: int) -> None:
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the state from a 32-bit seed.

        Raises:
            ValueError: If seed is outside [0, 2^32).
        """
        if not 0 <= seed <= _MASK32:
            raise ValueError(f"Seed {seed} is outside the unsigned 32-bit range")
        self.x = SEED_X
        self.y = SEED_Y
        self.z = seed
        self.w = self.x ^ self.z

    @property
    def state(self) -> tuple[int, int, int, int]:
        """The current (x, y, z, w) words."""
        return (self.x, self.y, self.z, self.w)

    def next_uint32(self) -> int:
        """Return the next raw 32-bit value."""
        t = (self.x ^ (self.x << 11)) & _MASK32
        self.x = self.y
        self.y = self.z
        self.z = self.w
        self.w = (self.w ^ (self.w >> 19)) ^ (t ^ (t >> 8))
        return self.w

    def next_uniform(self) -> float:
        """Return the next value scaled by UNIFORM_DIVISOR."""
        return self.next_uint32() / UNIFORM_DIVISOR


def host_pixel_seed(seed: int, index: int) -> int:
    """Host-side counterpart of pixel_seed()."""
    return (seed ^ (index * PIXEL_SEED_MULTIPLIER)) & _MASK32
