"""Image export for rendered images.

Rendered radiance is written as a plain-text PPM (P3) file:

    P3 <width> <height> 255
    r g b
    ...

Each channel is clamped to [0, 1], gamma encoded with exponent 1/2.2,
scaled to 255 and rounded half up. Pixels follow buffer order, which is
row-major starting from the top row.

Example:
    >>> from src.smallpt.preview.export import format_ppm
    >>> import numpy as np
    >>> format_ppm(np.zeros((1, 3)), 1, 1)
    'P3 1 1 255\\n0 0 0 \\n'
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt

# Display gamma used for the output encoding
GAMMA = 2.2


def apply_gamma(
    image: npt.ArrayLike,
    gamma: float = GAMMA,
) -> npt.NDArray[np.float64]:
    """Clamp to [0, 1] and apply gamma encoding: out = in^(1/gamma).

    Args:
        image: Linear radiance values of any shape.
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma-encoded values in [0, 1].
    """
    # Clamp first so negative values never reach the power
    clamped = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    return np.power(clamped, 1.0 / gamma)


def to_ppm_channel(value: npt.ArrayLike) -> npt.NDArray[np.int64] | int:
    """Convert linear radiance to an 8-bit channel value.

    Works on scalars and arrays. A scalar input returns a Python int.

    Example:
        >>> to_ppm_channel(0.0), to_ppm_channel(1.0), to_ppm_channel(2.0)
        (0, 255, 255)
    """
    encoded = np.floor(apply_gamma(value) * 255.0 + 0.5).astype(np.int64)
    if encoded.ndim == 0:
        return int(encoded)
    return encoded


def format_ppm(
    buffer: npt.ArrayLike,
    width: int,
    height: int,
) -> str:
    """Format a pixel buffer as plain PPM text.

    Args:
        buffer: Linear radiance of shape (width * height, 3) or
            (height, width, 3).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The PPM text, with a trailing space after each pixel triple.

    Raises:
        ValueError: If the dimensions are not positive or the buffer does
            not hold width * height RGB pixels.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    pixels = np.asarray(buffer, dtype=np.float64)
    if pixels.size != width * height * 3 or pixels.shape[-1] != 3:
        raise ValueError(
            f"Buffer of shape {pixels.shape} does not match a {width}x{height} RGB image"
        )

    channels = to_ppm_channel(pixels.reshape(-1, 3))
    lines = [f"P3 {width} {height} 255\n"]
    lines.extend(f"{r} {g} {b} \n" for r, g, b in channels.tolist())
    return "".join(lines)


def save_ppm(
    buffer: npt.ArrayLike,
    width: int,
    height: int,
    filepath: str | Path,
) -> None:
    """Write a pixel buffer to a plain PPM file.

    Args:
        buffer: Linear radiance, see format_ppm().
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .ppm).

    Raises:
        ValueError: If the buffer does not match the dimensions.
        OSError: If the file cannot be written.
    """
    text = format_ppm(buffer, width, height)
    Path(filepath).write_text(text, encoding="ascii")
