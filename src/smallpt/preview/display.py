"""Matplotlib-based preview display for rendered images.

Example:
    >>> from src.smallpt.preview.display import show_preview
    >>> show_preview(renderer.get_image_numpy(), title="Cornell box")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.smallpt.preview.export import GAMMA, apply_gamma


def prepare_display_image(
    image: npt.ArrayLike,
    gamma: float = GAMMA,
) -> npt.NDArray[np.float64]:
    """Gamma encode a linear (H, W, 3) image for display.

    Raises:
        ValueError: If the image is not an (H, W, 3) array.
    """
    array = np.asarray(image, dtype=np.float64)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
    return apply_gamma(array, gamma)


def show_preview(
    image: npt.ArrayLike,
    *,
    title: str | None = None,
    gamma: float = GAMMA,
    figsize: tuple[float, float] = (6, 6),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Uses the same clamp and gamma encoding as the PPM output, so the preview
    matches the written file.

    Args:
        image: Linear image array of shape (H, W, 3), top row first.
        title: Figure title (default shows the image size).
        gamma: Gamma correction value (default 2.2).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = prepare_display_image(image, gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image, interpolation="nearest")
    ax.axis("off")

    if title is None:
        h, w = display_image.shape[:2]
        title = f"Render Preview - {w}x{h}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
