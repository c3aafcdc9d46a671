"""Preview module for output and visualization.

Components:
    export: Gamma encoding and plain PPM output
    display: Matplotlib-based preview display

Example:
    >>> from src.smallpt.preview import save_ppm, show_preview
    >>> save_ppm(renderer.get_buffer_numpy(), 100, 100, "image.ppm")
    >>> show_preview(renderer.get_image_numpy())
"""

from src.smallpt.preview.display import prepare_display_image, show_preview
from src.smallpt.preview.export import (
    GAMMA,
    apply_gamma,
    format_ppm,
    save_ppm,
    to_ppm_channel,
)

__all__ = [
    # Display functions
    "show_preview",
    "prepare_display_image",
    # Export functions
    "GAMMA",
    "apply_gamma",
    "to_ppm_channel",
    "format_ppm",
    "save_ppm",
]
