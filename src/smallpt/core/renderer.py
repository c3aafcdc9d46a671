"""Render driver with batched progress reporting.

This module wraps the integrator kernels in a Renderer class that:
- Validates the render settings before any kernel runs
- Renders the image in batches of rows
- Reports progress through a callback or a generator
- Checks a cooperative cancellation hook between batches
- Exposes the finished buffer as NumPy arrays or PPM text

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.core.renderer import Renderer, RenderSettings
    >>> from src.smallpt.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> renderer = Renderer(RenderSettings(width=64, height=64, samples=4), camera)
    >>> renderer.render()
    >>> renderer.save_ppm("image.ppm")
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import numpy as np
import numpy.typing as npt

from src.smallpt.camera.pinhole import PinholeCamera, setup_camera
from src.smallpt.core.integrator import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    clear_pixel_buffer,
    get_pixel_buffer_numpy,
    render_range,
    seed_serial_stream,
)
from src.smallpt.preview.export import format_ppm, save_ppm

RenderMode = Literal["serial", "parallel"]

# Callback receives (pixels_done, total_pixels)
ProgressCallback = Callable[[int, int], None]

# Returns True when the render should stop
CancelCheck = Callable[[], bool]


class RenderCancelled(RuntimeError):
    """Raised when a render is stopped by its cancellation hook."""


@dataclass
class RenderSettings:
    """Parameters for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per sub-pixel cell (each pixel has 4 cells).
        seed: Unsigned 32-bit generator seed.
        mode: "serial" threads one generator through every pixel in order;
            "parallel" gives each pixel its own generator and renders
            pixels concurrently.
        rows_per_batch: Image rows rendered between progress reports.
    """

    width: int = 100
    height: int = 100
    samples: int = 40
    seed: int = 12345
    mode: RenderMode = "serial"
    rows_per_batch: int = 1

    @property
    def num_pixels(self) -> int:
        """Total number of pixels."""
        return self.width * self.height

    def validate(self) -> None:
        """Check that the settings can be rendered.

        Raises:
            ValueError: If any setting is out of range.
        """
        for name in ("width", "height", "samples", "rows_per_batch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if isinstance(self.seed, bool) or not isinstance(self.seed, int) or not 0 <= self.seed <= 0xFFFFFFFF:
            raise ValueError(f"seed must be an unsigned 32-bit integer, got {self.seed!r}")
        if self.mode not in ("serial", "parallel"):
            raise ValueError(f"Unknown render mode: {self.mode}")


class Renderer:
    """Render driver for the scene currently stored in the scene fields.

    Attributes:
        settings: The validated render settings.
        camera: The camera used for primary rays.
    """

    def __init__(self, settings: RenderSettings, camera: PinholeCamera) -> None:
        """Validate settings and prepare the camera.

        Raises:
            ValueError: If the settings or camera are invalid.
        """
        settings.validate()
        self.settings = settings
        self.camera = camera
        setup_camera(camera, settings.width, settings.height)
        self._completed = False

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.height

    @property
    def completed(self) -> bool:
        """Whether the last render finished every pixel."""
        return self._completed

    def render_progressive(
        self,
        should_cancel: CancelCheck | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image, yielding progress after each batch of rows.

        Args:
            should_cancel: Optional hook checked before each batch.

        Yields:
            Tuple of (pixels_done, total_pixels).

        Raises:
            RenderCancelled: If should_cancel returns True.
        """
        s = self.settings
        total = s.num_pixels
        batch = s.rows_per_batch * s.width
        parallel = s.mode == "parallel"

        self._completed = False
        # Camera fields are shared by every renderer
        setup_camera(self.camera, s.width, s.height)
        clear_pixel_buffer()
        if not parallel:
            seed_serial_stream(s.seed)

        done = 0
        while done < total:
            if should_cancel is not None and should_cancel():
                raise RenderCancelled(f"Render cancelled after {done} of {total} pixels")
            end = min(done + batch, total)
            render_range(done, end, s.width, s.height, s.samples, parallel=parallel, seed=s.seed)
            done = end
            yield (done, total)

        self._completed = True

    def render(
        self,
        callback: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> None:
        """Render the whole image.

        Args:
            callback: Optional function called after each batch with
                (pixels_done, total_pixels).
            should_cancel: Optional hook checked before each batch.

        Raises:
            RenderCancelled: If should_cancel returns True.

        Example:
            >>> def progress(done, total):
            ...     print(f"\\rRendering {100 * done // total}%", end="")
            >>> renderer.render(callback=progress)
        """
        for done, total in self.render_progressive(should_cancel):
            if callback is not None:
                callback(done, total)

    def get_buffer_numpy(self) -> npt.NDArray[np.float64]:
        """Get the flat pixel buffer.

        Returns:
            Array of shape (width * height, 3), row-major from the top row.
        """
        return get_pixel_buffer_numpy(self.settings.num_pixels)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the pixel buffer as an image array of shape (height, width, 3)."""
        return self.get_buffer_numpy().reshape(self.height, self.width, 3)

    def to_ppm(self) -> str:
        """Format the rendered image as plain PPM text."""
        return format_ppm(self.get_buffer_numpy(), self.width, self.height)

    def save_ppm(self, filepath: str | Path) -> None:
        """Write the rendered image to a plain PPM file."""
        save_ppm(self.get_buffer_numpy(), self.width, self.height, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        s = self.settings
        return (
            f"Renderer(width={s.width}, height={s.height}, samples={s.samples}, "
            f"seed={s.seed}, mode={s.mode!r}, completed={self._completed})"
        )
