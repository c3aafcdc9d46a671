#!/usr/bin/env python3
"""Render the Cornell box scene (or a scene file) to a PPM image.

Usage:
    python -m examples.render_cornell_box [options]

Options:
    --width WIDTH       Image width in pixels (default: 100)
    --height HEIGHT     Image height in pixels (default: 100)
    --samples SAMPLES   Samples per sub-pixel, 4 sub-pixels per pixel (default: 40)
    --seed SEED         Random seed (default: 12345)
    --mode MODE         "serial" or "parallel" (default: serial)
    --scene PATH        JSON scene file (default: built-in Cornell box)
    --output OUTPUT     Output file path (default: image.ppm)
    --arch ARCH         Taichi backend, "cpu" or "gpu" (default: cpu)
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_cornell_box --width 256 --height 192 --samples 25
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Cornell box scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=100,
        help="Image width in pixels (default: 100)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=100,
        help="Image height in pixels (default: 100)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=40,
        help="Samples per sub-pixel (default: 40)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=12345,
        help="Random seed (default: 12345)",
    )
    parser.add_argument(
        "--mode",
        choices=("serial", "parallel"),
        default="serial",
        help="Serial reproduces a single random stream; parallel seeds each pixel (default: serial)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in Cornell box)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file path (default: image.ppm)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    width: int = 100,
    height: int = 100,
    samples: int = 40,
    seed: int = 12345,
    mode: str = "serial",
    scene_path: str | None = None,
    output_path: str = "image.ppm",
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it as a PPM file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per sub-pixel.
        seed: Random seed.
        mode: "serial" or "parallel".
        scene_path: Optional JSON scene file. The Cornell box camera is used
            either way.
        output_path: Output file path (PPM).
        preview: If True, show the image after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.smallpt.core.renderer import Renderer, RenderSettings
    from src.smallpt.scene.cornell_box import create_cornell_box_scene

    settings = RenderSettings(width=width, height=height, samples=samples, seed=seed, mode=mode)
    settings.validate()

    scene, camera = create_cornell_box_scene()
    if scene_path is not None:
        scene.load_json(scene_path)
        if not quiet:
            print(f"Loaded {scene.get_sphere_count()} spheres from {scene_path}")

    renderer = Renderer(settings, camera)

    if not quiet:
        print(f"Rendering {width}x{height} at {samples * 4} spp ({mode})...")

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            print(f"\rRendering {100.0 * done / total:5.2f}%", end="", flush=True)

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    renderer.save_ppm(output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        from src.smallpt.preview.display import show_preview

        show_preview(renderer.get_image_numpy(), title=output_file.name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu, default_fp=ti.f64, fast_math=False)

    try:
        render_scene(
            width=args.width,
            height=args.height,
            samples=args.samples,
            seed=args.seed,
            mode=args.mode,
            scene_path=args.scene,
            output_path=args.output,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
