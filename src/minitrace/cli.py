"""Render the sphere scene from the command line.

Usage:
    minitrace [options]
    python -m minitrace [options]

Options:
    --width WIDTH             Image width in pixels (default: 400)
    --aspect-ratio RATIO      Width / height ratio (default: 16/9)
    --focal-length LENGTH     Camera to viewport distance (default: 1.0)
    --sphere-center X Y Z     Sphere center (default: 0 0 -1)
    --sphere-radius RADIUS    Sphere radius (default: 0.5)
    --no-sphere               Render the background only
    --pattern                 Render the red/green test gradient
    --output OUTPUT           Output path, .ppm or .png; "-" for stdout (default: -)
    --rows-per-batch ROWS     Scanlines per progress update (default: 1)
    --preview                 Show the result in a Matplotlib window
    --arch {cpu,gpu}          Taichi backend (default: cpu)
    --quiet                   Suppress progress output

Progress goes to stderr so the PPM stream on stdout stays clean.

Example:
    minitrace --width 256 --aspect-ratio 1 > image.ppm
"""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import taichi as ti


def _aspect_ratio(text: str) -> float:
    """Parse an aspect ratio given as a number or as "W/H"."""
    try:
        if "/" in text:
            numerator, denominator = text.split("/", 1)
            return float(numerator) / float(denominator)
        return float(text)
    except (ValueError, ZeroDivisionError) as e:
        raise argparse.ArgumentTypeError(f"invalid aspect ratio: {text!r}") from e


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="minitrace",
        description="Render a single sphere over a sky gradient.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=_aspect_ratio,
        default=16.0 / 9.0,
        help="Width / height ratio, a number or W/H (default: 16/9)",
    )
    parser.add_argument(
        "--focal-length",
        type=float,
        default=1.0,
        help="Distance from camera to viewport (default: 1.0)",
    )
    parser.add_argument(
        "--sphere-center",
        type=float,
        nargs=3,
        default=[0.0, 0.0, -1.0],
        metavar=("X", "Y", "Z"),
        help="Sphere center (default: 0 0 -1)",
    )
    parser.add_argument(
        "--sphere-radius",
        type=float,
        default=0.5,
        help="Sphere radius (default: 0.5)",
    )
    parser.add_argument(
        "--no-sphere",
        action="store_true",
        help="Render the background gradient only",
    )
    parser.add_argument(
        "--pattern",
        action="store_true",
        help="Render the red/green test gradient instead of the scene",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help='Output path ending in .ppm or .png, or "-" for stdout (default: -)',
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=1,
        help="Scanlines rendered per progress update (default: 1)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def init_taichi(arch: str = "cpu") -> None:
    """Initialize Taichi in double precision on the requested backend."""
    ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu, default_fp=ti.f64, fast_math=False)


def render(args: argparse.Namespace) -> Path | None:
    """Render according to parsed arguments and write the output.

    Returns:
        The output path, or None when writing to stdout.
    """
    # Lazy imports: the modules below declare Taichi fields at import time
    from minitrace.camera.viewport import ViewportCamera
    from minitrace.core.frame import FrameRenderer
    from minitrace.scene.scene import SceneConfig, SphereInfo

    camera = ViewportCamera(
        image_width=args.width,
        aspect_ratio=args.aspect_ratio,
        focal_length=args.focal_length,
    )
    if args.no_sphere:
        scene = SceneConfig(sphere=None)
    else:
        scene = SceneConfig(
            sphere=SphereInfo(center=tuple(args.sphere_center), radius=args.sphere_radius)
        )

    renderer = FrameRenderer(camera, scene)

    if not args.quiet:
        print(f"Rendering {renderer.width}x{renderer.height}...", file=sys.stderr)

    start_time = time.time()

    # Rows left before each band, counting down from the image height
    def progress_callback(done: int, total: int) -> None:
        if not args.quiet and done < total:
            print(f"Scanlines remaining: {total - done}", file=sys.stderr)

    if not args.quiet:
        print(f"Scanlines remaining: {renderer.height}", file=sys.stderr)

    if args.pattern:
        renderer.render_test_pattern(rows_per_batch=args.rows_per_batch, callback=progress_callback)
    else:
        renderer.render(rows_per_batch=args.rows_per_batch, callback=progress_callback)

    output_file = None
    if args.output == "-":
        renderer.write_ppm(sys.stdout)
        sys.stdout.flush()
    else:
        output_file = renderer.save(args.output)

    if not args.quiet:
        if output_file is not None:
            print(f"Saved to: {output_file.absolute()}", file=sys.stderr)
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)
        print("Done.", file=sys.stderr)

    if args.preview:
        from minitrace.preview.display import show_preview

        show_preview(renderer)

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        init_taichi(args.arch)
        render(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
