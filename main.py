#!/usr/bin/env python3
"""
chunktrace - A brute-force CPU ray caster

Main entry point for rendering scenes.
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from chunktrace.errors import SceneParseError
from chunktrace.progress import ProgressReporter
from chunktrace.renderer import Renderer, RenderSettings
from chunktrace.scene_parser import SceneParser, DEFAULT_SCENE


def parse_dimensions(value: str) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` string."""
    parts = value.lower().split('x')
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("dimensions should be in format: <WIDTHxHEIGHT>")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid dimensions: {value}")
    if width <= 0:
        raise argparse.ArgumentTypeError("width cannot be zero")
    if height <= 0:
        raise argparse.ArgumentTypeError("height cannot be zero")
    return width, height


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return number


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value}")
    if number < 0:
        raise argparse.ArgumentTypeError("cannot be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='chunktrace - A brute-force CPU ray caster',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py -s scenes/teapot.json -d 640x480 -t 8
  python main.py -s scenes/soft.yaml --samples 16 -q
        '''
    )

    parser.add_argument('-s', '--scene', type=str, default=None,
                        help='Scene file (.json or .yaml); renders a built-in scene if omitted')
    parser.add_argument('-o', '--output', type=str, default='render.png',
                        help='Output file (default: render.png)')
    parser.add_argument('-d', '--dimensions', type=parse_dimensions, default=(256, 256),
                        metavar='WIDTHxHEIGHT', help='Image dimensions (default: 256x256)')
    parser.add_argument('-t', '--threads', type=positive_int, default=os.cpu_count() or 4,
                        help='Number of worker threads (default: number of CPUs)')
    parser.add_argument('--samples', type=non_negative_int, default=0,
                        help='Soft shadow samples per light (default: 0, hard shadows)')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Quiet mode, only print the render time')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    reporter = ProgressReporter(quiet=args.quiet)

    width, height = args.dimensions
    settings = RenderSettings(
        width=width,
        height=height,
        num_threads=args.threads,
        shadow_samples=args.samples
    )

    reporter.message("loading scene...")
    try:
        parser = SceneParser()
        if args.scene:
            scene = parser.parse_file(args.scene)
        else:
            scene = parser.parse_dict(DEFAULT_SCENE)
    except SceneParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    reporter.message(f"Resolution: {settings.width}x{settings.height}")
    reporter.message(f"Threads: {settings.num_threads}")
    reporter.message(f"Objects in scene: {len(scene)}")

    renderer = Renderer(settings)
    renderer.set_progress_callback(reporter)

    start_time = time.time()
    pixels = renderer.render(scene)
    elapsed = time.time() - start_time
    reporter.finish()
    reporter.always(f"done rendering in {elapsed:.3f} seconds")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        renderer.save_image(pixels, str(output_path))
    except (OSError, ValueError) as e:
        print(f"error: could not write {args.output}: {e}", file=sys.stderr)
        return 2

    reporter.message(f'output written to "{args.output}"')
    return 0


if __name__ == '__main__':
    sys.exit(main())
