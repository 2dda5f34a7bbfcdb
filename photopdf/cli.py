#!/usr/bin/env python3
"""
Command-line interface for photopdf.

Usage:
    # Convert photos into one PDF, one page per photo
    photopdf convert IMG_0001.jpg IMG_0002.jpg scan.png -o album.pdf

    # Keep untagged landscape photos as landscape
    photopdf convert *.jpg -o out.pdf --no-phone-heuristic

    # Show the EXIF orientation tag of each file
    photopdf orientation IMG_0001.jpg IMG_0002.jpg
"""

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert images into a single PDF."""
    from .config import PipelineConfig
    from .errors import ConversionError
    from .pipeline import ConversionPipeline

    try:
        config = PipelineConfig(
            max_edge_pixels=args.max_edge,
            jpeg_quality=args.quality,
            margin_pt=args.margin,
            page_size=args.page_size,
            phone_portrait_heuristic=not args.no_phone_heuristic,
            allow_upscale=not args.no_upscale,
            show_progress=not args.quiet,
        )
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return 2

    try:
        result = ConversionPipeline(config).convert(args.images, args.output)
    except ConversionError as e:
        print(f"\n✗ Failed: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2

    print(f"\n✓ {result.embedded_count} pages written to {result.output_path}")
    for skipped in result.skipped:
        print(f"  ⚠ skipped {skipped.path} ({skipped.reason}: {skipped.detail})")
    return 0


def cmd_orientation(args: argparse.Namespace) -> int:
    """Print the EXIF orientation of each file."""
    from .exif import read_orientation

    missing = 0
    for name in args.images:
        path = Path(name)
        if not path.exists():
            print(f"{path}: file not found", file=sys.stderr)
            missing += 1
            continue
        orientation = read_orientation(path)
        print(f"{path}: {int(orientation)} ({orientation.name})")

    return 1 if missing else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="photopdf",
        description="Convert photos into a single paginated PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # convert command
    p_convert = subparsers.add_parser(
        "convert",
        help="Convert images into one PDF",
        description="Orient, scale and place each image on its own A4 page",
    )
    p_convert.add_argument("images", nargs="+", help="Image files, in page order")
    p_convert.add_argument("-o", "--output", default="./output.pdf", help="Output PDF file")
    p_convert.add_argument("--max-edge", type=int, default=2048,
                           help="Longest edge of each embedded image in pixels (default: 2048)")
    p_convert.add_argument("--quality", type=float, default=0.85,
                           help="JPEG quality in (0, 1] (default: 0.85)")
    p_convert.add_argument("--margin", type=float, default=20.0, help="Page margin in points (default: 20)")
    p_convert.add_argument("--page-size", choices=["A4"], default="A4", help="Paper size")
    p_convert.add_argument("--no-phone-heuristic", action="store_true",
                           help="Don't rotate untagged 4:3 landscape photos to portrait")
    p_convert.add_argument("--no-upscale", action="store_true", help="Don't enlarge small images to fill the page")
    p_convert.add_argument("-q", "--quiet", action="store_true", help="Hide the progress line")
    p_convert.set_defaults(func=cmd_convert)

    # orientation command
    p_orientation = subparsers.add_parser(
        "orientation",
        help="Show EXIF orientation tags",
    )
    p_orientation.add_argument("images", nargs="+", help="Image files")
    p_orientation.set_defaults(func=cmd_orientation)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
