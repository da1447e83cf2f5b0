#!/usr/bin/env python3
"""
pocket_pal.py
Inspect 56-byte console .pal files and recolour template screenshots with them.

Usage:
  python pocket_pal.py display PALETTE [--mode MODE] [--lenient-footer]
  python pocket_pal.py template OUTPUT
  python pocket_pal.py colorize -p PAL [PAL ...] -i IMG [IMG ...] [--outdir DIR]
                                [--scale N] [--merge] [--columns N] [--layout horizontal|vertical]
                                [--tolerance N] [--rgb] [--jobs N] [--html REPORT] [--debug]

Commands:
  display  : Print the palette as 24-bit ANSI colours (needs a truecolor terminal).
  template : Write the builtin template palette. Load it on the device, take
             screenshots, then colorize them with any other palette.
  colorize : Recolour template screenshots with each palette. Patterns with
             * ? [ are expanded. Output is an indexed PNG per (image, palette),
             or one merged PNG per palette with --merge.

Exit status:
  0 all jobs succeeded, 1 at least one job failed, 2 bad arguments or no inputs.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from pocket_palette.batch import ColorizeOptions, expand_paths, run_batch
from pocket_palette.constants import DEFAULT_TOLERANCE, MAX_SCALE, MIN_SCALE
from pocket_palette.core_types import LAYOUTS
from pocket_palette.display import DEFAULT_DISPLAY_MODE, DISPLAY_MODES, render_palette
from pocket_palette.errors import PaletteError
from pocket_palette.palette_data import TEMPLATE_PALETTE, load_palette, save_palette
from pocket_palette.report import write_preview
from pocket_palette.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    log,
)

# CLI args & small helpers


def _default_jobs() -> int:
    """Leave a core free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 2
    return max(1, n - 1)


def _scale_arg(text: str) -> int:
    value = int(text)
    if value < MIN_SCALE or value > MAX_SCALE:
        raise argparse.ArgumentTypeError(f"scale must be in [{MIN_SCALE}, {MAX_SCALE}]")
    return value


def _tolerance_arg(text: str) -> int:
    value = int(text)
    if value < 0 or value > 255:
        raise argparse.ArgumentTypeError("tolerance must be in [0, 255]")
    return value


def _positive_arg(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pocket_pal",
        description="Inspect .pal palettes and recolour template screenshots.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_display = sub.add_parser("display", help="Print palette as ANSI colours")
    p_display.add_argument("palette", type=Path, help=".pal file")
    p_display.add_argument(
        "--mode",
        choices=DISPLAY_MODES,
        default=DEFAULT_DISPLAY_MODE,
        help="How each colour is labelled.",
    )
    p_display.add_argument(
        "--lenient-footer",
        action="store_true",
        help="Log a wrong file signature instead of failing.",
    )

    p_template = sub.add_parser("template", help="Write the template palette")
    p_template.add_argument("output", type=Path, help="Destination .pal file")

    p_color = sub.add_parser("colorize", help="Recolour template screenshots")
    p_color.add_argument(
        "-p", "--palette", nargs="+", required=True, help=".pal files or glob patterns"
    )
    p_color.add_argument(
        "-i", "--image", nargs="+", required=True, help="Screenshots or glob patterns"
    )
    p_color.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (default: next to image)"
    )
    p_color.add_argument(
        "--scale", type=_scale_arg, default=1, help="Integer upscale factor (nearest)"
    )
    p_color.add_argument(
        "--merge", action="store_true", help="One tiled PNG per palette"
    )
    p_color.add_argument(
        "--columns", type=_positive_arg, default=4, help="Tiles per row (per column if vertical)"
    )
    p_color.add_argument("--layout", choices=LAYOUTS, default="horizontal")
    p_color.add_argument(
        "--tolerance",
        type=_tolerance_arg,
        default=DEFAULT_TOLERANCE,
        help="Per-channel matching tolerance",
    )
    p_color.add_argument(
        "--rgb", action="store_true", help="Write RGB PNGs instead of indexed PNGs"
    )
    p_color.add_argument(
        "--jobs", type=_positive_arg, default=_default_jobs(), help="Jobs run in parallel"
    )
    p_color.add_argument(
        "--html", type=Path, default=None, help="Write an HTML preview page here"
    )
    p_color.add_argument(
        "--lenient-footer",
        action="store_true",
        help="Log a wrong file signature instead of failing.",
    )
    p_color.add_argument("--debug", action="store_true", help="Verbose details")
    return parser


# Commands


def cmd_display(args: argparse.Namespace) -> int:
    try:
        palette = load_palette(args.palette, strict=not args.lenient_footer)
    except (PaletteError, OSError) as e:
        error(f"{args.palette}: {e}")
        return 1
    log(f"Palette {args.palette}")
    sys.stdout.write(render_palette(palette, args.mode))
    sys.stdout.flush()
    return 0


def cmd_template(args: argparse.Namespace) -> int:
    try:
        save_palette(TEMPLATE_PALETTE, args.output)
    except OSError as e:
        error(f"{args.output}: {e}")
        return 1
    log(f"Wrote template palette {args.output}")
    return 0


def cmd_colorize(args: argparse.Namespace) -> int:
    palettes = expand_paths(args.palette)
    images = expand_paths(args.image)
    if args.debug:
        debug_log(
            key_value_pairs_to_string([("Palettes", len(palettes)), ("Images", len(images))])
        )
    missing = [p for p in palettes + images if not p.exists()]
    for p in missing:
        error(f"not found: {p}")
    if missing or not palettes or not images:
        if not palettes or not images:
            error("need at least one palette and one image")
        return 2

    options = ColorizeOptions(
        tolerance=args.tolerance,
        scale=args.scale,
        merge=args.merge,
        columns=args.columns,
        layout=args.layout,
        rgb=args.rgb,
        strict_footer=not args.lenient_footer,
        outdir=args.outdir,
        debug=args.debug,
    )
    batch = run_batch(palettes, images, options, jobs=args.jobs)

    if args.html is not None:
        try:
            write_preview(args.html, batch.report_entries())
            log(f"Wrote preview {args.html}")
        except OSError as e:
            error(f"{args.html}: {e}")
            return 1
    return 1 if batch.failed else 0


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    enable_line_buffered_stdout()
    args = build_parser().parse_args(argv)
    if args.command == "display":
        return cmd_display(args)
    if args.command == "template":
        return cmd_template(args)
    return cmd_colorize(args)


if __name__ == "__main__":
    sys.exit(main())
