# pocket_palette/batch.py
from __future__ import annotations

"""
Batch recolouring: every palette against every screenshot.

One job per (palette, image), or one job per palette in merge mode. Jobs share
the template read-only and write to their own output path, so they run on a
thread pool without locking. A job that fails logs the offending path and is
recorded as failed; the rest of the batch carries on.
"""

import glob
import re
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .constants import DEFAULT_TOLERANCE
from .core_types import IndexBuffer, Layout, U8Image
from .errors import MismatchedTileDimensions
from .geometry import merge_buffers, merge_rgb, scale_buffer, scale_rgb
from .image_io import load_image_rgb, save_indexed_png, save_png_rgb
from .palette_data import TEMPLATE_PALETTE, Palette, load_palette
from .recolor import OutputPalette, recolor, recolor_rgb
from .utils import (
    debug_log,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

PathLike = Union[str, Path]

_GLOB_CHARS = re.compile(r"[*?\[]")
_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


# Paths / naming


def expand_paths(patterns: Iterable[str]) -> List[Path]:
    """Expand glob patterns, keep literal paths, then dedupe and sort."""
    found: List[str] = []
    for pattern in patterns:
        if _GLOB_CHARS.search(pattern):
            found.extend(glob.glob(pattern, recursive=True))
        else:
            found.append(pattern)
    return [Path(p) for p in sorted(set(found))]


def palette_tag(path: PathLike) -> str:
    """Palette path without suffix, flattened into a file-name-safe token."""
    p = Path(path)
    raw = p.with_suffix("").as_posix().lstrip("./")
    tag = _UNSAFE.sub("_", raw.replace("/", "_")).strip("_")
    return tag or "palette"


def output_name(index: int, image_path: PathLike, tag: str) -> str:
    return f"{index:03d}_{Path(image_path).stem}__{tag}.png"


def merged_output_name(tag: str) -> str:
    return f"merged__{tag}.png"


# Options / results


@dataclass(frozen=True)
class ColorizeOptions:
    tolerance: int = DEFAULT_TOLERANCE
    scale: int = 1
    merge: bool = False
    columns: int = 4
    layout: Layout = "horizontal"
    rgb: bool = False
    strict_footer: bool = True
    outdir: Optional[Path] = None
    debug: bool = False


@dataclass(frozen=True)
class Job:
    palette_path: Path
    image_paths: Tuple[Path, ...]
    output_path: Path


@dataclass
class JobResult:
    job: Job
    error: Optional[str] = None
    seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    results: List[JobResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[JobResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[JobResult]:
        return [r for r in self.results if not r.ok]

    def report_entries(self) -> List[Tuple[str, Path, Path]]:
        return [
            (r.job.palette_path.stem, r.job.palette_path, r.job.output_path)
            for r in self.succeeded
        ]


def _palette_tags(palettes: Sequence[Path]) -> List[str]:
    tags = [palette_tag(p) for p in palettes]
    counts = Counter(tags)
    taken = {tag for tag in tags if counts[tag] == 1}
    out: List[str] = []
    # distinct paths can flatten to the same tag; a suffix may hit another tag too
    for i, tag in enumerate(tags):
        if counts[tag] > 1:
            n = i
            while f"{tag}_{n:03d}" in taken:
                n += 1
            tag = f"{tag}_{n:03d}"
            taken.add(tag)
        out.append(tag)
    return out


def build_jobs(
    palettes: Sequence[Path], images: Sequence[Path], options: ColorizeOptions
) -> List[Job]:
    """Jobs in a deterministic order: palettes outer, images inner."""
    jobs: List[Job] = []
    if not images:
        return jobs
    for pal_path, tag in zip(palettes, _palette_tags(palettes)):
        if options.merge:
            outdir = options.outdir or images[0].parent
            jobs.append(
                Job(pal_path, tuple(images), outdir / merged_output_name(tag))
            )
            continue
        for i, img_path in enumerate(images):
            outdir = options.outdir or img_path.parent
            jobs.append(Job(pal_path, (img_path,), outdir / output_name(i, img_path, tag)))
    return jobs


# Per-job processing


def _indexed_tile(
    pixels: U8Image, template: Palette, options: ColorizeOptions
) -> Tuple[IndexBuffer, int, int]:
    height, width = pixels.shape[0], pixels.shape[1]
    indices = recolor(pixels, template, options.tolerance, debug=options.debug)
    buf, w, h = scale_buffer(indices, width, height, options.scale)
    return buf, w, h


def _process_job(job: Job, template: Palette, options: ColorizeOptions) -> None:
    target = load_palette(job.palette_path, strict=options.strict_footer, debug=options.debug)
    job.output_path.parent.mkdir(parents=True, exist_ok=True)

    if options.rgb:
        tiles = [
            scale_rgb(
                recolor_rgb(
                    load_image_rgb(p), template, target, options.tolerance, options.debug
                ),
                options.scale,
            )
            for p in job.image_paths
        ]
        out = tiles[0] if len(tiles) == 1 else merge_rgb(tiles, options.columns, options.layout)
        save_png_rgb(job.output_path, out)
        height, width = out.shape[0], out.shape[1]
    else:
        tiles = [_indexed_tile(load_image_rgb(p), template, options) for p in job.image_paths]
        buf, width, height = tiles[0]
        for i, (_, w, h) in enumerate(tiles):
            if (w, h) != (width, height):
                raise MismatchedTileDimensions(i, (w, h), (width, height))
        if len(tiles) > 1:
            buf, width, height = merge_buffers(
                [t[0] for t in tiles], width, height, options.columns, options.layout
            )
        palette_bytes = OutputPalette.from_palette(target).to_bytes()
        save_indexed_png(
            job.output_path, width, height, palette_bytes, np.asarray(buf).tobytes()
        )

    log(f"Wrote {job.output_path.name} | size={width}x{height} | images={len(job.image_paths)}")


def run_job(job: Job, template: Palette, options: ColorizeOptions) -> JobResult:
    """Run one job; structural and I/O errors are caught and recorded."""
    t_start = time.perf_counter()
    print_banner(f"{job.palette_path.name} -> {job.output_path.name}")
    try:
        _process_job(job, template, options)
    except (ValueError, OSError, Image.DecompressionBombError) as e:
        names = ", ".join(str(p) for p in job.image_paths)
        error(f"{job.palette_path} [{names}]: {e}")
        return JobResult(job, error=str(e), seconds=time.perf_counter() - t_start)
    seconds = time.perf_counter() - t_start
    if options.debug:
        debug_log(f"job took {format_seconds_compact(seconds)}")
    return JobResult(job, seconds=seconds)


def run_batch(
    palettes: Sequence[Path],
    images: Sequence[Path],
    options: ColorizeOptions,
    jobs: int = 1,
    template: Palette = TEMPLATE_PALETTE,
) -> BatchResult:
    """
    Recolour every image with every palette.

    Results keep job order regardless of completion order.
    """
    job_list = build_jobs(palettes, images, options)
    print_config_line(
        "run",
        [
            ("Palettes", len(palettes)),
            ("Images", len(images)),
            ("Jobs", len(job_list)),
            ("Workers", jobs),
            ("Tolerance", options.tolerance),
            ("Scale", options.scale),
            ("Merge", options.merge),
        ],
        debug=False,
    )

    t_start = time.perf_counter()
    if jobs <= 1 or len(job_list) <= 1:
        results = [run_job(j, template, options) for j in job_list]
    else:
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            futures = [ex.submit(run_job, j, template, options) for j in job_list]
            results = [f.result() for f in futures]

    batch = BatchResult(results)
    log(
        key_value_pairs_to_string(
            [
                ("Done", len(batch.succeeded)),
                ("Failed", len(batch.failed)),
                ("Total time", format_seconds_compact(time.perf_counter() - t_start)),
            ]
        )
    )
    return batch


__all__ = [
    "expand_paths",
    "palette_tag",
    "output_name",
    "merged_output_name",
    "ColorizeOptions",
    "Job",
    "JobResult",
    "BatchResult",
    "build_jobs",
    "run_job",
    "run_batch",
]
