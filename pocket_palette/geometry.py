# pocket_palette/geometry.py
from __future__ import annotations

"""
Index buffer / image geometry: integer nearest-neighbour scaling and grid
merging of equally sized tiles.

Exports:
  scale_buffer(buffer, width, height, factor) -> (buffer, width, height)
  scale_rgb(rgb, factor) -> rgb
  grid_shape(count, max_columns, layout) -> (columns, rows)
  tile_origin(i, tile_w, tile_h, max_columns, layout) -> (x, y)
  merge_buffers(buffers, tile_w, tile_h, max_columns, layout) -> (buffer, width, height)
  merge_rgb(images, max_columns, layout) -> rgb
"""

from typing import Sequence, Tuple

import numpy as np
from PIL import Image

from .constants import FILL_INDEX, FILL_RGB, MAX_SCALE, MIN_SCALE
from .core_types import LAYOUTS, IndexBuffer, Layout, U8Image
from .errors import InvalidScaleFactor, MismatchedTileDimensions


def _check_factor(factor: int) -> int:
    f = int(factor)
    if f < MIN_SCALE or f > MAX_SCALE:
        raise InvalidScaleFactor(f, MIN_SCALE, MAX_SCALE)
    return f


def _as_grid(buffer: IndexBuffer, width: int, height: int) -> np.ndarray:
    flat = np.asarray(buffer, dtype=np.uint8).reshape(-1)
    if flat.size != width * height:
        raise ValueError(
            f"buffer has {flat.size} entries, expected {width}x{height}={width * height}"
        )
    return flat.reshape(height, width)


def scale_buffer(
    buffer: IndexBuffer, width: int, height: int, factor: int
) -> Tuple[IndexBuffer, int, int]:
    """
    Nearest-neighbour upscale: every source entry becomes a factor x factor block.
    factor == 1 hands back the input untouched.
    """
    f = _check_factor(factor)
    if f == 1:
        return buffer, width, height
    grid = _as_grid(buffer, width, height)
    scaled = np.repeat(np.repeat(grid, f, axis=0), f, axis=1)
    return np.ascontiguousarray(scaled).reshape(-1), width * f, height * f


def scale_rgb(rgb: U8Image, factor: int) -> U8Image:
    """Nearest-neighbour upscale of an (H,W,3) image by an integer factor in [1, 20]."""
    f = _check_factor(factor)
    if f == 1:
        return rgb
    height, width = rgb.shape[0], rgb.shape[1]
    im = Image.fromarray(np.ascontiguousarray(rgb[..., :3], dtype=np.uint8))
    im2 = im.resize((width * f, height * f), Image.Resampling.NEAREST)
    return np.array(im2, dtype=np.uint8)


def _check_layout(layout: str) -> None:
    if layout not in LAYOUTS:
        raise ValueError(f"unknown layout '{layout}', expected one of {LAYOUTS}")


def grid_shape(count: int, max_columns: int, layout: Layout) -> Tuple[int, int]:
    """
    (columns, rows) of the merged grid.

    Horizontal keeps max_columns across and grows downwards; vertical swaps the
    two, filling max_columns down and growing to the right.
    """
    _check_layout(layout)
    if max_columns < 1:
        raise ValueError(f"max_columns must be >= 1, got {max_columns}")
    lines = (count + max_columns - 1) // max_columns
    if layout == "horizontal":
        return max_columns, lines
    return lines, max_columns


def tile_origin(
    i: int, tile_width: int, tile_height: int, max_columns: int, layout: Layout
) -> Tuple[int, int]:
    """Top-left pixel of tile i."""
    major, minor = divmod(i, max_columns)
    if layout == "horizontal":
        col, row = minor, major
    else:
        col, row = major, minor
    return col * tile_width, row * tile_height


def merge_buffers(
    buffers: Sequence[IndexBuffer],
    tile_width: int,
    tile_height: int,
    max_columns: int,
    layout: Layout = "horizontal",
) -> Tuple[IndexBuffer, int, int]:
    """
    Composite equally sized index buffers onto one canvas.

    Cells without a tile keep FILL_INDEX.
    """
    if not buffers:
        raise ValueError("nothing to merge")
    expected = tile_width * tile_height
    for i, buf in enumerate(buffers):
        size = int(np.asarray(buf).size)
        if size != expected:
            raise MismatchedTileDimensions(i, size, expected)

    columns, rows = grid_shape(len(buffers), max_columns, layout)
    width, height = columns * tile_width, rows * tile_height
    canvas = np.full((height, width), FILL_INDEX, dtype=np.uint8)
    for i, buf in enumerate(buffers):
        x, y = tile_origin(i, tile_width, tile_height, max_columns, layout)
        canvas[y : y + tile_height, x : x + tile_width] = _as_grid(
            buf, tile_width, tile_height
        )
    return canvas.reshape(-1), width, height


def merge_rgb(
    images: Sequence[U8Image], max_columns: int, layout: Layout = "horizontal"
) -> U8Image:
    """RGB counterpart of merge_buffers(); empty cells are white."""
    if not images:
        raise ValueError("nothing to merge")
    shape = images[0].shape[:2]
    for i, im in enumerate(images):
        if im.shape[:2] != shape:
            raise MismatchedTileDimensions(i, im.shape[:2], shape)

    tile_height, tile_width = shape
    columns, rows = grid_shape(len(images), max_columns, layout)
    canvas = np.empty((rows * tile_height, columns * tile_width, 3), dtype=np.uint8)
    canvas[...] = FILL_RGB
    for i, im in enumerate(images):
        x, y = tile_origin(i, tile_width, tile_height, max_columns, layout)
        canvas[y : y + tile_height, x : x + tile_width] = im[..., :3]
    return canvas


__all__ = [
    "scale_buffer",
    "scale_rgb",
    "grid_shape",
    "tile_origin",
    "merge_buffers",
    "merge_rgb",
]
