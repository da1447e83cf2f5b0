# pocket_palette/recolor.py
from __future__ import annotations

"""
Recolouring of template screenshots.

Two output paths:
  recolor()      -> flat uint8 index buffer of template slot indices, to be
                    written with an OutputPalette built from the target palette
  recolor_rgb()  -> (H,W,3) image with matched pixels replaced by the target
                    palette's colour for the same slot

Both log how many distinct source colours are present (coverage of the 16
visible template colours) and how many pixels matched. Shortfalls are warnings.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .constants import (
    DEFAULT_TOLERANCE,
    OUTPUT_PALETTE_SLOTS,
    UNMATCHED_INDEX,
    VISIBLE_COLOURS,
)
from .core_types import Color, IndexBuffer, U8Image, assert_u8_image_rgb
from .matching import match_slot_indices
from .palette_data import Palette
from .utils import (
    debug_log,
    format_percentage,
    log,
    unique_rgb,
    warn,
)


@dataclass(frozen=True)
class Coverage:
    """Distinct source colours against the visible template colours."""

    distinct: int
    expected: int = VISIBLE_COLOURS

    @property
    def percentage(self) -> float:
        return self.distinct / float(self.expected) * 100.0

    @property
    def complete(self) -> bool:
        return self.percentage >= 100.0


@dataclass(frozen=True)
class MatchReport:
    matched: int
    unmatched: int

    @property
    def total(self) -> int:
        return self.matched + self.unmatched

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 100.0
        return self.matched / float(self.total) * 100.0

    @property
    def complete(self) -> bool:
        return self.percentage >= 100.0


def colour_coverage(pixels: U8Image) -> Coverage:
    uniques, _counts, _inv = unique_rgb(assert_u8_image_rgb(pixels))
    return Coverage(distinct=int(uniques.shape[0]))


def log_coverage(coverage: Coverage) -> None:
    if coverage.complete:
        log(
            "All colours from palette (except lcd_off) have representation in source image"
        )
    else:
        warn(
            f"Only ~{format_percentage(coverage.percentage)} of colours have representation "
            f"in source image ({coverage.distinct} of {coverage.expected}; not counting lcd_off)"
        )


def log_match_report(report: MatchReport) -> None:
    if report.complete:
        log(f"Colourised all {report.total:,} pixels")
    else:
        warn(
            f"Not all pixels were colourised (~{format_percentage(report.percentage)}, "
            f"{report.unmatched:,} left), maybe the screenshot was not taken with the template palette"
        )


def _slot_indices(
    pixels: U8Image, template: Palette, tolerance: int, debug: bool
) -> Tuple[np.ndarray, MatchReport]:
    uniques, counts, inverse = unique_rgb(assert_u8_image_rgb(pixels))
    coverage = Coverage(distinct=int(uniques.shape[0]))
    if debug:
        debug_log(f"found {coverage.distinct} unique colours in image")
    log_coverage(coverage)

    # match each distinct colour once, then scatter back to pixels
    unique_slots = match_slot_indices(uniques, template, tolerance)
    indices = unique_slots[inverse]

    unmatched = int(counts[unique_slots == UNMATCHED_INDEX].sum())
    report = MatchReport(matched=int(indices.size) - unmatched, unmatched=unmatched)
    if debug:
        debug_log(
            f"Processed {report.matched:,} of {report.total:,} pixels "
            f"~{format_percentage(report.percentage)}"
        )
    log_match_report(report)
    return indices.astype(np.uint8, copy=False), report


def recolor_with_report(
    pixels: U8Image,
    template: Palette,
    tolerance: int = DEFAULT_TOLERANCE,
    debug: bool = False,
) -> Tuple[IndexBuffer, MatchReport]:
    """Index buffer (row-major, H*W) plus matched / unmatched counts."""
    return _slot_indices(pixels, template, tolerance, debug)


def recolor(
    pixels: U8Image,
    template: Palette,
    tolerance: int = DEFAULT_TOLERANCE,
    debug: bool = False,
) -> IndexBuffer:
    """
    Map every pixel to the index (0..16) of the template slot it matches.

    Unmatched pixels get UNMATCHED_INDEX.
    """
    indices, _report = _slot_indices(pixels, template, tolerance, debug)
    return indices


def recolor_rgb(
    pixels: U8Image,
    template: Palette,
    target: Palette,
    tolerance: int = DEFAULT_TOLERANCE,
    debug: bool = False,
) -> U8Image:
    """
    Direct RGB recolour. Matched pixels take the target colour of their slot,
    unmatched pixels keep the source colour.
    """
    rgb = assert_u8_image_rgb(pixels)
    indices, _report = _slot_indices(rgb, template, tolerance, debug)
    target_rgb = np.array(target.colours(), dtype=np.uint8)

    out = rgb.reshape(-1, 3).copy()
    matched = indices != UNMATCHED_INDEX
    out[matched] = target_rgb[indices[matched]]
    return out.reshape(rgb.shape)


class OutputPalette:
    """
    256-slot RGB table for indexed PNG export.

    Unused slots stay white, so UNMATCHED_INDEX renders as white.
    """

    SIZE = OUTPUT_PALETTE_SLOTS * 3

    def __init__(self, data: Optional[bytes] = None) -> None:
        self._pal = bytearray(b"\xff" * self.SIZE)
        self.index = 0
        if data is not None:
            if len(data) >= self.SIZE:
                raise ValueError(
                    f"palette data too big ({len(data)} bytes, max {self.SIZE - 1})"
                )
            self._pal[: len(data)] = bytes(data)

    @classmethod
    def from_palette(cls, palette: Palette) -> "OutputPalette":
        """Slot i of the table is slot i of the palette (17 entries)."""
        out = cls()
        for colour in palette.colours():
            out.push(colour)
        return out

    def set(self, index: int, colour: Color) -> bool:
        if index < 0 or index >= OUTPUT_PALETTE_SLOTS:
            return False
        self._pal[index * 3 : index * 3 + 3] = bytes(colour)
        return True

    def push(self, colour: Color) -> bool:
        ok = self.set(self.index, colour)
        if ok:
            self.index += 1
        return ok

    def colour_at(self, index: int) -> Color:
        c = self._pal[index * 3 : index * 3 + 3]
        return (c[0], c[1], c[2])

    def index_of(self, colour: Color) -> Optional[int]:
        needle = bytes(colour)
        for i in range(OUTPUT_PALETTE_SLOTS):
            if self._pal[i * 3 : i * 3 + 3] == needle:
                return i
        return None

    def index_of_with_tolerance(self, colour: Color, tolerance: int) -> Optional[int]:
        table = np.frombuffer(bytes(self._pal), dtype=np.uint8).reshape(-1, 3)
        diff = np.abs(table.astype(np.int16) - np.array(colour, dtype=np.int16))
        hits = np.flatnonzero(np.all(diff <= int(tolerance), axis=1))
        return int(hits[0]) if hits.size else None

    def to_bytes(self) -> bytes:
        return bytes(self._pal)


__all__ = [
    "Coverage",
    "MatchReport",
    "colour_coverage",
    "log_coverage",
    "log_match_report",
    "recolor",
    "recolor_with_report",
    "recolor_rgb",
    "OutputPalette",
]
