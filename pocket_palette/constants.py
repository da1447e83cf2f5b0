# pocket_palette/constants.py
"""
File format constants and tunables used across the project.

- Palette file layout (PAL_*, SLOT_LAYOUT)
- Matching defaults (DEFAULT_TOLERANCE)
- Output buffer / PNG palette constants
"""
from __future__ import annotations

from typing import List, Tuple

# =========================
# .pal file layout
# =========================
PAL_FILE_SIZE = 56
PAL_SIGNATURE = bytes([0x81, 0x41, 0x50, 0x47, 0x42])
PAL_SIGNATURE_OFFSET = 51

# (group, byte offset, colour count), in declaration order
SLOT_LAYOUT: List[Tuple[str, int, int]] = [
    ("bg", 0, 4),
    ("obj0", 12, 4),
    ("obj1", 24, 4),
    ("window", 36, 4),
    ("lcd_off", 48, 1),
]

# Section titles used by the ANSI display
GROUP_TITLES = {
    "bg": "Background",
    "obj0": "Object 0",
    "obj1": "Object 1",
    "window": "Window",
    "lcd_off": "LCD Off",
}

ALL_COLOURS = 17
# lcd_off is never visible on a screenshot
VISIBLE_COLOURS = ALL_COLOURS - 1

# =========================
# Matching
# =========================
# Screenshots carry a little LCD / encoder noise around the template colours.
DEFAULT_TOLERANCE = 8

# =========================
# Output
# =========================
UNMATCHED_INDEX = 255
FILL_INDEX = 255
FILL_RGB: Tuple[int, int, int] = (255, 255, 255)
OUTPUT_PALETTE_SLOTS = 256
MIN_SCALE = 1
MAX_SCALE = 20

__all__ = [
    "PAL_FILE_SIZE",
    "PAL_SIGNATURE",
    "PAL_SIGNATURE_OFFSET",
    "SLOT_LAYOUT",
    "GROUP_TITLES",
    "ALL_COLOURS",
    "VISIBLE_COLOURS",
    "DEFAULT_TOLERANCE",
    "UNMATCHED_INDEX",
    "FILL_INDEX",
    "FILL_RGB",
    "OUTPUT_PALETTE_SLOTS",
    "MIN_SCALE",
    "MAX_SCALE",
]
