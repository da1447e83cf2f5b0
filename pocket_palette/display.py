# pocket_palette/display.py
from __future__ import annotations

"""
24-bit ANSI rendering of colours and palettes for terminal preview.

Modes:
  just_color       two coloured blanks
  color_number     slot number on the colour (label required)
  color_value_dec  "[r, g, b]" padded to a fixed width
  color_value_hex  "#rrggbb"
"""

from typing import List, Literal, Optional, Sequence, Tuple

from .constants import GROUP_TITLES, SLOT_LAYOUT
from .core_types import Color, rgb_to_hex
from .palette_data import Palette

DisplayMode = Literal["just_color", "color_number", "color_value_dec", "color_value_hex"]
DISPLAY_MODES: Tuple[str, ...] = (
    "just_color",
    "color_number",
    "color_value_dec",
    "color_value_hex",
)
DEFAULT_DISPLAY_MODE: DisplayMode = "color_value_hex"

RESET = "\x1b[0m"


def contrast_colour(colour: Color) -> Color:
    """Black or white, whichever reads better on top of colour."""
    luminance = (0.299 * colour[0] + 0.587 * colour[1] + 0.114 * colour[2]) / 255.0
    value = 0 if luminance > 0.5 else 255
    return (value, value, value)


def _paint(text: str, background: Color, foreground: Optional[Color] = None) -> str:
    out = f"\x1b[48;2;{background[0]};{background[1]};{background[2]}m"
    if foreground is not None:
        out += f"\x1b[38;2;{foreground[0]};{foreground[1]};{foreground[2]}m"
    return f"{out}{text}{RESET}"


def render_colour(
    colour: Color, mode: DisplayMode = DEFAULT_DISPLAY_MODE, label: Optional[str] = None
) -> str:
    if mode == "just_color":
        return _paint("  ", colour)
    fg = contrast_colour(colour)
    if mode == "color_number":
        if label is None:
            raise ValueError("color_number mode needs a label")
        return _paint(f"  {label}  ", colour, fg)
    if mode == "color_value_dec":
        # pad so every entry is as wide as "[255, 255, 255]"
        padding = "".join(" " * (3 - len(str(v))) for v in colour)
        return _paint(f"  [{colour[0]}, {colour[1]}, {colour[2]}]  {padding}", colour, fg)
    if mode == "color_value_hex":
        return _paint(f"  {rgb_to_hex(colour)}  ", colour, fg)
    raise ValueError(f"unknown display mode '{mode}', expected one of {DISPLAY_MODES}")


def render_group(colours: Sequence[Color], mode: DisplayMode = DEFAULT_DISPLAY_MODE) -> str:
    parts: List[str] = []
    for i, colour in enumerate(colours):
        label = str(i) if mode == "color_number" else None
        parts.append(render_colour(colour, mode, label))
    return "".join(parts)


def render_palette(palette: Palette, mode: DisplayMode = DEFAULT_DISPLAY_MODE) -> str:
    """All groups, each under a '-- Title --' header."""
    lines: List[str] = []
    for group, _offset, _count in SLOT_LAYOUT:
        lines.append(f"-- {GROUP_TITLES[group]} --")
        lines.append(render_group(palette.group(group), mode))
    return "\n".join(lines) + "\n"


__all__ = [
    "DisplayMode",
    "DISPLAY_MODES",
    "DEFAULT_DISPLAY_MODE",
    "contrast_colour",
    "render_colour",
    "render_group",
    "render_palette",
]
