# pocket_palette/palette_data.py
from __future__ import annotations

"""
Palette definition, the builtin template and the .pal codec.

A .pal file is 56 bytes: 17 RGB colours (bg x4, obj0 x4, obj1 x4, window x4,
lcd_off) followed by the signature 81 41 50 47 42.

Exports:
  Palette                        frozen value object
  TEMPLATE_PALETTE               builtin template, every colour distinct
  SLOT_NAMES                     ["bg_0", ..., "window_3", "lcd_off"]
  decode_palette(data, strict)   -> Palette
  encode_palette(palette)        -> bytes
  load_palette(path, strict)     -> Palette
  save_palette(palette, path)    -> Path
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Set, Tuple, Union

from .constants import (
    PAL_FILE_SIZE,
    PAL_SIGNATURE,
    PAL_SIGNATURE_OFFSET,
    SLOT_LAYOUT,
)
from .core_types import Color, ColorGroup, SlotName, coerce_to_rgb_tuple
from .errors import IncorrectFooter, InvalidSize
from .image_io import atomic_output
from .utils import debug_log, error


def _slot_names() -> List[SlotName]:
    names: List[SlotName] = []
    for group, _offset, count in SLOT_LAYOUT:
        if count == 1:
            names.append(group)
        else:
            names.extend(f"{group}_{i}" for i in range(count))
    return names


SLOT_NAMES: List[SlotName] = _slot_names()
SLOT_INDEX: Dict[SlotName, int] = {name: i for i, name in enumerate(SLOT_NAMES)}


def _as_group(colours: Sequence[Sequence[int]], name: str) -> ColorGroup:
    if len(colours) != 4:
        raise ValueError(f"'{name}' needs exactly 4 colours, got {len(colours)}")
    return tuple(coerce_to_rgb_tuple(c) for c in colours)  # type: ignore[return-value]


@dataclass(frozen=True)
class Palette:
    """17-colour console palette. Immutable once built."""

    bg: ColorGroup
    obj0: ColorGroup
    obj1: ColorGroup
    window: ColorGroup
    lcd_off: Color

    def __post_init__(self) -> None:
        # normalise lists / arrays into tuples so instances hash and compare
        for group in ("bg", "obj0", "obj1", "window"):
            object.__setattr__(self, group, _as_group(getattr(self, group), group))
        object.__setattr__(self, "lcd_off", coerce_to_rgb_tuple(self.lcd_off))

    # construction

    @classmethod
    def from_colours(cls, colours: Sequence[Sequence[int]]) -> "Palette":
        """Build from 17 colours in slot order."""
        if len(colours) != len(SLOT_NAMES):
            raise ValueError(
                f"palette needs {len(SLOT_NAMES)} colours, got {len(colours)}"
            )
        fields: Dict[str, object] = {}
        pos = 0
        for group, _offset, count in SLOT_LAYOUT:
            chunk = list(colours[pos : pos + count])
            fields[group] = chunk[0] if count == 1 else chunk
            pos += count
        return cls(**fields)  # type: ignore[arg-type]

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = True) -> "Palette":
        return decode_palette(data, strict=strict)

    def to_bytes(self) -> bytes:
        return encode_palette(self)

    # views

    def colours(self) -> List[Color]:
        """All 17 colours in slot order."""
        out: List[Color] = []
        for group, _offset, count in SLOT_LAYOUT:
            value = getattr(self, group)
            if count == 1:
                out.append(value)
            else:
                out.extend(value)
        return out

    def group(self, name: str) -> Tuple[Color, ...]:
        value = getattr(self, name)
        return (value,) if name == "lcd_off" else value

    def distinct_colours(self) -> Set[Color]:
        return set(self.colours())

    def colour_of(self) -> Dict[SlotName, Color]:
        """Slot name -> colour, in slot order."""
        return dict(zip(SLOT_NAMES, self.colours()))

    def name_of(self) -> Dict[Color, SlotName]:
        """
        Colour -> slot name, in slot order.

        Duplicate colours collapse to one entry holding the last slot name, which
        is why a matching template must use distinct colours.
        """
        mapping: Dict[Color, SlotName] = {}
        for name, colour in zip(SLOT_NAMES, self.colours()):
            mapping[colour] = name
        return mapping


TEMPLATE_PALETTE = Palette(
    bg=((0, 0, 0), (32, 32, 32), (64, 64, 64), (128, 128, 128)),
    obj0=((0, 255, 0), (32, 255, 32), (64, 255, 64), (128, 255, 128)),
    obj1=((0, 0, 255), (32, 32, 255), (64, 64, 255), (128, 128, 255)),
    window=((255, 0, 0), (255, 32, 32), (255, 64, 64), (255, 128, 128)),
    lcd_off=(255, 0, 255),
)


# Codec


def _read_colour(data: bytes, offset: int) -> Color:
    return (data[offset], data[offset + 1], data[offset + 2])


def decode_palette(data: bytes, strict: bool = True) -> Palette:
    """
    Parse a 56-byte .pal buffer.

    Raises InvalidSize for any other length. A wrong signature raises
    IncorrectFooter, or with strict=False is logged and parsing continues.
    """
    if len(data) != PAL_FILE_SIZE:
        raise InvalidSize(len(data), PAL_FILE_SIZE)
    footer = bytes(data[PAL_SIGNATURE_OFFSET:])
    if footer != PAL_SIGNATURE:
        if strict:
            raise IncorrectFooter(footer)
        error(f"incorrect palette footer {footer.hex(' ')}, reading anyway")

    fields: Dict[str, object] = {}
    for group, offset, count in SLOT_LAYOUT:
        colours = [_read_colour(data, offset + 3 * i) for i in range(count)]
        fields[group] = colours[0] if count == 1 else colours
    return Palette(**fields)  # type: ignore[arg-type]


def encode_palette(palette: Palette) -> bytes:
    """Serialise to the 56-byte layout. The signature is always written."""
    out = bytearray()
    for colour in palette.colours():
        out.extend(colour)
    out.extend(PAL_SIGNATURE)
    return bytes(out)


def load_palette(path: Union[str, Path], strict: bool = True, debug: bool = False) -> Palette:
    """Read and decode a .pal file. OSError from the read propagates."""
    data = Path(path).read_bytes()
    if debug:
        debug_log(f"loaded {len(data)} bytes from {path}")
    return decode_palette(data, strict=strict)


def save_palette(palette: Palette, path: Union[str, Path]) -> Path:
    dst = Path(path)
    with atomic_output(dst) as fh:
        fh.write(encode_palette(palette))
    return dst


__all__ = [
    "Palette",
    "TEMPLATE_PALETTE",
    "SLOT_NAMES",
    "SLOT_INDEX",
    "decode_palette",
    "encode_palette",
    "load_palette",
    "save_palette",
]
