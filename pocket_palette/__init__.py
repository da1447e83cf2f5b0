# pocket_palette/__init__.py
"""
pocket_palette package.

Purpose:
  Decode 56-byte console .pal files and recolour screenshots taken with the
  builtin template palette. See pocket_pal.py for the CLI.

Public API:
  palette_data : Palette, TEMPLATE_PALETTE, .pal codec (decode/encode/load/save).
  matching     : per-channel tolerance matching (find_slot, match_slot_indices).
  recolor      : recolor / recolor_rgb, coverage reporting, OutputPalette.
  geometry     : scale_buffer / scale_rgb, merge_buffers / merge_rgb.
  display      : ANSI rendering of colours and palettes.
  image_io     : Pillow-backed image decode and PNG writers.
  batch        : palette x image job runner.
  report       : HTML preview page.
  errors       : PaletteError and subclasses.

Quick start:
  from pocket_palette import TEMPLATE_PALETTE, load_palette
  from pocket_palette.recolor import recolor
  from pocket_palette.image_io import load_image_rgb
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import errors
from . import palette_data
from . import matching
from . import recolor
from . import geometry
from . import display
from . import image_io
from . import utils

from .errors import (  # noqa: E402,F401
    IncorrectFooter,
    InvalidScaleFactor,
    InvalidSize,
    MismatchedTileDimensions,
    PaletteError,
)
from .palette_data import (  # noqa: E402,F401
    TEMPLATE_PALETTE,
    Palette,
    decode_palette,
    encode_palette,
    load_palette,
    save_palette,
)
from .matching import find_slot  # noqa: E402,F401
from .recolor import OutputPalette, recolor_rgb  # noqa: E402,F401
from .geometry import merge_buffers, scale_buffer  # noqa: E402,F401

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "errors",
    "palette_data",
    "matching",
    "recolor",
    "geometry",
    "display",
    "image_io",
    "utils",
    "PaletteError",
    "InvalidSize",
    "IncorrectFooter",
    "InvalidScaleFactor",
    "MismatchedTileDimensions",
    "Palette",
    "TEMPLATE_PALETTE",
    "decode_palette",
    "encode_palette",
    "load_palette",
    "save_palette",
    "find_slot",
    "OutputPalette",
    "recolor_rgb",
    "scale_buffer",
    "merge_buffers",
]
