# pocket_palette/core_types.py
from __future__ import annotations

"""
Core type aliases and lightweight colour helpers.
"""

from typing import Literal, Mapping, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

Color = Tuple[int, int, int]
ColorGroup = Tuple[Color, Color, Color, Color]
HexStr = str
SlotName = str

U8Image = NDArray[np.uint8]  # (H, W, 3)
IndexBuffer = NDArray[np.uint8]  # (H*W,) row-major slot indices

NameOf = Mapping[Color, SlotName]  # colour -> "bg_0"

Layout = Literal["horizontal", "vertical"]
LAYOUTS: Tuple[str, ...] = ("horizontal", "vertical")


# Small helpers


def rgb_to_hex(rgb: Color) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> Color:
    """
    Coerce a 3-length sequence or array to an (int, int, int) RGB tuple.
    Rejects channels outside 0..255.
    """
    if len(value) != 3:  # type: ignore[arg-type]
        raise ValueError(f"colour needs exactly 3 channels, got {len(value)}")  # type: ignore[arg-type]
    r, g, b = (int(value[0]), int(value[1]), int(value[2]))
    for channel in (r, g, b):
        if channel < 0 or channel > 255:
            raise ValueError(f"colour channel {channel} outside 0..255")
    return (r, g, b)


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return its RGB view."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] < 3:
        raise TypeError("expected uint8 (H,W,3/4) image")
    return image[..., :3]  # type: ignore[return-value]


__all__ = [
    "Color",
    "ColorGroup",
    "HexStr",
    "SlotName",
    "U8Image",
    "IndexBuffer",
    "NameOf",
    "Layout",
    "LAYOUTS",
    "rgb_to_hex",
    "coerce_to_rgb_tuple",
    "assert_u8_image_rgb",
]
