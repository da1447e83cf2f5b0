# pocket_palette/matching.py
from __future__ import annotations

"""
Per-channel tolerance matching of source colours against a template.

A template colour c matches pixel p when every channel of c lies inside
[p - tolerance, p + tolerance], clipped to 0..255. Candidates are tried in
the template's slot order and the first hit wins.
"""

from typing import Optional, Tuple

import numpy as np

from .constants import UNMATCHED_INDEX
from .core_types import Color, NameOf, SlotName
from .palette_data import SLOT_INDEX, Palette


def _check_tolerance(tolerance: int) -> int:
    t = int(tolerance)
    if t < 0 or t > 255:
        raise ValueError(f"tolerance {tolerance} outside 0..255")
    return t


def channel_window(value: int, tolerance: int) -> Tuple[int, int]:
    """Saturating [lo, hi] window for one channel."""
    return max(0, value - tolerance), min(255, value + tolerance)


def find_slot(
    template_colours: NameOf, pixel: Color, tolerance: int
) -> Optional[SlotName]:
    """Slot name of the first template colour within tolerance of pixel, else None."""
    t = _check_tolerance(tolerance)
    windows = [channel_window(int(pixel[i]), t) for i in range(3)]
    for colour, name in template_colours.items():
        if all(lo <= colour[i] <= hi for i, (lo, hi) in enumerate(windows)):
            return name
    return None


def template_arrays(template: Palette) -> Tuple[np.ndarray, np.ndarray]:
    """
    Template colours and their slot indices, in name_of() order.

    Returns:
      colours: int16 [K,3]
      slots: uint8 [K]
    """
    name_of = template.name_of()
    colours = np.array(list(name_of.keys()), dtype=np.int16).reshape(-1, 3)
    slots = np.array([SLOT_INDEX[n] for n in name_of.values()], dtype=np.uint8)
    return colours, slots


def match_slot_indices(
    colours: np.ndarray, template: Palette, tolerance: int
) -> np.ndarray:
    """
    Vectorised find_slot over many colours.

    Args:
      colours: uint8 [N,3]
    Returns:
      uint8 [N] slot indices (0..16), UNMATCHED_INDEX where nothing matched.
    """
    t = _check_tolerance(tolerance)
    tpl_rgb, tpl_slots = template_arrays(template)
    src = np.asarray(colours, dtype=np.int16).reshape(-1, 3)
    if src.shape[0] == 0:
        return np.zeros((0,), dtype=np.uint8)

    # |c - p| <= t on every channel is the same as the clipped window test
    diff = np.abs(src[:, None, :] - tpl_rgb[None, :, :])
    hits = np.all(diff <= t, axis=2)  # [N,K]
    any_hit = hits.any(axis=1)
    first = np.argmax(hits, axis=1)

    out = np.full(src.shape[0], UNMATCHED_INDEX, dtype=np.uint8)
    out[any_hit] = tpl_slots[first[any_hit]]
    return out


__all__ = [
    "channel_window",
    "find_slot",
    "template_arrays",
    "match_slot_indices",
]
