# pocket_palette/utils.py
from __future__ import annotations

"""
Shared utilities for pocket_palette.

Includes time / number formatting, unique colour counting and tidy logging.
"""

import sys
from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import U8Image


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# Colour helpers


def unique_rgb(image_rgb: U8Image) -> Tuple[U8Image, np.ndarray, np.ndarray]:
    """
    Unique RGB rows of an image with counts and inverse index.

    Returns:
      uniques: uint8 [U,3]
      counts: int64 [U]
      inverse_idx: int64 [H*W], uniques[inverse_idx] rebuilds the flattened image
    """
    flat_rgb = image_rgb[..., :3].reshape(-1, 3)
    if flat_rgb.shape[0] == 0:
        return (
            np.zeros((0, 3), dtype=np.uint8),
            np.zeros((0,), dtype=np.int64),
            np.zeros((0,), dtype=np.int64),
        )
    uniques, inverse_idx, counts = np.unique(
        flat_rgb, axis=0, return_inverse=True, return_counts=True
    )
    return (
        uniques.astype(np.uint8, copy=False),
        counts.astype(np.int64, copy=False),
        inverse_idx.reshape(-1).astype(np.int64, copy=False),
    )


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1_234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def format_percentage(value: float, decimals: int = 2) -> str:
    """Format a percentage already expressed in 0..100."""
    return f"{value:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Palettes: 3  Images: 12  Jobs: 4  Tolerance: 8
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Keeps job logs readable when several workers print at once.
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


__all__ = [
    "format_seconds_compact",
    "unique_rgb",
    "format_bool_on_off",
    "format_number_compact",
    "format_percentage",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
    "enable_line_buffered_stdout",
]
