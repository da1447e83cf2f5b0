# pocket_palette/image_io.py
from __future__ import annotations

import os
import struct
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Union

import numpy as np
from PIL import Image, ImageOps
from PIL.PngImagePlugin import PngInfo

from .constants import OUTPUT_PALETTE_SLOTS
from .core_types import U8Image

"""
Image I/O helpers: RGB decode, indexed / RGB PNG encode, atomic writes.
"""

PathLike = Union[str, Path]

# PNG stores gamma and chromaticities as value * 100000
_GAMMA = 1.0 / 2.2
_CHROMATICITIES = (
    (0.31270, 0.32900),  # white point
    (0.64000, 0.33000),  # red
    (0.30000, 0.60000),  # green
    (0.15000, 0.06000),  # blue
)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# mkstemp creates 0600 files; outputs get the usual 0666 & ~umask instead
_FILE_MODE = 0o666 & ~_current_umask()


@contextmanager
def atomic_output(path: PathLike) -> Iterator[IO[bytes]]:
    """
    Open a temp file next to `path` and move it into place on success.

    On any error the temp file is removed and the exception propagates, so a
    failed write never leaves a partial file under the final name.
    """
    dst = Path(path)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{dst.name}.", suffix=".tmp", dir=dst.parent
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
        os.chmod(tmp_name, _FILE_MODE)
        os.replace(tmp_name, dst)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def load_image_rgb(path: PathLike) -> U8Image:
    """Load any Pillow-readable image as uint8 (H,W,3). Alpha is dropped."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0)
        rgb = im.convert("RGB")
    return np.array(rgb, dtype=np.uint8)


def _srgb_png_info() -> PngInfo:
    info = PngInfo()
    info.add(b"gAMA", struct.pack(">I", int(round(_GAMMA * 100000))))
    chrm = b"".join(
        struct.pack(">II", int(round(x * 100000)), int(round(y * 100000)))
        for x, y in _CHROMATICITIES
    )
    info.add(b"cHRM", chrm)
    return info


def save_indexed_png(
    path: PathLike, width: int, height: int, palette: bytes, data: bytes
) -> Path:
    """
    Write an 8-bit indexed PNG.

    Args:
      palette: 256*3 RGB bytes (shorter tables are padded white)
      data: width*height index bytes, row-major
    """
    if len(data) != width * height:
        raise ValueError(
            f"index data has {len(data)} bytes, expected {width}x{height}={width * height}"
        )
    pal = bytes(palette)[: OUTPUT_PALETTE_SLOTS * 3]
    pal = pal + b"\xff" * (OUTPUT_PALETTE_SLOTS * 3 - len(pal))
    im = Image.frombytes("P", (width, height), bytes(data))
    im.putpalette(pal, rawmode="RGB")
    dst = Path(path)
    with atomic_output(dst) as fh:
        im.save(fh, format="PNG", pnginfo=_srgb_png_info())
    return dst


def save_png_rgb(path: PathLike, rgb: U8Image) -> Path:
    """Save an (H,W,3) uint8 array as an RGB PNG."""
    arr = np.ascontiguousarray(rgb[..., :3], dtype=np.uint8)
    height, width = arr.shape[0], arr.shape[1]
    im = Image.frombytes("RGB", (width, height), arr.tobytes())
    dst = Path(path)
    with atomic_output(dst) as fh:
        im.save(fh, format="PNG")
    return dst


__all__ = [
    "atomic_output",
    "load_image_rgb",
    "save_indexed_png",
    "save_png_rgb",
]
