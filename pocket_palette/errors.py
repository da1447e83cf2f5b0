# pocket_palette/errors.py
"""
Exceptions raised for malformed palette files and invalid geometry.

All derive from ValueError, so callers that only care about "bad input" can
catch that. Read/write failures are left as the OSError Python raises.
"""
from __future__ import annotations


class PaletteError(ValueError):
    """Base class for structural errors that abort one job."""


class InvalidSize(PaletteError):
    def __init__(self, size: int, expected: int) -> None:
        super().__init__(
            f"palette file should have exactly {expected} bytes, but it has {size} bytes"
        )
        self.size = size
        self.expected = expected


class IncorrectFooter(PaletteError):
    def __init__(self, footer: bytes) -> None:
        super().__init__(f"incorrect palette footer {footer.hex(' ')}")
        self.footer = footer


class InvalidScaleFactor(PaletteError):
    def __init__(self, factor: int, lo: int, hi: int) -> None:
        super().__init__(f"scale factor {factor} outside [{lo}, {hi}]")
        self.factor = factor


class MismatchedTileDimensions(PaletteError):
    def __init__(self, index: int, got: object, expected: object) -> None:
        super().__init__(f"tile {index} has size {got}, expected {expected}")
        self.index = index


__all__ = [
    "PaletteError",
    "InvalidSize",
    "IncorrectFooter",
    "InvalidScaleFactor",
    "MismatchedTileDimensions",
]
