# pocket_palette/report.py
from __future__ import annotations

"""
Static HTML preview listing every recoloured output next to its palette.
"""

import html
import os
from pathlib import Path
from string import Template
from typing import Iterable, List, Tuple, Union

from .image_io import atomic_output

PathLike = Union[str, Path]
ReportEntry = Tuple[str, PathLike, PathLike]  # (palette name, palette path, image path)

_PAGE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>$title</title>
<style>
body { font-family: sans-serif; background: #222; color: #eee; }
figure { display: inline-block; margin: 8px; vertical-align: top; }
img { image-rendering: pixelated; border: 1px solid #555; }
figcaption { font-size: 0.85em; margin-top: 4px; }
figcaption span { color: #999; }
</style>
</head>
<body>
<h1>$title</h1>
$figures
</body>
</html>
"""
)

_FIGURE = Template(
    """<figure>
<img src="$src" alt="$name">
<figcaption>$name<br><span>$pal_path</span></figcaption>
</figure>"""
)


def _relative(path: PathLike, base: Path) -> str:
    rel = os.path.relpath(Path(path).resolve(), base.resolve())
    return Path(rel).as_posix()


def render_preview(
    entries: Iterable[ReportEntry], base_dir: PathLike, title: str = "Palette preview"
) -> str:
    """HTML text; image paths are made relative to base_dir."""
    base = Path(base_dir)
    figures: List[str] = []
    for name, pal_path, image_path in entries:
        figures.append(
            _FIGURE.substitute(
                src=html.escape(_relative(image_path, base), quote=True),
                name=html.escape(str(name), quote=True),
                pal_path=html.escape(str(pal_path)),
            )
        )
    return _PAGE.substitute(title=html.escape(title), figures="\n".join(figures))


def write_preview(
    path: PathLike, entries: Iterable[ReportEntry], title: str = "Palette preview"
) -> Path:
    dst = Path(path)
    text = render_preview(entries, dst.parent, title=title)
    with atomic_output(dst) as fh:
        fh.write(text.encode("utf-8"))
    return dst


__all__ = ["ReportEntry", "render_preview", "write_preview"]
