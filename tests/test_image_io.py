import os
import stat

import numpy as np
import pytest
from PIL import Image

from pocket_palette import image_io
from pocket_palette.image_io import (
    atomic_output,
    load_image_rgb,
    save_indexed_png,
    save_png_rgb,
)
from pocket_palette.palette_data import TEMPLATE_PALETTE, save_palette
from pocket_palette.recolor import OutputPalette


def test_load_drops_alpha(tmp_path) -> None:
    rgba = np.zeros((2, 3, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 0
    path = tmp_path / "in.png"
    Image.fromarray(rgba).save(path)

    rgb = load_image_rgb(path)

    assert rgb.shape == (2, 3, 3)
    assert rgb.dtype == np.uint8
    assert np.all(rgb[..., 0] == 200)


def test_indexed_png_round_trip(tmp_path) -> None:
    data = bytes([0, 1, 2, 16, 255, 8])
    palette = OutputPalette.from_palette(TEMPLATE_PALETTE).to_bytes()

    path = save_indexed_png(tmp_path / "out.png", 3, 2, palette, data)

    with Image.open(path) as im:
        assert im.mode == "P"
        assert im.size == (3, 2)
        assert bytes(im.getpalette()[:51]) == TEMPLATE_PALETTE.to_bytes()[:51]
        assert np.array(im).reshape(-1).tolist() == list(data)
        assert im.info.get("gamma") == pytest.approx(1 / 2.2, abs=1e-4)
        rgb = np.array(im.convert("RGB"))
    assert rgb[1, 0].tolist() == [255, 0, 255]
    assert rgb[1, 1].tolist() == [255, 255, 255]


def test_indexed_png_rejects_wrong_length(tmp_path) -> None:
    with pytest.raises(ValueError):
        save_indexed_png(tmp_path / "out.png", 3, 2, b"", bytes(5))
    assert list(tmp_path.iterdir()) == []


def test_save_png_rgb(tmp_path) -> None:
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 1] = (1, 2, 3)

    path = save_png_rgb(tmp_path / "rgb.png", rgb)

    with Image.open(path) as im:
        assert im.mode == "RGB"
        assert np.array(im)[0, 1].tolist() == [1, 2, 3]


def test_atomic_output_leaves_nothing_on_failure(tmp_path) -> None:
    target = tmp_path / "partial.bin"

    with pytest.raises(RuntimeError):
        with atomic_output(target) as fh:
            fh.write(b"half")
            raise RuntimeError("disk full")

    assert list(tmp_path.iterdir()) == []


def test_atomic_output_replaces_existing(tmp_path) -> None:
    target = tmp_path / "file.bin"
    target.write_bytes(b"old")

    with atomic_output(target) as fh:
        fh.write(b"new")

    assert target.read_bytes() == b"new"
    assert [p.name for p in tmp_path.iterdir()] == ["file.bin"]


def test_missing_output_dir_raises_oserror(tmp_path) -> None:
    with pytest.raises(OSError):
        save_png_rgb(tmp_path / "nope" / "x.png", np.zeros((1, 1, 3), np.uint8))


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_atomic_output_uses_umask_mode(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(image_io, "_FILE_MODE", 0o666 & ~0o022)
    target = tmp_path / "t.pal"

    save_palette(TEMPLATE_PALETTE, target)

    assert stat.S_IMODE(target.stat().st_mode) == 0o644
