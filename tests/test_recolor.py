import numpy as np
import pytest

from pocket_palette.constants import UNMATCHED_INDEX
from pocket_palette.palette_data import TEMPLATE_PALETTE, Palette
from pocket_palette.recolor import (
    Coverage,
    MatchReport,
    OutputPalette,
    colour_coverage,
    recolor,
    recolor_rgb,
    recolor_with_report,
)


def _image(colours) -> np.ndarray:
    """One row image, one pixel per colour."""
    return np.array([colours], dtype=np.uint8)


VISIBLE = TEMPLATE_PALETTE.colours()[:16]
TARGET = Palette.from_colours([(i * 10, 255 - i * 10, i) for i in range(17)])


def test_full_coverage_has_no_warning(capsys: pytest.CaptureFixture) -> None:
    indices = recolor(_image(VISIBLE), TEMPLATE_PALETTE)

    out = capsys.readouterr().out
    assert indices.tolist() == list(range(16))
    assert "[warn]" not in out
    assert "All colours from palette" in out


def test_half_coverage_warns_with_percentage(capsys: pytest.CaptureFixture) -> None:
    coverage = colour_coverage(_image(VISIBLE[:8]))
    recolor(_image(VISIBLE[:8]), TEMPLATE_PALETTE)

    out = capsys.readouterr().out
    assert coverage.percentage == pytest.approx(50.0)
    assert not coverage.complete
    assert "[warn] Only ~50.00% of colours" in out


def test_coverage_above_full_counts_as_complete() -> None:
    assert Coverage(distinct=17).complete
    assert Coverage(distinct=16).complete
    assert not Coverage(distinct=15).complete


def test_index_buffer_is_row_major() -> None:
    pixels = np.array(
        [
            [(0, 0, 0), (32, 32, 32)],
            [(255, 0, 255), (255, 128, 128)],
            [(3, 250, 4), (1, 2, 3)],
        ],
        dtype=np.uint8,
    )

    indices = recolor(pixels, TEMPLATE_PALETTE)

    assert indices.dtype == np.uint8
    assert indices.shape == (6,)
    assert indices.tolist() == [0, 1, 16, 15, 4, 0]


def test_unmatched_pixels_get_sentinel(capsys: pytest.CaptureFixture) -> None:
    pixels = _image([(0, 0, 0), (200, 100, 50), (200, 100, 50), (0, 0, 255)])

    indices, report = recolor_with_report(pixels, TEMPLATE_PALETTE, tolerance=8)

    assert indices.tolist() == [0, UNMATCHED_INDEX, UNMATCHED_INDEX, 8]
    assert report == MatchReport(matched=2, unmatched=2)
    assert report.percentage == pytest.approx(50.0)
    assert "[warn] Not all pixels were colourised (~50.00%" in capsys.readouterr().out


def test_alpha_channel_is_ignored() -> None:
    rgba = np.array([[(0, 0, 0, 0), (32, 32, 32, 255)]], dtype=np.uint8)

    assert recolor(rgba, TEMPLATE_PALETTE).tolist() == [0, 1]


def test_empty_image_reports_full_match() -> None:
    pixels = np.zeros((0, 0, 3), dtype=np.uint8)

    indices, report = recolor_with_report(pixels, TEMPLATE_PALETTE)

    assert indices.size == 0
    assert report.complete


def test_recolor_rgb_uses_target_slot_colours() -> None:
    pixels = _image([(0, 0, 0), (64, 64, 255), (200, 100, 50)])

    out = recolor_rgb(pixels, TEMPLATE_PALETTE, TARGET)

    assert out.shape == (1, 3, 3)
    assert [tuple(c) for c in out[0].tolist()] == [
        TARGET.colours()[0],
        TARGET.colours()[10],
        (200, 100, 50),
    ]
    # source untouched
    assert pixels[0, 0].tolist() == [0, 0, 0]


def test_recolor_rgb_agrees_with_index_path() -> None:
    rng = np.random.default_rng(3)
    pixels = np.array(TEMPLATE_PALETTE.colours(), dtype=np.uint8)[
        rng.integers(0, 17, size=(12, 9))
    ]

    indices = recolor(pixels, TEMPLATE_PALETTE)
    rgb = recolor_rgb(pixels, TEMPLATE_PALETTE, TARGET)
    table = np.array(TARGET.colours(), dtype=np.uint8)

    assert np.array_equal(rgb.reshape(-1, 3), table[indices])


def test_output_palette_from_palette() -> None:
    pal = OutputPalette.from_palette(TARGET)
    data = pal.to_bytes()

    assert len(data) == 768
    assert data[:51] == TARGET.to_bytes()[:51]
    assert data[51:] == b"\xff" * (768 - 51)
    assert pal.index == 17
    assert pal.colour_at(UNMATCHED_INDEX) == (255, 255, 255)


def test_output_palette_cursor_and_bounds() -> None:
    pal = OutputPalette()
    for _ in range(256):
        assert pal.push((1, 2, 3))

    assert not pal.push((4, 5, 6))
    assert pal.index == 256
    assert not pal.set(256, (0, 0, 0))
    assert not pal.set(-1, (0, 0, 0))


def test_output_palette_lookup() -> None:
    pal = OutputPalette.from_palette(TEMPLATE_PALETTE)

    assert pal.index_of((32, 32, 255)) == 9
    assert pal.index_of((1, 1, 1)) is None
    assert pal.index_of((255, 255, 255)) == 17
    assert pal.index_of_with_tolerance((3, 3, 3), 4) == 0
    assert pal.index_of_with_tolerance((16, 16, 16), 20) == 0
    assert pal.index_of_with_tolerance((200, 100, 50), 8) is None


def test_output_palette_from_raw_bytes() -> None:
    pal = OutputPalette(bytes([9, 8, 7]))

    assert pal.colour_at(0) == (9, 8, 7)
    assert pal.colour_at(1) == (255, 255, 255)
    with pytest.raises(ValueError):
        OutputPalette(bytes(768))
