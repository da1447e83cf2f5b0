import re

import pytest

from pocket_palette.display import (
    DISPLAY_MODES,
    contrast_colour,
    render_colour,
    render_palette,
)
from pocket_palette.palette_data import TEMPLATE_PALETTE


def test_contrast_colour() -> None:
    assert contrast_colour((255, 255, 255)) == (0, 0, 0)
    assert contrast_colour((0, 0, 0)) == (255, 255, 255)
    assert contrast_colour((0, 0, 255)) == (255, 255, 255)
    assert contrast_colour((0, 255, 0)) == (0, 0, 0)


def test_render_hex() -> None:
    text = render_colour((255, 0, 255), "color_value_hex")

    assert "\x1b[48;2;255;0;255m" in text
    assert "#ff00ff" in text
    assert text.endswith("\x1b[0m")


def _visible(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def test_render_dec_pads_to_fixed_width() -> None:
    a = _visible(render_colour((1, 2, 3), "color_value_dec"))
    b = _visible(render_colour((255, 255, 255), "color_value_dec"))

    assert a.startswith("  [1, 2, 3]  ")
    assert len(a) == len(b)


def test_render_number_needs_label() -> None:
    assert "  3  " in render_colour((0, 0, 0), "color_number", "3")
    with pytest.raises(ValueError):
        render_colour((0, 0, 0), "color_number")


def test_render_just_color_has_no_text() -> None:
    assert render_colour((1, 2, 3), "just_color") == "\x1b[48;2;1;2;3m  \x1b[0m"


def test_unknown_mode() -> None:
    with pytest.raises(ValueError):
        render_colour((0, 0, 0), "bogus")  # type: ignore[arg-type]


@pytest.mark.parametrize("mode", DISPLAY_MODES)
def test_render_palette_sections(mode: str) -> None:
    text = render_palette(TEMPLATE_PALETTE, mode)  # type: ignore[arg-type]

    for title in ("Background", "Object 0", "Object 1", "Window", "LCD Off"):
        assert f"-- {title} --" in text
    assert text.count("\x1b[48;2;") == 17
