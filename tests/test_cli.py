import numpy as np
from PIL import Image

import pocket_pal
from pocket_palette.palette_data import TEMPLATE_PALETTE


def test_template_command_writes_template(tmp_path) -> None:
    out = tmp_path / "template.pal"

    assert pocket_pal.main(["template", str(out)]) == 0
    assert out.read_bytes() == TEMPLATE_PALETTE.to_bytes()


def test_display_command(tmp_path, capsys) -> None:
    out = tmp_path / "template.pal"
    out.write_bytes(TEMPLATE_PALETTE.to_bytes())

    assert pocket_pal.main(["display", str(out), "--mode", "color_value_dec"]) == 0
    text = capsys.readouterr().out
    assert "-- LCD Off --" in text
    assert "[255, 0, 255]" in text


def test_display_rejects_bad_file(tmp_path, capsys) -> None:
    bad = tmp_path / "bad.pal"
    bad.write_bytes(TEMPLATE_PALETTE.to_bytes()[:51] + bytes(5))

    assert pocket_pal.main(["display", str(bad)]) == 1
    assert "incorrect palette footer" in capsys.readouterr().err
    assert pocket_pal.main(["display", str(bad), "--lenient-footer"]) == 0


def test_colorize_missing_inputs(tmp_path) -> None:
    code = pocket_pal.main(
        ["colorize", "-p", str(tmp_path / "none.pal"), "-i", str(tmp_path / "none.png")]
    )

    assert code == 2


def test_colorize_end_to_end(tmp_path) -> None:
    pal = tmp_path / "t.pal"
    pal.write_bytes(TEMPLATE_PALETTE.to_bytes())
    shot = tmp_path / "shot.png"
    Image.fromarray(np.zeros((2, 2, 3), np.uint8)).save(shot)
    html = tmp_path / "index.html"

    code = pocket_pal.main(
        [
            "colorize",
            "-p",
            str(pal),
            "-i",
            str(tmp_path / "*.png"),
            "--outdir",
            str(tmp_path / "out"),
            "--jobs",
            "1",
            "--html",
            str(html),
        ]
    )

    assert code == 0
    outputs = list((tmp_path / "out").glob("*.png"))
    assert len(outputs) == 1
    assert outputs[0].name in html.read_text(encoding="utf-8")
