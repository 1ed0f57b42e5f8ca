"""End-to-end tests for the tiledungeon command."""

import cv2
import numpy as np
import pytest

from tiledungeon.cli import main

TILE = 16

CONFIG = """
(
    width: 480,
    height: 320,
    tile_size: 16,
    wall_tile_h: (0, 0),
    wall_tile_v_right: (16, 0),
    wall_tile_v_left: (32, 0),
    floor_tile: [(48, 0), (64, 0)],
    max_room_size: 6,
    min_room_size: 4,
    max_rooms: 4,
    min_rooms: 2,
)
"""


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """A working directory holding config.ron and a 5 tile spritesheet."""
    sheet = np.zeros((TILE, TILE * 5, 3), np.uint8)
    for index in range(5):
        sheet[:, index * TILE : (index + 1) * TILE] = (index * 50, 255 - index * 50, 100)
    cv2.imwrite(str(tmp_path / "sheet.png"), sheet)
    (tmp_path / "config.ron").write_text(CONFIG, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCli:
    def test_writes_output_png(self, workdir):
        assert main(["sheet.png"]) == 0

        image = cv2.imread(str(workdir / "output.png"))
        assert image is not None
        assert image.shape == (320, 480, 3)

    def test_custom_output_path(self, workdir):
        assert main(["sheet.png", "-o", "dungeon.png", "--quiet"]) == 0
        assert (workdir / "dungeon.png").exists()
        assert not (workdir / "output.png").exists()

    def test_seed_makes_output_reproducible(self, workdir):
        assert main(["sheet.png", "--seed", "9", "-o", "a.png", "-q"]) == 0
        assert main(["sheet.png", "--seed", "9", "-o", "b.png", "-q"]) == 0

        first = cv2.imread(str(workdir / "a.png"))
        second = cv2.imread(str(workdir / "b.png"))
        assert np.array_equal(first, second)

    def test_config_seed_is_used(self, workdir):
        (workdir / "seeded.ron").write_text(
            CONFIG.replace("min_rooms: 2,", "min_rooms: 2,\n    seed: Some(3),"),
            encoding="utf-8",
        )
        assert main(["sheet.png", "-c", "seeded.ron", "-o", "a.png", "-q"]) == 0
        assert main(["sheet.png", "-c", "seeded.ron", "-o", "b.png", "-q"]) == 0

        assert np.array_equal(
            cv2.imread(str(workdir / "a.png")), cv2.imread(str(workdir / "b.png"))
        )

    def test_ascii_output(self, workdir, capsys):
        assert main(["sheet.png", "--ascii", "--quiet"]) == 0

        out = capsys.readouterr().out
        lines = out.rstrip("\n").split("\n")
        assert len(lines) == 320 // TILE
        assert all(len(line) == 480 // TILE for line in lines)
        assert "." in out

    def test_progress_goes_to_stderr(self, workdir, capsys):
        assert main(["sheet.png"]) == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved to:" in captured.err

    def test_quiet_suppresses_progress(self, workdir, capsys):
        assert main(["sheet.png", "--quiet"]) == 0
        assert capsys.readouterr().err == ""

    def test_show_grid(self, workdir):
        assert main(["sheet.png", "--show-grid", "-q"]) == 0

        image = cv2.imread(str(workdir / "output.png"))
        assert tuple(int(v) for v in image[5, 0]) == (64, 64, 64)

    def test_missing_config(self, workdir, capsys):
        assert main(["sheet.png", "--config", "nope.ron"]) == 1
        assert "Error: Config file not found" in capsys.readouterr().err

    def test_missing_spritesheet(self, workdir, capsys):
        assert main(["nope.png"]) == 1
        assert "Error: Spritesheet not found" in capsys.readouterr().err

    def test_invalid_config(self, workdir, capsys):
        (workdir / "bad.ron").write_text(CONFIG.replace("tile_size: 16", "tile_size: 0"))
        assert main(["sheet.png", "-c", "bad.ron"]) == 1
        assert "tile_size must be positive" in capsys.readouterr().err

    def test_ron_syntax_error(self, workdir, capsys):
        (workdir / "bad.ron").write_text("(width: 320")
        assert main(["sheet.png", "-c", "bad.ron"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_config_that_is_not_utf8(self, workdir, capsys):
        (workdir / "config.ron").write_bytes(b"(width: \xff\xfe)")
        assert main(["sheet.png"]) == 1
        assert "Error: Failed to read" in capsys.readouterr().err

    def test_bad_unicode_escape_in_config(self, workdir, capsys):
        (workdir / "bad.ron").write_text('(width: "\\u{110000}")', encoding="utf-8")
        assert main(["sheet.png", "-c", "bad.ron"]) == 1
        assert "not a valid character" in capsys.readouterr().err

    def test_sprite_outside_sheet(self, workdir, capsys):
        (workdir / "bad.ron").write_text(CONFIG.replace("(64, 0)", "(640, 0)"))
        assert main(["sheet.png", "-c", "bad.ron", "-q"]) == 1
        assert "outside" in capsys.readouterr().err
        assert not (workdir / "output.png").exists()

    def test_impossible_room_count(self, workdir, capsys):
        (workdir / "crowded.ron").write_text(
            CONFIG.replace("max_rooms: 4", "max_rooms: 40").replace(
                "min_rooms: 2", "min_rooms: 40"
            )
        )
        assert main(["sheet.png", "-c", "crowded.ron", "-q"]) == 1
        assert "Error: Only placed" in capsys.readouterr().err

    def test_unwritable_output(self, workdir, capsys):
        assert main(["sheet.png", "-o", "missing/output.png", "-q"]) == 1
        assert "Error: Failed to write image" in capsys.readouterr().err

    def test_spritesheet_argument_is_required(self, workdir):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2
