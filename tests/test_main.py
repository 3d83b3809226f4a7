"""Tests for the hextactics command line."""

from pathlib import Path

import pytest

from hextactics.main import main

ROOT = Path(__file__).resolve().parent.parent
CONFIG = str(ROOT / "config" / "engine.yaml")
SKIRMISH = str(ROOT / "config" / "boards" / "skirmish.yaml")


def _run(*args):
    return main(["--config", CONFIG, *args])


class TestCommands:
    def test_los_clear(self, capsys):
        assert _run("los", "0,0", "3,0") == 0
        assert "clear=True" in capsys.readouterr().out

    def test_los_blocked_on_board(self, capsys):
        assert _run("--board", SKIRMISH, "los", "0,0", "3,0") == 1
        assert "blocked_by=tile" in capsys.readouterr().out

    def test_path(self, capsys):
        assert _run("path", "0,0", "3,0") == 0
        out = capsys.readouterr().out
        assert "cost=3 steps=3" in out
        assert "0,0 1,0 2,0 3,0" in out

    def test_path_failure(self, capsys):
        assert _run("--board", SKIRMISH, "path", "0,0", "9,9") == 1
        assert "no path" in capsys.readouterr().out

    def test_move(self, capsys):
        assert _run("move", "0,0", "1") == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 7
        assert lines[0] == "0,0\t0"

    def test_aoe_cone(self, capsys):
        assert _run("aoe", "0,0", "cone", "dir=0", "radius=1") == 0
        assert "3 cells" in capsys.readouterr().out

    def test_aoe_bolt_target(self, capsys):
        assert _run("aoe", "0,0", "bolt", "to=3,0") == 0
        assert "4 cells" in capsys.readouterr().out


class TestBadInput:
    def test_unknown_shape(self):
        assert _run("aoe", "0,0", "spiral", "radius=2") == 1

    def test_malformed_param(self):
        assert _run("aoe", "0,0", "circle", "radius") == 1

    def test_bad_hex_argument(self):
        with pytest.raises(SystemExit) as exc:
            _run("los", "zero", "3,0")
        assert exc.value.code == 2

    def test_missing_board_file(self, tmp_path):
        assert _run("--board", str(tmp_path / "missing.yaml"), "los", "0,0", "1,0") == 1

    def test_unparsable_param_value(self):
        assert _run("aoe", "0,0", "circle", "radius=[") == 1

    def test_unparsable_board_file(self, tmp_path):
        board = tmp_path / "broken.yaml"
        board.write_text("tiles: [unclosed\n")
        assert _run("--board", str(board), "los", "0,0", "1,0") == 1

    def test_non_numeric_wall(self, tmp_path):
        board = tmp_path / "walls.yaml"
        board.write_text('tiles:\n  "0,0": {}\n  "1,0": {}\nwalls:\n  - [a, 0, 1, 0]\n')
        assert _run("--board", str(board), "los", "0,0", "1,0") == 1

    def test_bad_tile_cost(self, tmp_path):
        board = tmp_path / "cost.yaml"
        board.write_text('tiles:\n  "0,0": {}\n  "1,0": {cost: cheap}\n')
        assert _run("--board", str(board), "move", "0,0", "3") == 1

    def test_unparsable_config_file(self, tmp_path):
        config = tmp_path / "engine.yaml"
        config.write_text("soft_cover_k: [1\n")
        assert main(["--config", str(config), "los", "0,0", "1,0"]) == 1
