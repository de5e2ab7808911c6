import json

import pytest

import main
from cornertile.conversion.tileset_io import TileSet
from cornertile.generators.corners import CornerConfiguration


@pytest.fixture
def tileset_path(tmp_path):
    tile_set = TileSet()
    tile_set.add(CornerConfiguration.from_letters("AEEEEEEE"), "corner_a.glb")
    return tile_set.save(tmp_path / "tiles.json")


def write_occupancy(path, cells):
    path.write_text(json.dumps({"cells": cells}))
    return path


def test_match(tileset_path, tmp_path, capsys):
    occupancy = write_occupancy(tmp_path / "grid.json", [{"cell": [0, 0, 0], "label": "A"}])

    assert main.main(["match", str(tileset_path), str(occupancy), "--seed", "3"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 8
    assert all("corner_a.glb" in line for line in lines)


def test_match_single_cell(tileset_path, tmp_path, capsys):
    occupancy = write_occupancy(tmp_path / "grid.json", [
        {"cell": [0, 0, 0], "label": "A"},
        {"cell": [9, 9, 9], "label": "A"},
    ])

    assert main.main(["match", str(tileset_path), str(occupancy), "--cell", "0", "0", "0"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 8


def test_match_missing_content(tileset_path, tmp_path, capsys):
    occupancy = write_occupancy(tmp_path / "grid.json", [{"cell": [0, 0, 0], "label": "B"}])

    # Missing content is a warning: the run still passes
    assert main.main(["match", str(tileset_path), str(occupancy)]) == 0
    assert "TILE-101" in capsys.readouterr().err


def test_match_bad_tileset(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("[]")
    occupancy = write_occupancy(tmp_path / "grid.json", [])
    assert main.main(["match", str(bad), str(occupancy)]) == 2


def test_profiles(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert main.main(["profiles"]) == 0
    assert "Example Bevel [builtin]" in capsys.readouterr().out


def test_generate_rejects_unknown_profile(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert main.main(["generate", "--profile", "Nope", "--output", str(tmp_path)]) == 2
