import json

import pytest

from cornertile.conversion.gltf_writer import (
    GRID_COLUMNS,
    GRID_SPACING,
    build_tile_scene,
    export_tile_scene,
    node_translation,
)
from cornertile.conversion.obj_writer import ObjWriter


@pytest.fixture(scope="module")
def some_classes(tile_set_generation):
    return tile_set_generation.classes[:30]


def test_node_layout():
    assert node_translation(0) == [0.0, 0.0, 0.0]
    assert node_translation(GRID_COLUMNS + 1) == [GRID_SPACING, 0.0, GRID_SPACING]


def test_scene_nodes(some_classes):
    scene = build_tile_scene(some_classes)
    for tile in some_classes:
        assert tile.name in scene.graph.nodes
        if len(tile.mesh.mesh1):
            assert f"{tile.name} mesh1" in scene.graph.nodes
        if len(tile.mesh.mesh2):
            assert f"{tile.name} mesh2" in scene.graph.nodes


def test_gltf_export(some_classes, tmp_path):
    path = export_tile_scene(some_classes, tmp_path / "tiles.gltf")
    document = json.loads(path.read_text())
    names = {node.get("name") for node in document["nodes"]}
    assert some_classes[1].name in names
    assert all(b["uri"].startswith("data:") for b in document["buffers"])


def test_glb_export(some_classes, tmp_path):
    path = export_tile_scene(some_classes, tmp_path / "tiles.glb")
    assert path.read_bytes()[:4] == b"glTF"


def test_obj_export(some_classes, tmp_path):
    writer = ObjWriter()
    writer.add_classes(some_classes)
    writer.write(str(tmp_path / "tiles.obj"))

    text = (tmp_path / "tiles.obj").read_text()
    non_empty = [t for t in some_classes if not t.mesh.is_empty]
    assert writer.object_count == len(non_empty)
    assert writer.face_count == sum(t.mesh.triangle_count for t in non_empty)
    assert writer.vertex_count == 3 * writer.face_count
    assert text.count("\no ") == len(non_empty)
    assert "usemtl surface_a" in text
    assert "newmtl surface_a" in (tmp_path / "tiles.mtl").read_text()
