"""
Scene export for generated tile classes (glTF / GLB via trimesh).

One parent node per class, named with the class debug name and laid out on a
24-wide grid with 2-unit spacing. Under it sit up to three child geometries:
the surface A triangles, the surface B triangles and the corner-marker lines.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

import numpy as np
import trimesh
from trimesh.exchange.gltf import export_gltf

logger = logging.getLogger(__name__)

GRID_COLUMNS = 24
GRID_SPACING = 2.0

SURFACE_A_COLOR = [1.0, 0.6, 0.6, 1.0]
SURFACE_B_COLOR = [0.6, 0.8, 1.0, 1.0]


def node_translation(index: int) -> List[float]:
    """Scene position of class ``index`` on the layout grid."""
    return [GRID_SPACING * (index % GRID_COLUMNS), 0.0, GRID_SPACING * (index // GRID_COLUMNS)]


def _triangle_mesh(vertices: np.ndarray, color: List[float]) -> trimesh.Trimesh:
    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    faces = np.arange(len(verts), dtype=np.int64).reshape(-1, 3)
    # process=False keeps the per-segment triangles exactly as authored
    mesh = trimesh.Trimesh(vertices=verts, faces=faces, process=False)
    material = trimesh.visual.material.PBRMaterial(
        baseColorFactor=color,
        doubleSided=True,
    )
    mesh.visual = trimesh.visual.TextureVisuals(material=material)
    return mesh


def build_tile_scene(classes: Sequence) -> trimesh.Scene:
    """Assemble a trimesh Scene from TileClass-like objects (.index, .name, .mesh)."""
    scene = trimesh.Scene()

    for tile in classes:
        mesh = tile.mesh
        if mesh is None:
            continue

        transform = np.eye(4)
        transform[:3, 3] = node_translation(tile.index)
        scene.graph.update(frame_from=scene.graph.base_frame, frame_to=tile.name, matrix=transform)

        if len(mesh.mesh1):
            scene.add_geometry(
                _triangle_mesh(mesh.mesh1, SURFACE_A_COLOR),
                node_name=f"{tile.name} mesh1",
                geom_name=f"{tile.name} mesh1",
                parent_node_name=tile.name,
            )
        if len(mesh.mesh2):
            scene.add_geometry(
                _triangle_mesh(mesh.mesh2, SURFACE_B_COLOR),
                node_name=f"{tile.name} mesh2",
                geom_name=f"{tile.name} mesh2",
                parent_node_name=tile.name,
            )
        if len(mesh.debug_mesh):
            lines = np.asarray(mesh.debug_mesh, dtype=np.float64).reshape(-1, 2, 3)
            scene.add_geometry(
                trimesh.load_path(lines),
                node_name=f"{tile.name} debug",
                geom_name=f"{tile.name} debug",
                parent_node_name=tile.name,
            )

    return scene


def export_tile_scene(classes: Sequence, output_path: Path) -> Path:
    """Write the class scene to ``output_path``.

    A ``.gltf`` suffix writes a single JSON file with embedded buffers;
    anything else is written as binary GLB.

    Returns:
        The path written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    scene = build_tile_scene(classes)

    if output_path.suffix.lower() == ".gltf":
        files = export_gltf(scene, embed_buffers=True)
        output_path.write_bytes(files["model.gltf"])
    else:
        scene.export(str(output_path), file_type="glb")

    logger.info("Wrote %d tile classes to %s", len(classes), output_path)
    return output_path
