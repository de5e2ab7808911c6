"""
Wavefront OBJ export for generated tile classes.

Each class becomes an ``o`` object laid out like the glTF scene, with its
surface A and surface B triangles under separate materials.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .gltf_writer import SURFACE_A_COLOR, SURFACE_B_COLOR, node_translation

Vec3 = Tuple[float, float, float]

SURFACE_A_MATERIAL = "surface_a"
SURFACE_B_MATERIAL = "surface_b"

_MATERIAL_COLORS = {
    SURFACE_A_MATERIAL: SURFACE_A_COLOR,
    SURFACE_B_MATERIAL: SURFACE_B_COLOR,
}


class ObjWriter:
    """Write tile meshes as Wavefront OBJ + optional MTL."""

    def __init__(self):
        self._vertices: List[Vec3] = []
        # (object name, [(vertex indices 1-based, material)])
        self._objects: List[Tuple[str, List[Tuple[List[int], str]]]] = []
        self._materials: Dict[str, bool] = {}

    def add_triangles(self, faces: List[Tuple[List[int], str]], vertices: np.ndarray,
                      offset: Sequence[float], material: str) -> None:
        verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3) + np.asarray(offset)
        for i in range(0, len(verts) - 2, 3):
            indices = []
            for v in verts[i:i + 3]:
                self._vertices.append((float(v[0]), float(v[1]), float(v[2])))
                indices.append(len(self._vertices))  # 1-based
            faces.append((indices, material))
        self._materials[material] = True

    def add_classes(self, classes: Sequence) -> None:
        """Add TileClass-like objects (.index, .name, .mesh)."""
        for tile in classes:
            if tile.mesh is None or tile.mesh.is_empty:
                continue
            offset = node_translation(tile.index)
            faces: List[Tuple[List[int], str]] = []
            self.add_triangles(faces, tile.mesh.mesh1, offset, SURFACE_A_MATERIAL)
            self.add_triangles(faces, tile.mesh.mesh2, offset, SURFACE_B_MATERIAL)
            self._objects.append((tile.name, faces))

    def write(self, obj_path: str, write_mtl: bool = True) -> None:
        """Write .obj (and optionally .mtl) files."""
        obj_p = Path(obj_path)
        obj_p.parent.mkdir(parents=True, exist_ok=True)
        mtl_name = obj_p.stem + ".mtl"

        lines = []
        lines.append("# cornertile OBJ export")
        lines.append(f"# {len(self._vertices)} vertices, {self.face_count} faces")
        if write_mtl:
            lines.append(f"mtllib {mtl_name}")
        lines.append("")

        for v in self._vertices:
            lines.append(f"v {v[0]:.4f} {v[1]:.4f} {v[2]:.4f}")

        lines.append("")

        for name, faces in self._objects:
            lines.append(f"o {name}")
            current_mat = None
            for indices, mat in faces:
                if mat != current_mat:
                    lines.append(f"usemtl {mat}")
                    current_mat = mat
                lines.append("f " + " ".join(str(i) for i in indices))

        obj_p.write_text("\n".join(lines) + "\n")

        if write_mtl:
            self._write_mtl(str(obj_p.parent / mtl_name))

    def _write_mtl(self, mtl_path: str) -> None:
        lines = ["# cornertile MTL", ""]
        for mat in sorted(self._materials.keys()):
            r, g, b, _ = _MATERIAL_COLORS.get(mat, (0.8, 0.8, 0.8, 1.0))
            lines.append(f"newmtl {mat}")
            lines.append("Ka 0.2 0.2 0.2")
            lines.append(f"Kd {r} {g} {b}")
            lines.append("Ks 0.0 0.0 0.0")
            lines.append("d 1.0")
            lines.append("")
        Path(mtl_path).write_text("\n".join(lines) + "\n")

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def face_count(self) -> int:
        return sum(len(faces) for _, faces in self._objects)

    @property
    def object_count(self) -> int:
        return len(self._objects)
