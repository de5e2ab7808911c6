"""
Tile-set file: the authored list of (corners, model) records.

On disk this is JSON::

    {"tiles": [{"corners": [1, 1, 4, 1, 1, 1, 1, 1], "model_path": "..."}, ...]}

Corners are packed label bytes in NNN..PPP order. This module is the only
place packed bytes are converted to and from CornerLabel values.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..generators.corners import CornerConfiguration
from ..generators.entry_pool import EntryPool, convert_to_entry_pool
from ..generators.symmetry import SymmetryTransform, apply_transform
from ..validation.core import ValidationResult
from ..validation.checks.tileset_checks import validate_tile_records

logger = logging.getLogger(__name__)

DEFAULT_MODEL_EXTENSIONS = (".glb", ".gltf", ".obj")


class TileSetFormatError(ValueError):
    """A tile-set document could not be read or failed strict validation.

    Attributes:
        result: Validation result behind the failure, if any
    """

    def __init__(self, message: str, result: Optional[ValidationResult] = None):
        self.result = result
        super().__init__(message)


@dataclass
class TilePrefab:
    """One tile-set record."""
    corners: CornerConfiguration
    model_path: str

    def to_dict(self) -> Dict[str, Any]:
        return {"corners": list(self.corners.to_packed()), "model_path": self.model_path}


@dataclass
class TileSet:
    """Ordered tile-set records plus the file they came from."""
    tiles: List[TilePrefab] = field(default_factory=list)
    path: Optional[Path] = None

    def __iter__(self) -> Iterator[TilePrefab]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def add(self, corners: CornerConfiguration, model_path: str) -> TilePrefab:
        prefab = TilePrefab(corners, model_path)
        self.tiles.append(prefab)
        return prefab

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def transform_record(self, index: int, transform: SymmetryTransform) -> TilePrefab:
        """Rotate/flip one record's corners in place.

        Raises:
            IndexError: If index is out of range.
        """
        prefab = self.tiles[index]
        prefab.corners = apply_transform(prefab.corners, transform)
        return prefab

    @classmethod
    def from_model_folder(cls, folder: Path,
                          extensions: Iterable[str] = DEFAULT_MODEL_EXTENSIONS) -> 'TileSet':
        """One all-empty record per model file in ``folder``, sorted by name.

        The corners are filled in afterwards by whoever authors the set.
        """
        folder = Path(folder)
        suffixes = {e.lower() for e in extensions}
        tile_set = cls()
        for model in sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in suffixes):
            tile_set.add(CornerConfiguration.empty(), model.name)
        logger.info("Created %d records from %s", len(tile_set), folder)
        return tile_set

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {"tiles": [t.to_dict() for t in self.tiles]}

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        self.path = path
        logger.info("Saved %d tile records to %s", len(self.tiles), path)
        return path

    @classmethod
    def from_dict(cls, data: Any, strict: bool = False,
                  report: Optional[ValidationResult] = None,
                  file_path: Optional[str] = None) -> 'TileSet':
        """Build a tile set from a decoded document.

        Malformed records are skipped (or, with ``strict``, abort the load).

        Args:
            data: Decoded JSON document
            strict: Raise instead of skipping malformed records
            report: Optional result that receives every issue found
            file_path: Source file, used in issue locations

        Raises:
            TileSetFormatError: On a document without a "tiles" list, or on
                any malformed record when ``strict``.
        """
        if not isinstance(data, dict) or not isinstance(data.get("tiles"), list):
            raise TileSetFormatError(f"{file_path or 'document'}: expected an object with a 'tiles' list")

        records = data["tiles"]
        result = validate_tile_records(records, file_path)
        if report is not None:
            report.merge(result)
        if strict and result.failed:
            raise TileSetFormatError(
                f"{file_path or 'document'}: {len(result.errors)} invalid record field(s)", result
            )

        bad = {issue.location for issue in result.errors}
        tile_set = cls()
        for index, record in enumerate(records):
            if f"tiles[{index}]" in bad:
                logger.error("Skipping malformed tile record %d in %s", index, file_path or "document")
                continue
            tile_set.add(CornerConfiguration.from_packed(record["corners"]), record["model_path"])
        return tile_set

    @classmethod
    def load(cls, path: Path, strict: bool = False,
             report: Optional[ValidationResult] = None) -> 'TileSet':
        """Read a tile-set file.

        Raises:
            TileSetFormatError: If the file can't be read or parsed, or
                (with ``strict``) holds a malformed record.
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TileSetFormatError(f"Cannot read tile set {path}: {e}") from e

        tile_set = cls.from_dict(data, strict=strict, report=report, file_path=str(path))
        tile_set.path = path
        logger.info("Loaded %d tile records from %s", len(tile_set), path)
        return tile_set

    def to_entry_pool(self) -> EntryPool:
        return convert_to_entry_pool(self.tiles)
