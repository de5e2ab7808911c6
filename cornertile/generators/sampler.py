"""
Occupancy grid and corner sampling.

The occupancy grid is a sparse map from integer cell to surface label; only
solid cells are stored and absence means EMPTY. A lattice position ``p``
reads the eight cells ``p + offset`` for offset in {0, 1}^3.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple

import numpy as np

from .corners import CORNER_OFFSETS, CornerConfiguration, CornerLabel, Vec3i

logger = logging.getLogger(__name__)

# Dense array encoding used by from_array()/to_array()
ARRAY_EMPTY = 0
ARRAY_SURFACE_A = 1
ARRAY_SURFACE_B = 2

_ARRAY_LABELS = {
    ARRAY_SURFACE_A: CornerLabel.SURFACE_A,
    ARRAY_SURFACE_B: CornerLabel.SURFACE_B,
}
_LABEL_ARRAY = {label: value for value, label in _ARRAY_LABELS.items()}


def _cell(cell) -> Vec3i:
    return (int(cell[0]), int(cell[1]), int(cell[2]))


class OccupancyGrid:
    """Sparse cell -> label map. Read-only from the matcher's point of view."""

    def __init__(self, cells: Optional[Mapping[Vec3i, CornerLabel]] = None):
        self._cells: Dict[Vec3i, CornerLabel] = {}
        for cell, label in (cells or {}).items():
            self.set(cell, label)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, array: np.ndarray, origin: Vec3i = (0, 0, 0)) -> 'OccupancyGrid':
        """Build a grid from a dense (X, Y, Z) array of 0 / 1 / 2 values.

        Args:
            array: 3-D integer array; 0 empty, 1 surface A, 2 surface B
            origin: Cell coordinate of array[0, 0, 0]

        Raises:
            ValueError: On a non 3-D array or unknown cell values.
        """
        data = np.asarray(array)
        if data.ndim != 3:
            raise ValueError(f"Occupancy array must be 3-D, got shape {data.shape}")
        unknown = set(np.unique(data).tolist()) - {ARRAY_EMPTY, ARRAY_SURFACE_A, ARRAY_SURFACE_B}
        if unknown:
            raise ValueError(f"Unknown occupancy values: {sorted(unknown)}")

        grid = cls()
        ox, oy, oz = _cell(origin)
        for x, y, z in np.argwhere(data != ARRAY_EMPTY):
            grid._cells[(ox + int(x), oy + int(y), oz + int(z))] = _ARRAY_LABELS[int(data[x, y, z])]
        return grid

    @classmethod
    def from_solid_bytes(cls, cells: Mapping[Vec3i, int]) -> 'OccupancyGrid':
        """Build a grid from packed label bytes (as stored by a map editor)."""
        grid = cls()
        for cell, value in cells.items():
            grid.set(cell, CornerLabel.from_packed(value))
        return grid

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def set(self, cell: Vec3i, label: CornerLabel) -> None:
        """Set a cell label. EMPTY removes the cell.

        Raises:
            ValueError: If label is not EMPTY, SURFACE_A or SURFACE_B.
        """
        key = _cell(cell)
        if label == CornerLabel.EMPTY:
            self._cells.pop(key, None)
        elif label in (CornerLabel.SURFACE_A, CornerLabel.SURFACE_B):
            self._cells[key] = label
        else:
            raise ValueError(f"Cell {key} needs a single surface label, got {label!r}")

    def clear(self, cell: Vec3i) -> None:
        self._cells.pop(_cell(cell), None)

    def get(self, cell: Vec3i) -> CornerLabel:
        return self._cells.get(_cell(cell), CornerLabel.EMPTY)

    def __contains__(self, cell) -> bool:
        return _cell(cell) in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Vec3i]:
        return iter(sorted(self._cells))

    def items(self) -> List[Tuple[Vec3i, CornerLabel]]:
        return sorted(self._cells.items())

    def bounds(self) -> Optional[Tuple[Vec3i, Vec3i]]:
        """Inclusive (min, max) cell bounds, or None for an empty grid."""
        if not self._cells:
            return None
        coords = np.array(list(self._cells), dtype=np.int64)
        lo = coords.min(axis=0)
        hi = coords.max(axis=0)
        return _cell(lo), _cell(hi)

    def to_array(self) -> Tuple[np.ndarray, Vec3i]:
        """Dense (X, Y, Z) int8 array over the occupied bounds plus its origin."""
        bounds = self.bounds()
        if bounds is None:
            return np.zeros((0, 0, 0), dtype=np.int8), (0, 0, 0)
        lo, hi = bounds
        shape = tuple(h - l + 1 for l, h in zip(lo, hi))
        data = np.zeros(shape, dtype=np.int8)
        for (x, y, z), label in self._cells.items():
            data[x - lo[0], y - lo[1], z - lo[2]] = _LABEL_ARRAY[label]
        return data, lo


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------

def sample_corners(grid: OccupancyGrid, position: Vec3i) -> CornerConfiguration:
    """Read the eight cells around a lattice position; missing cells are EMPTY."""
    px, py, pz = _cell(position)
    return CornerConfiguration(tuple(
        grid.get((px + dx, py + dy, pz + dz)) for dx, dy, dz in CORNER_OFFSETS
    ))


def positions_touching(cell: Vec3i) -> List[Vec3i]:
    """The eight lattice positions whose sample window contains ``cell``."""
    cx, cy, cz = _cell(cell)
    return [(cx - dx, cy - dy, cz - dz) for dx, dy, dz in CORNER_OFFSETS]


def affected_positions(grid: OccupancyGrid, cell: Optional[Vec3i] = None) -> List[Vec3i]:
    """Lattice positions to (re)compute, in sorted order.

    With ``cell`` (a localized edit, the cell may now be empty) this is the
    eight positions touching that cell; otherwise the union over every
    occupied cell.
    """
    if cell is not None:
        return sorted(positions_touching(cell))

    positions: Set[Vec3i] = set()
    for occupied in grid:
        positions.update(positions_touching(occupied))
    logger.debug("%d occupied cells touch %d lattice positions", len(grid), len(positions))
    return sorted(positions)
