"""
Runtime matcher: occupancy grid + entry pool -> placed tiles.

For every affected lattice position the sampled configuration is compared
against each candidate prototype under the 16 symmetry transforms. One
(prototype, transform) pair and one of its model variants are then drawn.

Every draw is seeded from a hash of (base seed, position, purpose, key)
rather than from a running counter, so a position's result depends only on
the grid contents around it and the pool. Evaluating positions in any order,
or only a subset of them, gives the same answers.
"""

from __future__ import annotations

import hashlib
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .corners import CornerConfiguration, Vec3i
from .entry_pool import EntryPool, TilePrototype
from .sampler import OccupancyGrid, affected_positions, sample_corners
from .symmetry import SymmetryTransform, get_rotation
from ..validation.core import ValidationResult
from ..validation.rules import TILE_101

logger = logging.getLogger(__name__)

# Seed purposes
PURPOSE_ROTATION = "rotation"
PURPOSE_CANDIDATE = "candidate"
PURPOSE_VARIANT = "variant"


@dataclass(frozen=True)
class VisualTileEntry:
    """What the instancing layer places at one lattice position.

    Attributes:
        position: Lattice position the entry belongs to
        model_reference: Model to load (scene node name or file path)
        transform: Transform mapping the prototype onto the sampled corners
        configuration: The prototype's canonical configuration
    """
    position: Vec3i
    model_reference: str
    transform: SymmetryTransform
    configuration: CornerConfiguration

    @property
    def instance_matrix(self) -> np.ndarray:
        return self.transform.instance_matrix(self.position)


def derive_seed(base_seed: int, position: Vec3i, purpose: str, *discriminant) -> int:
    """Stable 64-bit seed for one draw at one lattice position.

    Uses blake2b over the repr of the key tuple; Python's hash() is salted
    per process and cannot be used here.
    """
    key = (int(base_seed), tuple(int(v) for v in position), purpose) + tuple(discriminant)
    digest = hashlib.blake2b(repr(key).encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "little")


def find_matches(
    pool: EntryPool,
    target: CornerConfiguration,
    position: Vec3i,
    seed: int = 0,
) -> List[Tuple[TilePrototype, SymmetryTransform]]:
    """Every prototype matching target, in pool order, with its drawn transform."""
    matches = []
    for prototype in pool.candidates_for(target):
        rotation_seed = derive_seed(
            seed, position, PURPOSE_ROTATION, prototype.configuration.to_packed()
        )
        transform = get_rotation(prototype.configuration, target, rotation_seed)
        if transform is not None:
            matches.append((prototype, transform))
    return matches


def match_configuration(
    pool: EntryPool,
    target: CornerConfiguration,
    position: Vec3i,
    seed: int = 0,
) -> Optional[VisualTileEntry]:
    """Resolve one sampled configuration to a placed tile.

    Args:
        pool: Loaded entry pool
        target: Configuration sampled at ``position``
        position: Lattice position (feeds the per-draw seeds)
        seed: Base seed of the whole run

    Returns:
        The chosen entry, or None when no prototype matches.
    """
    matches = find_matches(pool, target, position, seed)
    if not matches:
        return None

    pick = random.Random(derive_seed(seed, position, PURPOSE_CANDIDATE))
    prototype, transform = matches[pick.randrange(len(matches))]

    variant = random.Random(derive_seed(
        seed, position, PURPOSE_VARIANT, prototype.configuration.to_packed()
    ))
    model_reference = prototype.models[variant.randrange(len(prototype.models))]

    return VisualTileEntry(
        position=tuple(position),
        model_reference=model_reference,
        transform=transform,
        configuration=prototype.configuration,
    )


def build_visual_tiles(
    grid: OccupancyGrid,
    pool: EntryPool,
    single_cell: Optional[Vec3i] = None,
    seed: int = 0,
    report: Optional[ValidationResult] = None,
) -> Dict[Vec3i, VisualTileEntry]:
    """Compute the tiles for every affected lattice position.

    Args:
        grid: Occupancy to sample (not modified)
        pool: Entry pool built from the tile set
        single_cell: Restrict work to the 8 positions around one edited cell
        seed: Base seed; same grid + pool + seed gives the same result
        report: Optional result collecting TILE-101 missing-content warnings

    Returns:
        {position: VisualTileEntry} for matched positions only. Callers
        should clear stale instances at every position from
        affected_positions(grid, single_cell) before applying the result.
    """
    positions = affected_positions(grid, single_cell)
    tiles: Dict[Vec3i, VisualTileEntry] = {}
    missing = 0

    for position in positions:
        target = sample_corners(grid, position)
        if target.is_empty:
            continue

        entry = match_configuration(pool, target, position, seed)
        if entry is None:
            missing += 1
            logger.warning("No tile for %s at %s", target.letters(), position)
            if report is not None:
                report.add_issue(TILE_101.issue(
                    location=f"position={position}", labels=target.describe(),
                ))
            continue

        tiles[position] = entry

    logger.info(
        "Matched %d of %d affected positions (%d missing)",
        len(tiles), len(positions), missing,
    )
    return tiles
