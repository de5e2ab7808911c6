"""
Offline class enumerator.

Walks every 3-way partition of the eight corners into empty / surface A /
surface B, resolves occluded corners with the ambiguity rule, drops
configurations equivalent under the symmetry group to one already kept, and
authors a mesh for each surviving class.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .corners import CORNER_COUNT, FULL_MASK, CornerConfiguration, popcount
from .mesh_author import VisualTileMesh, generate_visual_tile
from .profiles.generator_settings import GeneratorSettings
from .symmetry import is_equivalent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Partitions and the ambiguity rule
# ---------------------------------------------------------------------------

def is_partition(empty: int, surface_a: int, surface_b: int) -> bool:
    """True when the three masks are pairwise disjoint and cover all corners."""
    return (
        not (empty & surface_a or empty & surface_b or surface_a & surface_b)
        and (empty | surface_a | surface_b) == FULL_MASK
    )


def enumerate_partitions() -> Iterator[Tuple[int, int, int]]:
    """Yield every (empty, surface_a, surface_b) partition, 3^8 in total.

    Order: empty ascending, then surface_a ascending; surface_b is whatever
    is left over.
    """
    for empty in range(FULL_MASK + 1):
        for surface_a in range(FULL_MASK + 1):
            if surface_a & empty:
                continue
            yield empty, surface_a, FULL_MASK & ~(empty | surface_a)


def hidden_corners(solid: int) -> int:
    """Mask of solid corners whose three axis neighbours are all solid."""
    hidden = 0
    for corner in range(CORNER_COUNT):
        neighbours = (1 << (corner ^ 0b100)) | (1 << (corner ^ 0b010)) | (1 << (corner ^ 0b001))
        if solid >> corner & 1 and solid & neighbours == neighbours:
            hidden |= 1 << corner
    return hidden


def apply_ambiguity_rule(empty: int, surface_a: int, surface_b: int) -> Tuple[int, int, int]:
    """Force occluded corners into both surface masks.

    The input masks are not modified; a new triple is returned. Hidden
    corners are decided from the input solid set only, so the result does
    not depend on the order corners are visited.
    """
    hidden = hidden_corners(surface_a | surface_b)
    return empty, surface_a | hidden, surface_b | hidden


def quick_hash(empty: int, surface_a: int, surface_b: int) -> Tuple[int, int, int]:
    """Dedup bucket key: corner count per mask. Invariant under the group."""
    return popcount(empty), popcount(surface_a), popcount(surface_b)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

@dataclass
class TileClass:
    """One canonical corner class and its authored mesh."""
    index: int
    configuration: CornerConfiguration
    name: str
    mesh: Optional[VisualTileMesh] = None


@dataclass
class TileSetGeneration:
    """Result of a generate_tile_set() run.

    Attributes:
        classes: Canonical classes in discovery order
        partition_count: Partitions visited
        duplicate_count: Partitions dropped as equivalent to a kept class
        output_path: Scene file written, if any
    """
    classes: List[TileClass] = field(default_factory=list)
    partition_count: int = 0
    duplicate_count: int = 0
    output_path: Optional[Path] = None

    @property
    def configurations(self) -> List[CornerConfiguration]:
        return [c.configuration for c in self.classes]

    def __len__(self) -> int:
        return len(self.classes)


def enumerate_classes(with_meshes: bool = True,
                      settings: Optional[GeneratorSettings] = None) -> TileSetGeneration:
    """Enumerate and deduplicate corner classes, optionally authoring meshes.

    Raises:
        MissingProfileError: When authoring and ``settings`` lacks a profile
            some class needs.
    """
    if with_meshes and settings is None:
        raise ValueError("settings are required to author meshes")

    generation = TileSetGeneration()
    buckets: Dict[Tuple[int, int, int], List[CornerConfiguration]] = {}

    for partition in enumerate_partitions():
        generation.partition_count += 1
        empty, surface_a, surface_b = apply_ambiguity_rule(*partition)
        configuration = CornerConfiguration.from_masks(empty, surface_a, surface_b)

        bucket = buckets.setdefault(quick_hash(empty, surface_a, surface_b), [])
        if any(is_equivalent(configuration, kept) for kept in bucket):
            generation.duplicate_count += 1
            continue
        bucket.append(configuration)

        index = len(generation.classes)
        name = configuration.debug_name(index)
        mesh = generate_visual_tile(settings, empty, surface_a, surface_b, name=name) if with_meshes else None
        generation.classes.append(TileClass(index, configuration, name, mesh))

    logger.info(
        "Enumerated %d partitions -> %d classes (%d duplicates)",
        generation.partition_count, len(generation.classes), generation.duplicate_count,
    )
    return generation


def generate_tile_set(
    settings: Optional[GeneratorSettings] = None,
    output_path: Optional[Path] = None,
) -> TileSetGeneration:
    """Enumerate every corner class, author its mesh and optionally export.

    Args:
        settings: Bevel profiles; defaults to the catalog's default settings
        output_path: Scene file to write (.gltf or .glb); nothing is written
            when None

    Returns:
        TileSetGeneration with the classes and run counters.

    Raises:
        MissingProfileError: If ``settings`` lacks a profile some class needs.
    """
    if settings is None:
        # Import here to avoid circular imports
        from .profiles import SETTINGS_CATALOG
        settings = SETTINGS_CATALOG.get_default_profile()

    logger.info("Generating tile set with settings '%s'", settings.name)
    generation = enumerate_classes(with_meshes=True, settings=settings)

    if output_path is not None and generation.classes:
        from ..conversion.gltf_writer import export_tile_scene
        generation.output_path = export_tile_scene(generation.classes, Path(output_path))

    return generation
