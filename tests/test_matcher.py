import logging
import random

import numpy as np
import pytest

from cornertile.generators.corners import CornerConfiguration, CornerLabel
from cornertile.generators.entry_pool import EntryPool, convert_to_entry_pool
from cornertile.generators.matcher import (
    PURPOSE_CANDIDATE,
    PURPOSE_ROTATION,
    build_visual_tiles,
    derive_seed,
    find_matches,
    match_configuration,
)
from cornertile.generators.sampler import OccupancyGrid, affected_positions, sample_corners
from cornertile.generators.symmetry import apply_transform
from cornertile.validation import ValidationResult, ValidationStage


def random_grid(seed, size=5, fill=0.4):
    rng = random.Random(seed)
    grid = OccupancyGrid()
    for x in range(size):
        for y in range(size):
            for z in range(size):
                if rng.random() < fill:
                    grid.set((x, y, z), rng.choice([CornerLabel.SURFACE_A, CornerLabel.SURFACE_B]))
    return grid


def test_derive_seed_is_stable():
    a = derive_seed(7, (1, 2, 3), PURPOSE_ROTATION, (1, 2))
    assert a == derive_seed(7, (1, 2, 3), PURPOSE_ROTATION, (1, 2))
    assert 0 <= a < 2 ** 64
    assert a != derive_seed(8, (1, 2, 3), PURPOSE_ROTATION, (1, 2))
    assert a != derive_seed(7, (1, 2, 4), PURPOSE_ROTATION, (1, 2))
    assert a != derive_seed(7, (1, 2, 3), PURPOSE_CANDIDATE, (1, 2))
    assert derive_seed(0, np.array([1, 2, 3]), PURPOSE_CANDIDATE) == derive_seed(0, (1, 2, 3), PURPOSE_CANDIDATE)


def test_same_seed_same_tiles(class_pool):
    grid = random_grid(3)
    first = build_visual_tiles(grid, class_pool, seed=11)
    second = build_visual_tiles(grid, class_pool, seed=11)
    assert first == second


def test_every_entry_matches_its_sample(class_pool):
    grid = random_grid(4)
    tiles = build_visual_tiles(grid, class_pool, seed=2)
    assert tiles
    for position, entry in tiles.items():
        assert entry.position == position
        placed = apply_transform(entry.configuration, entry.transform)
        assert placed.matches(sample_corners(grid, position))


def test_full_class_pool_covers_every_position(class_pool):
    grid = random_grid(5)
    report = ValidationResult(stage=ValidationStage.MATCH)
    tiles = build_visual_tiles(grid, class_pool, report=report)

    non_empty = [p for p in affected_positions(grid) if not sample_corners(grid, p).is_empty]
    assert sorted(tiles) == non_empty
    assert report.issues == []


@pytest.mark.parametrize("label", [CornerLabel.SURFACE_B, CornerLabel.EMPTY])
def test_localized_edit_matches_full_rebuild(class_pool, label):
    grid = random_grid(6)
    before = build_visual_tiles(grid, class_pool, seed=5)

    cell = (2, 2, 2)
    grid.set(cell, label)
    partial = build_visual_tiles(grid, class_pool, single_cell=cell, seed=5)
    assert set(partial) <= set(affected_positions(grid, cell))

    merged = {p: e for p, e in before.items() if p not in affected_positions(grid, cell)}
    merged.update(partial)
    assert merged == build_visual_tiles(grid, class_pool, seed=5)


def test_missing_content_is_reported(caplog):
    pool = convert_to_entry_pool([(CornerConfiguration.from_letters("BEEEEEEE"), "b_corner")])
    grid = OccupancyGrid({(0, 0, 0): CornerLabel.SURFACE_A})
    report = ValidationResult(stage=ValidationStage.MATCH)

    with caplog.at_level(logging.WARNING, logger="cornertile"):
        tiles = build_visual_tiles(grid, pool, report=report)

    assert tiles == {}
    assert report.codes() == ["TILE-101"] * 8
    assert report.passed
    assert report.warnings[0].location.startswith("position=")
    assert "NNN" in report.warnings[0].message
    assert sum(1 for r in caplog.records if r.levelno == logging.WARNING) == 8


def test_empty_grid_and_empty_pool():
    assert build_visual_tiles(OccupancyGrid(), EntryPool()) == {}

    grid = OccupancyGrid({(0, 0, 0): CornerLabel.SURFACE_B})
    assert build_visual_tiles(grid, EntryPool()) == {}


def test_model_variants_are_drawn():
    single_a = CornerConfiguration.from_letters("AEEEEEEE")
    pool = convert_to_entry_pool([(single_a, "a0"), (single_a, "a1"), (single_a, "a2")])
    assert len(pool) == 1 and pool.model_count == 3

    grid = OccupancyGrid({(x * 3, 0, 0): CornerLabel.SURFACE_A for x in range(20)})
    tiles = build_visual_tiles(grid, pool, seed=1)

    assert len(tiles) == 160
    assert {e.model_reference for e in tiles.values()} == {"a0", "a1", "a2"}
    assert len({e.transform for e in tiles.values()}) > 1


def test_find_matches_and_no_match(class_pool):
    target = CornerConfiguration.from_letters("EEEEEEEA")
    matches = find_matches(class_pool, target, (0, 0, 0))
    assert len(matches) == 1
    prototype, transform = matches[0]
    assert apply_transform(prototype.configuration, transform) == target

    pool = convert_to_entry_pool([(CornerConfiguration.from_letters("BEEEEEEE"), "b")])
    assert match_configuration(pool, target, (0, 0, 0)) is None


def test_instance_matrix_places_tile(class_pool):
    grid = OccupancyGrid({(4, 5, 6): CornerLabel.SURFACE_A})
    tiles = build_visual_tiles(grid, class_pool)
    entry = tiles[(4, 5, 6)]
    matrix = entry.instance_matrix
    assert matrix.shape == (4, 4)
    assert np.allclose(matrix[:3, 3], [5.0, 6.0, 7.0])
