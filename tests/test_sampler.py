import numpy as np
import pytest

from cornertile.generators.corners import CornerConfiguration, CornerLabel
from cornertile.generators.matcher import build_visual_tiles
from cornertile.generators.sampler import (
    OccupancyGrid,
    affected_positions,
    positions_touching,
    sample_corners,
)


def test_missing_cells_are_empty():
    grid = OccupancyGrid()
    assert sample_corners(grid, (5, -3, 2)).is_empty


def test_isolated_voxel_sampling():
    grid = OccupancyGrid({(0, 0, 0): CornerLabel.SURFACE_A})

    config = sample_corners(grid, (0, 0, 0))
    assert config.letters() == "AEEEEEEE"

    for position in [(1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 1, 1), (2, 0, 0), (0, 0, -2)]:
        assert sample_corners(grid, position).is_empty


def test_isolated_voxel_matching(class_pool):
    grid = OccupancyGrid({(0, 0, 0): CornerLabel.SURFACE_A})

    tiles = build_visual_tiles(grid, class_pool)

    # Every position whose window holds the voxel sees one A corner
    assert sorted(tiles) == sorted(positions_touching((0, 0, 0)))
    single_a = CornerConfiguration.from_letters("AEEEEEEE")
    models = {entry.model_reference for entry in tiles.values()}
    assert len(models) == 1
    assert all(entry.configuration.label_counts() == single_a.label_counts() for entry in tiles.values())

    for position in [(1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 1, 1)]:
        assert position not in tiles


def test_affected_positions_for_cell():
    grid = OccupancyGrid()
    positions = affected_positions(grid, (2, 3, 4))
    assert len(positions) == 8
    assert positions == sorted(positions)
    assert (2, 3, 4) in positions and (1, 2, 3) in positions


def test_affected_positions_union():
    grid = OccupancyGrid({
        (0, 0, 0): CornerLabel.SURFACE_A,
        (1, 0, 0): CornerLabel.SURFACE_B,
    })
    positions = affected_positions(grid)
    assert len(positions) == 12
    assert len(set(positions)) == 12


def test_set_and_clear():
    grid = OccupancyGrid()
    grid.set((1, 1, 1), CornerLabel.SURFACE_B)
    assert (1, 1, 1) in grid and len(grid) == 1
    grid.set((1, 1, 1), CornerLabel.EMPTY)
    assert len(grid) == 0
    grid.set((0, 0, 0), CornerLabel.SURFACE_A)
    grid.clear((0, 0, 0))
    assert grid.get((0, 0, 0)) is CornerLabel.EMPTY
    with pytest.raises(ValueError):
        grid.set((0, 0, 0), CornerLabel.HIDDEN)


def test_from_array_with_origin():
    data = np.zeros((2, 2, 2), dtype=np.int8)
    data[0, 0, 0] = 1
    data[1, 1, 0] = 2
    grid = OccupancyGrid.from_array(data, origin=(10, 0, -1))

    assert grid.get((10, 0, -1)) is CornerLabel.SURFACE_A
    assert grid.get((11, 1, -1)) is CornerLabel.SURFACE_B
    assert len(grid) == 2

    dense, origin = grid.to_array()
    assert origin == (10, 0, -1)
    assert dense.shape == (2, 2, 1)
    assert dense[0, 0, 0] == 1 and dense[1, 1, 0] == 2


def test_from_array_rejects_bad_input():
    with pytest.raises(ValueError):
        OccupancyGrid.from_array(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        OccupancyGrid.from_array(np.full((1, 1, 1), 3))


def test_from_solid_bytes():
    grid = OccupancyGrid.from_solid_bytes({(0, 0, 0): 4, (0, 0, 1): 2, (5, 5, 5): 1})
    assert sample_corners(grid, (0, 0, 0)).letters() == "ABEEEEEE"
    assert len(grid) == 2
    with pytest.raises(ValueError):
        OccupancyGrid.from_solid_bytes({(0, 0, 0): 3})
