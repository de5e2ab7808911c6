# tests/conftest.py

import random

import pytest

from cornertile.generators.corners import CornerConfiguration, CornerLabel
from cornertile.generators.enumerator import generate_tile_set
from cornertile.generators.entry_pool import convert_to_entry_pool
from cornertile.generators.profiles import EXAMPLE_BEVEL_SETTINGS

SINGLE_LABELS = (CornerLabel.EMPTY, CornerLabel.SURFACE_A, CornerLabel.SURFACE_B)


def random_configurations(count, seed=1234, allow_hidden=False):
    """Reproducible random configurations for property tests."""
    rng = random.Random(seed)
    labels = SINGLE_LABELS + ((CornerLabel.HIDDEN,) if allow_hidden else ())
    return [
        CornerConfiguration(tuple(rng.choice(labels) for _ in range(8)))
        for _ in range(count)
    ]


@pytest.fixture
def example_settings():
    return EXAMPLE_BEVEL_SETTINGS.copy()


@pytest.fixture(scope="session")
def tile_set_generation():
    """Every class with its mesh, authored once per test session."""
    return generate_tile_set(EXAMPLE_BEVEL_SETTINGS.copy())


@pytest.fixture(scope="session")
def class_pool(tile_set_generation):
    """Entry pool of every non-trivial class, one model per class."""
    records = [
        (tile.configuration, f"class_{tile.index}")
        for tile in tile_set_generation.classes
        if not tile.configuration.is_empty
    ]
    return convert_to_entry_pool(records)


@pytest.fixture
def profiles_dir(tmp_path):
    return tmp_path / "profiles"
