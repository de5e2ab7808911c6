"""
Corner model, symmetry group and the offline/runtime tile algorithms.
"""

from .corners import Corner, CornerLabel, CornerConfiguration
from .symmetry import (
    SymmetryTransform,
    IDENTITY,
    ALL_TRANSFORMS,
    apply_transform,
    compose,
    inverse,
    get_rotation,
    is_equivalent,
)
from .sampler import OccupancyGrid, sample_corners, affected_positions
from .entry_pool import EntryPool, TilePrototype, convert_to_entry_pool
from .matcher import VisualTileEntry, build_visual_tiles, derive_seed

__all__ = [
    # Corner model
    'Corner',
    'CornerLabel',
    'CornerConfiguration',
    # Symmetry
    'SymmetryTransform',
    'IDENTITY',
    'ALL_TRANSFORMS',
    'apply_transform',
    'compose',
    'inverse',
    'get_rotation',
    'is_equivalent',
    # Runtime
    'OccupancyGrid',
    'sample_corners',
    'affected_positions',
    'EntryPool',
    'TilePrototype',
    'convert_to_entry_pool',
    'VisualTileEntry',
    'build_visual_tiles',
    'derive_seed',
]
