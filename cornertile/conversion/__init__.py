"""
File formats: tile-set JSON, glTF/GLB scene export and OBJ export.

The scene writers import trimesh; import them from their modules directly.
"""

from .tileset_io import TilePrefab, TileSet, TileSetFormatError

__all__ = [
    'TilePrefab',
    'TileSet',
    'TileSetFormatError',
]
