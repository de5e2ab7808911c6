"""
Validation check modules.

- tileset_checks: Tile-set record structure and generator settings
"""

from .tileset_checks import (
    check_tile_record,
    validate_tile_records,
    check_settings,
)

__all__ = [
    'check_tile_record',
    'validate_tile_records',
    'check_settings',
]
