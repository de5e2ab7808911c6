"""
Built-in generator settings.

- EXAMPLE_BEVEL_SETTINGS: the reference bevel set
"""

from .example_bevel import EXAMPLE_BEVEL_SETTINGS

__all__ = ['EXAMPLE_BEVEL_SETTINGS']
