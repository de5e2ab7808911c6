"""
Generator settings for the mesh author.

Usage:
    from cornertile.generators.profiles import SETTINGS_CATALOG

    settings = SETTINGS_CATALOG.get_profile("Example Bevel")

    # Create and save custom settings
    from cornertile.generators.profiles import save_profile, reload_custom_profiles
    custom = settings.copy(name="Sharp")
    custom.type1_vertical_inside = [(0.0, -0.5, 0.0), (0.0, 0.0, 0.0),
                                    (0.0, 0.0, 0.0), (-0.5, 0.0, 0.0)]
    save_profile(custom)
    reload_custom_profiles()  # Refresh catalog with new settings
"""

from pathlib import Path
from typing import Optional

from .generator_settings import PROFILE_NAMES, GeneratorSettings, SettingsCatalog
from .profile_storage import (
    get_profiles_dir,
    save_profile,
    load_profile,
    load_all_saved_profiles,
    list_saved_profiles,
    delete_profile,
    profile_exists,
)
from .builtin import EXAMPLE_BEVEL_SETTINGS

# Global catalog singleton
SETTINGS_CATALOG = SettingsCatalog()

# Built-in names (protected from deletion and from being shadowed)
BUILTIN_PROFILE_NAMES = {"Example Bevel"}

SETTINGS_CATALOG.register(EXAMPLE_BEVEL_SETTINGS)


def reload_custom_profiles(profiles_dir: Optional[Path] = None) -> int:
    """
    Reload custom settings from disk into the catalog.

    Clears all non-builtin entries and reloads every saved file. Not run at
    import time so that importing the package never touches the home directory.

    Returns:
        Number of custom settings loaded
    """
    for name in list(SETTINGS_CATALOG.list_profiles()):
        if name not in BUILTIN_PROFILE_NAMES:
            SETTINGS_CATALOG.unregister(name)

    loaded = 0
    for settings in load_all_saved_profiles(profiles_dir):
        if settings.name in BUILTIN_PROFILE_NAMES:
            continue
        SETTINGS_CATALOG.register(settings)
        loaded += 1

    return loaded


def is_builtin_profile(name: str) -> bool:
    return name in BUILTIN_PROFILE_NAMES


__all__ = [
    # Core classes
    'GeneratorSettings',
    'SettingsCatalog',
    'SETTINGS_CATALOG',
    'PROFILE_NAMES',
    # Built-in settings
    'EXAMPLE_BEVEL_SETTINGS',
    'BUILTIN_PROFILE_NAMES',
    # Storage functions
    'get_profiles_dir',
    'save_profile',
    'load_profile',
    'load_all_saved_profiles',
    'list_saved_profiles',
    'delete_profile',
    'profile_exists',
    # Utility functions
    'reload_custom_profiles',
    'is_builtin_profile',
]
