"""
Persistence layer for custom generator settings.

Handles save/load of settings to ~/.config/cornertile/profiles/. Every
function takes an optional ``profiles_dir`` to work on another directory.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import List, Optional, Dict, Any

from .generator_settings import PROFILE_NAMES, GeneratorSettings

logger = logging.getLogger(__name__)


def get_profiles_dir(profiles_dir: Optional[Path] = None) -> Path:
    """
    Get the directory for storing custom settings.

    Args:
        profiles_dir: Directory to use instead of the default

    Returns:
        Path to ~/.config/cornertile/profiles/ (or profiles_dir).
        Creates the directory if it doesn't exist.
    """
    config_dir = Path(profiles_dir) if profiles_dir else Path.home() / ".config" / "cornertile" / "profiles"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def _settings_to_dict(settings: GeneratorSettings) -> Dict[str, Any]:
    """Convert GeneratorSettings to a JSON-serializable dictionary."""
    data: Dict[str, Any] = {
        "name": settings.name,
        "description": settings.description,
    }
    for name in PROFILE_NAMES:
        data[name] = [list(p) for p in settings.profile(name)]
    return data


def _dict_to_settings(data: Dict[str, Any]) -> GeneratorSettings:
    """Create GeneratorSettings from a dictionary. Missing profiles are empty."""
    return GeneratorSettings(
        name=data.get("name", "Unknown"),
        description=data.get("description", ""),
        **{name: data.get(name, []) for name in PROFILE_NAMES},
    )


def _sanitize_filename(name: str) -> str:
    """
    Sanitize a settings name for use as a filename.

    Returns:
        A safe filename (lowercase, spaces replaced with underscores, special chars removed)
    """
    safe = name.lower().replace(" ", "_")
    safe = "".join(c for c in safe if c.isalnum() or c in "_-")
    return safe or "profile"


def _profile_path(name: str, profiles_dir: Optional[Path]) -> Path:
    return get_profiles_dir(profiles_dir) / (_sanitize_filename(name) + ".json")


def save_profile(settings: GeneratorSettings, profiles_dir: Optional[Path] = None) -> Path:
    """
    Save settings to the profiles directory.

    Returns:
        Path to the saved file

    Raises:
        OSError: If the file cannot be written
    """
    file_path = _profile_path(settings.name, profiles_dir)

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(_settings_to_dict(settings), f, indent=2, ensure_ascii=False)

    logger.info("Saved generator settings '%s' to %s", settings.name, file_path)
    return file_path


def load_profile_from_path(file_path: Path) -> Optional[GeneratorSettings]:
    """
    Load settings from a specific file path.

    Returns:
        GeneratorSettings if valid, None otherwise
    """
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return _dict_to_settings(data)
    except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", file_path, e)
        return None


def load_profile(name: str, profiles_dir: Optional[Path] = None) -> Optional[GeneratorSettings]:
    """
    Load settings by name from the profiles directory.

    Returns:
        GeneratorSettings if found and valid, None otherwise
    """
    return load_profile_from_path(_profile_path(name, profiles_dir))


def load_all_saved_profiles(profiles_dir: Optional[Path] = None) -> List[GeneratorSettings]:
    """Load every readable settings file, in filename order."""
    profiles = []
    for file_path in sorted(get_profiles_dir(profiles_dir).glob("*.json")):
        settings = load_profile_from_path(file_path)
        if settings:
            profiles.append(settings)
    return profiles


def list_saved_profiles(profiles_dir: Optional[Path] = None) -> List[str]:
    """
    List all saved settings names.

    Returns:
        Sorted list of names (as stored in the files, not the filenames)
    """
    return sorted(s.name for s in load_all_saved_profiles(profiles_dir))


def delete_profile(name: str, profiles_dir: Optional[Path] = None) -> bool:
    """
    Delete saved settings by name.

    Returns:
        True if deleted, False if not found
    """
    file_path = _profile_path(name, profiles_dir)
    if file_path.exists():
        file_path.unlink()
        return True

    # Also try to find by iterating (in case filename doesn't match)
    for fp in get_profiles_dir(profiles_dir).glob("*.json"):
        settings = load_profile_from_path(fp)
        if settings and settings.name == name:
            fp.unlink()
            return True

    return False


def profile_exists(name: str, profiles_dir: Optional[Path] = None) -> bool:
    if _profile_path(name, profiles_dir).exists():
        return True
    return any(s.name == name for s in load_all_saved_profiles(profiles_dir))
