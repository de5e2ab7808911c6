"""
GeneratorSettings dataclass and SettingsCatalog: the bevel profile tables the
mesh author draws from.

Each profile is a flat list of 3-D points read two at a time as line
segments. Vertical profiles are authored for the cap layer around the
NNN corner (z = 0, translated to the top or bottom face by the mesh author);
horizontal profiles are authored on the x = -0.5 side face.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple

Point = Tuple[float, float, float]

# Profiles the mesh author can select, in rule-table order
PROFILE_NAMES: Tuple[str, ...] = (
    "mixed1_vertical_inside",
    "mixed2_vertical_inside",
    "type1_vertical_outside",
    "type1_vertical_inside",
    "type2_vertical_outside",
    "type2_vertical_inside",
    "mixed_side_vertical_1_inside",
    "mixed_side_horizontal_1_inside",
    "mixed_side_vertical_2_inside",
    "mixed_side_horizontal_2_inside",
    "type1_horizontal_outside",
    "type1_horizontal_inside",
    "type2_horizontal_outside",
    "type2_horizontal_inside",
)


@dataclass
class GeneratorSettings:
    """
    Bevel polylines keyed by situation.

    "type1" profiles build surface A geometry, "type2" surface B. "inside"
    profiles wrap a single empty corner, "outside" profiles a single solid
    one; "mixed" profiles are used where an empty corner borders both
    surface types.

    Attributes:
        name: Display name (e.g., "Example Bevel")
        description: Human-readable description
    """

    # Identity
    name: str
    description: str = ""

    # Cap (vertical) profiles
    mixed1_vertical_inside: List[Point] = field(default_factory=list)
    mixed2_vertical_inside: List[Point] = field(default_factory=list)
    type1_vertical_outside: List[Point] = field(default_factory=list)
    type1_vertical_inside: List[Point] = field(default_factory=list)
    type2_vertical_outside: List[Point] = field(default_factory=list)
    type2_vertical_inside: List[Point] = field(default_factory=list)

    # Side (horizontal) profiles
    mixed_side_vertical_1_inside: List[Point] = field(default_factory=list)
    mixed_side_horizontal_1_inside: List[Point] = field(default_factory=list)
    mixed_side_vertical_2_inside: List[Point] = field(default_factory=list)
    mixed_side_horizontal_2_inside: List[Point] = field(default_factory=list)
    type1_horizontal_outside: List[Point] = field(default_factory=list)
    type1_horizontal_inside: List[Point] = field(default_factory=list)
    type2_horizontal_outside: List[Point] = field(default_factory=list)
    type2_horizontal_inside: List[Point] = field(default_factory=list)

    def __post_init__(self):
        # JSON gives lists; keep points as tuples of floats
        for name in PROFILE_NAMES:
            points = getattr(self, name)
            setattr(self, name, [tuple(float(c) for c in p) for p in points])

    def profile(self, name: str) -> List[Point]:
        """
        Get a profile by name.

        Raises:
            KeyError: If name is not one of PROFILE_NAMES.
        """
        if name not in PROFILE_NAMES:
            raise KeyError(f"Unknown profile: {name}")
        return getattr(self, name)

    def profiles(self) -> Dict[str, List[Point]]:
        return {name: list(getattr(self, name)) for name in PROFILE_NAMES}

    def copy(self, name: Optional[str] = None) -> 'GeneratorSettings':
        """Deep copy, optionally under a new name."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({n: list(values[n]) for n in PROFILE_NAMES})
        if name is not None:
            values["name"] = name
        return GeneratorSettings(**values)


class SettingsCatalog:
    """
    Registry of generator settings.

    Provides case-insensitive lookup and default selection.
    """

    def __init__(self):
        self._settings: Dict[str, GeneratorSettings] = {}

    def register(self, settings: GeneratorSettings) -> None:
        self._settings[settings.name] = settings

    def get_profile(self, name: str) -> Optional[GeneratorSettings]:
        """
        Get settings by name (case-insensitive).

        Args:
            name: Settings name to look up

        Returns:
            GeneratorSettings if found, None otherwise
        """
        if name in self._settings:
            return self._settings[name]

        name_lower = name.lower()
        for sname, settings in self._settings.items():
            if sname.lower() == name_lower:
                return settings

        return None

    def list_profiles(self) -> List[str]:
        return sorted(self._settings.keys())

    def get_default_profile(self) -> GeneratorSettings:
        """The "Example Bevel" settings, or the first registered."""
        return self.get_profile("Example Bevel") or next(iter(self._settings.values()))

    def unregister(self, name: str) -> bool:
        """
        Unregister settings from the catalog.

        Returns:
            True if removed, False if not found
        """
        if name in self._settings:
            del self._settings[name]
            return True

        name_lower = name.lower()
        for sname in list(self._settings.keys()):
            if sname.lower() == name_lower:
                del self._settings[sname]
                return True

        return False

    def is_registered(self, name: str) -> bool:
        return self.get_profile(name) is not None
