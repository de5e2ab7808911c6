"""
Tile-set and generator-settings checks.

- TILE-001: Malformed corner label
- TILE-002: Wrong corner count
- TILE-003: Missing model path
- TILE-201: Empty bevel profile
- TILE-202: Odd-length bevel profile
"""

from typing import Any, List, Optional

from ...generators.corners import CORNER_COUNT, PACKED_LABELS, Corner
from ..core import ValidationIssue, ValidationResult, ValidationStage
from ..rules import TILE_001, TILE_002, TILE_003, TILE_201, TILE_202


def check_tile_record(record: Any, index: int, file_path: Optional[str] = None) -> List[ValidationIssue]:
    """Check one raw tile-set record (a decoded JSON object).

    Args:
        record: Expected to be {"corners": [8 ints], "model_path": str}
        index: Position of the record in the file, used as location
        file_path: Optional source file for the issue

    Returns:
        Issues found; an empty list means the record is usable.
    """
    issues: List[ValidationIssue] = []
    location = f"tiles[{index}]"
    data = record if isinstance(record, dict) else {}

    corners = data.get("corners")
    if not isinstance(corners, (list, tuple)) or len(corners) != CORNER_COUNT:
        count = len(corners) if isinstance(corners, (list, tuple)) else 0
        issues.append(TILE_002.issue(location=location, file_path=file_path, count=count))
    else:
        for i, value in enumerate(corners):
            # bool is an int subclass; True would otherwise read as EMPTY
            if isinstance(value, bool) or not isinstance(value, int) or value not in PACKED_LABELS:
                issues.append(TILE_001.issue(
                    location=location, file_path=file_path,
                    corner=Corner(i).name, value=value,
                ))

    model_path = data.get("model_path")
    if not isinstance(model_path, str) or not model_path.strip():
        issues.append(TILE_003.issue(location=location, file_path=file_path))

    return issues


def validate_tile_records(records: List[Any], file_path: Optional[str] = None) -> ValidationResult:
    """Check every raw record of a tile-set document."""
    result = ValidationResult(stage=ValidationStage.LOAD)
    for index, record in enumerate(records):
        for issue in check_tile_record(record, index, file_path):
            result.add_issue(issue)
    return result


def check_settings(settings) -> ValidationResult:
    """Check that every bevel profile the mesh author may select is usable.

    Args:
        settings: GeneratorSettings to check

    Returns:
        ValidationResult with TILE-201 / TILE-202 issues, one per bad profile
    """
    # Import here to avoid circular imports
    from ...generators.profiles.generator_settings import PROFILE_NAMES

    result = ValidationResult(stage=ValidationStage.AUTHORING)
    for name in PROFILE_NAMES:
        points = settings.profile(name)
        location = f"{settings.name}.{name}"
        if not points:
            result.add_issue(TILE_201.issue(location=location, profile=name))
        elif len(points) % 2:
            result.add_issue(TILE_202.issue(location=location, profile=name, count=len(points)))
    return result
