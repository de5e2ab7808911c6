"""
Validation rule definitions.

Each rule has:
- Code: Unique identifier (e.g., "TILE-001")
- Severity: FAIL, WARN, or INFO
- Rule reference: Topic the rule belongs to
- Message template: Human-readable description
- Remediation: Suggested fix

Rules are numbered by area:
- TILE-0xx: Tile-set file records
- TILE-1xx: Runtime matching
- TILE-2xx: Generator settings (bevel profiles)
"""

from dataclasses import dataclass
from typing import Optional

from .core import Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule.

    Attributes:
        code: Unique rule code (e.g., "TILE-001")
        severity: Default severity for this rule
        rule_reference: Topic reference
        message_template: Template for error message (use {placeholders})
        remediation_template: Template for suggested fix
        description: Full description of the rule
    """
    code: str
    severity: Severity
    rule_reference: str
    message_template: str
    remediation_template: Optional[str] = None
    description: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        """Format the message template with provided values."""
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        """Format the remediation template with provided values."""
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None

    def issue(self, location: Optional[str] = None, file_path: Optional[str] = None,
              **kwargs) -> ValidationIssue:
        """Build an issue for this rule, filling both templates from kwargs."""
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=self.format_message(**kwargs),
            rule_reference=self.rule_reference,
            remediation=self.format_remediation(**kwargs),
            location=location,
            file_path=file_path,
        )


# =============================================================================
# TILE-SET RECORD RULES
# =============================================================================

TILE_001 = ValidationRule(
    code="TILE-001",
    severity=Severity.FAIL,
    rule_reference="Tile-set file - corner labels",
    message_template="Corner {corner} has malformed label {value!r}",
    remediation_template="Use 1 (empty), 2 (surface B), 4 (surface A) or 6 (hidden)",
    description="Every stored corner must hold exactly one valid packed label"
)

TILE_002 = ValidationRule(
    code="TILE-002",
    severity=Severity.FAIL,
    rule_reference="Tile-set file - corner count",
    message_template="Record has {count} corners, expected 8",
    remediation_template="Store exactly eight corners in NNN..PPP order",
    description="Every record must describe all eight corners of its window"
)

TILE_003 = ValidationRule(
    code="TILE-003",
    severity=Severity.FAIL,
    rule_reference="Tile-set file - model reference",
    message_template="Record has no model path",
    remediation_template="Set model_path to the scene node or file of the model",
    description="Every record must reference the model it places"
)

# =============================================================================
# RUNTIME MATCHING RULES
# =============================================================================

TILE_101 = ValidationRule(
    code="TILE-101",
    severity=Severity.WARN,
    rule_reference="Runtime matching - missing content",
    message_template="No tile matches configuration {labels}",
    remediation_template="Author a model for {labels} (or any rotation/flip of it)",
    description="A non-empty sampled configuration had no equivalent prototype"
)

# =============================================================================
# GENERATOR SETTINGS RULES
# =============================================================================

TILE_201 = ValidationRule(
    code="TILE-201",
    severity=Severity.FAIL,
    rule_reference="Generator settings - bevel profiles",
    message_template="Profile {profile} is empty",
    remediation_template="Give {profile} at least one segment (two points)",
    description="Every bevel profile the mesh author can select must have segments"
)

TILE_202 = ValidationRule(
    code="TILE-202",
    severity=Severity.FAIL,
    rule_reference="Generator settings - bevel profiles",
    message_template="Profile {profile} has an odd number of points ({count})",
    remediation_template="Profiles are consumed as segment pairs; add or drop one point in {profile}",
    description="Profile points are read two at a time as line segments"
)


# =============================================================================
# RULE REGISTRY
# =============================================================================

ALL_RULES = {
    'TILE-001': TILE_001,
    'TILE-002': TILE_002,
    'TILE-003': TILE_003,
    'TILE-101': TILE_101,
    'TILE-201': TILE_201,
    'TILE-202': TILE_202,
}


def get_rule(code: str) -> Optional[ValidationRule]:
    """Get a rule by its code, or None if unknown."""
    return ALL_RULES.get(code)


def get_rules_by_category(prefix: str) -> list:
    """Get all rules whose code starts with prefix (e.g. "TILE-2")."""
    return [rule for code, rule in ALL_RULES.items() if code.startswith(prefix)]
