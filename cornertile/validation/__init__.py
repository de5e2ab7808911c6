"""
Validation package for cornertile.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Workflow stage enumeration
    - ValidationError: Exception raised on FAIL issues
    - ValidationRule, get_rule: Rule definitions

Checks live in ``cornertile.validation.checks`` and are imported on use.
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .rules import ValidationRule, get_rule

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    # Rules
    'ValidationRule',
    'get_rule',
]
