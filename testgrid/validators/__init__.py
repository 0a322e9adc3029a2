"""Validators for structural validation of test plan configurations."""

from .base import ISSUE_SEVERITIES, Severity, ValidationIssue, ValidationResult
from .change_sets import check_overlapping_change_sets, check_unused_change_sets
from .infrastructure import check_infrastructure
from .reference_integrity import check_reference_integrity
from .runner import run_validators, validate_config_file

__all__ = [
    "ISSUE_SEVERITIES",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "check_overlapping_change_sets",
    "check_unused_change_sets",
    "check_infrastructure",
    "check_reference_integrity",
    "run_validators",
    "validate_config_file",
]
