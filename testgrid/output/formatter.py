"""Render validation results of a test plan configuration."""

import json
from dataclasses import asdict
from typing import Literal

from ..validators.base import Severity, ValidationIssue, ValidationResult

SEVERITY_SYMBOLS = {Severity.ERROR: "✘", Severity.WARNING: "⚠"}


def format_validation_result(
    result: ValidationResult,
    format: Literal["text", "json"] = "text",
) -> str:
    """Format a validation result for the ``validate`` command.

    Args:
        result: The validation result to format.
        format: ``text`` for a sectioned report, ``json`` for tooling.
    """
    if format == "json":
        return json.dumps(
            {
                "valid": result.is_valid,
                "error_count": len(result.errors),
                "warning_count": len(result.warnings),
                "issues": [_issue_dict(issue) for issue in result.issues],
            },
            indent=2,
        )

    lines: list[str] = []
    for title, issues in (("ERRORS", result.errors), ("WARNINGS", result.warnings)):
        lines.append(f"{title}:")
        lines.extend(f"  {format_issue(issue)}" for issue in issues)
        if not issues:
            lines.append("  (none)")
        lines.append("")
    lines.append(verdict(result))
    return "\n".join(lines)


def format_issue(issue: ValidationIssue) -> str:
    """One report line, e.g. ``✘ UNDEFINED_SCENARIO_REF: [ssl-on>sso] ...``."""
    location = f"[{issue.location}] " if issue.location else ""
    return f"{SEVERITY_SYMBOLS[issue.severity]} {issue.code}: {location}{issue.message}"


def verdict(result: ValidationResult) -> str:
    errors, warnings = len(result.errors), len(result.warnings)
    if errors:
        return f"Validation failed: {errors} error(s), {warnings} warning(s)"
    if warnings:
        return f"Validation passed with {warnings} warning(s)"
    return "Validation passed"


def _issue_dict(issue: ValidationIssue) -> dict:
    data = asdict(issue)
    data["severity"] = issue.severity.value
    return data
