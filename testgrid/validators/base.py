"""Issues found in a test plan configuration before it is run."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


# Every code the validators report. Errors make a configuration unusable;
# warnings point at parts of it that will be silently ignored at run time.
ISSUE_SEVERITIES: dict[str, Severity] = {
    "DUPLICATE_SCENARIO": Severity.ERROR,
    "UNDEFINED_SCENARIO_REF": Severity.ERROR,
    "NO_PROVISIONER": Severity.ERROR,
    "NO_INFRA_PARAMS": Severity.WARNING,
    "OVERLAPPING_CHANGE_SET": Severity.WARNING,
    "UNUSED_CHANGE_SET": Severity.WARNING,
}


@dataclass
class ValidationIssue:
    """One problem, pinned to the change set and/or scenario it concerns."""

    code: str
    message: str
    severity: Severity
    scenario: str | None = None
    change_set: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        """``<change set>><scenario>``, or whichever of the two is set."""
        if self.change_set and self.scenario:
            return f"{self.change_set}>{self.scenario}"
        return self.change_set or self.scenario or ""

    def __str__(self) -> str:
        location = f" [{self.location}]" if self.location else ""
        return f"{self.severity.value.upper()}: {self.code}{location} - {self.message}"


@dataclass
class ValidationResult:
    """Issues collected from one or more validators."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @classmethod
    def combine(cls, *results: "ValidationResult") -> "ValidationResult":
        return cls([issue for result in results for issue in result.issues])

    def report(
        self,
        code: str,
        message: str,
        scenario: str | None = None,
        change_set: str | None = None,
        **details: Any,
    ) -> ValidationIssue:
        """Record an issue with the severity registered for its code.

        Raises:
            KeyError: If ``code`` is not in ``ISSUE_SEVERITIES``.
        """
        issue = ValidationIssue(
            code=code,
            message=message,
            severity=ISSUE_SEVERITIES[code],
            scenario=scenario,
            change_set=change_set,
            details=details,
        )
        self.issues.append(issue)
        return issue

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def fails(self, strict: bool = False) -> bool:
        """Whether the configuration should be rejected; ``strict`` rejects warnings too."""
        return self.has_errors or (strict and self.has_warnings)

