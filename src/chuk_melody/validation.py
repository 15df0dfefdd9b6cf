"""
Validation results for untrusted payloads.

Decoders check the raw JSON structure before any model parsing and
collect every problem found, so a rejection can be logged in full.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Payload is rejected
    WARNING = "warning"  # Payload is accepted but suspicious


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a payload."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(self, code: str, message: str, location: str | None = None) -> None:
        """Add an error issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, code, message, location))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        """Add a warning issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, code, message, location))

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings are OK)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def __bool__(self) -> bool:
        """Boolean conversion returns is_valid."""
        return self.is_valid

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


def is_number(value: Any) -> bool:
    """JSON number check; booleans do not count."""
    return isinstance(value, int | float) and not isinstance(value, bool)
