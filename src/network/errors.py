"""Validation findings and the exceptions raised while obtaining a model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List


class Severity(str, Enum):
    ERROR = "ERROR"
    WARN = "WARN"


@dataclass(frozen=True)
class ValidationIssue:
    """One finding of syntax or semantic control, located by a JSON path."""

    code: str
    msg: str
    path: str
    severity: Severity = Severity.ERROR

    def describe(self) -> str:
        return f"{self.severity.value} {self.code} at {self.path}: {self.msg}"


@dataclass(frozen=True)
class ValidationReport:
    """Findings of one model document, split by severity, with stage timings."""

    ok: bool
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]
    timings_ms: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_issues(cls, issues: Iterable[ValidationIssue], timings_ms: Dict[str, int]) -> "ValidationReport":
        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []
        for issue in issues:
            (warnings if issue.severity is Severity.WARN else errors).append(issue)
        return cls(ok=not errors, errors=errors, warnings=warnings, timings_ms=dict(timings_ms))

    def blocking(self, warn_as_error: bool = False) -> List[ValidationIssue]:
        """Issues that reject the model; warnings count only under ``warn_as_error``."""

        return self.errors + self.warnings if warn_as_error else list(self.errors)


def make_error(code: str, msg: str, path: str) -> ValidationIssue:
    return ValidationIssue(code=code, msg=msg, path=path, severity=Severity.ERROR)


def make_warning(code: str, msg: str, path: str) -> ValidationIssue:
    return ValidationIssue(code=code, msg=msg, path=path, severity=Severity.WARN)


class ModelError(RuntimeError):
    """Base class for failures while obtaining a model."""


class ModelFileError(ModelError):
    """The model path is unusable or its content is not a JSON document."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}")


class ModelValidationError(ModelError):
    """The document failed syntax or semantic control; ``issues`` lists why."""

    def __init__(self, report: ValidationReport, issues: List[ValidationIssue]) -> None:
        codes = ", ".join(issue.code for issue in issues[:5])
        if len(issues) > 5:
            codes += ", ..."
        super().__init__(f"Model validation failed: {codes}")
        self.report = report
        self.issues = issues


__all__ = [
    "ModelError",
    "ModelFileError",
    "ModelValidationError",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "make_error",
    "make_warning",
]
