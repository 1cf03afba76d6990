"""Pydantic v2 models for validation rule output."""

from typing import Iterable, Literal

from pydantic import Field

from .base import CamelModel

Severity = Literal["error", "warning", "info"]


class ValidationIssue(CamelModel):
    """A single problem reported by a validation rule."""

    rule_id: str
    message: str
    field: str | None = None
    severity: Severity = "error"


class ValidationResult(CamelModel):
    """Outcome of one or more validation rules."""

    valid: bool = True
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def merge(cls, results: Iterable["ValidationResult"]) -> "ValidationResult":
        """AND the ``valid`` flags and concatenate issues in order."""
        merged = cls()
        for result in results:
            merged.valid = merged.valid and result.valid
            merged.errors.extend(result.errors)
            merged.warnings.extend(result.warnings)
        return merged
