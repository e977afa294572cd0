"""
Validation Models

Results of reviewing an extracted snapshot. Schema problems never get
this far (the extractor raises); what is reported here are warnings about
records that are well-formed but look suspicious.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    record_kind: str = Field(
        ...,
        pattern="^(income|expense)$",
        description="Which sequence the record belongs to"
    )
    record_index: int = Field(
        ...,
        ge=0,
        description="Position of the record in its sequence"
    )
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'subtotal_mismatch', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )

    def to_log_dict(self) -> dict:
        return {
            "record": f"{self.record_kind}[{self.record_index}]",
            "field": self.field,
            "type": self.issue_type,
            "message": self.message,
        }


class ValidationResult(BaseModel):
    """
    Result of the semantic review of a snapshot.

    Warnings never block the analysis: the aggregation rules absorb
    misclassified records.
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    record_count: int = Field(ge=0)
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "warning")
