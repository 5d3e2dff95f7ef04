"""
Draft Validation Models

A draft is checked field by field in form order and the first problem
stops the check, the way a browser blocks a form on its first invalid
control. So a result carries at most one issue.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


IssueType = Literal["missing", "invalid_value", "invalid_format", "malformed_selection"]


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: IssueType = Field(
        ...,
        description="Type of issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Outcome of validating a draft."""

    is_valid: bool
    issue: Optional[ValidationIssue] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, field: str, issue_type: IssueType, message: str) -> "ValidationResult":
        return cls(
            is_valid=False,
            issue=ValidationIssue(field=field, issue_type=issue_type, message=message),
        )
