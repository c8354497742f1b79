"""
Validation result models.

These models represent the output of the form validator.
"""

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """Validation error for a specific field."""

    field_id: str = Field(..., description="Id of the field with error")
    message: str = Field(..., description="Human-readable error message")
    rule: str | None = Field(default=None, description="Kind of the rule that failed")


class FormValidation(BaseModel):
    """Result of form validation."""

    is_valid: bool = Field(..., description="Whether the form data is valid")
    errors: list[FieldError] = Field(
        default_factory=list, description="Errors in field iteration order"
    )

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.errors)

    def get_field_errors(self, field_id: str) -> list[FieldError]:
        """Get all errors for a specific field."""
        return [e for e in self.errors if e.field_id == field_id]

    def to_error_dict(self) -> dict[str, str]:
        """
        Map each field id to a single message.

        When several rules fail for the same field the last one wins, which
        is what the form renderer displays next to the field.
        """
        result: dict[str, str] = {}
        for error in self.errors:
            result[error.field_id] = error.message
        return result

    def to_error_lists(self) -> dict[str, list[str]]:
        """Map each field id to every message reported for it, in order."""
        result: dict[str, list[str]] = {}
        for error in self.errors:
            result.setdefault(error.field_id, []).append(error.message)
        return result
