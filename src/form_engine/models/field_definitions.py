"""
Field definition models for form schemas.

A form schema is an ordered list of fields. Each field carries its type,
its validation rules and, for derived fields, the configuration used to
compute its value from other fields.

The persisted representation uses camelCase keys (``validationRules``,
``isDerived``, ``parentFields``...), so every model accepts both the
Python attribute name and its camelCase alias.
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class FieldType(str, Enum):
    """Input type of a field; determines the value shape it accepts."""

    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"


# Field types whose legal values come from ``options``
CHOICE_FIELD_TYPES = frozenset({FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX})


class RuleKind(str, Enum):
    """Kind of a validation rule."""

    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    EMAIL = "email"
    PASSWORD = "password"
    CUSTOM = "custom"


class ComputationKind(str, Enum):
    """How a derived field computes its value from its parent fields."""

    AGE = "age"
    SUM = "sum"
    CONCAT = "concat"
    CUSTOM = "custom"


class _SchemaModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidationRule(_SchemaModel):
    """
    One declarative constraint attached to a field.

    ``kind`` is a RuleKind when recognised. Unknown kinds are kept as plain
    strings so that a stored schema still loads; the evaluator treats them
    as a no-op.
    """

    kind: RuleKind | str = Field(
        ..., alias="type", union_mode="left_to_right", description="Rule kind"
    )
    value: int | float | str | None = Field(
        default=None, description="Threshold for minLength/maxLength"
    )
    message: str = Field(
        default="", description="Error message; empty means the built-in default"
    )


class SelectOption(_SchemaModel):
    """One legal value of a select, radio or checkbox field."""

    label: str
    value: str


class DerivedFieldConfig(_SchemaModel):
    """Configuration of a derived (computed) field."""

    parent_fields: list[str] = Field(
        default_factory=list, description="Ids of the fields the value is computed from"
    )
    computation: ComputationKind | str = Field(
        default=ComputationKind.CONCAT, union_mode="left_to_right"
    )
    formula: str = Field(default="", description="Reserved for the custom computation")


class FormField(_SchemaModel):
    """A single field of a form schema."""

    id: str = Field(..., description="Unique field identifier")
    type: FieldType = Field(..., description="Input type")
    label: str = Field(..., description="Human-readable label")
    required: bool = Field(default=False)
    default_value: Any = Field(default=None, description="Initial value for a fill session")
    options: list[SelectOption] | None = Field(default=None)
    validation_rules: list[ValidationRule] = Field(default_factory=list)
    is_derived: bool = Field(default=False)
    derived_config: DerivedFieldConfig | None = Field(default=None)
    order: int = Field(default=0, description="Render/evaluation position")

    @model_validator(mode="after")
    def _parse_date_default(self) -> "FormField":
        # Date defaults come back from storage as ISO-8601 text
        if self.type is FieldType.DATE and self.default_value is not None:
            self.default_value = parse_date(self.default_value) or self.default_value
        return self


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FormSchema(_SchemaModel):
    """A named, persisted collection of fields."""

    id: str = Field(default_factory=lambda: f"form_{uuid.uuid4().hex[:12]}")
    name: str = Field(..., description="Form name")
    fields: list[FormField] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def ordered_fields(self) -> list[FormField]:
        """Fields sorted by ascending ``order``."""
        return sorted(self.fields, key=lambda f: f.order)

    def get_field(self, field_id: str) -> FormField | None:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def derived_fields(self) -> list[FormField]:
        return [f for f in self.ordered_fields() if f.is_derived]


def parse_date(value: Any) -> date | None:
    """
    Interpret a value as a calendar date.

    Accepts date and datetime instances and ISO-8601 strings (a time part,
    if any, is dropped). Returns None for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None
