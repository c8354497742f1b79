"""
Data models for Form Engine.

This module contains Pydantic models for:
- Form schemas and their fields (rules, options, derived configuration)
- Validation results
- Data bag helpers
"""

from form_engine.models.field_definitions import (
    CHOICE_FIELD_TYPES,
    ComputationKind,
    DerivedFieldConfig,
    FieldType,
    FormField,
    FormSchema,
    RuleKind,
    SelectOption,
    ValidationRule,
    parse_date,
)
from form_engine.models.form_data import (
    FormData,
    coerce_form_data,
    to_jsonable,
)
from form_engine.models.validation_result import (
    FieldError,
    FormValidation,
)

__all__ = [
    # Schema
    "CHOICE_FIELD_TYPES",
    "ComputationKind",
    "DerivedFieldConfig",
    "FieldType",
    "FormField",
    "FormSchema",
    "RuleKind",
    "SelectOption",
    "ValidationRule",
    "parse_date",
    # Data bag
    "FormData",
    "coerce_form_data",
    "to_jsonable",
    # Validation
    "FieldError",
    "FormValidation",
]
