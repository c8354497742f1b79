"""Shared fixtures for Form Engine tests."""

from datetime import date

import pytest

from form_engine.models.field_definitions import (
    DerivedFieldConfig,
    FieldType,
    FormField,
    FormSchema,
    ValidationRule,
)

TODAY = date(2026, 10, 19)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def profile_schema() -> FormSchema:
    """First/last name, birth date and two derived fields."""
    return FormSchema(
        id="form_profile",
        name="Profile",
        fields=[
            FormField(
                id="first_name",
                type=FieldType.TEXT,
                label="First name",
                required=True,
                validation_rules=[ValidationRule(kind="required")],
                order=0,
            ),
            FormField(id="last_name", type=FieldType.TEXT, label="Last name", order=1),
            FormField(id="birth_date", type=FieldType.DATE, label="Birth date", order=2),
            FormField(
                id="full_name",
                type=FieldType.TEXT,
                label="Full name",
                is_derived=True,
                derived_config=DerivedFieldConfig(
                    parent_fields=["first_name", "last_name"], computation="concat"
                ),
                order=3,
            ),
            FormField(
                id="age",
                type=FieldType.NUMBER,
                label="Age",
                is_derived=True,
                derived_config=DerivedFieldConfig(parent_fields=["birth_date"], computation="age"),
                order=4,
            ),
        ],
    )
