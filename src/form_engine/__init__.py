"""
Form Engine: schema evaluation for user-built forms.

A form schema is an ordered list of fields with types, validation rules
and, for derived fields, a computation over other fields. The engine
answers two questions for a schema and a data bag: what are the errors,
and what are the derived values.

Simple Usage:
    from form_engine import validate_form, refresh_derived_values

    result = refresh_derived_values(schema.fields, data)
    validation = validate_form(schema.ordered_fields(), result.data)

    if not validation.is_valid:
        errors = validation.to_error_dict()  # field id -> message

Building and storing schemas:
    from form_engine import FormBuilder, FormStore, FieldType

    builder = FormBuilder()
    email = builder.add_field(FieldType.TEXT)
    builder.update_field(email.id, label="Email")
    schema = builder.save_schema("Newsletter", FormStore("forms.json"))

Fill sessions:
    from form_engine import FormSession

    session = FormSession(schema)
    session.set_value(email.id, "jane@example.com")
    session.submit()
"""

from form_engine.builder import (
    FormBuilder,
    SchemaCheckResult,
    check_schema,
)
from form_engine.engine import (
    DependencyGraph,
    RefreshResult,
    compute_derived_value,
    evaluate_rule,
    initialize_form_data,
    refresh_derived_values,
    validate_field,
    validate_form,
)
from form_engine.exceptions import (
    DerivedFieldCycleError,
    FieldNotFoundError,
    FormEngineError,
    InvalidParentFieldError,
    StorageError,
)
from form_engine.models import (
    ComputationKind,
    DerivedFieldConfig,
    FieldError,
    FieldType,
    FormData,
    FormField,
    FormSchema,
    FormValidation,
    RuleKind,
    SelectOption,
    ValidationRule,
)
from form_engine.session import FormSession
from form_engine.storage import FormStore

__all__ = [
    # Engine
    "evaluate_rule",
    "validate_field",
    "validate_form",
    "compute_derived_value",
    "refresh_derived_values",
    "initialize_form_data",
    "DependencyGraph",
    "RefreshResult",
    # Models
    "ComputationKind",
    "DerivedFieldConfig",
    "FieldError",
    "FieldType",
    "FormData",
    "FormField",
    "FormSchema",
    "FormValidation",
    "RuleKind",
    "SelectOption",
    "ValidationRule",
    # Collaborators
    "FormBuilder",
    "SchemaCheckResult",
    "check_schema",
    "FormSession",
    "FormStore",
    # Errors
    "DerivedFieldCycleError",
    "FieldNotFoundError",
    "FormEngineError",
    "InvalidParentFieldError",
    "StorageError",
]

__version__ = "0.1.0"
