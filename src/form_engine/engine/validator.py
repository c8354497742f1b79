"""
Field and form validators.

Every rule of every field is evaluated; nothing short-circuits. The field
type is not inspected here, value shape is the renderer's concern.
"""

from typing import Any, Iterable, Mapping

from form_engine.engine.rules import CustomRuleHook, evaluate_rule
from form_engine.models.field_definitions import FormField
from form_engine.models.validation_result import FieldError, FormValidation


def validate_field(
    field: FormField,
    value: Any,
    custom_hook: CustomRuleHook | None = None,
) -> list[FieldError]:
    """Evaluate the field's rules in declared order and collect every failure."""
    errors: list[FieldError] = []
    for rule in field.validation_rules:
        error = evaluate_rule(rule, field.label, value, field_id=field.id, custom_hook=custom_hook)
        if error is not None:
            errors.append(error)
    return errors


def validate_form(
    fields: Iterable[FormField],
    data: Mapping[str, Any],
    custom_hook: CustomRuleHook | None = None,
) -> FormValidation:
    """
    Validate a data bag against a list of fields.

    Derived fields are validated like any other field. Errors follow the
    iteration order of ``fields``; pass them sorted by ``order`` for a
    top-to-bottom error list.

    Args:
        fields: Fields of the schema.
        data: Mapping of field id to current value.
        custom_hook: Optional checker for ``custom`` rules.

    Returns:
        FormValidation with ``is_valid`` true iff no rule failed.
    """
    all_errors: list[FieldError] = []
    for field in fields:
        all_errors.extend(validate_field(field, data.get(field.id), custom_hook))

    return FormValidation(is_valid=len(all_errors) == 0, errors=all_errors)
