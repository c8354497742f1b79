"""
Rule evaluator.

Evaluates one validation rule against one field value. Failures are
returned as FieldError values, never raised.
"""

import logging
from typing import Any, Callable

from form_engine.engine.constants import (
    CUSTOM_MESSAGE,
    DIGIT_PATTERN,
    EMAIL_MESSAGE,
    EMAIL_PATTERN,
    MAX_LENGTH_MESSAGE,
    MIN_LENGTH_MESSAGE,
    PASSWORD_MESSAGE,
    PASSWORD_MIN_LENGTH,
    REQUIRED_MESSAGE,
)
from form_engine.models.field_definitions import RuleKind, ValidationRule
from form_engine.models.validation_result import FieldError

logger = logging.getLogger(__name__)

# Called for ``custom`` rules; returns True when the value passes
CustomRuleHook = Callable[[ValidationRule, Any], bool]


def is_missing(value: Any) -> bool:
    """True for None, blank strings and empty lists."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_password(value: str) -> bool:
    return len(value) >= PASSWORD_MIN_LENGTH and DIGIT_PATTERN.search(value) is not None


def _threshold(rule: ValidationRule) -> float | None:
    value = rule.value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _format_threshold(threshold: float) -> str:
    return str(int(threshold)) if float(threshold).is_integer() else str(threshold)


def _error(rule: ValidationRule, field_id: str, default: str, **params: Any) -> FieldError:
    kind = rule.kind.value if isinstance(rule.kind, RuleKind) else rule.kind
    message = rule.message or default.format(**params)
    return FieldError(field_id=field_id, message=message, rule=kind)


def evaluate_rule(
    rule: ValidationRule,
    field_label: str,
    value: Any,
    field_id: str = "",
    custom_hook: CustomRuleHook | None = None,
) -> FieldError | None:
    """
    Evaluate a single rule against a value.

    Args:
        rule: The rule to check.
        field_label: Label used in default messages.
        value: Current value of the field (None when absent).
        field_id: Id recorded on the returned error.
        custom_hook: Optional checker for ``custom`` rules.

    Returns:
        A FieldError when the rule fails, otherwise None.
    """
    kind = rule.kind

    if kind == RuleKind.REQUIRED:
        if is_missing(value):
            return _error(rule, field_id, REQUIRED_MESSAGE, label=field_label)
        return None

    if kind == RuleKind.MIN_LENGTH or kind == RuleKind.MAX_LENGTH:
        # Length rules only constrain strings
        if not isinstance(value, str):
            return None
        threshold = _threshold(rule)
        if threshold is None:
            logger.debug(f"Ignoring {kind} rule with unusable threshold {rule.value!r}")
            return None
        shown = _format_threshold(threshold)
        if kind == RuleKind.MIN_LENGTH and len(value) < threshold:
            return _error(rule, field_id, MIN_LENGTH_MESSAGE, label=field_label, value=shown)
        if kind == RuleKind.MAX_LENGTH and len(value) > threshold:
            return _error(rule, field_id, MAX_LENGTH_MESSAGE, label=field_label, value=shown)
        return None

    if kind == RuleKind.EMAIL:
        # Empty input is left to a separate required rule
        if isinstance(value, str) and value and not is_valid_email(value):
            return _error(rule, field_id, EMAIL_MESSAGE)
        return None

    if kind == RuleKind.PASSWORD:
        # No exemption for the empty string
        if isinstance(value, str) and not is_valid_password(value):
            return _error(rule, field_id, PASSWORD_MESSAGE)
        return None

    if kind == RuleKind.CUSTOM:
        if custom_hook is None:
            return None
        try:
            passed = custom_hook(rule, value)
        except Exception as e:
            logger.warning(f"Custom rule hook failed for field {field_id or field_label}: {e}")
            return None
        if not passed:
            return _error(rule, field_id, CUSTOM_MESSAGE, label=field_label)
        return None

    logger.debug(f"Ignoring rule of unknown kind {kind!r} on field {field_id or field_label}")
    return None
