"""
Derived value computer.

Computes the value of a derived field from the current values of its
parent fields. The data bag is only read. A value that cannot be
computed yet (missing or invalid parent data) is returned as None.
"""

import logging
import math
from datetime import date, datetime
from typing import Any, Callable, Mapping

from form_engine.engine.constants import CONCAT_LIST_SEPARATOR, CONCAT_SEPARATOR
from form_engine.models.field_definitions import ComputationKind, DerivedFieldConfig, FormField

logger = logging.getLogger(__name__)

# Called for the ``custom`` computation; returns the derived value or None
CustomComputationHook = Callable[[DerivedFieldConfig, Mapping[str, Any]], Any]


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def age_on(birth_date: date, today: date) -> int:
    """Whole years from ``birth_date`` to ``today``."""
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def _compute_age(config: DerivedFieldConfig, data: Mapping[str, Any], today: date | None) -> int | None:
    if not config.parent_fields:
        return None
    # Only the first parent is consulted
    birth = data.get(config.parent_fields[0])
    if isinstance(birth, datetime):
        birth = birth.date()
    if not isinstance(birth, date):
        return None
    return age_on(birth, today or date.today())


def _compute_sum(config: DerivedFieldConfig, data: Mapping[str, Any]) -> int | float:
    total: int | float = 0
    for field_id in config.parent_fields:
        value = data.get(field_id)
        if is_number(value):
            total += value
    return total


def _is_blank(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def _to_text(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return CONCAT_LIST_SEPARATOR.join(_to_text(item) for item in value)
    return str(value)


def _compute_concat(config: DerivedFieldConfig, data: Mapping[str, Any]) -> str:
    values = (data.get(field_id) for field_id in config.parent_fields)
    return CONCAT_SEPARATOR.join(_to_text(value) for value in values if not _is_blank(value))


def compute_derived_value(
    field: FormField,
    data: Mapping[str, Any],
    today: date | None = None,
    custom_hook: CustomComputationHook | None = None,
) -> Any:
    """
    Compute the value of a derived field.

    Args:
        field: The field to compute. Non-derived fields yield None.
        data: Mapping of field id to current value.
        today: Reference date for ``age``; defaults to the current date.
        custom_hook: Optional implementation of the ``custom`` computation.

    Returns:
        The computed value, or None when it cannot be computed.
    """
    if not field.is_derived or field.derived_config is None:
        return None

    config = field.derived_config
    computation = config.computation

    if computation == ComputationKind.AGE:
        return _compute_age(config, data, today)
    if computation == ComputationKind.SUM:
        return _compute_sum(config, data)
    if computation == ComputationKind.CONCAT:
        return _compute_concat(config, data)
    if computation == ComputationKind.CUSTOM:
        if custom_hook is None:
            return None
        try:
            return custom_hook(config, data)
        except Exception as e:
            logger.warning(f"Custom computation failed for field {field.id}: {e}")
            return None

    logger.debug(f"Unknown computation {computation!r} on field {field.id}")
    return None
