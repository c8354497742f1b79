"""
Helpers for the data bag of a form-fill session.

A data bag maps field ids to their current value: a scalar, a list of
strings (checkbox) or a date. Bags that arrive as JSON carry dates as
ISO-8601 text; ``coerce_form_data`` turns those back into ``date`` values.
"""

from datetime import date, datetime
from typing import Any, Iterable

from form_engine.models.field_definitions import FieldType, FormField, parse_date

FormData = dict[str, Any]


def coerce_form_data(fields: Iterable[FormField], data: FormData) -> FormData:
    """Return a copy of ``data`` with date-field values parsed into dates."""
    coerced = dict(data)
    for field in fields:
        if field.type is not FieldType.DATE or field.id not in coerced:
            continue
        parsed = parse_date(coerced[field.id])
        if parsed is not None:
            coerced[field.id] = parsed
    return coerced


def to_jsonable(data: FormData) -> dict[str, Any]:
    """Return a copy of ``data`` with dates rendered as ISO-8601 text."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (date, datetime)):
            result[key] = value.isoformat()
        else:
            result[key] = value
    return result
