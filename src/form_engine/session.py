"""
Form fill session.

Holds the data bag of one preview or fill session for a schema. Every
change replaces the bag, reruns the derivation refresh loop and clears the
displayed error of the edited field; ``submit`` validates the whole form.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from form_engine.engine.constants import NO_VALUE_TEXT
from form_engine.engine.derived import CustomComputationHook
from form_engine.engine.refresh import RefreshResult, initialize_form_data, refresh_derived_values
from form_engine.engine.rules import CustomRuleHook
from form_engine.engine.validator import validate_form
from form_engine.exceptions import FieldNotFoundError
from form_engine.models.field_definitions import FormSchema
from form_engine.models.form_data import FormData
from form_engine.models.validation_result import FormValidation

logger = logging.getLogger(__name__)


@dataclass
class FormSession:
    """
    Data bag and displayed errors for one schema.

    Usage:
        session = FormSession(schema)
        session.set_value("first_name", "Jane")
        result = session.submit()
        if not result.is_valid:
            print(session.errors)   # field id -> message
    """

    schema: FormSchema
    today: date | None = None
    rule_hook: CustomRuleHook | None = None
    computation_hook: CustomComputationHook | None = None
    data: FormData = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    submitted: bool = False
    last_refresh: RefreshResult | None = None

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Start over from the field defaults."""
        self.data = initialize_form_data(
            self.schema.fields, today=self.today, custom_hook=self.computation_hook
        )
        self.errors = {}
        self.submitted = False

    def set_value(self, field_id: str, value: Any) -> FormData:
        """Set one field and bring derived fields up to date."""
        if self.schema.get_field(field_id) is None:
            raise FieldNotFoundError(field_id)
        return self.update({field_id: value})

    def update(self, values: dict[str, Any]) -> FormData:
        """Set several fields at once."""
        for field_id in values:
            self.errors.pop(field_id, None)
        self.last_refresh = refresh_derived_values(
            self.schema.fields,
            {**self.data, **values},
            today=self.today,
            custom_hook=self.computation_hook,
        )
        self.data = self.last_refresh.data
        return self.data

    def validate(self) -> FormValidation:
        return validate_form(self.schema.ordered_fields(), self.data, self.rule_hook)

    def submit(self) -> FormValidation:
        """Validate the bag; on failure record one message per field."""
        validation = self.validate()
        if validation.is_valid:
            self.submitted = True
            self.errors = {}
            logger.info(f"Form {self.schema.id} submitted")
        else:
            self.errors = validation.to_error_dict()
            logger.debug(f"Form {self.schema.id} has {validation.error_count} errors")
        return validation

    def display_value(self, field_id: str) -> str:
        """Text shown for a field; absent values read as "No value"."""
        value = self.data.get(field_id)
        if value is None:
            return NO_VALUE_TEXT
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        return str(value)
