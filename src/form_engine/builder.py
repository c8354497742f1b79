"""
Form builder.

Edits the field list of a schema: add, update, delete and reorder fields,
attach rules, options and derived configuration, then build or save the
resulting FormSchema. Field ``order`` is renumbered to 0..n-1 after every
structural edit, and derived-field edits are checked against the
dependency graph so a cycle is reported when it is introduced.
"""

import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Iterable, TYPE_CHECKING

from pydantic import BaseModel, Field

from form_engine.engine.graph import DependencyGraph
from form_engine.exceptions import (
    DerivedFieldCycleError,
    FieldNotFoundError,
    InvalidParentFieldError,
)
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
)

if TYPE_CHECKING:
    from form_engine.storage import FormStore

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = [
    SelectOption(label="Option 1", value="option1"),
    SelectOption(label="Option 2", value="option2"),
]


class SchemaCheckResult(BaseModel):
    """Result of checking a field list for configuration problems."""

    is_valid: bool = Field(..., description="Whether the schema can be evaluated safely")
    errors: list[str] = Field(default_factory=list, description="Blocking problems")
    warnings: list[str] = Field(default_factory=list, description="Non-blocking problems")
    cycles: list[list[str]] = Field(default_factory=list, description="Derived-field cycles")


def check_schema(fields: Iterable[FormField]) -> SchemaCheckResult:
    """
    Check a field list for problems the evaluator would silently tolerate.

    Errors:
        duplicate field ids, derived fields that depend on themselves.
    Warnings:
        unknown or derived parent fields, age fields without a parent,
        derived fields without configuration, unknown rule or computation
        kinds, select/radio fields without options, gaps in ``order``.
    """
    fields = list(fields)
    errors: list[str] = []
    warnings: list[str] = []
    by_id: dict[str, FormField] = {}

    for field in fields:
        if field.id in by_id:
            errors.append(f"Duplicate field id '{field.id}'")
        by_id[field.id] = field

    orders = sorted(f.order for f in fields)
    if orders != list(range(len(fields))):
        warnings.append("Field order is not a dense 0-based sequence")

    graph = DependencyGraph.from_fields(fields)
    cycles = graph.find_cycles()
    for cycle in cycles:
        if len(cycle) == 1:
            errors.append(f"Derived field '{cycle[0]}' uses itself as a parent")
        else:
            errors.append("Derived fields depend on each other: " + " -> ".join(cycle + cycle[:1]))

    for field_id, missing in graph.missing_parents().items():
        for parent_id in missing:
            warnings.append(f"Derived field '{field_id}' references unknown field '{parent_id}'")

    for field in fields:
        for rule in field.validation_rules:
            if not isinstance(rule.kind, RuleKind):
                warnings.append(f"Field '{field.id}' has a rule of unknown kind '{rule.kind}'")

        if field.type in (FieldType.SELECT, FieldType.RADIO) and not field.options:
            warnings.append(f"Field '{field.id}' has no options")

        if not field.is_derived:
            continue
        config = field.derived_config
        if config is None:
            warnings.append(f"Derived field '{field.id}' has no derived configuration")
            continue
        if not isinstance(config.computation, ComputationKind):
            warnings.append(
                f"Derived field '{field.id}' has unknown computation '{config.computation}'"
            )
        if config.computation == ComputationKind.AGE and not config.parent_fields:
            warnings.append(f"Age field '{field.id}' has no parent date field")
        for parent_id in config.parent_fields:
            parent = by_id.get(parent_id)
            if parent is not None and parent.is_derived and parent_id != field.id:
                warnings.append(
                    f"Derived field '{field.id}' uses derived field '{parent_id}' as a parent"
                )

    return SchemaCheckResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        cycles=cycles,
    )


def generate_field_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"field_{int(time.time() * 1000)}_{suffix}"


class FormBuilder:
    """
    Editable field list for one form schema.

    Usage:
        builder = FormBuilder()
        name = builder.add_field(FieldType.TEXT)
        builder.update_field(name.id, label="Full name")
        builder.update_field_validation(name.id, [ValidationRule(kind="required")])

        schema = builder.save_schema("Sign-up", store)
    """

    def __init__(self, initial_form: FormSchema | None = None):
        self.initial_form = initial_form
        self.form_name = initial_form.name if initial_form else ""
        self.selected_field_id: str | None = None
        self._fields: list[FormField] = (
            [f.model_copy(deep=True) for f in initial_form.ordered_fields()] if initial_form else []
        )

    @property
    def fields(self) -> list[FormField]:
        """Fields in ascending order."""
        return sorted(self._fields, key=lambda f: f.order)

    def get_field(self, field_id: str) -> FormField:
        for field in self._fields:
            if field.id == field_id:
                return field
        raise FieldNotFoundError(field_id)

    @property
    def selected_field(self) -> FormField | None:
        if self.selected_field_id is None:
            return None
        try:
            return self.get_field(self.selected_field_id)
        except FieldNotFoundError:
            return None

    def select_field(self, field_id: str | None) -> None:
        if field_id is not None:
            self.get_field(field_id)
        self.selected_field_id = field_id

    def add_field(self, field_type: FieldType | str) -> FormField:
        """Append a new field of the given type and select it."""
        field_type = FieldType(field_type)
        field = self._new_field(field_type)
        self._fields.append(field)
        self.selected_field_id = field.id
        logger.debug(f"Added {field_type.value} field {field.id}")
        return field

    def _new_field(self, field_type: FieldType) -> FormField:
        options = None
        if field_type in CHOICE_FIELD_TYPES:
            options = [o.model_copy() for o in DEFAULT_OPTIONS]
        return FormField(
            id=generate_field_id(),
            type=field_type,
            label=f"{field_type.value.capitalize()} Field",
            required=False,
            validation_rules=[],
            order=len(self._fields),
            options=options,
        )

    def update_field(self, field_id: str, **updates: Any) -> FormField:
        """
        Replace attributes of a field.

        The updated field is validated as a whole. Edits that make a field
        depend on itself raise DerivedFieldCycleError and leave the field
        unchanged.
        """
        current = self.get_field(field_id)
        aliases = {info.alias: name for name, info in FormField.model_fields.items() if info.alias}
        updates = {aliases.get(key, key): value for key, value in updates.items()}
        updates.pop("id", None)
        updated = FormField.model_validate({**current.model_dump(), **updates})

        index = self._fields.index(current)
        self._fields[index] = updated
        if (
            updated.is_derived != current.is_derived
            or updated.derived_config != current.derived_config
        ):
            try:
                self._ensure_acyclic(field_id)
            except DerivedFieldCycleError:
                self._fields[index] = current
                raise
        return updated

    def delete_field(self, field_id: str) -> None:
        """Remove a field and renumber the remaining ones."""
        field = self.get_field(field_id)
        remaining = [f for f in self.fields if f is not field]
        self._fields = [f.model_copy(update={"order": index}) for index, f in enumerate(remaining)]
        if self.selected_field_id == field_id:
            self.selected_field_id = None

    def reorder_fields(self, start_index: int, end_index: int) -> None:
        """Move the field at ``start_index`` to ``end_index`` and renumber."""
        result = self.fields
        if not 0 <= start_index < len(result):
            raise IndexError(f"No field at position {start_index}")
        moved = result.pop(start_index)
        result.insert(end_index, moved)
        self._fields = [f.model_copy(update={"order": index}) for index, f in enumerate(result)]

    def update_field_validation(self, field_id: str, rules: list[ValidationRule]) -> FormField:
        return self.update_field(field_id, validation_rules=[r.model_dump() for r in rules])

    def update_field_options(self, field_id: str, options: list[SelectOption]) -> FormField:
        return self.update_field(field_id, options=[o.model_dump() for o in options])

    def available_parent_fields(self, field_id: str) -> list[FormField]:
        """Fields a derived field may compute from: its non-derived siblings."""
        return [f for f in self.fields if f.id != field_id and not f.is_derived]

    def update_derived_config(self, field_id: str, config: DerivedFieldConfig) -> FormField:
        """Mark a field as derived and set how its value is computed."""
        self.get_field(field_id)
        allowed = {f.id for f in self.available_parent_fields(field_id)}
        for parent_id in config.parent_fields:
            if parent_id == field_id:
                raise InvalidParentFieldError(field_id, parent_id, "a field cannot depend on itself")
            if parent_id not in allowed:
                try:
                    self.get_field(parent_id)
                except FieldNotFoundError:
                    raise InvalidParentFieldError(field_id, parent_id, "no such field") from None
                raise InvalidParentFieldError(field_id, parent_id, "derived fields cannot be parents")
        return self.update_field(field_id, is_derived=True, derived_config=config.model_dump())

    def clear_derived(self, field_id: str) -> FormField:
        return self.update_field(field_id, is_derived=False, derived_config=None)

    def _ensure_acyclic(self, field_id: str) -> None:
        for cycle in DependencyGraph.from_fields(self._fields).find_cycles():
            if field_id in cycle:
                raise DerivedFieldCycleError(cycle)

    def check_schema(self) -> SchemaCheckResult:
        return check_schema(self._fields)

    def build_schema(self, name: str) -> FormSchema:
        """Snapshot the current fields as a FormSchema."""
        now = datetime.now(timezone.utc)
        initial = self.initial_form
        return FormSchema(
            id=initial.id if initial else f"form_{int(time.time() * 1000)}",
            name=name,
            fields=[f.model_copy(deep=True) for f in self.fields],
            created_at=initial.created_at if initial else now,
            updated_at=now,
        )

    def save_schema(self, name: str, store: "FormStore") -> FormSchema:
        """Build the schema and hand it to the form store."""
        schema = self.build_schema(name)
        store.save_schema(schema)
        self.form_name = name
        if self.initial_form is None:
            self.initial_form = schema
        return schema
