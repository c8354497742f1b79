"""
Exceptions raised by the schema-editing and storage collaborators.

The evaluation engine itself never raises for well-typed input: validation
failures are FieldError values and missing derived inputs are absent results.
"""


class FormEngineError(Exception):
    """Base class for Form Engine errors."""


class FieldNotFoundError(FormEngineError, KeyError):
    """Raised when a field id is not part of the schema being edited."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Unknown field: {field_id}")

    def __str__(self) -> str:
        return f"Unknown field: {self.field_id}"


class InvalidParentFieldError(FormEngineError, ValueError):
    """Raised when a derived field names a parent it may not depend on."""

    def __init__(self, field_id: str, parent_id: str, reason: str):
        self.field_id = field_id
        self.parent_id = parent_id
        self.reason = reason
        super().__init__(f"Field '{field_id}' cannot use '{parent_id}' as a parent: {reason}")


class DerivedFieldCycleError(FormEngineError, ValueError):
    """Raised when a derived-field edit would make a field depend on itself."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__("Derived field cycle: " + " -> ".join(cycle + cycle[:1]))


class StorageError(FormEngineError):
    """Raised when a schema cannot be written to the form store."""
