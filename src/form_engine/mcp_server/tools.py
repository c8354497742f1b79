"""
MCP tool definitions for Form Engine.

Each tool is a plain function taking JSON-decoded arguments and returning
a JSON-serialisable dict, so the handlers can be called directly as well
as through the MCP server.
"""

import logging
from datetime import date
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from form_engine.builder import check_schema
from form_engine.engine.derived import compute_derived_value
from form_engine.engine.refresh import refresh_derived_values
from form_engine.engine.validator import validate_form
from form_engine.exceptions import FormEngineError
from form_engine.models.field_definitions import FormField, FormSchema
from form_engine.models.form_data import coerce_form_data, to_jsonable
from form_engine.storage import FormStore

logger = logging.getLogger("form-engine-mcp")

_field_list = TypeAdapter(list[FormField])


def _parse_fields(raw: Any) -> list[FormField]:
    return _field_list.validate_python(raw or [])


def _parse_today(raw: str | None) -> date | None:
    return date.fromisoformat(raw) if raw else None


def _jsonable_value(value: Any) -> Any:
    return to_jsonable({"value": value})["value"]


def validate_form_tool(fields: list[dict], data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Validate a data bag; fields are evaluated in ascending ``order``."""
    parsed = sorted(_parse_fields(fields), key=lambda f: f.order)
    bag = coerce_form_data(parsed, data or {})
    validation = validate_form(parsed, bag)
    return {
        **validation.model_dump(mode="json"),
        "error_map": validation.to_error_dict(),
    }


def compute_derived_value_tool(
    field: dict,
    data: dict[str, Any] | None = None,
    fields: list[dict] | None = None,
    today: str | None = None,
) -> dict[str, Any]:
    """Compute one derived field. ``fields`` lets date parents be parsed."""
    parsed_field = FormField.model_validate(field)
    bag = coerce_form_data(_parse_fields(fields), data or {})
    value = compute_derived_value(parsed_field, bag, today=_parse_today(today))
    return {"field_id": parsed_field.id, "value": _jsonable_value(value)}


def refresh_derived_values_tool(
    fields: list[dict],
    data: dict[str, Any] | None = None,
    today: str | None = None,
    max_passes: int | None = None,
) -> dict[str, Any]:
    """Run the refresh loop and return the updated bag."""
    parsed = _parse_fields(fields)
    bag = coerce_form_data(parsed, data or {})
    result = refresh_derived_values(parsed, bag, max_passes=max_passes, today=_parse_today(today))
    return {
        "data": to_jsonable(result.data),
        "passes": result.passes,
        "changed_fields": result.changed_fields,
        "converged": result.converged,
        "cycle_fields": result.cycle_fields,
    }


def check_schema_tool(fields: list[dict]) -> dict[str, Any]:
    return check_schema(_parse_fields(fields)).model_dump()


def list_schemas_tool() -> dict[str, Any]:
    schemas = FormStore().load_schemas()
    return {
        "schemas": [
            {
                "id": s.id,
                "name": s.name,
                "field_count": len(s.fields),
                "updated_at": s.updated_at.isoformat(),
            }
            for s in schemas
        ]
    }


def save_schema_tool(schema: dict) -> dict[str, Any]:
    saved = FormStore().save_schema(FormSchema.model_validate(schema))
    return {"schema": saved.model_dump(mode="json", by_alias=True)}


TOOL_HANDLERS: dict[str, Callable[..., dict[str, Any]]] = {
    "validate_form": validate_form_tool,
    "compute_derived_value": compute_derived_value_tool,
    "refresh_derived_values": refresh_derived_values_tool,
    "check_schema": check_schema_tool,
    "list_schemas": list_schemas_tool,
    "save_schema": save_schema_tool,
}


def handle_tool_call(name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
    """
    Dispatch a tool call by name.

    Malformed arguments are reported as an ``error`` payload rather than
    raised, so the MCP client always gets a JSON answer.
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return {"error": f"Unknown tool: {name}"}

    try:
        return handler(**(arguments or {}))
    except ValidationError as e:
        logger.warning(f"Invalid arguments for {name}: {e.error_count()} errors")
        return {"error": "Invalid arguments", "details": e.errors(include_url=False, include_input=False)}
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid arguments for {name}: {e}")
        return {"error": str(e)}
    except FormEngineError as e:
        logger.error(f"Error in {name}: {e}")
        return {"error": str(e)}


_FIELDS_SCHEMA = {
    "type": "array",
    "items": {"type": "object"},
    "description": "Form fields (id, type, label, validationRules, isDerived, derivedConfig, order)",
}

_DATA_SCHEMA = {
    "type": "object",
    "description": "Data bag mapping field id to value; dates as YYYY-MM-DD",
}


def get_mcp_tools() -> list[dict]:
    """
    Get MCP tool definitions for registration with MCP server.

    Returns list of tool schemas compatible with MCP protocol.
    """
    return [
        {
            "name": "validate_form",
            "description": "Validate form data against the rules of each field. "
            "Returns is_valid, the ordered error list and a field-to-message map.",
            "inputSchema": {
                "type": "object",
                "properties": {"fields": _FIELDS_SCHEMA, "data": _DATA_SCHEMA},
                "required": ["fields"],
            },
        },
        {
            "name": "compute_derived_value",
            "description": "Compute the value of one derived field (age, sum or concat) "
            "from the current form data. Returns null when it cannot be computed.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "field": {"type": "object", "description": "The derived field"},
                    "data": _DATA_SCHEMA,
                    "fields": _FIELDS_SCHEMA,
                    "today": {"type": "string", "description": "Reference date, YYYY-MM-DD"},
                },
                "required": ["field"],
            },
        },
        {
            "name": "refresh_derived_values",
            "description": "Recompute every derived field until the values settle and "
            "return the updated form data.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "fields": _FIELDS_SCHEMA,
                    "data": _DATA_SCHEMA,
                    "today": {"type": "string", "description": "Reference date, YYYY-MM-DD"},
                    "max_passes": {"type": "integer", "description": "Upper bound on passes; at least one pass runs"},
                },
                "required": ["fields"],
            },
        },
        {
            "name": "check_schema",
            "description": "Report configuration problems in a field list, such as "
            "derived fields that depend on themselves.",
            "inputSchema": {
                "type": "object",
                "properties": {"fields": _FIELDS_SCHEMA},
                "required": ["fields"],
            },
        },
        {
            "name": "list_schemas",
            "description": "List the stored form schemas.",
            "inputSchema": {"type": "object", "properties": {}},
        },
        {
            "name": "save_schema",
            "description": "Store a form schema, replacing any stored schema with the same id.",
            "inputSchema": {
                "type": "object",
                "properties": {"schema": {"type": "object", "description": "The form schema"}},
                "required": ["schema"],
            },
        },
    ]
