"""Tests for the MCP tool handlers."""

import pytest

from form_engine.config import get_config
from form_engine.mcp_server.tools import get_mcp_tools, handle_tool_call

FIELDS = [
    {"id": "first", "type": "text", "label": "First", "order": 0,
     "validationRules": [{"type": "required", "message": ""}]},
    {"id": "email", "type": "text", "label": "Email", "order": 1,
     "validationRules": [{"type": "email", "message": ""}]},
    {"id": "dob", "type": "date", "label": "Birth date", "order": 2},
    {"id": "age", "type": "number", "label": "Age", "order": 3, "isDerived": True,
     "derivedConfig": {"parentFields": ["dob"], "computation": "age", "formula": ""}},
]


@pytest.fixture
def storage_path(tmp_path, monkeypatch):
    path = tmp_path / "forms.json"
    monkeypatch.setattr(get_config(), "storage_path", str(path))
    return path


class TestToolDefinitions:
    """Tests for get_mcp_tools."""

    def test_every_tool_has_a_handler(self):
        """Test that each advertised tool can be dispatched."""
        names = [t["name"] for t in get_mcp_tools()]
        assert names == [
            "validate_form",
            "compute_derived_value",
            "refresh_derived_values",
            "check_schema",
            "list_schemas",
            "save_schema",
        ]
        for tool in get_mcp_tools():
            assert tool["inputSchema"]["type"] == "object"


class TestHandleToolCall:
    """Tests for handle_tool_call."""

    def test_validate_form(self):
        """Test validating a JSON data bag."""
        result = handle_tool_call("validate_form", {"fields": FIELDS, "data": {"email": "a@b"}})
        assert result["is_valid"] is False
        assert [e["field_id"] for e in result["errors"]] == ["first", "email"]
        assert result["error_map"]["first"] == "First is required"

    def test_compute_derived_value(self):
        """Test computing an age from an ISO date."""
        result = handle_tool_call("compute_derived_value", {
            "field": FIELDS[3],
            "fields": FIELDS,
            "data": {"dob": "2000-10-20"},
            "today": "2026-10-19",
        })
        assert result == {"field_id": "age", "value": 25}

    def test_refresh_derived_values(self):
        """Test the refresh loop through the tool interface."""
        result = handle_tool_call("refresh_derived_values", {
            "fields": FIELDS,
            "data": {"dob": "2000-01-01", "first": "Jane"},
            "today": "2026-10-19",
        })
        assert result["data"] == {"dob": "2000-01-01", "first": "Jane", "age": 26}
        assert result["converged"] is True
        assert result["cycle_fields"] == []

    def test_refresh_with_zero_pass_limit(self):
        """Test that a zero pass limit still computes derived values."""
        result = handle_tool_call("refresh_derived_values", {
            "fields": FIELDS,
            "data": {"dob": "2000-01-01", "first": "Jane"},
            "today": "2026-10-19",
            "max_passes": 0,
        })
        assert result["data"]["age"] == 26
        assert result["passes"] == 1

    def test_check_schema(self):
        """Test reporting a cycle."""
        fields = [
            {"id": "x", "type": "number", "label": "X", "order": 0, "isDerived": True,
             "derivedConfig": {"parentFields": ["x"], "computation": "sum"}},
        ]
        result = handle_tool_call("check_schema", {"fields": fields})
        assert result["is_valid"] is False
        assert result["cycles"] == [["x"]]

    def test_save_and_list(self, storage_path):
        """Test storing a schema and listing it."""
        saved = handle_tool_call("save_schema", {"schema": {"id": "f1", "name": "Signup", "fields": FIELDS}})
        assert saved["schema"]["id"] == "f1"
        listed = handle_tool_call("list_schemas", {})
        assert [s["name"] for s in listed["schemas"]] == ["Signup"]
        assert listed["schemas"][0]["field_count"] == 4
        assert storage_path.exists()

    def test_unknown_tool(self):
        """Test that unknown tools return an error payload."""
        assert handle_tool_call("explode", {}) == {"error": "Unknown tool: explode"}

    def test_invalid_fields(self):
        """Test that malformed fields return an error payload."""
        result = handle_tool_call("validate_form", {"fields": [{"id": "a", "type": "slider"}]})
        assert result["error"] == "Invalid arguments"
        assert result["details"]

    def test_unexpected_argument(self):
        """Test that unexpected arguments return an error payload."""
        result = handle_tool_call("check_schema", {"fields": [], "colour": "red"})
        assert "error" in result

    def test_bad_today(self):
        """Test that an unparseable reference date returns an error payload."""
        result = handle_tool_call("compute_derived_value", {"field": FIELDS[3], "today": "soon"})
        assert "error" in result
