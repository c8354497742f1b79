"""Tests for the JSON form store."""

import json
import os
from datetime import date

import pytest

from form_engine.exceptions import StorageError
from form_engine.models.field_definitions import FormSchema
from form_engine.storage import FormStore


@pytest.fixture
def store(tmp_path) -> FormStore:
    return FormStore(tmp_path / "forms.json")


class TestFormStore:
    """Tests for FormStore."""

    def test_empty_store(self, store):
        """Test that a missing file reads as no schemas."""
        assert store.load_schemas() == []
        assert store.get_schema("anything") is None

    def test_round_trip(self, store, profile_schema):
        """Test that dates and derived configuration survive storage."""
        profile_schema.fields[2].default_value = date(1999, 12, 31)
        store.save_schema(profile_schema)

        loaded = store.get_schema(profile_schema.id)
        assert loaded == profile_schema
        assert loaded.fields[2].default_value == date(1999, 12, 31)
        assert loaded.created_at == profile_schema.created_at

    def test_file_uses_camel_case(self, store, profile_schema):
        """Test the stored key names."""
        store.save_schema(profile_schema)
        stored = json.loads(store.path.read_text())
        assert stored[0]["createdAt"]
        assert "validationRules" in stored[0]["fields"][0]
        assert stored[0]["fields"][3]["derivedConfig"]["parentFields"] == ["first_name", "last_name"]
        assert stored[0]["fields"][0]["validationRules"][0]["type"] == "required"

    def test_replace_refreshes_updated_at(self, store, profile_schema):
        """Test that saving an existing id replaces it."""
        store.save_schema(profile_schema)
        renamed = profile_schema.model_copy(update={"name": "Renamed"})
        saved = store.save_schema(renamed)

        schemas = store.load_schemas()
        assert len(schemas) == 1
        assert schemas[0].name == "Renamed"
        assert saved.updated_at >= profile_schema.updated_at
        assert schemas[0].created_at == profile_schema.created_at

    def test_delete(self, store, profile_schema):
        """Test deleting schemas."""
        store.save_schema(profile_schema)
        store.save_schema(FormSchema(name="Other"))
        assert store.delete_schema(profile_schema.id) is True
        assert store.delete_schema(profile_schema.id) is False
        assert [s.name for s in store.load_schemas()] == ["Other"]

    def test_corrupt_file(self, store):
        """Test that an unreadable file yields no schemas."""
        store.path.write_text("{not json")
        assert store.load_schemas() == []

    def test_invalid_entry_skipped(self, store, profile_schema):
        """Test that entries that no longer validate are skipped."""
        store.save_schema(profile_schema)
        stored = json.loads(store.path.read_text())
        stored.append({"id": "broken"})
        store.path.write_text(json.dumps(stored))
        assert [s.id for s in store.load_schemas()] == [profile_schema.id]

    def test_write_failure(self, tmp_path, profile_schema):
        """Test that a write failure raises StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = FormStore(blocker / "forms.json")
        with pytest.raises(StorageError):
            store.save_schema(profile_schema)

    def test_failed_replace_leaves_no_temp_file(self, tmp_path, profile_schema, monkeypatch):
        """Test that a failed write removes its temporary file."""
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        store = FormStore(tmp_path / "forms.json")
        with pytest.raises(StorageError):
            store.save_schema(profile_schema)
        assert list(tmp_path.glob("*.tmp")) == []
        assert not (tmp_path / "forms.json").exists()
