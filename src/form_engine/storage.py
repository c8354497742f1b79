"""
JSON file store for form schemas.

All schemas live in one JSON document (a list, camelCase keys). Dates and
datetimes are written as ISO-8601 text and parsed back on load.
"""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from form_engine.config import get_config
from form_engine.exceptions import StorageError
from form_engine.models.field_definitions import FormSchema

logger = logging.getLogger(__name__)

_schema_list = TypeAdapter(list[FormSchema])


class FormStore:
    """
    Persists FormSchema objects to a JSON file.

    Usage:
        store = FormStore("forms.json")
        store.save_schema(schema)
        schemas = store.load_schemas()
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or get_config().storage_path)

    def load_schemas(self) -> list[FormSchema]:
        """
        Load every stored schema.

        A missing or unreadable file yields an empty list. Entries that no
        longer validate are skipped.
        """
        if not self.path.exists():
            return []

        try:
            raw = TypeAdapter(list[dict]).validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error(f"Error loading forms from {self.path}: {e}")
            return []

        schemas: list[FormSchema] = []
        for entry in raw:
            try:
                schemas.append(FormSchema.model_validate(entry))
            except ValidationError as e:
                logger.error(f"Skipping stored form {entry.get('id', '?')}: {e}")
        return schemas

    def get_schema(self, schema_id: str) -> FormSchema | None:
        for schema in self.load_schemas():
            if schema.id == schema_id:
                return schema
        return None

    def save_schema(self, schema: FormSchema) -> FormSchema:
        """
        Insert a schema, or replace the stored one with the same id.

        A replaced schema gets a fresh ``updated_at``.
        """
        schemas = self.load_schemas()
        for index, existing in enumerate(schemas):
            if existing.id == schema.id:
                schema = schema.model_copy(update={"updated_at": datetime.now(timezone.utc)})
                schemas[index] = schema
                break
        else:
            schemas.append(schema)

        self._write(schemas)
        logger.info(f"Saved form {schema.id} ({schema.name})")
        return schema

    def delete_schema(self, schema_id: str) -> bool:
        """Remove a schema; returns False when no schema had that id."""
        schemas = self.load_schemas()
        remaining = [s for s in schemas if s.id != schema_id]
        if len(remaining) == len(schemas):
            return False
        self._write(remaining)
        logger.info(f"Deleted form {schema_id}")
        return True

    def _write(self, schemas: list[FormSchema]) -> None:
        payload = _schema_list.dump_json(
            schemas, by_alias=True, indent=get_config().indent_json_output
        )
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f"Error saving forms to {self.path}: {e}")
            raise StorageError(f"Failed to save forms to {self.path}") from e
