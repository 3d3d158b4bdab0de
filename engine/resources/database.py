"""
Game Database.

Handles loading and validation of static game data files.

Layout under the data path:
    schemas/<name>.schema.json
    <document>.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

from engine.core.errors import DataError


class Database:
    """
    Central storage for static game data documents.

    A document that is missing is reported and left as None. A document
    that exists but is unreadable or fails its schema raises DataError in
    strict mode, and is otherwise logged and left as None.
    """

    # document attribute -> (file name, schema file name)
    DOCUMENTS: dict[str, tuple[str, str]] = {
        "map_data": ("map-data.json", "map.schema.json"),
        "resume_data": ("resume-data.json", "resume.schema.json"),
    }

    def __init__(self, data_path: Path | str, strict: bool = False):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}
        self.strict = strict

        self.map_data: dict[str, Any] | None = None
        self.resume_data: dict[str, Any] | None = None

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_all(self) -> None:
        """Load every known document from disk."""
        self._load_schemas()

        for attr, (file_name, schema_name) in self.DOCUMENTS.items():
            setattr(self, attr, self._load_document(file_name, schema_name))

        loaded = [attr for attr in self.DOCUMENTS if getattr(self, attr) is not None]
        self.logger.info(
            f"Loaded {len(loaded)}/{len(self.DOCUMENTS)} documents from {self._data_path}"
        )

    def _load_schemas(self) -> None:
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in schema_dir.glob("*.schema.json"):
            try:
                with open(schema_file, "r", encoding="utf-8") as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_document(self, file_name: str, schema_name: str) -> dict[str, Any] | None:
        file_path = self._data_path / file_name
        if not file_path.exists():
            self.logger.warning(f"Data file not found: {file_path}")
            return None

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            return self._reject(file_path, f"unreadable JSON ({e})")

        if not isinstance(data, dict):
            return self._reject(file_path, "top-level value must be an object")

        schema = self._schemas.get(schema_name)
        if schema is None:
            self.logger.warning(f"No schema {schema_name} for {file_name}, loading unvalidated")
            return data

        try:
            jsonschema.validate(instance=data, schema=schema)
        except jsonschema.ValidationError as e:
            where = "/".join(str(p) for p in e.absolute_path) or "<root>"
            return self._reject(file_path, f"schema violation at {where}: {e.message}")

        return data

    def _reject(self, file_path: Path, reason: str) -> None:
        if self.strict:
            raise DataError(file_path, reason)
        self.logger.error(f"Ignoring {file_path}: {reason}")
        return None
