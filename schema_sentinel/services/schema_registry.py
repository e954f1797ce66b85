"""
JSON Schema Compiler & Validator.

SchemaRegistry compiles JSON Schema documents into jsonschema validators and
keeps them keyed by schema id. The id for a document is, in order:
1. the id supplied by the caller
2. the document's own "$id"
3. the resolved file path it was loaded from

Usage:
    registry = SchemaRegistry()
    registry.load_all("contracts/messages")

    result = registry.validate("order-created-event", event)
    if not result.valid:
        for error in result.errors:
            print(f"{error.path}: {error.message}")

get_registry() returns a lazily built process-wide registry holding the
configured message schemas. Prefer constructing a SchemaRegistry and passing
it explicitly; tests should always use their own instance.
"""

import json
import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import jsonschema
from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator

from ..core.config import get_settings
from ..core.errors import NotFoundError, ParseError, SchemaAssertionError
from ..core.resources import FileResourceReader, PathLike, ResourceReader
from ..schemas.json_schema import JsonValidationResult, SchemaViolation

logger = logging.getLogger(__name__)


SCHEMA_SUFFIXES = (".schema.json", ".json")


def schema_id_from_filename(filename: str) -> str:
    """
    Derive a schema id from a schema file name.

    Example:
        >>> schema_id_from_filename("order-created-event.schema.json")
        'order-created-event'
        >>> schema_id_from_filename("legacy.json")
        'legacy'
    """
    for suffix in SCHEMA_SUFFIXES:
        if filename.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def _json_pointer(path) -> str:
    return "".join(f"/{part}" for part in path)


class SchemaRegistry:
    """
    Mapping from schema id to a compiled JSON Schema validator.

    Loads are serialized with a lock; validation only reads the mapping.
    """

    def __init__(self, reader: Optional[ResourceReader] = None) -> None:
        self.reader = reader or FileResourceReader()
        self._validators: dict[str, Validator] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_schema(
        self,
        document: Union[Mapping[str, Any], str, bytes],
        schema_id: Optional[str] = None,
        source_path: Optional[PathLike] = None,
    ) -> str:
        """
        Compile a schema and register it.

        Args:
            document: Parsed schema mapping, or JSON text/bytes
            schema_id: Explicit id; takes precedence over "$id" and source_path
            source_path: File the document came from, used as the last-resort id

        Returns:
            str: The id the schema was registered under

        Raises:
            ParseError: If the JSON is malformed, the schema is invalid, or no id
                can be resolved
        """
        schema = self._parse(document, source_path)
        for keyword in ("$schema", "$id"):
            if keyword in schema and not isinstance(schema[keyword], str):
                raise ParseError(
                    f"Invalid JSON Schema: '{keyword}' must be a string, "
                    f"got {type(schema[keyword]).__name__}"
                )

        resolved_id = schema_id or schema.get("$id") or (
            str(Path(source_path).resolve()) if source_path is not None else None
        )
        if not resolved_id:
            raise ParseError("Cannot determine schema id: no id, $id or source path")

        validator_cls = jsonschema.validators.validator_for(schema, default=Draft7Validator)
        try:
            validator_cls.check_schema(schema)
        except SchemaError as e:
            raise ParseError(f"Invalid JSON Schema {resolved_id}: {e.message}") from e

        validator = validator_cls(schema, format_checker=FormatChecker())
        with self._lock:
            if resolved_id in self._validators:
                logger.debug(f"Replacing schema {resolved_id}")
            self._validators[resolved_id] = validator

        logger.info(f"Loaded schema {resolved_id} ({validator_cls.__name__})")
        return resolved_id

    def load_schema_file(self, path: PathLike, schema_id: Optional[str] = None) -> str:
        """Read a schema file through the reader and register it."""
        return self.load_schema(
            self.reader.read_bytes(path), schema_id, source_path=self.reader.resolve(path)
        )

    def load_all(self, directory: PathLike) -> list[str]:
        """
        Load every *.json schema in a directory.

        Each schema is registered under its file name minus ".schema.json".

        Returns:
            list[str]: Registered ids in file name order
        """
        loaded = []
        for path in self.reader.list_files(directory, "*.json"):
            loaded.append(self.load_schema_file(path, schema_id_from_filename(path.name)))
        return loaded

    @staticmethod
    def _parse(
        document: Union[Mapping[str, Any], str, bytes],
        source_path: Optional[PathLike],
    ) -> dict[str, Any]:
        if isinstance(document, Mapping):
            return dict(document)
        try:
            schema = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            where = f" in {source_path}" if source_path is not None else ""
            raise ParseError(f"Malformed JSON Schema{where}: {e}") from e
        if not isinstance(schema, dict):
            raise ParseError(f"JSON Schema must be an object, got {type(schema).__name__}")
        return schema

    # -------------------------------------------------------------------------
    # Lookup & validation
    # -------------------------------------------------------------------------

    def schema_ids(self) -> list[str]:
        return sorted(self._validators)

    def __contains__(self, schema_id: object) -> bool:
        return schema_id in self._validators

    def _get(self, schema_id: str) -> Validator:
        validator = self._validators.get(schema_id)
        if validator is None:
            raise NotFoundError(
                f"Schema not loaded: {schema_id}. Available: {', '.join(self.schema_ids())}"
            )
        return validator

    def get_schema(self, schema_id: str) -> dict[str, Any]:
        """Return the raw schema document registered under schema_id."""
        return dict(self._get(schema_id).schema)

    def validate(self, schema_id: str, payload: Any) -> JsonValidationResult:
        """
        Validate a payload against a registered schema.

        Violations are sorted by path and message, so the same inputs always
        give the same result.

        Raises:
            NotFoundError: If schema_id has not been loaded
        """
        validator = self._get(schema_id)
        violations = sorted(
            (
                SchemaViolation(
                    path=_json_pointer(error.absolute_path),
                    message=error.message,
                    validator=str(error.validator),
                )
                for error in validator.iter_errors(payload)
            ),
            key=lambda v: (v.path, v.message),
        )
        return JsonValidationResult(
            valid=not violations,
            errors=violations or None,
            schema_id=schema_id,
        )

    def assert_valid(self, schema_id: str, payload: Any) -> None:
        """
        Validate and raise if invalid. Meant for test assertions.

        Raises:
            SchemaAssertionError: Listing "{path} {message}" for every violation
            NotFoundError: If schema_id has not been loaded
        """
        result = self.validate(schema_id, payload)
        if not result.valid:
            raise SchemaAssertionError(schema_id, [str(e) for e in result.errors])


@lru_cache()
def get_registry() -> SchemaRegistry:
    """
    Process-wide registry with the configured message schemas loaded once.

    Returns:
        SchemaRegistry: Shared instance (cached for the process lifetime)
    """
    settings = get_settings()
    registry = SchemaRegistry(FileResourceReader(settings.contracts_root))
    registry.load_all(settings.message_schemas_dir)
    return registry
