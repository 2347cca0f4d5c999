"""Schema-gated binding of decoded JSON onto typed objects.

A decoded response body is first validated against a JSON Schema document.
Only a conforming document is bound onto a fresh instance of the target type;
binding matches keys to field names, ignores unknown keys and leaves missing
fields at their defaults.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Type, TypeVar

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .errors import InvalidConfiguration, SchemaNotFound, SchemaValidationError

logger = logging.getLogger("hughttp.schema")

Target = TypeVar("Target")


def load_schema(path: str | Path) -> dict[str, Any]:
    """Read a JSON Schema document from ``path``."""
    schema_path = Path(path)
    if not schema_path.is_file():
        raise SchemaNotFound(schema_path)
    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise InvalidConfiguration(
            f"Schema file {schema_path} is not valid JSON: {exc}"
        ) from exc
    if not isinstance(schema, dict):
        raise InvalidConfiguration(
            f"Schema file {schema_path} must contain a JSON object"
        )
    return schema


def _error_path_to_jsonpath(path) -> str:
    """Convert a jsonschema error path to JSONPath ("$.items[0].id")."""
    parts = ["$"]
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        else:
            parts.append(f".{segment}")
    return "".join(parts)


def validate_document(document: Any, schema: dict[str, Any]) -> list[str]:
    """Return every violation of ``schema`` in ``document``.

    An empty list means the document is valid.
    """
    validator_cls = validator_for(schema, default=Draft7Validator)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        raise InvalidConfiguration(f"Invalid JSON Schema: {exc.message}") from exc

    validator = validator_cls(schema)
    return [
        f"{_error_path_to_jsonpath(error.absolute_path)}: {error.message}"
        for error in validator.iter_errors(document)
    ]


def _plain_field_names(instance: Any) -> set[str]:
    names: set[str] = set()
    for klass in type(instance).__mro__:
        names.update(getattr(klass, "__annotations__", {}))
    names.update(getattr(instance, "__dict__", {}))
    return {name for name in names if not name.startswith("_")}


def bind_fields(document: Any, target_type: Type[Target]) -> Target:
    """Copy matching keys of ``document`` onto a new ``target_type``."""
    instance = target_type()
    if not isinstance(document, dict):
        return instance

    if dataclasses.is_dataclass(instance):
        names = {f.name for f in dataclasses.fields(instance) if f.init}
        matched = {k: v for k, v in document.items() if k in names}
        return dataclasses.replace(instance, **matched)

    names = _plain_field_names(instance)
    for key, value in document.items():
        if key in names:
            setattr(instance, key, value)
    return instance


class SchemaTransformer:
    """Validate decoded documents against one schema file and bind them."""

    def __init__(self, schema_path: str | Path) -> None:
        self.schema_path = Path(schema_path)

    def transform(self, document: Any, target_type: Type[Target]) -> Target:
        """Validate ``document`` and bind it onto a new ``target_type``.

        Raises:
            SchemaNotFound: the schema file does not exist.
            SchemaValidationError: the document violates the schema; carries
                every violation message.
        """
        schema = load_schema(self.schema_path)
        messages = validate_document(document, schema)
        if messages:
            logger.debug(
                "Document failed %s with %d violation(s)",
                self.schema_path,
                len(messages),
            )
            raise SchemaValidationError(messages)
        return bind_fields(document, target_type)
