"""
JSON Schema validation for generated documents.

Wraps `jsonschema` so that callers get a plain `ValidationReport` with one
human-readable violation per failed constraint, and typed errors when the
schema or the document themselves cannot be parsed.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Protocol

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import validator_for

from .errors import DocumentMalformed, SchemaMalformed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    violations: List[str] = field(default_factory=list)


class SchemaValidator(Protocol):
    """Capability used by the orchestrator; tests may substitute a fake."""

    def check_schema(self, schema_text: str) -> None: ...

    def validate(self, schema_text: str, document_text: str) -> ValidationReport: ...


def _format_path(path: Iterable[Any]) -> str:
    out = "$"
    for part in path:
        out += f"[{part}]" if isinstance(part, int) else f".{part}"
    return out


class JsonSchemaValidator:
    """`SchemaValidator` backed by the `jsonschema` package."""

    def _load_schema(self, schema_text: str) -> Any:
        try:
            schema = json.loads(schema_text)
        except (TypeError, ValueError) as e:
            raise SchemaMalformed(f"Schema is not valid JSON: {e}") from e
        if not isinstance(schema, (dict, bool)):
            raise SchemaMalformed("Schema must be a JSON object or boolean")

        cls = validator_for(schema)
        try:
            cls.check_schema(schema)
        except jsonschema_exceptions.SchemaError as e:
            raise SchemaMalformed(f"Invalid JSON Schema: {e.message}") from e
        return cls(schema)

    def check_schema(self, schema_text: str) -> None:
        self._load_schema(schema_text)

    def validate(self, schema_text: str, document_text: str) -> ValidationReport:
        validator = self._load_schema(schema_text)
        try:
            document = json.loads(document_text)
        except (TypeError, ValueError) as e:
            raise DocumentMalformed(f"Document is not valid JSON: {e}") from e

        violations = [
            f"{_format_path(err.absolute_path)}: {err.message}"
            for err in validator.iter_errors(document)
        ]
        if violations:
            logger.info("Validation errors: %s", ", ".join(violations))
        return ValidationReport(valid=not violations, violations=violations)


_default_validator = JsonSchemaValidator()


def validate_against_schema(schema_text: str, document_text: str) -> ValidationReport:
    return _default_validator.validate(schema_text, document_text)
