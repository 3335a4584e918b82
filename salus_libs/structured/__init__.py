"""
Structured Generation Library.

Extract, validate and retry until a free-text generator yields a
schema-conformant document.
"""

from .errors import (
    DocumentMalformed,
    GenerationTransportError,
    SchemaMalformed,
    StructuredGenerationError,
    UnexpectedResponseShape,
    UpstreamUnavailable,
)
from .json_extract import extract_json, find_json_object
from .orchestrator import (
    AttemptRecord,
    FailureKind,
    GenerationExhausted,
    GenerationSuccess,
    Outcome,
    StructuredGenerator,
    TextGenerator,
    compose_prompt,
)
from .schema_validator import JsonSchemaValidator, SchemaValidator, ValidationReport, validate_against_schema

__all__ = [
    "AttemptRecord",
    "DocumentMalformed",
    "FailureKind",
    "GenerationExhausted",
    "GenerationSuccess",
    "GenerationTransportError",
    "JsonSchemaValidator",
    "Outcome",
    "SchemaMalformed",
    "SchemaValidator",
    "StructuredGenerationError",
    "StructuredGenerator",
    "TextGenerator",
    "UnexpectedResponseShape",
    "UpstreamUnavailable",
    "ValidationReport",
    "compose_prompt",
    "extract_json",
    "find_json_object",
    "validate_against_schema",
]
