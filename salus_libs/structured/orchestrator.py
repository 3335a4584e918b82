"""
Structured Generation Orchestrator.

Turns a free-text generator into a structured-data source: every attempt goes
generate -> extract JSON -> decode into the target model -> validate against
the JSON Schema. The first attempt passing both gates wins; decode and
validation failures are recorded and retried, transport failures abort.

Contract:
- at most `max_attempts` generator calls per `run`, strictly sequential
- attempt records keep attempt order and are never deduplicated
- exactly one Outcome per call: GenerationSuccess or GenerationExhausted
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, Protocol, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from salus_libs.core.asset_store import SchemaDocument

from .errors import DocumentMalformed, SchemaMalformed
from .json_extract import find_json_object
from .schema_validator import JsonSchemaValidator, SchemaValidator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_FRAMING = "Consider the following request: {user_input}"


class TextGenerator(Protocol):
    """One generation round trip: composed prompt in, raw model text out."""

    async def generate(self, prompt: str) -> str: ...


class FailureKind(str, Enum):
    DECODE = "decode"
    VALIDATION = "validation"


@dataclass(frozen=True)
class AttemptRecord:
    """Diagnostics of one failed attempt."""

    index: int
    raw_text: str
    candidate: Optional[str]
    kind: FailureKind
    errors: List[str] = field(default_factory=list)

    def describe(self) -> str:
        label = "decode error" if self.kind is FailureKind.DECODE else "schema validation error"
        detail = ", ".join(self.errors) if self.errors else "no details"
        return f"attempt {self.index}: {label}: {detail}"


@dataclass(frozen=True)
class GenerationSuccess(Generic[T]):
    value: T
    # failed attempts that preceded the winning one
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts) + 1


@dataclass(frozen=True)
class GenerationExhausted:
    attempts: List[AttemptRecord]
    max_attempts: int

    @property
    def summary(self) -> str:
        return "; ".join(record.describe() for record in self.attempts)


Outcome = Union[GenerationSuccess, GenerationExhausted]


def compose_prompt(base_prompt: str, user_input: Optional[str], framing: str = DEFAULT_FRAMING) -> str:
    """Prefix `base_prompt` with the framed user request, if there is one."""
    if user_input is None or not user_input.strip():
        return base_prompt
    return f"{framing.format(user_input=user_input.strip())}\n\n{base_prompt}"


def _decode_errors(err: ValidationError) -> List[str]:
    out: List[str] = []
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", ())) or "$"
        out.append(f"{loc}: {item.get('msg', 'invalid value')}")
    return out


class StructuredGenerator:
    """Drives the bounded generate/extract/decode/validate retry loop."""

    def __init__(self, generator: TextGenerator, validator: Optional[SchemaValidator] = None):
        self.generator = generator
        self.validator = validator or JsonSchemaValidator()

    async def run(
        self,
        base_prompt: str,
        user_input: Optional[str],
        schema: SchemaDocument,
        target: Type[T],
        max_attempts: int,
        framing: str = DEFAULT_FRAMING,
    ) -> Outcome:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        # 坏 schema 在任何生成调用之前失败
        self.validator.check_schema(schema.text)

        prompt = compose_prompt(base_prompt, user_input, framing)
        records: List[AttemptRecord] = []

        for index in range(1, max_attempts + 1):
            # GenerationTransportError propagates: transport failures are not retried
            raw_text = await self.generator.generate(prompt)
            candidate = find_json_object(raw_text)
            document_text = candidate if candidate is not None else raw_text

            try:
                value = target.model_validate_json(document_text)
            except ValidationError as e:
                record = AttemptRecord(index, raw_text, candidate, FailureKind.DECODE, _decode_errors(e))
                records.append(record)
                logger.warning("[%s] %s", schema.name, record.describe())
                continue

            try:
                report = self.validator.validate(schema.text, document_text)
                violations = report.violations if not report.valid else []
                if not report.valid and not violations:
                    violations = ["failed schema validation"]
            except (SchemaMalformed, DocumentMalformed) as e:
                violations = [str(e)]

            if violations:
                record = AttemptRecord(index, raw_text, candidate, FailureKind.VALIDATION, violations)
                records.append(record)
                logger.warning("[%s] %s", schema.name, record.describe())
                continue

            logger.info("[%s] valid document on attempt %d/%d", schema.name, index, max_attempts)
            return GenerationSuccess(value=value, attempts=records)

        logger.error("[%s] no valid document after %d attempts", schema.name, max_attempts)
        return GenerationExhausted(attempts=records, max_attempts=max_attempts)
