"""
Plan Generate Usecase.

Loads the schema and base prompt of a plan kind, then runs the structured
generation loop and turns its outcome into a plan or a PlanGenerationError.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from salus.plans.registry import PlanKind
from salus_libs.core.asset_store import AssetError, AssetStore
from salus_libs.structured.errors import GenerationTransportError, SchemaMalformed
from salus_libs.structured.orchestrator import (
    GenerationExhausted,
    GenerationSuccess,
    StructuredGenerator,
    TextGenerator,
)
from salus_libs.structured.schema_validator import SchemaValidator

logger = logging.getLogger(__name__)


class PlanGenerationError(Exception):
    """Any failure that ends a plan request without a plan."""

    def __init__(self, message: str, outcome: Optional[GenerationExhausted] = None):
        super().__init__(message)
        self.outcome = outcome


class PlanGenerateUsecase:
    """Usecase for generating one plan of a given kind."""

    def __init__(
        self,
        kind: PlanKind,
        assets: AssetStore,
        generator: TextGenerator,
        validator: Optional[SchemaValidator] = None,
    ):
        self.kind = kind
        self.assets = assets
        self.structured = StructuredGenerator(generator, validator)

    async def execute(self, user_input: Optional[str] = None) -> BaseModel:
        kind = self.kind
        try:
            schema = self.assets.load_schema(kind.schema_name)
            base_prompt = self.assets.load_prompt(kind.prompt_name)
        except AssetError as e:
            raise PlanGenerationError(f"Error loading {e.kind}: {e}") from e

        try:
            outcome = await self.structured.run(
                base_prompt=base_prompt,
                user_input=user_input,
                schema=schema,
                target=kind.model,
                max_attempts=kind.max_attempts,
                framing=kind.framing,
            )
        except SchemaMalformed as e:
            raise PlanGenerationError(f"Error loading schema: {e}") from e
        except GenerationTransportError as e:
            logger.error("[%s] generation aborted: %s", kind.name, e)
            raise PlanGenerationError(str(e)) from e

        if isinstance(outcome, GenerationSuccess):
            return outcome.value

        raise PlanGenerationError(
            f"Failed to generate valid {kind.label} after {outcome.max_attempts} attempts. "
            f"Errors: {outcome.summary}",
            outcome=outcome,
        )
