"""
Plan API Router.

`GET|POST /meal-plan` and `GET|POST /workout-plan`: turn the optional user
request into a validated plan, or a 500 carrying every attempt's diagnostics.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from salus.common.utils import is_json_request, read_limited_body
from salus.plans.registry import PlanKind
from salus.plans.usecases.generate import PlanGenerateUsecase, PlanGenerationError
from salus.settings import BackendSettings

logger = logging.getLogger(__name__)


class PlanRequest(BaseModel):
    """POST body; unknown top-level fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    prompt: str = ""
    preferences: Dict[str, Any] = Field(default_factory=dict)

    def user_input(self) -> str:
        parts = []
        if self.prompt.strip():
            parts.append(self.prompt.strip())
        if self.preferences:
            prefs = json.dumps(self.preferences, ensure_ascii=False, separators=(",", ":"))
            parts.append(f"Preferences: {prefs}")
        return "\n".join(parts)


async def _parse_post_body(request: Request, max_bytes: int) -> PlanRequest:
    if not is_json_request(request):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Content-Type must be application/json for POST requests",
        )
    body = await read_limited_body(request, max_bytes)
    try:
        return PlanRequest.model_validate_json(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error parsing JSON request: {e}",
        ) from e


def build_plan_router(
    settings: BackendSettings,
    kinds: Dict[str, PlanKind],
    usecases: Dict[str, PlanGenerateUsecase],
) -> APIRouter:
    router = APIRouter()

    def _register(kind: PlanKind, usecase: PlanGenerateUsecase) -> None:
        @router.api_route(
            kind.route,
            methods=["GET", "POST"],
            responses={200: {"model": kind.model}},
            name=f"{kind.name}_plan",
        )
        async def generate_plan(request: Request, prompt: Optional[str] = None):
            if request.method == "POST":
                user_input = (await _parse_post_body(request, settings.max_request_bytes)).user_input()
            else:
                user_input = (prompt or "").strip()

            logger.info(
                "[Request] Action:%s_plan | Method:%s | Prompt:%s",
                kind.name, request.method, bool(user_input),
            )
            if user_input:
                logger.info("Received %s request with custom prompt: %s", kind.label, user_input)

            try:
                return await usecase.execute(user_input=user_input or None)
            except PlanGenerationError as e:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e),
                ) from e

    for name, kind in kinds.items():
        _register(kind, usecases[name])

    return router
