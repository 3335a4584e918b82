"""
Main Application Entry Point.

Configures and initializes the FastAPI application, including logging,
routers, and health checks.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salus.llm_runtime import throttle
from salus.nutrition.api import FoodSearchClient, build_nutrition_router
from salus.plans.api import build_plan_router
from salus.plans.registry import build_plan_kinds
from salus.plans.usecases.generate import PlanGenerateUsecase
from salus.settings import BackendSettings, load_settings
from salus_libs.api_keys.api_key_manager import get_default_api_key_manager
from salus_libs.core.asset_store import AssetStore
from salus_libs.fatsecret.client import FatSecretClient, FatSecretConfig
from salus_libs.llm_gemini.gemini_client import GeminiClientConfig, GeminiTextClient
from salus_libs.structured.orchestrator import TextGenerator


def _build_generator(settings: BackendSettings) -> TextGenerator:
    return GeminiTextClient(
        api_key_manager=get_default_api_key_manager(),
        config=GeminiClientConfig(
            model_name=settings.gemini_model_name,
            temperature=settings.gemini_temperature,
            top_p=settings.gemini_top_p,
            timeout_seconds=settings.gemini_timeout_seconds,
        ),
    )


def _build_nutrition_client(settings: BackendSettings) -> FatSecretClient:
    return FatSecretClient(
        FatSecretConfig(
            client_id=settings.fatsecret_client_id,
            client_secret=settings.fatsecret_client_secret,
            base_url=settings.fatsecret_base_url,
            token_url=settings.fatsecret_token_url,
        )
    )


def create_app(
    settings: Optional[BackendSettings] = None,
    generator: Optional[TextGenerator] = None,
    nutrition_client: Optional[FoodSearchClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s"
    )

    # Silence httpx/httpcore (used by google-genai) and aiohttp
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("google.genai").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    fastapi_app = FastAPI(title="Salus Plan Relay", version="0.1.0")

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @fastapi_app.exception_handler(RequestValidationError)
    async def _bad_request(_: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": f"Invalid request: {problems}"},
        )

    kinds = build_plan_kinds(settings)
    assets = AssetStore(settings.assets_dir)
    throttled = throttle(generator or _build_generator(settings), settings)
    usecases = {
        name: PlanGenerateUsecase(kind=kind, assets=assets, generator=throttled)
        for name, kind in kinds.items()
    }

    @fastapi_app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": "salus-plan-relay",
            "gemini_model": settings.gemini_model_name,
            "max_attempts": {name: kind.max_attempts for name, kind in kinds.items()},
        }

    fastapi_app.include_router(build_plan_router(settings, kinds, usecases))
    fastapi_app.include_router(
        build_nutrition_router(nutrition_client or _build_nutrition_client(settings))
    )
    return fastapi_app


app = create_app()
