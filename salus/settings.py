"""
Backend Settings.

Loads and validates configuration for the backend application,
aggregating settings from environment variables and config files.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from salus_libs.api_keys.api_key_manager import APIKeyManager
from salus_libs.core.config_loader import load_dotenv_vars, load_root_config
from salus_libs.fatsecret.client import DEFAULT_BASE_URL, DEFAULT_TOKEN_URL

DEFAULT_ASSETS_DIR = Path(__file__).resolve().parent / "assets"


class ConfigurationError(ValueError):
    """A configuration value is present but unusable."""


@dataclass(frozen=True)
class BackendSettings:
    """Immutable configuration object for the backend service."""

    host: str
    port: int
    gemini_model_name: str
    gemini_temperature: float = 0.9
    gemini_top_p: float = 0.95
    gemini_timeout_seconds: float = 60.0
    gemini_max_concurrency: int = 20
    # None: use the per-model default from llm_runtime
    gemini_rpm: Optional[int] = None

    meal_plan_max_attempts: int = 3
    workout_plan_max_attempts: int = 10
    max_request_bytes: int = 1024 * 1024

    frontend_url: str = ""
    assets_dir: Path = DEFAULT_ASSETS_DIR

    fatsecret_client_id: str = ""
    fatsecret_client_secret: str = ""
    fatsecret_base_url: str = DEFAULT_BASE_URL
    fatsecret_token_url: str = DEFAULT_TOKEN_URL

    @property
    def cors_origins(self) -> List[str]:
        return [self.frontend_url] if self.frontend_url else ["*"]


def _get_env_value(name: str, default: str = "") -> str:
    """
    Read from real env first, then .env, then fallback.
    """
    value = os.getenv(name)
    if value is not None and value.strip():
        return value.strip()
    dotenv_val = load_dotenv_vars().get(name, "").strip()
    return dotenv_val if dotenv_val else default


def _get_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    raw = _get_env_value(name, str(default))
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = _get_env_value(name, str(default))
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings() -> BackendSettings:
    """
    后端配置（单进程入口）

    Precedence: environment > project .env > root config.json > defaults.
    """
    root_cfg = load_root_config()

    default_model = str(root_cfg.get("GEMINI_MODEL_NAME") or "gemini-2.5-flash")

    return BackendSettings(
        host=_get_env_value("BACKEND_HOST", "0.0.0.0"),
        port=_get_int("PORT", _get_int("BACKEND_PORT", 8080, minimum=1), minimum=1),
        gemini_model_name=_get_env_value("GEMINI_MODEL_NAME", default_model),
        gemini_temperature=_get_float("GEMINI_TEMPERATURE", 0.9),
        gemini_top_p=_get_float("GEMINI_TOP_P", 0.95),
        gemini_timeout_seconds=_get_float("GEMINI_TIMEOUT_SECONDS", 60.0),
        gemini_max_concurrency=_get_int("GEMINI_MAX_CONCURRENCY", 20, minimum=1),
        gemini_rpm=_get_int("GEMINI_RPM", 0, minimum=1) if _get_env_value("GEMINI_RPM") else None,
        meal_plan_max_attempts=_get_int("MEAL_PLAN_MAX_ATTEMPTS", 3, minimum=1),
        workout_plan_max_attempts=_get_int("WORKOUT_PLAN_MAX_ATTEMPTS", 10, minimum=1),
        max_request_bytes=_get_int("MAX_REQUEST_BYTES", 1024 * 1024, minimum=1),
        frontend_url=_get_env_value("FRONTEND_URL", ""),
        assets_dir=Path(_get_env_value("SALUS_ASSETS_DIR", str(DEFAULT_ASSETS_DIR))),
        fatsecret_client_id=_get_env_value("FATSECRET_CLIENT_ID", ""),
        fatsecret_client_secret=_get_env_value("FATSECRET_CLIENT_SECRET", ""),
        fatsecret_base_url=_get_env_value("FATSECRET_BASE_URL", DEFAULT_BASE_URL),
        fatsecret_token_url=_get_env_value("FATSECRET_TOKEN_URL", DEFAULT_TOKEN_URL),
    )


def missing_credentials(settings: BackendSettings, api_keys: APIKeyManager) -> List[str]:
    """Names of the mandatory credentials that are not configured."""
    missing: List[str] = []
    if not api_keys.has_keys():
        missing.append("GEMINI_API_KEY")
    if not settings.fatsecret_client_id:
        missing.append("FATSECRET_CLIENT_ID")
    if not settings.fatsecret_client_secret:
        missing.append("FATSECRET_CLIENT_SECRET")
    return missing
