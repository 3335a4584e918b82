"""
配置加载验证脚本

运行方式：pytest test_settings.py
"""

import pytest

from salus import settings as settings_module
from salus.settings import ConfigurationError, load_settings, missing_credentials
from salus_libs.api_keys.api_key_manager import APIKeyManager

_KEYS = [
    "PORT",
    "BACKEND_PORT",
    "BACKEND_HOST",
    "GEMINI_MODEL_NAME",
    "GEMINI_RPM",
    "MEAL_PLAN_MAX_ATTEMPTS",
    "WORKOUT_PLAN_MAX_ATTEMPTS",
    "FRONTEND_URL",
    "FATSECRET_CLIENT_ID",
    "FATSECRET_CLIENT_SECRET",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(settings_module, "load_dotenv_vars", lambda: {})
    monkeypatch.setattr(settings_module, "load_root_config", lambda: {})


def test_defaults():
    settings = load_settings()
    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.gemini_model_name == "gemini-2.5-flash"
    assert settings.gemini_rpm is None
    assert settings.meal_plan_max_attempts == 3
    assert settings.workout_plan_max_attempts == 10
    assert settings.max_request_bytes == 1024 * 1024
    assert settings.cors_origins == ["*"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BACKEND_PORT", "9000")
    monkeypatch.setenv("GEMINI_RPM", "30")
    monkeypatch.setenv("WORKOUT_PLAN_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("FRONTEND_URL", "https://salus.example")
    settings = load_settings()

    assert settings.port == 9000
    assert settings.gemini_rpm == 30
    assert settings.workout_plan_max_attempts == 4
    assert settings.cors_origins == ["https://salus.example"]

    monkeypatch.setenv("PORT", "7000")
    assert load_settings().port == 7000


def test_dotenv_and_config_json_layers(monkeypatch):
    monkeypatch.setattr(settings_module, "load_dotenv_vars", lambda: {"FATSECRET_CLIENT_ID": "from-dotenv"})
    monkeypatch.setattr(settings_module, "load_root_config", lambda: {"GEMINI_MODEL_NAME": "gemini-1.5-pro"})
    settings = load_settings()

    assert settings.fatsecret_client_id == "from-dotenv"
    assert settings.gemini_model_name == "gemini-1.5-pro"

    monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-1.5-flash")
    assert load_settings().gemini_model_name == "gemini-1.5-flash"


def test_malformed_numbers_raise(monkeypatch):
    monkeypatch.setenv("MEAL_PLAN_MAX_ATTEMPTS", "three")
    with pytest.raises(ConfigurationError):
        load_settings()

    monkeypatch.setenv("MEAL_PLAN_MAX_ATTEMPTS", "0")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_missing_credentials(monkeypatch):
    no_keys = APIKeyManager(load_environment=False)
    assert missing_credentials(load_settings(), no_keys) == [
        "GEMINI_API_KEY",
        "FATSECRET_CLIENT_ID",
        "FATSECRET_CLIENT_SECRET",
    ]

    monkeypatch.setenv("FATSECRET_CLIENT_ID", "id")
    monkeypatch.setenv("FATSECRET_CLIENT_SECRET", "secret")
    keys = APIKeyManager(keys=["k1"], load_environment=False)
    assert missing_credentials(load_settings(), keys) == []
