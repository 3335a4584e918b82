"""
FatSecret nutrition API library.
"""

from .client import (
    FatSecretClient,
    FatSecretConfig,
    NutritionAPIError,
    NutritionAuthError,
    NutritionUpstreamError,
)
from .token_cache import OAuthTokenCache, TokenResponse

__all__ = [
    "FatSecretClient",
    "FatSecretConfig",
    "NutritionAPIError",
    "NutritionAuthError",
    "NutritionUpstreamError",
    "OAuthTokenCache",
    "TokenResponse",
]
