"""
FatSecret Platform API client.

Client-credentials OAuth2 plus the `foods.search` method, with the access
token cached by `OAuthTokenCache`.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp
from pydantic import ValidationError

from .token_cache import OAuthTokenCache, TokenResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://platform.fatsecret.com/rest/server.api"
DEFAULT_TOKEN_URL = "https://oauth.fatsecret.com/connect/token"


class NutritionAPIError(Exception):
    """Base class for nutrition search failures."""


class NutritionAuthError(NutritionAPIError):
    """The token endpoint refused or failed the client-credentials grant."""


class NutritionUpstreamError(NutritionAPIError):
    """The search request itself failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class FatSecretConfig:
    client_id: str
    client_secret: str
    base_url: str = DEFAULT_BASE_URL
    token_url: str = DEFAULT_TOKEN_URL
    scope: str = "basic"
    timeout_seconds: float = 10.0


class FatSecretClient:
    def __init__(self, config: FatSecretConfig, token_cache: Optional[OAuthTokenCache] = None):
        self.config = config
        self._timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)
        self.token_cache = token_cache or OAuthTokenCache(self.fetch_token)

    async def fetch_token(self) -> TokenResponse:
        if not self.config.client_id or not self.config.client_secret:
            raise NutritionAuthError("FatSecret client credentials are not configured")

        form = {"grant_type": "client_credentials", "scope": self.config.scope}
        auth = aiohttp.BasicAuth(self.config.client_id, self.config.client_secret)
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(self.config.token_url, data=form, auth=auth) as response:
                    if response.status != 200:
                        raise NutritionAuthError(f"failed to get token: HTTP {response.status}")
                    payload = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise NutritionAuthError("failed to get token: request timed out") from e
        except aiohttp.ClientError as e:
            raise NutritionAuthError(f"failed to get token: {e}") from e

        try:
            return TokenResponse.model_validate(payload)
        except ValidationError as e:
            raise NutritionAuthError(f"failed to get token: malformed token response: {e}") from e

    async def _search_once(self, token: str, params: Dict[str, str]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(self.config.base_url, params=params, headers=headers) as response:
                    if response.status != 200:
                        raise NutritionUpstreamError(f"API error: HTTP {response.status}", status=response.status)
                    data = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise NutritionUpstreamError("API error: request timed out") from e
        except aiohttp.ClientError as e:
            raise NutritionUpstreamError(f"API error: {e}") from e
        except ValueError as e:
            raise NutritionUpstreamError(f"API error: response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise NutritionUpstreamError("API error: response is not a JSON object")
        return data

    async def search_foods(
        self,
        query: str,
        page_number: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = {"method": "foods.search", "search_expression": query, "format": "json"}
        if page_number is not None:
            params["page_number"] = str(page_number)
        if max_results is not None:
            params["max_results"] = str(max_results)

        token = await self.token_cache.get_token()
        try:
            return await self._search_once(token, params)
        except NutritionUpstreamError as e:
            if e.status != 401:
                raise
            # token revoked before its advertised expiry: refresh once
            logger.warning("FatSecret rejected cached token, refreshing")
            self.token_cache.invalidate(token)
            token = await self.token_cache.get_token()
            return await self._search_once(token, params)
