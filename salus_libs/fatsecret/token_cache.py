"""
OAuth access-token cache with single-flight refresh.

The token is reused until shortly before its advertised expiry. Refreshes are
serialized behind an asyncio.Lock and re-checked after the lock is taken, so
concurrent callers either see the still-valid token or wait for the single
refresh in flight.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TokenResponse(BaseModel):
    """OAuth2 client-credentials token endpoint response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    scope: str = ""


@dataclass(frozen=True)
class CachedToken:
    value: str
    expires_at: float


class OAuthTokenCache:
    def __init__(
        self,
        fetch: Callable[[], Awaitable[TokenResponse]],
        clock: Callable[[], float] = time.monotonic,
        expiry_margin_seconds: float = 30.0,
    ):
        self._fetch = fetch
        self._clock = clock
        self._margin = expiry_margin_seconds
        self._token: Optional[CachedToken] = None
        self._lock = asyncio.Lock()

    def _valid(self, token: Optional[CachedToken]) -> bool:
        return token is not None and self._clock() < token.expires_at - self._margin

    async def get_token(self) -> str:
        token = self._token
        if self._valid(token):
            return token.value

        async with self._lock:
            token = self._token
            if self._valid(token):
                return token.value

            self._token = None
            response = await self._fetch()
            self._token = CachedToken(
                value=response.access_token,
                expires_at=self._clock() + max(response.expires_in, 0),
            )
            logger.info("OAuth token refreshed, expires in %ss", response.expires_in)
            return self._token.value

    def invalidate(self, rejected: Optional[str] = None) -> None:
        """
        Drop the cached token. With `rejected`, only while the cache still
        holds that value, so a token refreshed meanwhile by another caller
        survives.
        """
        token = self._token
        if rejected is None or (token is not None and token.value == rejected):
            self._token = None
