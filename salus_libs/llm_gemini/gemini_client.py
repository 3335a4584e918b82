import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from salus_libs.api_keys.api_key_manager import APIKeyManager
from salus_libs.structured.errors import UnexpectedResponseShape, UpstreamUnavailable

logger = logging.getLogger(__name__)

_AUTH_FAILURE_CODES = (401, 403)


@dataclass(frozen=True)
class GeminiClientConfig:
    model_name: str
    temperature: float = 0.9
    top_p: float = 0.95
    timeout_seconds: float = 60.0


class GeminiTextClient:
    """
    Gemini 文本生成封装（原子能力）

    约定：
    - one call = one request, returns the first candidate's text
    - sampling parameters are fixed by the config, not per call
    - no retries here; every failure is raised as a transport error
    """

    def __init__(self, api_key_manager: APIKeyManager, config: GeminiClientConfig):
        self.api_key_manager = api_key_manager
        self.config = config
        self._clients: Dict[str, genai.Client] = {}
        self._generation_config = types.GenerateContentConfig(
            temperature=config.temperature,
            top_p=config.top_p,
        )

    def _client_for(self, api_key: str) -> genai.Client:
        client = self._clients.get(api_key)
        if client is None:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(self.config.timeout_seconds * 1000)),
            )
            self._clients[api_key] = client
        return client

    @staticmethod
    def _first_text(response: Any) -> str:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            raise UnexpectedResponseShape("Invalid response format from model: no candidates")
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        if not parts:
            raise UnexpectedResponseShape("Invalid response format from model: candidate has no parts")
        text: Optional[str] = getattr(parts[0], "text", None)
        if text is None:
            raise UnexpectedResponseShape("Invalid response format from model: first part is not text")
        return text

    async def generate(self, prompt: str) -> str:
        api_key = self.api_key_manager.get_key()
        if not api_key:
            raise UpstreamUnavailable("Gemini client unavailable: no API key configured")

        try:
            response = await self._client_for(api_key).aio.models.generate_content(
                model=self.config.model_name,
                contents=prompt,
                config=self._generation_config,
            )
        except genai_errors.APIError as e:
            if e.code in _AUTH_FAILURE_CODES:
                self.api_key_manager.mark_failed(api_key)
            logger.error("Gemini call failed (%s): %s", e.code, e.message)
            raise UpstreamUnavailable(f"Gemini call failed: {e}") from e
        # pylint: disable=broad-exception-caught
        except Exception as e:
            logger.error("Gemini call failed: %s", e)
            raise UpstreamUnavailable(f"Gemini call failed: {e}") from e

        return self._first_text(response)
