import asyncio
from typing import Dict

from salus.settings import BackendSettings
from salus_libs.structured.orchestrator import TextGenerator
from salus_libs.utils.rate_limiter import AsyncRateLimiter

# 不同模型的每分钟请求数限制（RPM）；GEMINI_RPM 配置优先
MODEL_RPM: Dict[str, int] = {
    "gemini-2.5-flash": 15,
    "gemini-1.5-flash": 15,
    "gemini-1.5-pro": 2,
    "default": 10,
}


class ThrottledTextGenerator:
    """
    Applies the global concurrency cap and the model RPM limit to every
    single generation call of the wrapped generator.
    """

    def __init__(self, inner: TextGenerator, semaphore: asyncio.Semaphore, limiter: AsyncRateLimiter):
        self.inner = inner
        self.semaphore = semaphore
        self.limiter = limiter

    async def generate(self, prompt: str) -> str:
        async with self.semaphore:
            await self.limiter.check_and_wait()
            return await self.inner.generate(prompt)


def build_model_limiter(settings: BackendSettings) -> AsyncRateLimiter:
    rpm = settings.gemini_rpm or MODEL_RPM.get(settings.gemini_model_name, MODEL_RPM["default"])
    return AsyncRateLimiter(max_count=rpm, time_limit=60)


def throttle(inner: TextGenerator, settings: BackendSettings) -> ThrottledTextGenerator:
    return ThrottledTextGenerator(
        inner,
        semaphore=asyncio.Semaphore(settings.gemini_max_concurrency),
        limiter=build_model_limiter(settings),
    )
