import logging
import time

import openai
from openai import AsyncOpenAI
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from lexscan.services.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (openai.RateLimitError, openai.APITimeoutError)


class OpenAIProvider(LLMProvider):
    """Chat Completions client for OpenAI or any endpoint speaking its protocol.

    `max_attempts` defaults to 1, so a failed call is reported immediately.
    """

    def __init__(self, api_key: str, model: str, base_url: str | None = None, max_attempts: int = 1):
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_attempts = max(1, max_attempts)
        self.retry_wait: wait_base = wait_exponential(multiplier=1, min=1, max=10)

    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.0,
        max_tokens: int = 2000,
        response_format: dict | None = None,
    ) -> LLMResponse:
        kwargs: dict = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            kwargs["response_format"] = response_format

        start = time.monotonic()
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                response = await self.client.chat.completions.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)
        logger.debug(f"Chat completion from {self.model} took {latency_ms}ms")

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=response.model or self.model,
            latency_ms=latency_ms,
        )
