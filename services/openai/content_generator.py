"""Social post generation via OpenAI chat completions.

`ContentGenerator` turns a free-form prompt and a target platform into a
validated `GenerationResult`. Calls that hit the provider's rate limit are
retried with exponential backoff; every other provider failure is surfaced
immediately as a `GenerationError` carrying a stable code that the realtime
socket and the HTTP routes pass through to clients.

The generator keeps no per-call state, so a single instance is shared by
every websocket session and request handler.
"""

import asyncio
import logging
import os
from typing import Any, Awaitable, Callable, Optional, TypeVar

from openai import AsyncOpenAI, OpenAIError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from models.content_models import GenerationResult
from services.openai.content_prompts import build_system_prompt, build_user_prompt
from services.openai.errors import API_ERROR, AUTH_ERROR, RATE_LIMIT, GenerationError
from services.openai.response_parser import extract_message_text, parse_generation_result

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
MAX_ATTEMPTS = 3
RETRY_BASE_DELAY = 1.0

T = TypeVar("T")


def is_rate_limit_error(exc: BaseException) -> bool:
    """Return True when the provider signalled too many requests."""
    if getattr(exc, "status_code", None) == 429:
        return True
    return "rate_limit_exceeded" in (getattr(exc, "type", None), getattr(exc, "code", None))


def error_code_for(exc: BaseException) -> str:
    status = getattr(exc, "status_code", None)
    if status == 429:
        return RATE_LIMIT
    if status == 401:
        return AUTH_ERROR
    return API_ERROR


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = MAX_ATTEMPTS,
    base_delay: float = RETRY_BASE_DELAY,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run `operation`, retrying only rate-limit failures.

    After failed attempt `i` (0-indexed) the wait is `base_delay * 2 ** i`.
    The last failure, or any failure that is not a rate limit, is re-raised
    unchanged.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, exp_base=2),
        retry=retry_if_exception(is_rate_limit_error),
        before_sleep=before_sleep_log(LOGGER, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)


class ContentGenerator:
    """Generate platform-optimized social posts with OpenAI."""

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = DEFAULT_MODEL,
        max_attempts: int = MAX_ATTEMPTS,
        retry_base_delay: float = RETRY_BASE_DELAY,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            client: Shared async OpenAI client.
            model: Chat completion model identifier.
            max_attempts: Total attempts per call, including the first.
            retry_base_delay: Seconds to wait after the first rate-limited attempt.
            sleep: Optional awaitable sleep used between attempts (tests inject a fake).
        """
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.client = client
        self.model = model
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay
        self._sleep = sleep or asyncio.sleep

    async def generate(self, prompt: str, platform: str) -> GenerationResult:
        """Return a validated post suggestion for `prompt` on `platform`.

        Raises:
            GenerationError: EMPTY_RESPONSE, VALIDATION_ERROR, RATE_LIMIT,
                AUTH_ERROR or API_ERROR.
        """
        messages = [
            {"role": "system", "content": build_system_prompt(platform)},
            {"role": "user", "content": build_user_prompt(prompt, platform)},
        ]

        async def _create() -> Any:
            return await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
            )

        try:
            response = await retry_with_backoff(
                _create,
                max_attempts=self.max_attempts,
                base_delay=self.retry_base_delay,
                sleep=self._sleep,
            )
        except OpenAIError as exc:
            LOGGER.error("OpenAI API error while generating %s content: %s", platform, exc)
            raise GenerationError(f"Failed to generate content: {exc}", error_code_for(exc)) from exc

        try:
            return parse_generation_result(extract_message_text(response))
        except GenerationError as exc:
            LOGGER.error("Rejected OpenAI reply (%s): %s", exc.code, exc.message)
            raise
