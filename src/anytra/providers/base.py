"""
Base provider: retry, backoff and graceful degradation around a single
backend attempt.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Tuple, Type

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from anytra.config import (
    BASE_RETRY_DELAY,
    FALLBACK_CONFIDENCE,
    FALLBACK_RATIONALE,
    MAX_ATTEMPTS,
)
from anytra.models.core_models import EnhancedPrompt, EnhancementOptions, Prompt

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class BaseProvider(ABC):
    """
    Completion backend with the shared failure policy.

    Transport failures (connection errors, timeouts) are retried up to
    ``max_attempts`` times in total, sleeping ``base_delay * 2**(attempt - 1)``
    seconds between attempts. When the last attempt also fails at transport
    level the call degrades to :meth:`fallback` instead of raising. Any other
    error raised by :meth:`_send` propagates immediately.
    """

    provider_name = "base"
    transient_errors: Tuple[Type[BaseException], ...] = (httpx.TransportError,)

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_RETRY_DELAY,
        sleep: Optional[SleepFunc] = None,
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep or asyncio.sleep

    @abstractmethod
    async def _send(self, prompt: Prompt, options: EnhancementOptions) -> EnhancedPrompt:
        """Perform exactly one backend call."""
        ...

    async def enhance(
        self, prompt: Prompt, options: EnhancementOptions
    ) -> EnhancedPrompt:
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await self._send(prompt, options)
        except self.transient_errors as e:
            logger.error(
                f"{self.provider_name} unreachable after {self.max_attempts} attempts, "
                f"returning fallback: {e}"
            )
            return self.fallback(prompt)
        raise RuntimeError("retry loop exited without an outcome")

    def fallback(self, prompt: Prompt) -> EnhancedPrompt:
        """Low-confidence answer used when the backend stays unreachable."""
        return EnhancedPrompt(
            text=f"Enhanced: {prompt.text}",
            rationale=FALLBACK_RATIONALE,
            confidence=FALLBACK_CONFIDENCE,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay),
            retry=retry_if_exception_type(self.transient_errors),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"{self.provider_name} transport failure on attempt "
            f"{retry_state.attempt_number}/{self.max_attempts}: {error}; "
            f"retrying in {delay:.1f}s"
        )
