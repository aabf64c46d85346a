"""
OpenRouter chat-completions backend.
"""

import logging
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from anytra import __version__
from anytra.config import (
    CONNECT_TIMEOUT_SECONDS,
    DEFAULT_TEMPERATURE,
    OPENROUTER_CHAT_URL,
    REQUEST_TIMEOUT_SECONDS,
    OpenRouterConfig,
)
from anytra.exceptions import (
    NotConfiguredError,
    RequestFailedError,
    UnexpectedResponseError,
)
from anytra.models.core_models import EnhancedPrompt, EnhancementOptions, Prompt
from anytra.prompts.templates import build_chat_messages
from anytra.providers.base import BaseProvider

logger = logging.getLogger(__name__)


class ChoiceMessage(BaseModel):
    content: str


class Choice(BaseModel):
    message: ChoiceMessage


class ChatCompletionResponse(BaseModel):
    choices: List[Choice]


class OpenRouterProvider(BaseProvider):
    """Enhances prompts through the OpenRouter chat completions API."""

    provider_name = "OpenRouter"

    def __init__(
        self,
        config: OpenRouterConfig,
        client: Optional[httpx.AsyncClient] = None,
        url: str = OPENROUTER_CHAT_URL,
        **retry_kwargs,
    ):
        """
        Args:
            config: Credentials and model selection
            client: Optional pre-built HTTP client (tests inject a mock transport)
            url: Chat completions endpoint
            retry_kwargs: Forwarded to BaseProvider (max_attempts, base_delay, sleep)

        Raises:
            NotConfiguredError: If the API key is empty
        """
        if not config.api_key:
            raise NotConfiguredError("OPENROUTER_API_KEY missing")

        super().__init__(**retry_kwargs)
        self.config = config
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS, connect=CONNECT_TIMEOUT_SECONDS),
            headers={"User-Agent": f"anytra/{__version__}"},
        )
        logger.info(f"Using {self.provider_name}: model='{config.model}'")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        if self.config.referer:
            headers["HTTP-Referer"] = self.config.referer
        if self.config.title:
            headers["X-Title"] = self.config.title
        return headers

    def _payload(self, prompt: Prompt, options: EnhancementOptions) -> dict:
        return {
            "model": self.config.model,
            "messages": build_chat_messages(prompt, options),
            "temperature": DEFAULT_TEMPERATURE,
        }

    async def _send(self, prompt: Prompt, options: EnhancementOptions) -> EnhancedPrompt:
        try:
            response = await self._client.post(
                self.url, headers=self._headers(), json=self._payload(prompt, options)
            )
        except httpx.DecodingError as e:
            # Complete response whose content encoding cannot be decoded.
            raise UnexpectedResponseError(f"undecodable body: {e}") from e

        if not response.is_success:
            raise RequestFailedError(f"status {response.status_code}")

        try:
            parsed = ChatCompletionResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise UnexpectedResponseError(str(e)) from e

        if not parsed.choices:
            raise UnexpectedResponseError("no choices")

        return EnhancedPrompt(text=parsed.choices[0].message.content.strip())

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
