"""
Pytest configuration and fixtures shared by the test suite.
"""

import asyncio
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import httpx
import pytest

from anytra.config import Config, OpenRouterConfig, SequentialThinkingConfig
from anytra.handlers.enhance_prompt import EnhancePrompt
from anytra.models.core_models import EnhancedPrompt, EnhancementOptions, Prompt
from anytra.providers.base import BaseProvider
from anytra.server import MCPServer

# 15 words, well inside the validation gate
VALID_ENHANCED_TEXT = (
    "ENHANCED: write code - this is a longer text with enough words to pass validation"
)

Outcome = Union[str, EnhancedPrompt, BaseException]


class MockProvider:
    """
    Provider double implementing the LLMProvider interface.

    Returns scripted outcomes in order (strings become EnhancedPrompt, exceptions
    are raised); once the script is exhausted it echoes the prompt inside
    ``template``.
    """

    def __init__(
        self,
        outcomes: Optional[Sequence[Outcome]] = None,
        template: str = "Mock enhanced: {text} - this is a longer text with enough words to pass validation",
    ):
        self.outcomes: List[Outcome] = list(outcomes or [])
        self.template = template
        self.calls: List[Tuple[Prompt, EnhancementOptions]] = []

    async def enhance(
        self, prompt: Prompt, options: EnhancementOptions
    ) -> EnhancedPrompt:
        self.calls.append((prompt, options))
        if self.outcomes:
            outcome = self.outcomes.pop(0)
            if isinstance(outcome, BaseException):
                raise outcome
            if isinstance(outcome, EnhancedPrompt):
                return outcome
            return EnhancedPrompt(text=outcome)
        return EnhancedPrompt(text=self.template.format(text=prompt.text))


class ScriptedProvider(BaseProvider):
    """BaseProvider whose single attempt follows a script; sleeps are recorded."""

    provider_name = "Scripted"

    def __init__(self, outcomes: Sequence[Outcome], **kwargs):
        self.sleeps: List[float] = []
        self.attempts = 0
        self.outcomes = list(outcomes)
        kwargs.setdefault("sleep", self._record_sleep)
        super().__init__(**kwargs)

    async def _record_sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    async def _send(self, prompt: Prompt, options: EnhancementOptions) -> EnhancedPrompt:
        self.attempts += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, EnhancedPrompt):
            return outcome
        return EnhancedPrompt(text=outcome)


def connect_error(message: str = "connection refused") -> httpx.ConnectError:
    return httpx.ConnectError(
        message, request=httpx.Request("POST", "https://example.invalid")
    )


def make_config(thinking_enabled: bool = False, **openrouter: Any) -> Config:
    openrouter.setdefault("api_key", "test-key")
    return Config(
        openrouter=OpenRouterConfig(**openrouter),
        sequential_thinking=SequentialThinkingConfig(default_enabled=thinking_enabled),
    )


def make_server(
    provider: Optional[MockProvider] = None,
    thinking_enabled: bool = False,
    shutdown_timeout: float = 5.0,
) -> MCPServer:
    usecase = EnhancePrompt(provider or MockProvider(), make_config(thinking_enabled))
    return MCPServer(usecase, shutdown_timeout=shutdown_timeout)


def stream_reader(*lines: str, eof: bool = True) -> asyncio.StreamReader:
    """StreamReader pre-fed with ``lines`` (newline appended to each)."""
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data((line + "\n").encode("utf-8"))
    if eof:
        reader.feed_eof()
    return reader


@pytest.fixture
def config() -> Config:
    return make_config(thinking_enabled=False)


@pytest.fixture
def thinking_config() -> Config:
    return make_config(thinking_enabled=True)


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def clean_env(monkeypatch) -> Callable[..., None]:
    """Remove every variable the configuration reads; returns a setter."""
    for key in (
        "OPENROUTER_API_KEY",
        "OPENROUTER_MODEL",
        "OPENROUTER_REFERER",
        "OPENROUTER_TITLE",
        "ENABLE_SEQUENTIAL_THINKING",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)

    def set_env(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)

    return set_env
