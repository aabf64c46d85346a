"""
Tests for the provider failure policy and the OpenRouter backend.
"""

import json
import logging

import httpx
import pytest

from anytra.config import FALLBACK_CONFIDENCE, FALLBACK_RATIONALE, OpenRouterConfig
from anytra.exceptions import (
    ErrorType,
    NotConfiguredError,
    RequestFailedError,
    UnexpectedResponseError,
)
from anytra.models.core_models import EnhancedPrompt, EnhancementOptions, Prompt
from anytra.prompts.templates import SYSTEM_PROMPT
from anytra.providers.openrouter import OpenRouterProvider
from .conftest import ScriptedProvider, connect_error

PROMPT = Prompt(text="write code")
OPTIONS = EnhancementOptions()


class TestBaseProviderRetry:
    """Test retry, backoff and fallback."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        provider = ScriptedProvider(["enhanced text"])

        result = await provider.enhance(PROMPT, OPTIONS)

        assert result.text == "enhanced text"
        assert provider.attempts == 1
        assert provider.sleeps == []

    @pytest.mark.asyncio
    async def test_recovers_after_transport_failures(self):
        provider = ScriptedProvider([connect_error(), connect_error(), "third time"])

        result = await provider.enhance(PROMPT, OPTIONS)

        assert result.text == "third time"
        assert provider.attempts == 3
        assert provider.sleeps == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_fallback_after_exhausted_attempts(self):
        provider = ScriptedProvider([connect_error()] * 3)

        result = await provider.enhance(PROMPT, OPTIONS)

        assert result.text == "Enhanced: write code"
        assert result.confidence == FALLBACK_CONFIDENCE
        assert result.rationale == FALLBACK_RATIONALE
        assert provider.attempts == 3
        assert provider.sleeps == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_timeouts_are_transient(self):
        timeout = httpx.ReadTimeout(
            "timed out", request=httpx.Request("POST", "https://example.invalid")
        )
        provider = ScriptedProvider([timeout, "ok after timeout"])

        result = await provider.enhance(PROMPT, OPTIONS)

        assert result.text == "ok after timeout"
        assert provider.sleeps == [0.5]

    @pytest.mark.asyncio
    async def test_status_errors_not_retried(self):
        provider = ScriptedProvider([RequestFailedError("status 500"), "unused"])

        with pytest.raises(RequestFailedError):
            await provider.enhance(PROMPT, OPTIONS)

        assert provider.attempts == 1
        assert provider.sleeps == []

    @pytest.mark.asyncio
    async def test_unexpected_response_not_retried(self):
        provider = ScriptedProvider([UnexpectedResponseError("no choices")])

        with pytest.raises(UnexpectedResponseError):
            await provider.enhance(PROMPT, OPTIONS)

        assert provider.attempts == 1

    @pytest.mark.asyncio
    async def test_custom_attempt_budget(self):
        provider = ScriptedProvider([connect_error()] * 2, max_attempts=2, base_delay=1.0)

        result = await provider.enhance(PROMPT, OPTIONS)

        assert result.confidence == FALLBACK_CONFIDENCE
        assert provider.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_retries_are_logged(self, caplog):
        provider = ScriptedProvider([connect_error(), "ok"])

        with caplog.at_level(logging.WARNING, logger="anytra.providers.base"):
            await provider.enhance(PROMPT, OPTIONS)

        assert "attempt 1/3" in caplog.text


def completion_body(content: str = "  Enhanced prompt text  ") -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_openrouter(handler, **config) -> OpenRouterProvider:
    config.setdefault("api_key", "sk-test")
    sleeps = []

    async def record_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = OpenRouterProvider(
        OpenRouterConfig(**config), client=client, sleep=record_sleep
    )
    provider.recorded_sleeps = sleeps
    return provider


class TestOpenRouterProvider:
    """Test the OpenRouter backend against a mock transport."""

    def test_empty_api_key_not_configured(self):
        with pytest.raises(NotConfiguredError) as exc_info:
            OpenRouterProvider(OpenRouterConfig(api_key=""))

        assert str(exc_info.value) == "provider not configured: OPENROUTER_API_KEY missing"
        assert exc_info.value.error_type == ErrorType.PROVIDER_ERROR

    @pytest.mark.asyncio
    async def test_successful_completion(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json=completion_body())

        provider = make_openrouter(
            handler, model="test/model", referer="https://example.com", title="anytra"
        )

        result = await provider.enhance(PROMPT, EnhancementOptions(goal="Be precise"))

        assert result == EnhancedPrompt(text="Enhanced prompt text")

        request = captured["request"]
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["HTTP-Referer"] == "https://example.com"
        assert request.headers["X-Title"] == "anytra"

        payload = json.loads(request.content)
        assert payload["model"] == "test/model"
        assert payload["temperature"] == 0.2
        assert payload["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert payload["messages"][1]["role"] == "user"
        assert "Goal: Be precise" in payload["messages"][1]["content"]
        assert payload["messages"][1]["content"].endswith("Original prompt:\nwrite code")

    @pytest.mark.asyncio
    async def test_attribution_headers_optional(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["headers"] = request.headers
            return httpx.Response(200, json=completion_body())

        await make_openrouter(handler).enhance(PROMPT, OPTIONS)

        assert "HTTP-Referer" not in captured["headers"]
        assert "X-Title" not in captured["headers"]

    @pytest.mark.asyncio
    async def test_error_status(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, text="upstream exploded")

        provider = make_openrouter(handler)

        with pytest.raises(RequestFailedError) as exc_info:
            await provider.enhance(PROMPT, OPTIONS)

        assert str(exc_info.value) == "request failed: status 500"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unparseable_body(self):
        provider = make_openrouter(lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(UnexpectedResponseError):
            await provider.enhance(PROMPT, OPTIONS)

    @pytest.mark.asyncio
    async def test_missing_content(self):
        provider = make_openrouter(
            lambda request: httpx.Response(200, json={"choices": [{"message": {}}]})
        )

        with pytest.raises(UnexpectedResponseError):
            await provider.enhance(PROMPT, OPTIONS)

    @pytest.mark.asyncio
    async def test_no_choices(self):
        provider = make_openrouter(
            lambda request: httpx.Response(200, json={"choices": []})
        )

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await provider.enhance(PROMPT, OPTIONS)

        assert str(exc_info.value) == "unexpected response: no choices"

    @pytest.mark.asyncio
    async def test_undecodable_body_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=httpx.ByteStream(b"not gzip at all"),
            )

        provider = make_openrouter(handler)

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await provider.enhance(PROMPT, OPTIONS)

        assert str(exc_info.value).startswith("unexpected response: undecodable body")
        assert len(calls) == 1
        assert provider.recorded_sleeps == []

    @pytest.mark.asyncio
    async def test_connection_failure_falls_back(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        provider = make_openrouter(handler)

        result = await provider.enhance(PROMPT, OPTIONS)

        assert result.text == "Enhanced: write code"
        assert result.confidence == FALLBACK_CONFIDENCE
        assert len(calls) == 3
        assert provider.recorded_sleeps == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200))
        )
        provider = OpenRouterProvider(OpenRouterConfig(api_key="sk-test"), client=client)

        await provider.aclose()

        assert not client.is_closed
        await client.aclose()
