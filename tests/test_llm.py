"""Tests for provider error classification and the OpenAI and Anthropic providers."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from diffsage.analysis.orchestrator import AnalysisOrchestrator
from diffsage.analysis.prompts import AnalysisIdentity
from diffsage.config import LLMConfig
from diffsage.exceptions import (
    AnalysisError,
    EmptyResponseError,
    ErrorKind,
    SizeRejectionError,
    TransportError,
)
from diffsage.llm.anthropic_provider import AnthropicProvider
from diffsage.llm.base import CompletionRequest, Message
from diffsage.llm.errors import classify_error, provider_error
from diffsage.llm.factory import create_provider
from diffsage.llm.openai_provider import LOCAL_API_KEY, OpenAIProvider

REQUEST = CompletionRequest(
    model="gpt-4-turbo",
    messages=[Message(role="user", content="analyze this")],
    max_tokens=4000,
    temperature=0.3,
)


class TestClassifyError:
    @pytest.mark.parametrize(
        "body",
        [
            '{"error": {"code": "context_length_exceeded"}}',
            "This model's maximum context length is 16385 tokens.",
            '{"type": "error", "error": {"message": "prompt is too long: 210000 tokens"}}',
        ],
    )
    def test_oversize(self, body: str):
        assert classify_error(400, body) is ErrorKind.OVERSIZE_REQUEST

    def test_authentication(self):
        assert classify_error(401, "Incorrect API key provided") is ErrorKind.AUTHENTICATION
        assert classify_error(403, "forbidden") is ErrorKind.AUTHENTICATION

    def test_rate_limited(self):
        assert classify_error(429, "Rate limit reached") is ErrorKind.RATE_LIMITED

    def test_other(self):
        assert classify_error(500, "server error") is ErrorKind.OTHER
        assert classify_error(None, "connection reset") is ErrorKind.OTHER

    def test_provider_error_types(self):
        size = provider_error(400, "context_length_exceeded")
        assert isinstance(size, SizeRejectionError)
        assert size.kind is ErrorKind.OVERSIZE_REQUEST
        assert size.status_code == 400

        auth = provider_error(401, "bad key")
        assert type(auth) is TransportError
        assert auth.kind is ErrorKind.AUTHENTICATION
        assert auth.body == "bad key"
        assert str(auth) == "HTTP 401: bad key"


class _FakeCompletions:
    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _provider_with(outcome) -> tuple[OpenAIProvider, _FakeCompletions]:
    completions = _FakeCompletions(outcome)
    provider = OpenAIProvider(api_key="sk-test")
    provider._async_client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider, completions


def _completion(content: str | None, choices: bool = True):
    choice = SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")
    return SimpleNamespace(
        choices=[choice] if choices else [],
        model="gpt-4-turbo-2024-04-09",
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=30),
    )


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_complete(self):
        provider, completions = _provider_with(_completion("# Report"))
        response = await provider.complete(REQUEST)

        assert response.content == "# Report"
        assert response.finish_reason == "stop"
        assert response.usage == {"prompt_tokens": 120, "completion_tokens": 30}
        assert completions.calls[0] == {
            "model": "gpt-4-turbo",
            "messages": [{"role": "user", "content": "analyze this"}],
            "max_tokens": 4000,
            "temperature": 0.3,
        }

    @pytest.mark.asyncio
    async def test_no_choices(self):
        provider, _ = _provider_with(_completion("x", choices=False))
        with pytest.raises(EmptyResponseError):
            await provider.complete(REQUEST)

    @pytest.mark.asyncio
    async def test_empty_content(self):
        provider, _ = _provider_with(_completion(None))
        with pytest.raises(EmptyResponseError):
            await provider.complete(REQUEST)

    @pytest.mark.asyncio
    async def test_context_length_error(self):
        httpx = pytest.importorskip("httpx")
        openai = pytest.importorskip("openai")

        body = '{"error": {"code": "context_length_exceeded"}}'
        response = httpx.Response(
            400,
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"),
            text=body,
        )
        error = openai.BadRequestError("context too long", response=response, body=None)
        provider, _ = _provider_with(error)

        with pytest.raises(SizeRejectionError) as exc_info:
            await provider.complete(REQUEST)
        assert exc_info.value.status_code == 400
        assert exc_info.value.body == body

    @pytest.mark.asyncio
    async def test_auth_error(self):
        httpx = pytest.importorskip("httpx")
        openai = pytest.importorskip("openai")

        response = httpx.Response(
            401,
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"),
            text='{"error": {"code": "invalid_api_key"}}',
        )
        error = openai.AuthenticationError("bad key", response=response, body=None)
        provider, _ = _provider_with(error)

        with pytest.raises(TransportError) as exc_info:
            await provider.complete(REQUEST)
        assert not isinstance(exc_info.value, SizeRejectionError)
        assert exc_info.value.kind is ErrorKind.AUTHENTICATION

    @pytest.mark.asyncio
    async def test_sdk_error_is_translated(self):
        openai = pytest.importorskip("openai")
        provider, _ = _provider_with(openai.OpenAIError("Missing credentials"))

        with pytest.raises(TransportError) as exc_info:
            await provider.complete(REQUEST)
        assert "Missing credentials" in str(exc_info.value)
        assert exc_info.value.kind is ErrorKind.OTHER

    def test_local_endpoint_without_key(self, monkeypatch: pytest.MonkeyPatch):
        pytest.importorskip("openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        config = LLMConfig(provider="local", base_url="http://localhost:11434/v1")

        client = create_provider(config)._get_client()
        assert client.api_key == LOCAL_API_KEY

    def test_missing_key_is_transport_error(self, monkeypatch: pytest.MonkeyPatch):
        pytest.importorskip("openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(TransportError):
            OpenAIProvider()._get_client()

    @pytest.mark.asyncio
    async def test_missing_key_ends_analysis_cleanly(self, monkeypatch: pytest.MonkeyPatch):
        pytest.importorskip("openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        orchestrator = AnalysisOrchestrator(OpenAIProvider(), LLMConfig())

        with pytest.raises(AnalysisError):
            await orchestrator.analyze(
                "diff --git a/x b/x\n", AnalysisIdentity.for_commit("mylib", "abc")
            )


class TestFactory:
    def test_openai(self):
        provider = create_provider(LLMConfig(provider="openai"), api_key="sk-test")
        assert isinstance(provider, OpenAIProvider)
        assert provider.api_key == "sk-test"

    def test_local_uses_openai_protocol(self):
        config = LLMConfig(provider="local", base_url="http://localhost:11434/v1")
        provider = create_provider(config)
        assert isinstance(provider, OpenAIProvider)
        assert provider.base_url == "http://localhost:11434/v1"

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_provider(LLMConfig(provider="nope"))


def _anthropic_provider_with(outcome) -> tuple[AnthropicProvider, _FakeCompletions]:
    messages = _FakeCompletions(outcome)
    provider = AnthropicProvider(api_key="sk-ant-test")
    provider._client = SimpleNamespace(messages=messages)
    return provider, messages


def _anthropic_message(blocks: list):
    return SimpleNamespace(
        content=blocks,
        model="claude-sonnet-4-5-20250929",
        stop_reason="end_turn",
        usage=SimpleNamespace(input_tokens=50, output_tokens=10),
    )


class TestAnthropicProvider:
    @pytest.fixture(autouse=True)
    def _requires_sdk(self):
        pytest.importorskip("anthropic")

    @pytest.mark.asyncio
    async def test_complete_joins_text_blocks(self):
        message = _anthropic_message([
            SimpleNamespace(type="text", text="# Report\n"),
            SimpleNamespace(type="tool_use", id="t1"),
            SimpleNamespace(type="text", text="No side effects."),
        ])
        provider, messages = _anthropic_provider_with(message)
        request = CompletionRequest(
            model="claude-sonnet-4-5-20250929",
            messages=[
                Message(role="system", content="Answer in markdown."),
                Message(role="user", content="analyze this"),
            ],
            max_tokens=4000,
        )

        response = await provider.complete(request)

        assert response.content == "# Report\nNo side effects."
        assert response.finish_reason == "end_turn"
        assert response.usage == {"prompt_tokens": 50, "completion_tokens": 10}
        call = messages.calls[0]
        assert call["system"] == "Answer in markdown."
        assert call["messages"] == [{"role": "user", "content": "analyze this"}]
        assert call["max_tokens"] == 4000

    @pytest.mark.asyncio
    async def test_no_system_prompt_is_omitted(self):
        provider, messages = _anthropic_provider_with(
            _anthropic_message([SimpleNamespace(type="text", text="ok")])
        )
        await provider.complete(REQUEST)
        assert "system" not in messages.calls[0]

    @pytest.mark.asyncio
    async def test_no_text_blocks(self):
        provider, _ = _anthropic_provider_with(
            _anthropic_message([SimpleNamespace(type="tool_use", id="t1")])
        )
        with pytest.raises(EmptyResponseError):
            await provider.complete(REQUEST)

    @pytest.mark.asyncio
    async def test_prompt_too_long(self):
        httpx = pytest.importorskip("httpx")
        import anthropic

        body = (
            '{"type": "error", "error": {"type": "invalid_request_error", '
            '"message": "prompt is too long: 210000 tokens > 200000 maximum"}}'
        )
        response = httpx.Response(
            400,
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"),
            text=body,
        )
        error = anthropic.BadRequestError("prompt is too long", response=response, body=None)
        provider, _ = _anthropic_provider_with(error)

        with pytest.raises(SizeRejectionError) as exc_info:
            await provider.complete(REQUEST)
        assert exc_info.value.status_code == 400
        assert exc_info.value.body == body

    @pytest.mark.asyncio
    async def test_sdk_error_is_translated(self):
        import anthropic

        provider, _ = _anthropic_provider_with(anthropic.AnthropicError("connection reset"))
        with pytest.raises(TransportError) as exc_info:
            await provider.complete(REQUEST)
        assert not isinstance(exc_info.value, SizeRejectionError)
