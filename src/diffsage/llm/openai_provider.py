"""OpenAI LLM provider."""

from __future__ import annotations

from typing import Any

from diffsage.exceptions import EmptyResponseError, TransportError
from diffsage.llm.base import CompletionRequest, LLMProvider, LLMResponse, Message
from diffsage.llm.errors import provider_error

LOCAL_API_KEY = "not-needed"


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI and OpenAI-compatible chat completion APIs."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(api_key, base_url, timeout)
        self._async_client = None

    def _get_client(self):
        if self._async_client is None:
            try:
                from openai import AsyncOpenAI, OpenAIError
            except ImportError:
                from diffsage.exceptions import ProviderNotAvailableError
                raise ProviderNotAvailableError("openai", "openai")

            kwargs: dict[str, Any] = {}
            if self.api_key:
                kwargs["api_key"] = self.api_key
            elif self.base_url:
                # Local OpenAI-compatible servers accept any key.
                kwargs["api_key"] = LOCAL_API_KEY
            if self.base_url:
                kwargs["base_url"] = self.base_url
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            try:
                self._async_client = AsyncOpenAI(**kwargs)
            except OpenAIError as e:
                raise TransportError(str(e)) from e
        return self._async_client

    def _format_messages(self, messages: list[Message]) -> list[dict]:
        """Convert our Message format to OpenAI's format."""
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        client = self._get_client()
        from openai import APIStatusError, OpenAIError

        try:
            response = await client.chat.completions.create(
                model=request.model,
                messages=self._format_messages(request.messages),
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except APIStatusError as e:
            raise provider_error(e.status_code, e.response.text) from e
        except OpenAIError as e:
            raise TransportError(str(e)) from e

        if not response.choices:
            raise EmptyResponseError(f"{request.model} returned no choices")
        choice = response.choices[0]
        if not choice.message.content:
            raise EmptyResponseError(f"{request.model} returned an empty message")

        return LLMResponse(
            content=choice.message.content,
            model=response.model or request.model,
            finish_reason=choice.finish_reason or "",
            usage={
                "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
                "completion_tokens": response.usage.completion_tokens if response.usage else 0,
            },
        )
