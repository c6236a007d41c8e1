"""Anthropic Claude LLM provider."""

from __future__ import annotations

from typing import Any

from diffsage.exceptions import EmptyResponseError, TransportError
from diffsage.llm.base import CompletionRequest, LLMProvider, LLMResponse, Message
from diffsage.llm.errors import provider_error


class AnthropicProvider(LLMProvider):
    """Provider for Anthropic's Claude models."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(api_key, base_url, timeout)
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError:
                from diffsage.exceptions import ProviderNotAvailableError
                raise ProviderNotAvailableError("anthropic", "anthropic")

            kwargs: dict[str, Any] = {}
            if self.api_key:
                kwargs["api_key"] = self.api_key
            if self.base_url:
                kwargs["base_url"] = self.base_url
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            self._client = AsyncAnthropic(**kwargs)
        return self._client

    def _format_messages(self, messages: list[Message]) -> tuple[str, list[dict]]:
        """Convert our Message format to Anthropic's format.

        Returns (system_prompt, messages_list).
        """
        system = ""
        result = []
        for msg in messages:
            if msg.role == "system":
                system = msg.content
                continue
            result.append({"role": msg.role, "content": msg.content})
        return system, result

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        client = self._get_client()
        from anthropic import AnthropicError, APIStatusError

        system, formatted_msgs = self._format_messages(request.messages)
        kwargs: dict[str, Any] = {
            "model": request.model,
            "messages": formatted_msgs,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if system:
            kwargs["system"] = system

        try:
            response = await client.messages.create(**kwargs)
        except APIStatusError as e:
            raise provider_error(e.status_code, e.response.text) from e
        except AnthropicError as e:
            raise TransportError(str(e)) from e

        content = "".join(block.text for block in response.content if block.type == "text")
        if not content:
            raise EmptyResponseError(f"{request.model} returned no text content")

        return LLMResponse(
            content=content,
            model=response.model or request.model,
            finish_reason=response.stop_reason or "",
            usage={
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
            },
        )
