"""Base LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class Message(BaseModel):
    """A message in the conversation."""

    role: str  # "system", "user", "assistant"
    content: str = ""


class CompletionRequest(BaseModel):
    """One completion call: which model, what to send, how much to get back."""

    model: str
    messages: list[Message] = Field(default_factory=list)
    max_tokens: int = 4000
    temperature: float = 0.3


class LLMResponse(BaseModel):
    """Response from the LLM."""

    content: str = ""
    model: str = ""
    finish_reason: str = ""
    usage: dict[str, int] = Field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract base for LLM providers.

    ``complete`` either returns a response with non-empty content or raises:
    ``SizeRejectionError`` when the request exceeded the model's context
    window, ``TransportError`` for any other provider failure, and
    ``EmptyResponseError`` when the provider answered without a completion.
    """

    name = "base"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """Send a completion request to the LLM."""
        ...
