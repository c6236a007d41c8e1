"""LLM provider abstraction layer."""

from diffsage.llm.base import CompletionRequest, LLMProvider, LLMResponse, Message
from diffsage.llm.errors import classify_error
from diffsage.llm.factory import create_provider

__all__ = [
    "CompletionRequest",
    "LLMProvider",
    "LLMResponse",
    "Message",
    "classify_error",
    "create_provider",
]
