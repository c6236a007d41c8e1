"""Factory for creating LLM providers from configuration."""

from __future__ import annotations

from diffsage.config import LLMConfig
from diffsage.llm.base import LLMProvider


def create_provider(config: LLMConfig, api_key: str | None = None) -> LLMProvider:
    """Create an LLM provider from configuration.

    Args:
        config: LLM configuration with provider, base_url, etc.
        api_key: Overrides the key looked up from the environment.

    Returns:
        An initialized LLM provider.

    Raises:
        ValueError: If the provider is unknown.
        ProviderNotAvailableError: If the provider's SDK is not installed.
    """
    provider = config.provider.lower()
    key = api_key or config.api_key

    if provider == "openai" or provider == "local":
        from diffsage.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(api_key=key, base_url=config.base_url, timeout=config.timeout)
    elif provider == "anthropic":
        from diffsage.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(api_key=key, base_url=config.base_url, timeout=config.timeout)
    else:
        raise ValueError(
            f"Unknown LLM provider: '{provider}'. "
            f"Supported providers: openai, anthropic, local"
        )
