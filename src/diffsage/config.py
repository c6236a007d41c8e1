"""Configuration management for diffsage."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from diffsage.exceptions import ConfigError

DIFFSAGE_DIR = ".diffsage"
CONFIG_FILE = "config.json"

PLACEHOLDER_API_KEYS = {"your_openai_api_key_here", "your_anthropic_api_key_here"}


class ModelProfile(BaseModel):
    """Token limits for one model."""

    context_window: int
    prompt_overhead: int = 800
    response_reservation: int = 4000
    max_response_tokens: int = 4000

    @property
    def content_budget(self) -> int:
        """Tokens left for diff content once the prompt and response are reserved."""
        return self.context_window - self.prompt_overhead - self.response_reservation


# gpt-4-turbo is advertised at 128k; 120k leaves headroom for the estimator.
DEFAULT_MODEL_PROFILES: dict[str, ModelProfile] = {
    "gpt-4-turbo": ModelProfile(context_window=120_000),
    "gpt-4o": ModelProfile(context_window=120_000),
    "gpt-4o-mini": ModelProfile(context_window=120_000),
    "gpt-3.5-turbo": ModelProfile(
        context_window=16_000, response_reservation=2000, max_response_tokens=2000
    ),
    "claude-sonnet-4-5-20250929": ModelProfile(context_window=190_000),
    "claude-haiku-4-5-20251001": ModelProfile(
        context_window=190_000, response_reservation=2000, max_response_tokens=2000
    ),
}


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "openai"
    model: str = "gpt-4-turbo"
    fallback_model: str = "gpt-3.5-turbo"
    api_key_env: str = ""
    temperature: float = 0.3
    base_url: str | None = None
    timeout: float = 600.0
    # Fallback content is only re-truncated above the trigger, down to the budget.
    fallback_trigger_tokens: int = 8000
    fallback_content_tokens: int = 6000
    profiles: dict[str, ModelProfile] = Field(
        default_factory=lambda: dict(DEFAULT_MODEL_PROFILES)
    )

    @property
    def api_key(self) -> str | None:
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        # Try common env vars
        env_map = {
            "openai": "OPENAI_API_KEY",
            "anthropic": "ANTHROPIC_API_KEY",
        }
        env_var = env_map.get(self.provider, "")
        return os.environ.get(env_var)

    def profile_for(self, model: str) -> ModelProfile:
        """Look up the token profile of a model."""
        try:
            return self.profiles[model]
        except KeyError:
            known = ", ".join(sorted(self.profiles))
            raise ConfigError(
                f"No token profile for model '{model}'. Known models: {known}"
            ) from None


class FilterConfig(BaseModel):
    """Diff filtering configuration."""

    extra_exclude_patterns: list[str] = Field(default_factory=list)
    use_git_pathspecs: bool = True


class OutputConfig(BaseModel):
    """Where repositories are found and reports are written."""

    repositories_dir: str = "repositories"
    reports_dir: str = "reports"


class ProjectConfig(BaseModel):
    """Full diffsage configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def find_config_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .diffsage directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / DIFFSAGE_DIR).is_dir():
            return current
        current = current.parent
    if (current / DIFFSAGE_DIR).is_dir():
        return current
    return None


def get_diffsage_dir(root: Path) -> Path:
    """Get the .diffsage directory for a root."""
    return root / DIFFSAGE_DIR


def load_config(root: Path | None) -> ProjectConfig:
    """Load configuration from .diffsage/config.json, or defaults."""
    if root is None:
        return ProjectConfig()
    config_path = get_diffsage_dir(root) / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return ProjectConfig(**data)
        except ValueError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    return ProjectConfig()


def save_config(root: Path, config: ProjectConfig) -> Path:
    """Save configuration to .diffsage/config.json."""
    ds_dir = get_diffsage_dir(root)
    ds_dir.mkdir(parents=True, exist_ok=True)
    config_path = ds_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))
    return config_path


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'llm.model')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    return ProjectConfig(**data)


def resolve_api_key(config: LLMConfig) -> str:
    """Return the provider API key or raise a ConfigError explaining how to set it."""
    key = config.api_key
    env_var = config.api_key_env or {
        "openai": "OPENAI_API_KEY",
        "anthropic": "ANTHROPIC_API_KEY",
    }.get(config.provider, f"{config.provider.upper()}_API_KEY")
    if not key:
        raise ConfigError(
            f"No API key found for {config.provider}. "
            f"Set the {env_var} environment variable or add it to a .env file."
        )
    if key in PLACEHOLDER_API_KEYS:
        raise ConfigError(f"{env_var} still holds the placeholder value; set a real key.")
    return key
