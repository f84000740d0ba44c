"""talker/settings.py

Runtime configuration loaded from environment variables / .env file.

Configure via environment variables:
  LLM_API_KEY          — bearer token for the completion endpoint (required)
  LLM_API_URL          — chat-completions URL
  LLM_MODEL            — model identifier, also selects the tokenizer
  LLM_SYSTEM_PROMPT    — system prompt pinned in front of every request
  LLM_MAX_MESSAGES     — message-count budget per request
  LLM_MAX_TOKENS       — token budget per request
  LLM_REQUEST_TIMEOUT  — HTTP timeout in seconds
"""

from __future__ import annotations

# Standard Library
from typing import Any

# Third-Party Libraries
import pydantic
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Local Modules
from talker.client import DEFAULT_API_URL
from talker.errors import ConfigError

DEFAULT_MODEL: str = "gpt-4o"
DEFAULT_SYSTEM_PROMPT: str = "You are a helpful assistant."
DEFAULT_MAX_MESSAGES: int = 30
# 32k is plenty for chat; larger windows only add cost.
DEFAULT_MAX_TOKENS: int = 32000


class TalkerSettings(BaseSettings):
    """Configuration for :class:`talker.chat.LLMTalker`.

    Attributes:
        api_key: Bearer token. An empty value is rejected when the talker is
            built, not here, so settings can be inspected without a key.
        api_url: OpenAI-compatible chat-completions URL.
        model: Model identifier sent to the API and used for token counting.
        system_prompt: Text of the pinned system message.
        max_messages: Maximum messages transmitted per request.
        max_tokens: Maximum estimated tokens transmitted per request.
        request_timeout: HTTP timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str = Field("", description="Bearer token for the completion API.")
    api_url: str = Field(DEFAULT_API_URL, description="Chat-completions URL.")
    model: str = Field(DEFAULT_MODEL, description="Model identifier.")
    system_prompt: str = Field(
        DEFAULT_SYSTEM_PROMPT, description="System prompt pinned to each request."
    )
    max_messages: int = Field(
        DEFAULT_MAX_MESSAGES, ge=0, description="Message budget per request."
    )
    max_tokens: int = Field(
        DEFAULT_MAX_TOKENS, ge=0, description="Token budget per request."
    )
    request_timeout: float = Field(
        60.0, gt=0, description="HTTP timeout in seconds."
    )


def load_settings(**overrides: Any) -> TalkerSettings:
    """Load settings from the environment, applying keyword overrides.

    Raises:
        ConfigError: If any value fails validation.
    """
    try:
        return TalkerSettings(**overrides)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"Invalid talker settings: {exc}") from exc
