"""Relay configuration with environment variable loading.

Pydantic-based configuration for the model provider, the relay and the
session store. Supports OpenAI and OpenAI-compatible APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


class RelayConfig(BaseModel):
    """Configuration for the chat relay.

    Attributes:
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        system_prompt: Instruction placed ahead of every conversation.
        max_turns: Turns retained per session after each reply.
        default_session_id: Session used when the caller sends none.
        max_sessions: Session count cap (None for unbounded).
        session_ttl_seconds: Idle session lifetime (None to never expire).
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY", ""),
        validate_default=True,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    system_prompt: str = Field(
        default_factory=lambda: os.getenv("SYSTEM_PROMPT", "You are a helpful assistant."),
        description="System instruction sent before the history",
    )
    max_turns: int = Field(
        default_factory=lambda: int(os.getenv("MAX_SESSION_TURNS", "30")),
        ge=1,
        description="Turns kept per session after each assistant reply",
    )
    default_session_id: str = Field(
        default="default",
        min_length=1,
        description="Session shared by callers that send no session id",
    )
    max_sessions: int | None = Field(
        default_factory=lambda: _optional_int("MAX_SESSIONS"),
        ge=1,
        description="Maximum number of sessions kept in memory",
    )
    session_ttl_seconds: float | None = Field(
        default_factory=lambda: _optional_float("SESSION_TTL_SECONDS"),
        gt=0,
        description="Idle seconds before a session may be evicted",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return RelayConfig()
