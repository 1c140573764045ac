"""Unit tests for RelayConfig."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from chat_relay.relay.config import RelayConfig, get_relay_config


class TestRelayConfig:
    """Tests for RelayConfig validation."""

    def test_valid_config_with_all_fields(self) -> None:
        """Config accepts valid values for all fields."""
        config = RelayConfig(
            api_key="sk-test-key-12345",
            base_url="https://generativelanguage.googleapis.com/v1beta/openai/",
            model_name="gemini-2.5-flash",
            temperature=0.5,
            max_tokens=2048,
            system_prompt="Be brief.",
            max_turns=10,
            max_sessions=100,
            session_ttl_seconds=3600,
        )

        assert config.api_key == "sk-test-key-12345"
        assert config.model_name == "gemini-2.5-flash"
        assert config.temperature == 0.5
        assert config.max_tokens == 2048
        assert config.max_turns == 10
        assert config.max_sessions == 100
        assert config.session_ttl_seconds == 3600

    def test_config_with_default_values(self) -> None:
        """Config uses sensible defaults when only API key provided."""
        config = RelayConfig(api_key="sk-test-key")

        assert config.temperature == 0.7
        assert config.max_tokens == 1024
        assert config.default_session_id == "default"

    def test_config_fails_with_missing_api_key(self) -> None:
        """Config raises ValueError when API key is missing."""
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="")

        assert "API key required" in str(exc_info.value)

    def test_config_fails_with_whitespace_api_key(self) -> None:
        """Config rejects whitespace-only API key."""
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="   ")

        assert "API key required" in str(exc_info.value)

    def test_config_strips_api_key_whitespace(self) -> None:
        """Config strips leading/trailing whitespace from API key."""
        config = RelayConfig(api_key="  sk-test-key  ")

        assert config.api_key == "sk-test-key"

    def test_config_fails_with_temperature_out_of_range(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="sk-test", temperature=2.5)

        assert "temperature" in str(exc_info.value).lower()

    def test_config_fails_with_zero_max_turns(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="sk-test", max_turns=0)

        assert "max_turns" in str(exc_info.value).lower()

    def test_config_fails_with_zero_max_sessions(self) -> None:
        with pytest.raises(ValidationError):
            RelayConfig(api_key="sk-test", max_sessions=0)


class TestGetRelayConfig:
    """Tests for get_relay_config factory function."""

    def test_get_config_from_environment(self) -> None:
        """get_relay_config reads credentials and limits from environment."""
        env = {
            "LLM_API_KEY": "sk-env-key",
            "LLM_MODEL": "gpt-4o",
            "MAX_SESSION_TURNS": "12",
            "MAX_SESSIONS": "50",
            "SESSION_TTL_SECONDS": "900",
        }
        with patch.dict("os.environ", env):
            config = get_relay_config()

        assert config.api_key == "sk-env-key"
        assert config.model_name == "gpt-4o"
        assert config.max_turns == 12
        assert config.max_sessions == 50
        assert config.session_ttl_seconds == 900

    def test_falls_back_to_openai_api_key(self) -> None:
        with patch.dict("os.environ", {"OPENAI_API_KEY": "sk-openai"}):
            os.environ.pop("LLM_API_KEY", None)
            config = get_relay_config()

        assert config.api_key == "sk-openai"

    def test_get_config_fails_without_key(self) -> None:
        """get_relay_config raises when no API key is set."""
        with (
            patch.dict("os.environ", {"LLM_API_KEY": "", "OPENAI_API_KEY": ""}),
            pytest.raises(ValidationError),
        ):
            get_relay_config()

    def test_get_config_fails_when_keys_unset(self) -> None:
        with patch.dict("os.environ", {}):
            os.environ.pop("LLM_API_KEY", None)
            os.environ.pop("OPENAI_API_KEY", None)
            with pytest.raises(ValidationError) as exc_info:
                get_relay_config()

        assert "API key required" in str(exc_info.value)

    def test_environment_key_is_stripped(self) -> None:
        with patch.dict("os.environ", {"LLM_API_KEY": "  sk-env  "}):
            config = get_relay_config()

        assert config.api_key == "sk-env"

    def test_empty_llm_key_falls_back_to_openai_key(self) -> None:
        with patch.dict("os.environ", {"LLM_API_KEY": "", "OPENAI_API_KEY": "sk-openai"}):
            config = get_relay_config()

        assert config.api_key == "sk-openai"
