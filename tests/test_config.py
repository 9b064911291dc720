"""Unit tests for configuration objects."""

import pytest
from pydantic import ValidationError

from mcp_pagerduty.config import (
    DEFAULT_API_HOST,
    DEFAULT_TIMEOUT,
    ClientConfig,
    HTTPConfig,
    ServerConfig,
    env_flag,
)


class TestClientConfig:
    """Tests for the gateway configuration."""

    def test_defaults(self):
        """Test default host and timeout."""
        config = ClientConfig()
        assert config.api_key is None
        assert config.api_host == DEFAULT_API_HOST
        assert config.timeout == DEFAULT_TIMEOUT

    def test_trailing_slash_is_stripped(self):
        """Test that the base URL never ends with a slash."""
        config = ClientConfig(api_host="https://api.eu.pagerduty.com/")
        assert config.api_host == "https://api.eu.pagerduty.com"

    def test_from_env(self, monkeypatch):
        """Test reading the gateway settings from the environment."""
        monkeypatch.setenv("PAGERDUTY_USER_API_KEY", "abc")
        monkeypatch.setenv("PAGERDUTY_API_HOST", "https://api.eu.pagerduty.com")
        monkeypatch.setenv("PAGERDUTY_FROM_EMAIL", "oncall@example.com")

        config = ClientConfig.from_env()

        assert config.api_key == "abc"
        assert config.api_host == "https://api.eu.pagerduty.com"
        assert config.from_email == "oncall@example.com"

    def test_from_env_empty_values(self, monkeypatch):
        """Test that empty variables fall back to defaults."""
        monkeypatch.setenv("PAGERDUTY_USER_API_KEY", "")
        monkeypatch.delenv("PAGERDUTY_API_HOST", raising=False)
        monkeypatch.delenv("PAGERDUTY_FROM_EMAIL", raising=False)

        config = ClientConfig.from_env()

        assert config.api_key is None
        assert config.api_host == DEFAULT_API_HOST

    def test_config_is_frozen(self):
        """Test that configuration cannot be changed after startup."""
        config = ClientConfig(api_key="abc")
        with pytest.raises(ValidationError):
            config.api_key = "other"


class TestServerConfig:
    """Tests for the write-tools policy flag."""

    def test_write_tools_disabled_by_default(self, monkeypatch):
        monkeypatch.delenv("PAGERDUTY_ENABLE_WRITE_TOOLS", raising=False)
        assert ServerConfig().enable_write_tools is False
        assert ServerConfig.from_env().enable_write_tools is False

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes"])
    def test_write_tools_enabled_from_env(self, monkeypatch, value):
        monkeypatch.setenv("PAGERDUTY_ENABLE_WRITE_TOOLS", value)
        assert ServerConfig.from_env().enable_write_tools is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "anything"])
    def test_write_tools_disabled_from_env(self, monkeypatch, value):
        monkeypatch.setenv("PAGERDUTY_ENABLE_WRITE_TOOLS", value)
        assert env_flag("PAGERDUTY_ENABLE_WRITE_TOOLS") is False


def test_http_config_defaults():
    """Test the default bind address."""
    config = HTTPConfig()
    assert (config.host, config.port) == ("127.0.0.1", 3000)
