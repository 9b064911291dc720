"""Tests for the command line entry point."""

import pytest
from click.testing import CliRunner

import mcp_pagerduty
from mcp_pagerduty.auth import AllowAllAuthorizer, RemoteAuthorizer


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "PAGERDUTY_USER_API_KEY",
        "PAGERDUTY_API_HOST",
        "PAGERDUTY_FROM_EMAIL",
        "PAGERDUTY_ENABLE_WRITE_TOOLS",
        "MCP_HTTP",
        "MCP_HOST",
        "MCP_PORT",
        "MCP_AUTH_URL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def captured(monkeypatch):
    """Replace both transports so main() returns instead of serving."""
    calls = {}

    def fake_run_stdio(dispatcher):
        calls["stdio"] = dispatcher

    def fake_run_http(dispatcher, http_config, authorizer):
        calls["http"] = (dispatcher, http_config, authorizer)

    monkeypatch.setattr("mcp_pagerduty.transports.stdio.run_stdio", fake_run_stdio)
    monkeypatch.setattr("mcp_pagerduty.transports.http.run_http", fake_run_http)
    return calls


class TestMain:
    def test_stdio_requires_api_key(self, captured):
        result = CliRunner().invoke(mcp_pagerduty.main, [])

        assert result.exit_code == 2
        assert "PAGERDUTY_USER_API_KEY" in result.output
        assert captured == {}

    def test_stdio_read_only_by_default(self, captured, monkeypatch):
        monkeypatch.setenv("PAGERDUTY_USER_API_KEY", "k")

        result = CliRunner().invoke(mcp_pagerduty.main, [])

        assert result.exit_code == 0, result.output
        dispatcher = captured["stdio"]
        assert len(dispatcher.catalog) == 38
        assert dispatcher.client.config.api_key == "k"

    def test_write_tools_from_env(self, captured, monkeypatch):
        monkeypatch.setenv("PAGERDUTY_USER_API_KEY", "k")
        monkeypatch.setenv("PAGERDUTY_ENABLE_WRITE_TOOLS", "true")

        result = CliRunner().invoke(mcp_pagerduty.main, [])

        assert result.exit_code == 0, result.output
        assert len(captured["stdio"].catalog) == 60

    def test_http_without_api_key(self, captured):
        """Test that HTTP mode starts without a default credential."""
        result = CliRunner().invoke(mcp_pagerduty.main, ["--http", "--port", "8081"])

        assert result.exit_code == 0, result.output
        dispatcher, http_config, authorizer = captured["http"]
        assert dispatcher.client.config.api_key is None
        assert http_config.port == 8081
        assert isinstance(authorizer, AllowAllAuthorizer)

    def test_http_with_remote_authorizer(self, captured):
        result = CliRunner().invoke(
            mcp_pagerduty.main,
            ["--http", "--auth-url", "https://auth.test/verify", "--api-host", "https://api.eu.pagerduty.com/"],
        )

        assert result.exit_code == 0, result.output
        dispatcher, _, authorizer = captured["http"]
        assert isinstance(authorizer, RemoteAuthorizer)
        assert authorizer.url == "https://auth.test/verify"
        assert dispatcher.client.config.api_host == "https://api.eu.pagerduty.com"
