# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for PagerDuty MCP

Configuration objects are built once at startup (from the CLI or the
environment) and passed by reference to the pieces that need them.
Nothing below the CLI reads the environment.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_HOST = "https://api.pagerduty.com"
DEFAULT_TIMEOUT = 30.0

DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 3000


def env_flag(name: str, default: str = "false") -> bool:
    """Read a boolean flag from the environment."""
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class ClientConfig(BaseModel):
    """Settings for the PagerDuty REST API gateway."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(
        default=None,
        description="Default PagerDuty user API key, used when a request carries no override",
    )
    api_host: str = Field(default=DEFAULT_API_HOST, description="PagerDuty REST API base URL")
    from_email: Optional[str] = Field(
        default=None,
        description="Email sent in the From header, required by some endpoints for user tokens",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="Per-request timeout in seconds")

    @field_validator("api_host")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return (value or DEFAULT_API_HOST).rstrip("/")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            api_key=os.getenv("PAGERDUTY_USER_API_KEY") or None,
            api_host=os.getenv("PAGERDUTY_API_HOST") or DEFAULT_API_HOST,
            from_email=os.getenv("PAGERDUTY_FROM_EMAIL") or None,
        )


class ServerConfig(BaseModel):
    """Tool policy for the MCP server."""

    model_config = ConfigDict(frozen=True)

    # Write tools are disabled by default for safety
    enable_write_tools: bool = False

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(enable_write_tools=env_flag("PAGERDUTY_ENABLE_WRITE_TOOLS"))


class HTTPConfig(BaseModel):
    """Bind address for the HTTP front door."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HTTP_HOST
    port: int = DEFAULT_HTTP_PORT
