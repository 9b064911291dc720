# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

import logging
import sys
from typing import Optional

import click
from dotenv import load_dotenv

from .config import DEFAULT_API_HOST, DEFAULT_HTTP_HOST, DEFAULT_HTTP_PORT, ClientConfig, HTTPConfig, ServerConfig

load_dotenv()


@click.command()
@click.option(
    "--enable-write-tools",
    is_flag=True,
    default=False,
    envvar="PAGERDUTY_ENABLE_WRITE_TOOLS",
    help="Register tools that create, modify or delete PagerDuty data",
)
@click.option("--http", "use_http", is_flag=True, default=False, envvar="MCP_HTTP", help="Serve over HTTP instead of stdio")
@click.option("--host", default=DEFAULT_HTTP_HOST, envvar="MCP_HOST", help="Host to listen on in HTTP mode")
@click.option("--port", default=DEFAULT_HTTP_PORT, type=int, envvar="MCP_PORT", help="Port to listen on in HTTP mode")
@click.option("--api-key", envvar="PAGERDUTY_USER_API_KEY", default=None, help="Default PagerDuty user API key")
@click.option("--api-host", envvar="PAGERDUTY_API_HOST", default=DEFAULT_API_HOST, help="PagerDuty REST API base URL")
@click.option("--from-email", envvar="PAGERDUTY_FROM_EMAIL", default=None, help="Email sent in the From header")
@click.option(
    "--auth-url",
    envvar="MCP_AUTH_URL",
    default=None,
    help="Endpoint that verifies the Authorization header of HTTP requests",
)
@click.option("-v", "--verbose", count=True)
def main(
    enable_write_tools: bool,
    use_http: bool,
    host: str,
    port: int,
    api_key: Optional[str],
    api_host: str,
    from_email: Optional[str],
    auth_url: Optional[str],
    verbose: int,
) -> None:
    """Entry point for the PagerDuty MCP server.

    Parameters:
      enable_write_tools: Register write-capable tools as well as read tools.
      use_http: Serve JSON-RPC over HTTP instead of stdio.
      host: Host interface to bind in HTTP mode.
      port: Port to bind in HTTP mode.
      api_key: Default PagerDuty credential (required in stdio mode).
      api_host: PagerDuty API base URL.
      from_email: Optional From header value.
      auth_url: Delegate HTTP authorization to this endpoint.
      verbose: Verbosity flag count (-v / -vv) mapping to log level.
    """
    logging_level = logging.WARN
    if verbose == 1:
        logging_level = logging.INFO
    elif verbose >= 2:
        logging_level = logging.DEBUG
    logging.basicConfig(level=logging_level, stream=sys.stderr)

    if not api_key and not use_http:
        raise click.UsageError("PAGERDUTY_USER_API_KEY environment variable is required in stdio mode")

    from .server import create_server

    client_config = ClientConfig(api_key=api_key or None, api_host=api_host, from_email=from_email or None)
    server_config = ServerConfig(enable_write_tools=enable_write_tools)
    dispatcher = create_server(client_config, server_config)

    if use_http:
        from .auth import AllowAllAuthorizer, RemoteAuthorizer
        from .transports.http import run_http

        if not api_key:
            logging.getLogger(__name__).warning(
                "No default API key configured: every request must send the X-PagerDuty-Token header"
            )
        authorizer = RemoteAuthorizer(auth_url) if auth_url else AllowAllAuthorizer()
        run_http(dispatcher, HTTPConfig(host=host, port=port), authorizer)
    else:
        from .transports.stdio import run_stdio

        run_stdio(dispatcher)


if __name__ == "__main__":
    main()
