# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0
"""
HTTP front door for the PagerDuty MCP server.

Routes:
- GET /health: liveness, never requires authorization
- POST /: one JSON-RPC message per request

Every other request goes through AuthorizationMiddleware:
1. No Authorization header: 401 {"error": "Authorization header required"}
2. Authorizer raises AuthorizerError: 500 {"error": "Authorization failed"}
3. Authorizer says no: 401 {"error": "Unauthorized"}
4. Otherwise the X-PagerDuty-Token header, if any, becomes the PagerDuty
   credential for this request only.

The transport is stateless: each POST is served by its own, already
initialized, MCP session.
"""

import logging
from typing import Iterable, Optional

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.types import ASGIApp

from mcp_pagerduty.auth import AllowAllAuthorizer, Authorizer, AuthorizerError
from mcp_pagerduty.config import HTTPConfig
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.protocol import Dispatcher, McpSession

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware that gates requests behind an Authorizer.

    Usage:
        app.add_middleware(
            AuthorizationMiddleware,
            authorizer=RemoteAuthorizer("https://auth.example.com/verify"),
        )
    """

    def __init__(
        self,
        app: ASGIApp,
        authorizer: Authorizer,
        excluded_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.authorizer = authorizer
        self.excluded_paths = set(excluded_paths or [HEALTH_PATH])
        logger.info(f"AuthorizationMiddleware initialized with {authorizer.__class__.__name__}")

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        token = request.headers.get("Authorization")
        if not token:
            return JSONResponse({"error": "Authorization header required"}, status_code=401)

        ctx = RequestContext.from_headers(request.headers)

        try:
            authorized = await self.authorizer.authorize(token, ctx)
        except AuthorizerError as e:
            logger.error(f"Authorizer failed: {e}")
            return JSONResponse({"error": "Authorization failed"}, status_code=500)

        if not authorized:
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        request.state.request_context = ctx
        return await call_next(request)


def create_app(dispatcher: Dispatcher, authorizer: Optional[Authorizer] = None) -> Starlette:
    """Build the Starlette application serving ``dispatcher``."""

    async def health(request: Request) -> Response:
        return JSONResponse({"status": "ok", "version": dispatcher.version})

    async def handle_jsonrpc(request: Request) -> Response:
        ctx = getattr(request.state, "request_context", None) or RequestContext.from_headers(request.headers)
        body = await request.body()

        response = await dispatcher.handle_raw(body, McpSession(initialized=True), ctx)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)

    return Starlette(
        routes=[
            Route(HEALTH_PATH, health, methods=["GET"]),
            Route("/", handle_jsonrpc, methods=["POST"]),
        ],
        middleware=[
            Middleware(AuthorizationMiddleware, authorizer=authorizer or AllowAllAuthorizer()),
        ],
    )


def run_http(dispatcher: Dispatcher, http_config: HTTPConfig, authorizer: Optional[Authorizer] = None) -> None:
    app = create_app(dispatcher, authorizer)
    logger.info(f"Starting HTTP server on {http_config.host}:{http_config.port}")
    uvicorn.run(app, host=http_config.host, port=http_config.port)
