# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""
Authorizers for the HTTP front door.

An authorizer answers one question: does this Authorization header value
grant access to the server? Two variants are provided:

- AllowAllAuthorizer: accepts any non-empty header (development default).
- RemoteAuthorizer: delegates the decision to an external endpoint.

Authorizers report "not authorized" by returning False and report their
own failure by raising AuthorizerError. The middleware maps these to 401
and 500 respectively.
"""

import logging
from typing import Optional

import httpx

from mcp_pagerduty.context import RequestContext

logger = logging.getLogger(__name__)


class AuthorizerError(Exception):
    """The authorizer could not reach a decision."""


class Authorizer:
    """Base class for authorizers."""

    async def authorize(self, token: str, ctx: RequestContext) -> bool:
        raise NotImplementedError


class AllowAllAuthorizer(Authorizer):
    async def authorize(self, token: str, ctx: RequestContext) -> bool:
        return bool(token)


class RemoteAuthorizer(Authorizer):
    """
    Verify the Authorization header against an external endpoint.

    The header is forwarded unchanged in a GET to ``url``. A 2xx answer
    authorizes the request, 401/403 rejects it and anything else is an
    authorizer failure.

    Args:
        url: Verification endpoint.
        timeout: Seconds to wait for the endpoint.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        logger.info(f"Initialized remote authorizer: url={url}")

    async def authorize(self, token: str, ctx: RequestContext) -> bool:
        if not token:
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url, headers={"Authorization": token})
        except httpx.RequestError as e:
            logger.error(f"Authorization endpoint unreachable: {e.__class__.__name__}")
            raise AuthorizerError(f"authorization endpoint unreachable: {e.__class__.__name__}") from e

        if 200 <= response.status_code < 300:
            return True
        if response.status_code in (401, 403):
            logger.debug(f"Authorization endpoint rejected token with {response.status_code}")
            return False

        logger.error(f"Authorization endpoint returned unexpected status {response.status_code}")
        raise AuthorizerError(f"authorization endpoint returned status {response.status_code}")
