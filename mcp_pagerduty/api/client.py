# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""PagerDuty API client

This module provides the gateway between tool handlers and the PagerDuty
REST API. It handles authentication, query-string encoding and response
parsing, and turns every failure into a ``PagerDutyError`` subclass so
handlers can report it back to the caller verbatim.

The client does not retry, back off or rate-limit. A 429 from PagerDuty
is reported like any other status >= 400.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx

from mcp_pagerduty.__about__ import __version__
from mcp_pagerduty.config import ClientConfig
from mcp_pagerduty.context import DEFAULT_CONTEXT, RequestContext

logger = logging.getLogger(__name__)

USER_AGENT = f"mcp-pagerduty/{__version__}"
ACCEPT_HEADER = "application/vnd.pagerduty+json;version=2"

PAGE_LIMIT = 100

QueryParams = Mapping[str, Any]
ArrayQueryParams = Mapping[str, Sequence[str]]


class PagerDutyError(Exception):
    """Base class for everything the gateway can raise."""


class PagerDutyAPIError(PagerDutyError):
    """PagerDuty answered with a status code >= 400."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error (status {status_code}): {body}")


class PagerDutyTransportError(PagerDutyError):
    """The request never produced an HTTP response (DNS, timeout, reset...)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"request failed: {reason}")


class MissingCredentialError(PagerDutyError):
    """Neither a per-request override nor a default API key is available."""

    def __init__(self):
        super().__init__(
            "PagerDuty API token is required. Set the PAGERDUTY_USER_API_KEY environment "
            "variable or send the X-PagerDuty-Token header."
        )


class PagerDutyClient:
    """Thin async wrapper around the PagerDuty REST API.

    The configuration is fixed at construction time and never mutated, so
    a single instance is shared by every concurrent request. Everything
    that varies per request (the credential override) arrives through the
    ``ctx`` argument of each call.

    Args:
        config: Base URL, default credential, timeout and From address.
        transport: Optional httpx transport, used by tests to stand in for
            the network.
    """

    def __init__(self, config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def resolve_token(self, ctx: Optional[RequestContext] = None) -> str:
        """Pick the credential for a call: the request override wins over the default."""
        if ctx is not None and ctx.pagerduty_token:
            return ctx.pagerduty_token
        if self.config.api_key:
            return self.config.api_key
        raise MissingCredentialError()

    def build_url(self, path: str) -> str:
        return f"{self.config.api_host}/{path.lstrip('/')}"

    @staticmethod
    def build_params(
        params: Optional[QueryParams] = None,
        array_params: Optional[ArrayQueryParams] = None,
    ) -> List[Tuple[str, str]]:
        """Flatten scalar and array query parameters into ordered pairs.

        Scalar parameters produce one ``key=value`` pair each. Array
        parameters produce one pair per value, so ``{"team_ids[]": ["A", "B"]}``
        becomes ``team_ids[]=A&team_ids[]=B``. The caller decides which
        form a given filter needs.
        """
        pairs: List[Tuple[str, str]] = []
        for key, value in (params or {}).items():
            pairs.append((key, str(value)))
        for key, values in (array_params or {}).items():
            for value in values:
                pairs.append((key, str(value)))
        return pairs

    def _headers(self, token: str) -> Dict[str, str]:
        headers = {
            "Authorization": f"Token token={token}",
            "Accept": ACCEPT_HEADER,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.config.from_email:
            headers["From"] = self.config.from_email
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[QueryParams] = None,
        array_params: Optional[ArrayQueryParams] = None,
        data: Any = None,
        ctx: Optional[RequestContext] = None,
    ) -> Any:
        """Make a request to the PagerDuty API

        Args:
            method: HTTP method.
            path: API path, with or without a leading slash.
            params: Scalar query parameters.
            array_params: Multi-valued query parameters, one pair per value.
            data: JSON body for POST/PUT requests.
            ctx: Request context carrying an optional credential override.

        Returns:
            The decoded JSON body, or None when the response has no body.

        Raises:
            PagerDutyAPIError: PagerDuty returned a status >= 400.
            PagerDutyTransportError: the request could not be completed.
            MissingCredentialError: no credential is configured.
        """
        ctx = ctx or DEFAULT_CONTEXT
        token = self.resolve_token(ctx)
        url = self.build_url(path)
        query = self.build_params(params, array_params)

        # DO NOT log headers, they carry the API token
        logger.debug(f"{method} {url} params={query}")
        if data is not None:
            logger.debug(f"Request data: {data}")

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self._headers(token),
                    params=query,
                    json=data if method in ("POST", "PUT", "PATCH") else None,
                )
        except httpx.TimeoutException:
            logger.error(f"{method} {path} timed out after {self.config.timeout:g} seconds")
            raise PagerDutyTransportError(f"timed out after {self.config.timeout:g} seconds")
        except httpx.RequestError as e:
            reason = str(e) or e.__class__.__name__
            if token in reason:
                reason = reason.replace(token, "[REDACTED]")
            logger.error(f"{method} {path} failed: {reason}")
            raise PagerDutyTransportError(reason) from e

        logger.debug(f"Response status code: {response.status_code}")

        if response.status_code >= 400:
            logger.error(f"{method} {path} returned {response.status_code}")
            raise PagerDutyAPIError(response.status_code, response.text)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise PagerDutyError(f"failed to decode response: {e}") from e

    async def get(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        array_params: Optional[ArrayQueryParams] = None,
        ctx: Optional[RequestContext] = None,
    ) -> Any:
        return await self.request("GET", path, params=params, array_params=array_params, ctx=ctx)

    async def post(self, path: str, data: Any = None, ctx: Optional[RequestContext] = None) -> Any:
        return await self.request("POST", path, data=data, ctx=ctx)

    async def put(self, path: str, data: Any = None, ctx: Optional[RequestContext] = None) -> Any:
        return await self.request("PUT", path, data=data, ctx=ctx)

    async def delete(self, path: str, ctx: Optional[RequestContext] = None) -> Any:
        return await self.request("DELETE", path, ctx=ctx)

    async def paginate(
        self,
        path: str,
        on_page: Callable[[Dict[str, Any]], int],
        params: Optional[QueryParams] = None,
        max_results: int = 0,
        ctx: Optional[RequestContext] = None,
    ) -> int:
        """Walk a classic offset/limit paginated endpoint.

        ``on_page`` receives each decoded page and returns how many records
        it consumed. Walking stops when PagerDuty reports ``more: false``,
        when a page is not a JSON object, or once ``max_results`` records
        have been consumed (0 means no limit).

        Returns:
            The total number of records reported by ``on_page``.
        """
        query = dict(params or {})
        offset = 0
        fetched = 0

        while True:
            query["offset"] = offset
            query["limit"] = PAGE_LIMIT

            page = await self.get(path, params=query, ctx=ctx)
            if not isinstance(page, dict):
                break

            fetched += on_page(page)

            if max_results > 0 and fetched >= max_results:
                break
            if not page.get("more"):
                break

            offset += PAGE_LIMIT

        return fetched
