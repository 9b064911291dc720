"""Shared pytest fixtures for PagerDuty MCP tests."""

import json

import httpx
import pytest

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.config import ClientConfig, ServerConfig
from mcp_pagerduty.protocol import McpSession
from mcp_pagerduty.server import create_server

API_HOST = "https://pagerduty.test"
DEFAULT_TOKEN = "default-token"


class FakePagerDuty:
    """In-memory stand-in for the PagerDuty REST API.

    Routes are keyed by (method, path). Unrouted requests get
    ``default_status`` with ``default_json`` so handlers can run end to
    end without wiring every endpoint. Every request is recorded.
    """

    def __init__(self):
        self.requests = []
        self.routes = {}
        self.default_status = 200
        self.default_json = {}

    def add(self, method, path, json_body=None, status=200, text=None):
        self.routes[(method, path)] = (status, json_body, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body, text = self.routes.get(
            (request.method, request.url.path), (self.default_status, self.default_json, None)
        )
        if text is not None:
            return httpx.Response(status, text=text)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def calls(self, method=None):
        return [r for r in self.requests if method is None or r.method == method]


def body_of(request: httpx.Request):
    return json.loads(request.content)


@pytest.fixture
def fake_pd():
    return FakePagerDuty()


@pytest.fixture
def client_config():
    return ClientConfig(api_key=DEFAULT_TOKEN, api_host=API_HOST)


@pytest.fixture
def pd_client(client_config, fake_pd):
    return PagerDutyClient(client_config, transport=fake_pd.transport)


@pytest.fixture
def dispatcher(client_config, fake_pd):
    """Dispatcher with write tools enabled."""
    return create_server(client_config, ServerConfig(enable_write_tools=True), transport=fake_pd.transport)


@pytest.fixture
def read_only_dispatcher(client_config, fake_pd):
    return create_server(client_config, ServerConfig(enable_write_tools=False), transport=fake_pd.transport)


@pytest.fixture
def session():
    return McpSession(initialized=True)


def call_tool_message(name, arguments=None, request_id=1):
    params = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return {"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": params}
