"""Tests for the HTTP front door and the authorizers."""

import httpx
import pytest
from starlette.testclient import TestClient

from mcp_pagerduty.__about__ import __version__
from mcp_pagerduty.auth import AllowAllAuthorizer, Authorizer, AuthorizerError, RemoteAuthorizer
from mcp_pagerduty.context import DEFAULT_CONTEXT
from mcp_pagerduty.transports.http import create_app

from .conftest import DEFAULT_TOKEN, call_tool_message

AUTH = {"Authorization": "Bearer caller"}


class RejectingAuthorizer(Authorizer):
    async def authorize(self, token, ctx):
        return False


class BrokenAuthorizer(Authorizer):
    async def authorize(self, token, ctx):
        raise AuthorizerError("auth backend down")


@pytest.fixture
def http_client(dispatcher):
    return TestClient(create_app(dispatcher))


class TestHealth:
    def test_health_needs_no_authorization(self, http_client):
        response = http_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}

    def test_health_with_rejecting_authorizer(self, dispatcher):
        client = TestClient(create_app(dispatcher, RejectingAuthorizer()))
        assert client.get("/health").status_code == 200


class TestAuthorization:
    """Tests for the authorization middleware."""

    def test_missing_header(self, http_client, fake_pd):
        response = http_client.post("/", json={"jsonrpc": "2.0", "id": 1, "method": "ping"})

        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header required"}

    def test_default_authorizer_accepts_any_header(self, http_client):
        response = http_client.post("/", json={"jsonrpc": "2.0", "id": 1, "method": "ping"}, headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"jsonrpc": "2.0", "id": 1, "result": {}}

    def test_rejected(self, dispatcher, fake_pd):
        client = TestClient(create_app(dispatcher, RejectingAuthorizer()))

        response = client.post("/", json=call_tool_message("get_user_data"), headers=AUTH)

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert fake_pd.requests == []

    def test_authorizer_failure_is_500(self, dispatcher):
        """Test that a broken authorizer is distinguishable from a bad credential."""
        client = TestClient(create_app(dispatcher, BrokenAuthorizer()))

        response = client.post("/", json={"jsonrpc": "2.0", "id": 1, "method": "ping"}, headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"error": "Authorization failed"}


class TestJsonRpcOverHttp:
    def test_tools_call_without_initialize(self, http_client, fake_pd):
        """Test that each HTTP request is served by an initialized session."""
        fake_pd.add("GET", "/users/me", {"user": {"id": "PU1"}})

        response = http_client.post("/", json=call_tool_message("get_user_data"), headers=AUTH)

        assert response.status_code == 200
        assert response.json()["result"]["isError"] is False
        assert fake_pd.last.headers["Authorization"] == f"Token token={DEFAULT_TOKEN}"

    def test_token_override_reaches_backend(self, http_client, fake_pd):
        headers = dict(AUTH, **{"X-PagerDuty-Token": "per-request"})

        http_client.post("/", json=call_tool_message("get_user_data"), headers=headers)
        http_client.post("/", json=call_tool_message("get_user_data"), headers=AUTH)

        first, second = fake_pd.requests
        assert first.headers["Authorization"] == "Token token=per-request"
        # the override does not leak into the next request
        assert second.headers["Authorization"] == f"Token token={DEFAULT_TOKEN}"

    def test_notification_is_accepted(self, http_client):
        response = http_client.post(
            "/", json={"jsonrpc": "2.0", "method": "notifications/initialized"}, headers=AUTH
        )

        assert response.status_code == 202
        assert response.content == b""

    def test_parse_error(self, http_client):
        response = http_client.post("/", content=b"{oops", headers=dict(AUTH, **{"Content-Type": "application/json"}))

        assert response.status_code == 200
        assert response.json()["error"]["code"] == -32700

    def test_get_is_not_allowed(self, http_client):
        assert http_client.get("/", headers=AUTH).status_code == 405


class TestAuthorizers:
    @pytest.mark.asyncio
    async def test_allow_all(self):
        authorizer = AllowAllAuthorizer()
        assert await authorizer.authorize("anything", DEFAULT_CONTEXT) is True
        assert await authorizer.authorize("", DEFAULT_CONTEXT) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, expected", [(200, True), (204, True), (401, False), (403, False)])
    async def test_remote_decisions(self, status, expected):
        seen = []

        def verify(request):
            seen.append(request)
            return httpx.Response(status)

        authorizer = RemoteAuthorizer("https://auth.test/verify", transport=httpx.MockTransport(verify))

        assert await authorizer.authorize("Bearer abc", DEFAULT_CONTEXT) is expected
        assert seen[0].method == "GET"
        assert seen[0].headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_remote_unexpected_status(self):
        authorizer = RemoteAuthorizer(
            "https://auth.test/verify", transport=httpx.MockTransport(lambda request: httpx.Response(502))
        )

        with pytest.raises(AuthorizerError, match="status 502"):
            await authorizer.authorize("Bearer abc", DEFAULT_CONTEXT)

    @pytest.mark.asyncio
    async def test_remote_unreachable(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        authorizer = RemoteAuthorizer("https://auth.test/verify", transport=httpx.MockTransport(refuse))

        with pytest.raises(AuthorizerError, match="unreachable"):
            await authorizer.authorize("Bearer abc", DEFAULT_CONTEXT)

    def test_remote_failure_maps_to_500(self, dispatcher):
        authorizer = RemoteAuthorizer(
            "https://auth.test/verify", transport=httpx.MockTransport(lambda request: httpx.Response(503))
        )
        client = TestClient(create_app(dispatcher, authorizer))

        response = client.post("/", json={"jsonrpc": "2.0", "id": 1, "method": "ping"}, headers=AUTH)

        assert response.status_code == 500
