"""Tests for the stdio transport."""

import io
import json
import subprocess
import sys

import pytest

from mcp_pagerduty.transports.stdio import serve_stdio

from .conftest import call_tool_message


def lines(*messages):
    return io.StringIO("".join((m if isinstance(m, str) else json.dumps(m)) + "\n" for m in messages))


class TestServeStdio:
    @pytest.mark.asyncio
    async def test_session_lifecycle(self, dispatcher, fake_pd):
        """Test a full handshake followed by a tool call, answered in order."""
        fake_pd.add("GET", "/users/me", {"user": {"id": "PU1"}})
        reader = lines(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"protocolVersion": "2025-03-26"}},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            "",
            {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
            call_tool_message("get_user_data", request_id=3),
        )
        writer = io.StringIO()

        await serve_stdio(dispatcher, reader, writer)

        responses = [json.loads(line) for line in writer.getvalue().splitlines()]
        assert [r["id"] for r in responses] == [1, 2, 3]
        assert responses[0]["result"]["serverInfo"]["name"] == dispatcher.name
        assert len(responses[1]["result"]["tools"]) == 60
        assert json.loads(responses[2]["result"]["content"][0]["text"]) == {"id": "PU1"}

    @pytest.mark.asyncio
    async def test_tools_before_initialize(self, dispatcher):
        writer = io.StringIO()

        await serve_stdio(dispatcher, lines({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}), writer)

        (response,) = [json.loads(line) for line in writer.getvalue().splitlines()]
        assert response["error"]["code"] == -32600

    @pytest.mark.asyncio
    async def test_bad_line_does_not_stop_the_loop(self, dispatcher):
        writer = io.StringIO()

        await serve_stdio(dispatcher, lines("{broken", {"jsonrpc": "2.0", "id": 7, "method": "ping"}), writer)

        first, second = [json.loads(line) for line in writer.getvalue().splitlines()]
        assert first["error"]["code"] == -32700
        assert second == {"jsonrpc": "2.0", "id": 7, "result": {}}

    @pytest.mark.asyncio
    async def test_eof_on_empty_input(self, dispatcher):
        writer = io.StringIO()
        await serve_stdio(dispatcher, io.StringIO(""), writer)
        assert writer.getvalue() == ""


def test_stdio_does_not_load_http_transport():
    """Importing the stdio transport leaves the HTTP transport unloaded."""
    code = (
        "import sys\n"
        "import mcp_pagerduty.transports.stdio\n"
        "print('mcp_pagerduty.transports.http' in sys.modules)\n"
    )
    result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, check=True)

    assert result.stdout.strip() == "False"
