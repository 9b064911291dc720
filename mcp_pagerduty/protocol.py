# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""MCP dispatch core

Implements the JSON-RPC 2.0 method surface of an MCP server on top of a
``ToolCatalog``:

- ``initialize`` / ``notifications/initialized``: capability negotiation
- ``ping``: liveness, allowed in any state
- ``tools/list``: every descriptor in the catalog
- ``tools/call``: look up a tool by name and run its handler

The dispatcher is transport-agnostic. A transport decodes a message,
hands it to ``Dispatcher.handle_message`` together with the session it
belongs to and the per-request context, and writes back whatever
response (if any) comes out.

Tool-level failures (bad arguments, PagerDuty errors) are returned as a
successful ``CallToolResult`` with ``isError`` set. Protocol-level
failures (unknown method or tool, call before ``initialize``) are
JSON-RPC error responses.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from mcp.shared.exceptions import McpError
from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    LATEST_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    CallToolResult,
    ErrorData,
    Implementation,
    InitializeResult,
    ListToolsResult,
    ServerCapabilities,
    TextContent,
    ToolsCapability,
)
from pydantic import BaseModel

from mcp_pagerduty.api.client import PagerDutyClient, PagerDutyError
from mcp_pagerduty.context import DEFAULT_CONTEXT, RequestContext
from mcp_pagerduty.tools.arguments import Arguments, ToolArgumentError
from mcp_pagerduty.tools.registry import ToolCatalog

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

Message = Dict[str, Any]
MethodHandler = Callable[[Dict[str, Any], "McpSession", RequestContext], Awaitable[Dict[str, Any]]]


class McpSession:
    """Protocol state for one logical MCP session.

    stdio has a single session for the lifetime of the process. The HTTP
    front door is stateless and creates a session per request with
    ``initialized=True``.
    """

    def __init__(self, initialized: bool = False):
        self.initialized = initialized
        self.protocol_version: Optional[str] = None
        self.client_info: Optional[Dict[str, Any]] = None


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


def result_response(request_id: Any, result: Dict[str, Any]) -> Message:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, error: ErrorData) -> Message:
    # id stays null when the request id could not be determined
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": _dump(error)}


def tool_error(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


class Dispatcher:
    """Routes JSON-RPC messages to the MCP methods.

    Args:
        catalog: The tools this server exposes, fixed at startup.
        client: Gateway handed to every tool handler.
        name: Server name reported in ``initialize``.
        version: Server version reported in ``initialize``.
        instructions: Optional usage guide reported in ``initialize``.
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        client: PagerDutyClient,
        name: str,
        version: str,
        instructions: Optional[str] = None,
    ):
        self.catalog = catalog
        self.client = client
        self.name = name
        self.version = version
        self.instructions = instructions
        self._methods: Dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    async def handle_raw(
        self,
        raw: Union[str, bytes],
        session: McpSession,
        ctx: RequestContext = DEFAULT_CONTEXT,
    ) -> Optional[Message]:
        """Decode one serialized message and dispatch it."""
        try:
            message = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding unparseable message: {e}")
            return error_response(None, ErrorData(code=PARSE_ERROR, message=f"Parse error: {e}"))
        return await self.handle_message(message, session, ctx)

    async def handle_message(
        self,
        message: Any,
        session: McpSession,
        ctx: RequestContext = DEFAULT_CONTEXT,
    ) -> Optional[Message]:
        """Dispatch one decoded message.

        Returns the response to send back, or None when the message is a
        notification (or a response from the client) and nothing must be
        sent.
        """
        if not isinstance(message, dict) or message.get("jsonrpc") != JSONRPC_VERSION:
            return error_response(
                message.get("id") if isinstance(message, dict) else None,
                ErrorData(code=INVALID_REQUEST, message="Invalid Request: expected a JSON-RPC 2.0 object"),
            )

        method = message.get("method")
        if method is None and ("result" in message or "error" in message):
            # Responses to server-initiated requests; this server never sends any
            logger.debug(f"Ignoring client response for id {message.get('id')}")
            return None

        if not isinstance(method, str):
            return error_response(
                message.get("id"), ErrorData(code=INVALID_REQUEST, message="Invalid Request: missing method")
            )

        if "id" not in message:
            self._handle_notification(method, message.get("params"), session)
            return None

        request_id = message["id"]
        params = message.get("params") or {}
        if not isinstance(params, dict):
            return error_response(request_id, ErrorData(code=INVALID_PARAMS, message="params must be an object"))

        handler = self._methods.get(method)
        if handler is None:
            logger.warning(f"Unknown method: {method}")
            return error_response(request_id, ErrorData(code=METHOD_NOT_FOUND, message=f"Method not found: {method}"))

        try:
            result = await handler(params, session, ctx)
        except McpError as e:
            return error_response(request_id, e.error)
        except Exception:
            logger.exception(f"Unhandled error while processing {method}")
            return error_response(request_id, ErrorData(code=INTERNAL_ERROR, message="Internal error"))

        return result_response(request_id, result)

    def _handle_notification(self, method: str, params: Any, session: McpSession) -> None:
        if method == "notifications/initialized":
            session.initialized = True
            logger.info("Client finished initialization")
        else:
            logger.debug(f"Ignoring notification {method}")

    def _require_initialized(self, session: McpSession, method: str) -> None:
        if not session.initialized:
            logger.warning(f"Rejecting {method} received before initialize")
            raise McpError(
                ErrorData(code=INVALID_REQUEST, message=f"Session not initialized: call initialize before {method}")
            )

    async def _initialize(self, params: Dict[str, Any], session: McpSession, ctx: RequestContext) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        if requested in SUPPORTED_PROTOCOL_VERSIONS:
            version = requested
        else:
            version = LATEST_PROTOCOL_VERSION

        session.protocol_version = version
        session.client_info = params.get("clientInfo")
        # Clients may send tools/list before the initialized notification
        session.initialized = True

        client_name = (session.client_info or {}).get("name", "unknown")
        logger.info(f"Initialized session with client {client_name} (protocol {version})")

        result = InitializeResult(
            protocolVersion=version,
            capabilities=ServerCapabilities(tools=ToolsCapability(listChanged=False)),
            serverInfo=Implementation(name=self.name, version=self.version),
            instructions=self.instructions,
        )
        return _dump(result)

    async def _ping(self, params: Dict[str, Any], session: McpSession, ctx: RequestContext) -> Dict[str, Any]:
        return {}

    async def _list_tools(self, params: Dict[str, Any], session: McpSession, ctx: RequestContext) -> Dict[str, Any]:
        self._require_initialized(session, "tools/list")
        return _dump(ListToolsResult(tools=self.catalog.list_tools()))

    async def _call_tool(self, params: Dict[str, Any], session: McpSession, ctx: RequestContext) -> Dict[str, Any]:
        self._require_initialized(session, "tools/call")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise McpError(ErrorData(code=INVALID_PARAMS, message="tools/call requires a tool name"))

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise McpError(ErrorData(code=INVALID_PARAMS, message="tools/call arguments must be an object"))

        spec = self.catalog.get(name)
        if spec is None:
            logger.warning(f"Unknown tool requested: {name}")
            raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Unknown tool: {name}"))

        logger.info(f"Calling tool {name}")
        logger.debug(f"Arguments for {name}: {arguments}")

        try:
            text = await spec.handler(self.client, Arguments(arguments), ctx)
        except (ToolArgumentError, PagerDutyError) as e:
            logger.info(f"Tool {name} failed: {e}")
            return _dump(tool_error(str(e)))

        return _dump(CallToolResult(content=[TextContent(type="text", text=text)], isError=False))
