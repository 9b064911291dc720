# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Newline-delimited JSON-RPC over stdin/stdout

One session for the lifetime of the process. Messages are handled one at
a time in arrival order, so responses leave in request order. stdout is
reserved for protocol messages; logs go to stderr.
"""

import asyncio
import json
import logging
import sys
from typing import Optional, TextIO

from mcp_pagerduty.context import DEFAULT_CONTEXT
from mcp_pagerduty.protocol import Dispatcher, McpSession

logger = logging.getLogger(__name__)


async def serve_stdio(
    dispatcher: Dispatcher,
    reader: Optional[TextIO] = None,
    writer: Optional[TextIO] = None,
) -> None:
    reader = reader or sys.stdin
    writer = writer or sys.stdout
    session = McpSession()

    logger.info("Serving MCP over stdio")
    while True:
        # readline blocks, keep it off the event loop
        line = await asyncio.to_thread(reader.readline)
        if not line:
            logger.info("stdin closed, shutting down")
            break

        line = line.strip()
        if not line:
            continue

        response = await dispatcher.handle_raw(line, session, DEFAULT_CONTEXT)
        if response is not None:
            writer.write(json.dumps(response, ensure_ascii=False) + "\n")
            writer.flush()


def run_stdio(dispatcher: Dispatcher) -> None:
    asyncio.run(serve_stdio(dispatcher))
