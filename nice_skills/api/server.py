"""MCP stdio transport: advertises the tool schemas and forwards calls."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .definitions import TOOL_DEFINITIONS
from .dispatch import Dispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "nice-skills"


def list_tool_models() -> List[types.Tool]:
    return [
        types.Tool(name=tool["name"], description=tool["description"], inputSchema=tool["inputSchema"])
        for tool in TOOL_DEFINITIONS
    ]


def create_server(dispatcher: Dispatcher) -> Server:
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return list_tool_models()

    # Arguments are narrowed by the dispatcher and each tool, not by schema.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        response = await dispatcher.dispatch(name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=response.text)],
            isError=response.is_error,
        )

    return server


async def run_stdio(dispatcher: Dispatcher) -> None:
    server = create_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Nice Skills MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
