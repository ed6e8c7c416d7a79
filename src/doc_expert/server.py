"""MCP server exposing the expert tools over stdio."""

from __future__ import annotations

import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from doc_expert.service import ExpertService

logger = logging.getLogger(__name__)

SERVER_NAME = "expert-server"
SERVER_VERSION = "1.0.0"


def build_server(service: ExpertService) -> Server:
    """Bind `tools/list` and `tools/call` to the service's dispatcher.

    Exceptions raised by the dispatcher (unknown tool, invalid arguments) are
    left to the SDK, which reports them to the client as tool errors.
    """

    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        payload = await service.dispatcher.list_tools()
        return [
            Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in payload["tools"]
        ]

    # argument validation happens in the dispatcher so errors list every field
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        result = await service.dispatcher.call_tool(name, arguments)
        return [TextContent(type="text", text=item["text"]) for item in result["content"]]

    return server


async def serve(service: ExpertService) -> None:
    server = build_server(service)
    logger.info("Server created, connecting stdio transport...")
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Expert MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
