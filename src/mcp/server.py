"""MCP stdio server exposing the product search tools."""

from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from src.core.bootstrap import setup_tools
from src.core.config import config
from src.core.logger import logger
from src.tools.base import ToolRegistry


def create_server(registry: ToolRegistry) -> Server:
    server = Server(config.mcp_server_name, version=config.mcp_server_version)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.get_schema(),
            )
            for tool in registry.list_tools()
        ]

    # Arguments are validated by the tool's own model so failures share one envelope.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        result = await registry.dispatch(name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.text)],
            isError=result.is_error,
        )

    return server


async def run_stdio(registry: ToolRegistry | None = None) -> int:
    errors = config.validate()
    if errors:
        for problem in errors:
            logger.error(f"Config: {problem}")
        return 1

    closables: list[object] = []
    if registry is None:
        registry, closables = setup_tools()
    server = create_server(registry)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"🚀 {config.mcp_server_name} MCP server started  backend={config.backend_url}")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        for resource in closables:
            await resource.close()
        logger.info("MCP server stopped")
    return 0
