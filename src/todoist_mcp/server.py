"""MCP stdio server for todoist-mcp.

Advertises the ten Todoist commands with their JSON input schemas and routes
every ``tools/call`` through the command dispatcher. Results are returned as
a single text block plus the ``isError`` flag.

Input validation is done by the dispatcher, not by the MCP layer: invalid
arguments produce error-flagged text results like every other failure.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, List, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from todoist_mcp.config import ConfigurationError, ServerConfig, get_config
from todoist_mcp.core.client import TodoistClient
from todoist_mcp.core.context import async_request_context
from todoist_mcp.core.observability import audit_log
from todoist_mcp.schemas.commands import list_all
from todoist_mcp.tools.dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)


def list_commands() -> List[types.Tool]:
    """Return the registered commands as MCP tool definitions."""
    return [
        types.Tool(
            name=descriptor.name,
            description=descriptor.description,
            inputSchema=descriptor.input_schema(),
        )
        for descriptor in list_all()
    ]


async def invoke_command(
    dispatcher: CommandDispatcher, name: str, arguments: Any
) -> types.CallToolResult:
    """Run one command inside a fresh request context."""
    async with async_request_context(command=name) as ctx:
        result = await dispatcher.dispatch(name, arguments)
        logger.debug(
            "Request %s finished (%s)",
            ctx.correlation_id,
            result.error_code or "ok",
        )
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.text)],
            isError=result.is_error,
        )


def _build_client(config: ServerConfig) -> TodoistClient:
    return TodoistClient(
        config.require_api_token(),
        base_url=config.api_base_url,
        timeout=config.request_timeout,
    )


def create_server(
    config: Optional[ServerConfig] = None,
    client: Optional[TodoistClient] = None,
) -> Server:
    """Create and configure the MCP server instance.

    Raises:
        ConfigurationError: If no client is given and the API token is unset.
    """
    if config is None:
        config = get_config()

    dispatcher = CommandDispatcher(client or _build_client(config))
    server: Server = Server(config.server_name, version=config.server_version)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return list_commands()

    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: Any) -> types.CallToolResult:
        return await invoke_command(dispatcher, name, arguments)

    logger.info("Server created: %s v%s", config.server_name, config.server_version)
    return server


async def run(config: ServerConfig) -> None:
    """Serve over stdio until the input stream closes."""
    client = _build_client(config)
    server = create_server(config, client=client)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await client.aclose()
        audit_log("server_stop", server=config.server_name)


def main() -> None:
    """Main entry point for the todoist-mcp server."""
    config = get_config()
    config.setup_logging()

    try:
        config.require_api_token()
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        audit_log("config_error", error=str(exc))
        sys.exit(1)

    try:
        logger.info("Starting %s v%s", config.server_name, config.server_version)
        audit_log("server_start", server=config.server_name, version=config.server_version)
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as exc:
        logger.error("Server error: %s: %s", type(exc).__name__, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
