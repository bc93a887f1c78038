#!/usr/bin/env python3
"""
Everhour MCP Server
===================

Serves the Everhour time-tracking API as MCP tools over stdio.

Usage:
    python main.py                  # Serve over stdio
    python main.py --list-tools     # Print the tool table and exit
    python main.py --help           # Show help

Environment:
    EVERHOUR_API_KEY          required
    EVERHOUR_READONLY_MODE    "true", "1" or "yes" blocks write/delete tools
    EVERHOUR_API_BASE_URL     default https://api.everhour.com
    EVERHOUR_API_VERSION      "current" (default) or "legacy" endpoint paths
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent))

import httpx
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from rich.console import Console
from rich.table import Table

from api import EverhourClient
from core.errors import ConfigurationError, ToolNotFoundError
from infra.config import Settings, load_settings
from infra.logging import configure_logging
from tools import AccessGate, Dispatcher, ToolResult, build_registry


SERVER_NAME = "everhour-mcp-server"
SERVER_VERSION = "1.0.0"

# stdout belongs to the protocol
console = Console(stderr=True)


def build_dispatcher(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Dispatcher:
    """Wire gateway, registry and access gate together."""
    gateway = EverhourClient.from_settings(settings, transport=transport)
    registry = build_registry()
    gate = AccessGate.from_settings(settings)
    return Dispatcher(registry, gate, gateway)


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=item.text) for item in result.content],
        isError=result.is_error,
    )


def create_server(dispatcher: Dispatcher) -> Server:
    """Low-level MCP server whose handlers delegate to the dispatcher."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=entry["name"],
                description=entry["description"],
                inputSchema=entry["inputSchema"],
            )
            for entry in dispatcher.registry.list_tools()
        ]

    # The dispatcher validates after the access gate, so the SDK must not
    # validate first
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Optional[dict]) -> types.CallToolResult:
        result = await dispatcher.invoke(name, arguments)
        return to_call_tool_result(result)

    # The SDK turns every exception raised inside handle_call_tool into an
    # isError result, so unknown names are rejected before it runs
    tool_call_handler = server.request_handlers[types.CallToolRequest]

    async def handle_call_tool_request(request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        if name not in dispatcher.registry:
            error = ToolNotFoundError(name)
            logging.getLogger("everhour.main").warning(error.message)
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=error.message))
        return await tool_call_handler(request)

    server.request_handlers[types.CallToolRequest] = handle_call_tool_request

    return server


async def self_check(gateway: EverhourClient) -> bool:
    """One authenticated call; failure is logged, never fatal."""
    logger = logging.getLogger("everhour.main")
    ok = await gateway.test_connection()
    if ok:
        logger.info("Successfully connected to Everhour API")
    else:
        logger.warning("Could not connect to Everhour API; tools will report upstream errors")
    return ok


async def serve(dispatcher: Dispatcher) -> None:
    """Serve over stdio until the client disconnects."""
    logger = logging.getLogger("everhour.main")
    server = create_server(dispatcher)

    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"{SERVER_NAME} {SERVER_VERSION} running on stdio")
        check = asyncio.create_task(self_check(dispatcher.gateway))
        try:
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
        finally:
            if not check.done():
                check.cancel()


def print_tool_table(dispatcher: Dispatcher) -> None:
    """Print every tool with its operation type and access state."""
    allowed, _ = dispatcher.gate.partition(dispatcher.registry)

    table = Table(title=f"Everhour tools ({dispatcher.gate.mode} mode)")
    table.add_column("Tool", style="cyan")
    table.add_column("Operation")
    table.add_column("Resources", style="dim")
    table.add_column("Access")

    for descriptor in dispatcher.registry:
        table.add_row(
            descriptor.name,
            descriptor.operation_type.value,
            ", ".join(sorted(descriptor.affected_resources)),
            "[green]allowed[/green]" if descriptor.name in allowed else "[red]blocked[/red]",
        )

    Console().print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Everhour MCP Server - Everhour time tracking as MCP tools"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file (default: everhour.yaml)"
    )
    parser.add_argument(
        "--log-level", "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides EVERHOUR_LOG_LEVEL)"
    )
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the available tools and exit"
    )

    args = parser.parse_args(argv)

    try:
        settings = load_settings(config_path=args.config)
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        return 1

    configure_logging(level=args.log_level or settings.log_level, log_dir=settings.log_dir)
    logger = logging.getLogger("everhour.main")

    dispatcher = build_dispatcher(settings)

    if args.list_tools:
        print_tool_table(dispatcher)
        return 0

    dispatcher.gate.log_status(dispatcher.registry)

    try:
        asyncio.run(serve(dispatcher))
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception:
        logger.exception("Fatal error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
