#!/usr/bin/env python3
"""YNAB MCP Server - Provides access to a YNAB budget via the MCP protocol."""

import asyncio
import logging
import sys
from typing import Any, Dict, List

from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import ServerCapabilities, TextContent, Tool

from . import __version__
from .config import Settings
from .errors import BudgetError
from .gateway import YNABGateway
from .handlers import ToolHandlers
from .resolver import EntityResolver
from .tools import TOOLS

SERVER_NAME = "ynab"

logger = logging.getLogger(__name__)


def build_server(handlers: ToolHandlers) -> Server:
    """Create the MCP server bound to one set of handlers."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        """List all available tools."""
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        """Execute a tool and return the results.

        Raised exceptions become MCP error results carrying the message.
        """
        try:
            text = await handlers.dispatch(name, arguments)
        except BudgetError as e:
            logger.info("Tool %s failed: %s", name, e)
            raise
        except Exception as e:
            logger.exception("Unexpected error executing %s", name)
            raise RuntimeError(f"Error executing {name}: {e}") from e
        return [TextContent(type="text", text=text)]

    return server


def configure_logging(level: str) -> None:
    # stdout carries the MCP stdio stream; logs must go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def serve(settings: Settings) -> None:
    """Resolve the budget, warm the payee cache and serve over stdio."""
    async with YNABGateway(
        settings.token,
        budget_id=settings.budget_id,
        base_url=settings.base_url,
        timeout=settings.timeout,
    ) as gateway:
        logger.info("Using YNAB API base URL: %s", gateway.base_url)
        await gateway.initialize()

        resolver = EntityResolver(gateway)
        await resolver.refresh_payees()

        server = build_server(ToolHandlers(gateway, resolver, timezone=settings.timezone))
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=ServerCapabilities(
                        tools={}
                    )
                )
            )


async def main() -> None:
    """Main entry point for the server."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    await serve(settings)


def run() -> None:
    try:
        asyncio.run(main())
    except BudgetError as e:
        print(f"Failed to start YNAB MCP server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
