"""YNAB MCP Server - exposes a YNAB budget as MCP tools with name resolution."""

__version__ = "1.0.0"
