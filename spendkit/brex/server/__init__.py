"""MCP server exposing the Brex operations."""

from .mcp import configure_logging, main, mcp, run, set_api

__all__ = ["mcp", "run", "main", "set_api", "configure_logging"]
