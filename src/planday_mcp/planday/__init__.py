"""Planday API client, tools and MCP server factory."""

from .server import build_planday_server

__all__ = ["build_planday_server"]
