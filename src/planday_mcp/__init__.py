"""MCP tools for the Planday workforce-management API."""

__version__ = "0.1.0"
