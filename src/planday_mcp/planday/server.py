"""Factory for the Planday MCP server."""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP

from ..logging import configure_logging, get_logger
from .tools import PlandayRuntime, PlandayTools, build_runtime

LOGGER = get_logger(__name__)


def build_planday_server(runtime: Optional[PlandayRuntime] = None) -> FastMCP:
    runtime = runtime or build_runtime()
    configure_logging(runtime.settings.log_level)
    server = FastMCP(
        "planday",
        json_response=True,
        stateless_http=True,
    )

    tools = PlandayTools(runtime)
    for spec in tools.tool_specs():
        tool_name = spec["name"]
        server.tool(name=tool_name, description=spec.get("summary", ""))(spec["func"])
        LOGGER.info("tool_registered", tool=tool_name)

    return server

