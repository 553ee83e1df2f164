"""CLI entry point for running the Planday MCP server."""

from __future__ import annotations

import argparse

from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

from .logging import configure_logging, get_logger
from .planday import build_planday_server
from .planday.tools import build_runtime
from .settings import load_planday_settings

LOGGER = get_logger(__name__)


def _add_preflight_handler(app, path: str) -> None:
    async def options_endpoint(request):
        origin = request.headers.get("origin", "*")
        requested_headers = request.headers.get(
            "access-control-request-headers",
            "authorization, content-type, accept, mcp-session-id, mcp-protocol-version",
        )
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
            "Access-Control-Allow-Headers": requested_headers,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Max-Age": "600",
        }
        return Response(status_code=204, headers=headers)

    app.add_route(path, options_endpoint, methods=["OPTIONS"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Planday MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mechanism for MCP (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host for the HTTP transport")
    parser.add_argument("--port", type=int, default=8080, help="Port for the HTTP transport")
    parser.add_argument("--env-file", help="Env file with PLANDAY_* settings (overrides PLANDAY_ENV_FILE)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override PLANDAY_LOG_LEVEL",
    )
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    settings = load_planday_settings(args.env_file)
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level})
    configure_logging(settings.log_level)
    LOGGER.info("planday_server_starting", transport=args.transport, api_base_url=settings.api_base_url)
    server = build_planday_server(build_runtime(settings))

    if args.transport == "stdio":
        server.run()
    elif args.transport == "http":
        import uvicorn

        app = server.streamable_http_app()
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["mcp-session-id", "mcp-protocol-version"],
            allow_credentials=True,
        )
        _add_preflight_handler(app, server.settings.streamable_http_path)
        LOGGER.info("http_transport_starting", host=args.host, port=args.port)
        uvicorn.run(app, host=args.host, port=args.port)
    else:
        raise ValueError(f"Unsupported transport {args.transport}")


if __name__ == "__main__":  # pragma: no cover
    main()
