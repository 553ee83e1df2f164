"""Structured logging helpers for the Planday MCP server."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

import structlog


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure structlog + stdlib logging once.

    Logs go to stderr: stdout belongs to the stdio MCP transport.
    """
    numeric_level = _coerce_level(level)
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger with consistent structure."""
    return structlog.get_logger(name)


def mask_token(token: Optional[str]) -> Optional[str]:
    """Shorten a credential to something safe to log or display."""
    if not token:
        return None
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"
