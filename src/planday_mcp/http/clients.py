"""Shared HTTPX client factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx

from .. import __version__

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": f"planday-mcp/{__version__}",
}


@asynccontextmanager
async def create_async_client(
    timeout: float = 30.0,
    *,
    base_url: str = "",
    headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    merged = {**DEFAULT_HEADERS, **(headers or {})}
    async with httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        headers=merged,
        transport=transport,
    ) as client:
        yield client
