"""HTTP helpers shared by the token exchanger and the API client."""

from .clients import DEFAULT_HEADERS, create_async_client

__all__ = ["DEFAULT_HEADERS", "create_async_client"]
