"""Authentication helpers for the Planday MCP server."""

from .authority import TOKEN_REFRESH_BUFFER, AuthenticationResult, SessionAuthority
from .session import AccessGrant, Session
from .tokens import OAuthToken, PlandayTokenExchanger

__all__ = [
    "TOKEN_REFRESH_BUFFER",
    "AccessGrant",
    "AuthenticationResult",
    "OAuthToken",
    "PlandayTokenExchanger",
    "Session",
    "SessionAuthority",
]
