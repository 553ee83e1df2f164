"""Token lifecycle management for the Planday session.

The authority owns the single long-lived refresh token and the current
short-lived access token. Every tool asks it for a bearer token before
calling Planday; it hands out the cached token while it is comfortably
inside its lifetime and performs one exchange otherwise.

Concurrent callers that all observe an expired token share one exchange:
the refresh path runs under an ``asyncio.Lock`` and re-checks the session
after acquiring it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from ..errors import ExchangeFailedError, InvalidCredentialError, UnauthenticatedError
from ..logging import get_logger, mask_token
from ..settings import PlandaySettings
from .session import Session
from .tokens import PlandayTokenExchanger

LOGGER = get_logger(__name__)

TOKEN_REFRESH_BUFFER = timedelta(minutes=5)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuthenticationResult:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class SessionAuthority:
    """Owns the Planday session and decides when to refresh its token."""

    def __init__(
        self,
        exchanger: Optional[PlandayTokenExchanger] = None,
        *,
        settings: Optional[PlandaySettings] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._exchanger = exchanger or PlandayTokenExchanger(settings)
        self._clock = clock
        self._session: Optional[Session] = None
        self._refresh_lock = asyncio.Lock()

    @staticmethod
    def _validate_refresh_token(refresh_token: Any) -> str:
        if not isinstance(refresh_token, str):
            raise InvalidCredentialError("Refresh token must be a string")
        token = refresh_token.strip()
        if not token:
            raise InvalidCredentialError("Refresh token is empty")
        if any(char.isspace() for char in token):
            raise InvalidCredentialError("Refresh token must not contain whitespace")
        return token

    async def authenticate(self, refresh_token: str) -> AuthenticationResult:
        """Exchange ``refresh_token`` right away and store the new session.

        A malformed credential raises ``InvalidCredentialError``. A failed
        exchange is reported in the result and leaves any prior session as is.
        """
        token = self._validate_refresh_token(refresh_token)
        try:
            oauth_token = await self._exchanger.exchange(token)
        except ExchangeFailedError as exc:
            LOGGER.warning("authentication_failed", error=str(exc), status_code=exc.status_code)
            return AuthenticationResult(success=False, error=str(exc))

        self._session = Session(refresh_token=token, grant=oauth_token.to_grant(self._clock()))
        LOGGER.info(
            "session_established",
            refresh_token=mask_token(token),
            expires_at=self._session.expires_at.isoformat() if self._session.expires_at else None,
        )
        return AuthenticationResult(
            success=True,
            message="Token exchange successful - session stored in memory",
        )

    async def get_valid_access_token(self) -> Optional[str]:
        """Return a bearer token valid for at least the buffer window, or ``None``.

        ``None`` means the caller must re-authenticate; it is returned when no
        session exists or when the refresh exchange fails.
        """
        session = self._session
        if session is None or not session.refresh_token:
            return None
        if session.has_usable_token(self._clock(), TOKEN_REFRESH_BUFFER):
            return session.access_token

        async with self._refresh_lock:
            session = self._session
            if session is None:
                return None
            if session.has_usable_token(self._clock(), TOKEN_REFRESH_BUFFER):
                return session.access_token

            try:
                oauth_token = await self._exchanger.exchange(session.refresh_token)
            except ExchangeFailedError as exc:
                LOGGER.warning("access_token_refresh_failed", error=str(exc), status_code=exc.status_code)
                session.discard_grant()
                return None

            current = self._session
            if current is not session:
                # Cleared or replaced while the exchange was in flight.
                LOGGER.info("access_token_refresh_discarded")
                if current is not None and current.has_usable_token(self._clock(), TOKEN_REFRESH_BUFFER):
                    return current.access_token
                return None

            session.store_grant(oauth_token.to_grant(self._clock()))
            LOGGER.info(
                "access_token_refreshed",
                expires_at=session.expires_at.isoformat() if session.expires_at else None,
            )
            return session.access_token

    async def require_access_token(self) -> str:
        token = await self.get_valid_access_token()
        if token:
            return token
        if not self.is_authenticated():
            raise UnauthenticatedError()
        raise UnauthenticatedError(
            "Unable to get a valid access token. Please re-authenticate using the authenticate_planday tool."
        )

    def is_authenticated(self) -> bool:
        return self._session is not None and bool(self._session.refresh_token)

    def clear_session(self) -> None:
        if self._session is not None:
            LOGGER.info("session_cleared")
        self._session = None

    def session_info(self) -> Optional[Dict[str, Any]]:
        session = self._session
        if session is None:
            return None
        expires_at = session.expires_at
        return {
            "refreshToken": mask_token(session.refresh_token),
            "accessToken": mask_token(session.access_token),
            "expiresAt": expires_at.isoformat() if expires_at else None,
            "tokenValid": session.has_usable_token(self._clock(), TOKEN_REFRESH_BUFFER),
        }
