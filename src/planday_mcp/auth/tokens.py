"""OAuth helpers for exchanging Planday refresh tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import httpx

from ..errors import ExchangeFailedError
from ..http import create_async_client
from ..logging import get_logger
from ..settings import PlandaySettings, load_planday_settings
from .session import AccessGrant

LOGGER = get_logger(__name__)


@dataclass
class OAuthToken:
    access_token: str
    token_type: str
    expires_in: int

    def to_grant(self, issued_at: datetime) -> AccessGrant:
        return AccessGrant(
            access_token=self.access_token,
            expires_at=issued_at + timedelta(seconds=self.expires_in),
        )


class PlandayTokenExchanger:
    """Refresh-token based authentication for Planday.

    A single request per call: failures surface as ``ExchangeFailedError`` and
    are never retried here.
    """

    def __init__(
        self,
        settings: Optional[PlandaySettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or load_planday_settings()
        self._transport = transport

    async def exchange(self, refresh_token: str) -> OAuthToken:
        data = {
            "client_id": self.settings.client_id,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        LOGGER.info("token_exchange_requested", token_url=self.settings.token_url)
        try:
            async with create_async_client(
                timeout=self.settings.request_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.settings.token_url,
                    data=data,
                    headers={
                        "Accept": "application/json",
                        "Content-Type": "application/x-www-form-urlencoded",
                    },
                )
        except httpx.HTTPError as exc:
            raise ExchangeFailedError(f"Token exchange failed: {exc}") from exc

        if response.is_error:
            raise ExchangeFailedError(
                f"Token exchange failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            return OAuthToken(
                access_token=str(payload["access_token"]),
                token_type=payload.get("token_type", "Bearer"),
                expires_in=int(payload["expires_in"]),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise ExchangeFailedError(f"Token exchange returned an unexpected body: {exc}") from exc
