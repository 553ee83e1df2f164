"""In-memory session state for a single Planday portal connection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class AccessGrant:
    """A short-lived bearer token together with its absolute expiry."""

    access_token: str
    expires_at: datetime

    def is_usable(self, now: datetime, buffer: timedelta = timedelta(0)) -> bool:
        return now < self.expires_at - buffer


@dataclass
class Session:
    refresh_token: str
    grant: Optional[AccessGrant] = None

    @property
    def access_token(self) -> Optional[str]:
        return self.grant.access_token if self.grant else None

    @property
    def expires_at(self) -> Optional[datetime]:
        return self.grant.expires_at if self.grant else None

    def has_usable_token(self, now: datetime, buffer: timedelta) -> bool:
        return self.grant is not None and self.grant.is_usable(now, buffer)

    def store_grant(self, grant: AccessGrant) -> None:
        # Token and expiry always travel together.
        self.grant = grant

    def discard_grant(self) -> None:
        self.grant = None
