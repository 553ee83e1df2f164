"""Pytest configuration shared across the suite."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from planday_mcp.auth import OAuthToken
from planday_mcp.errors import ExchangeFailedError
from planday_mcp.settings import PlandaySettings


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 6, 3, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeExchanger:
    """Stands in for PlandayTokenExchanger and records every exchange."""

    def __init__(self, *, expires_in: int = 3600, tokens: Optional[List[str]] = None) -> None:
        self.expires_in = expires_in
        self.tokens = list(tokens or [])
        self.calls: List[str] = []
        self.fail = False
        self.gate: Optional[asyncio.Event] = None

    async def exchange(self, refresh_token: str) -> OAuthToken:
        self.calls.append(refresh_token)
        token = self.tokens.pop(0) if self.tokens else f"access-{len(self.calls)}"
        gate = self.gate
        await asyncio.sleep(0)
        if gate is not None:
            await gate.wait()
        if self.fail:
            raise ExchangeFailedError("Token exchange failed: 400 Bad Request", status_code=400)
        return OAuthToken(access_token=token, token_type="Bearer", expires_in=self.expires_in)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def exchanger() -> FakeExchanger:
    return FakeExchanger()


@pytest.fixture
def settings() -> PlandaySettings:
    return PlandaySettings(
        PLANDAY_CLIENT_ID="test-client-id",
        PLANDAY_AUTH_URL="https://id.planday.test",
        PLANDAY_API_BASE_URL="https://openapi.planday.test",
        PLANDAY_LOOKUP_TIMEOUT_SECONDS=2,
    )
