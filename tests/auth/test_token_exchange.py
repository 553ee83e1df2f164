from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs

import httpx
import pytest

from planday_mcp.auth import OAuthToken, PlandayTokenExchanger, SessionAuthority
from planday_mcp.errors import ExchangeFailedError


@pytest.mark.asyncio
async def test_exchange_posts_refresh_grant_with_client_id(settings) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"access_token": "abc", "expires_in": 3600, "token_type": "Bearer"})

    exchanger = PlandayTokenExchanger(settings, transport=httpx.MockTransport(handler))

    token = await exchanger.exchange("refresh-123")

    assert token.access_token == "abc"
    assert token.expires_in == 3600
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://id.planday.test/connect/token"
    form = parse_qs(request.content.decode())
    assert form == {
        "client_id": ["test-client-id"],
        "grant_type": ["refresh_token"],
        "refresh_token": ["refresh-123"],
    }


def test_grant_expiry_is_absolute_from_issue_time() -> None:
    issued_at = datetime(2024, 6, 3, 8, 0, tzinfo=timezone.utc)

    grant = OAuthToken(access_token="abc", token_type="Bearer", expires_in=3600).to_grant(issued_at)

    assert grant.expires_at == issued_at + timedelta(hours=1)
    assert grant.is_usable(issued_at + timedelta(minutes=54), timedelta(minutes=5))
    assert not grant.is_usable(issued_at + timedelta(minutes=55), timedelta(minutes=5))


@pytest.mark.asyncio
async def test_non_success_status_raises_exchange_failed(settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))
    exchanger = PlandayTokenExchanger(settings, transport=transport)

    with pytest.raises(ExchangeFailedError) as excinfo:
        await exchanger.exchange("revoked")

    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_network_error_raises_exchange_failed(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    exchanger = PlandayTokenExchanger(settings, transport=httpx.MockTransport(handler))

    with pytest.raises(ExchangeFailedError, match="connection refused"):
        await exchanger.exchange("refresh-123")


@pytest.mark.asyncio
async def test_malformed_body_raises_exchange_failed(settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"token_type": "Bearer"}))
    exchanger = PlandayTokenExchanger(settings, transport=transport)

    with pytest.raises(ExchangeFailedError, match="unexpected body"):
        await exchanger.exchange("refresh-123")


@pytest.mark.asyncio
async def test_authority_reports_exchange_error_without_retrying(settings) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    authority = SessionAuthority(PlandayTokenExchanger(settings, transport=httpx.MockTransport(handler)))

    result = await authority.authenticate("refresh-123")

    assert result.success is False
    assert "503" in (result.error or "")
    assert len(calls) == 1
    assert authority.is_authenticated() is False
