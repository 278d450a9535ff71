"""
Tests for the client-credentials token cache.

A fake clock drives expiry so no test depends on wall time.
"""

import asyncio
import base64
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from ramp_approvals.core.exceptions import AuthenticationError
from ramp_approvals.services.token_cache import TokenCache

TOKEN_URL = "https://demo-api.ramp.com/developer/v1/token"


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_cache(clock: FakeClock) -> TokenCache:
    return TokenCache(
        client_id="client-id",
        client_secret="client-secret",
        token_url=TOKEN_URL,
        scope="transactions:read reimbursements:read",
        clock=clock,
    )


async def get_token(cache: TokenCache):
    async with httpx.AsyncClient() as http:
        return await cache.get_token(http)


@respx.mock
def test_exchange_uses_basic_auth_and_client_credentials():
    route = respx.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
    )

    token = asyncio.run(get_token(make_cache(FakeClock())))

    assert token.access_token == "tok-1"
    request = route.calls.last.request
    expected = base64.b64encode(b"client-id:client-secret").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    body = parse_qs(request.content.decode())
    assert body["grant_type"] == ["client_credentials"]
    assert body["scope"] == ["transactions:read reimbursements:read"]


@respx.mock
def test_expiry_is_five_minutes_early():
    respx.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
    )

    token = asyncio.run(get_token(make_cache(FakeClock(1_000.0))))

    assert token.expires_at == 1_000.0 + 3600 - 300


@respx.mock
def test_cached_token_skips_network():
    route = respx.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
    )
    clock = FakeClock(1_000.0)
    cache = make_cache(clock)

    first = asyncio.run(get_token(cache))
    clock.now = 1_000.0 + 3600 - 301
    second = asyncio.run(get_token(cache))

    assert second is first
    assert route.call_count == 1


@respx.mock
def test_expired_token_is_refreshed():
    route = respx.post(TOKEN_URL).mock(side_effect=[
        httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600}),
        httpx.Response(200, json={"access_token": "tok-2", "expires_in": 3600}),
    ])
    clock = FakeClock(1_000.0)
    cache = make_cache(clock)

    asyncio.run(get_token(cache))
    clock.now = 1_000.0 + 3600 - 300  # exactly at expiry: no longer valid
    token = asyncio.run(get_token(cache))

    assert token.access_token == "tok-2"
    assert route.call_count == 2


@respx.mock
def test_rejected_exchange_raises_authentication_error():
    respx.post(TOKEN_URL).mock(return_value=httpx.Response(401, json={"error": "invalid_client"}))
    cache = make_cache(FakeClock())

    with pytest.raises(AuthenticationError) as excinfo:
        asyncio.run(get_token(cache))

    assert excinfo.value.status_code == 401
    assert "401" in excinfo.value.message
    assert cache.cached is None


@respx.mock
def test_unreachable_token_endpoint_raises_authentication_error():
    respx.post(TOKEN_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(AuthenticationError):
        asyncio.run(get_token(make_cache(FakeClock())))


@respx.mock
def test_invalidate_forces_new_exchange():
    route = respx.post(TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
    )
    cache = make_cache(FakeClock())

    asyncio.run(get_token(cache))
    cache.invalidate()
    asyncio.run(get_token(cache))

    assert route.call_count == 2
