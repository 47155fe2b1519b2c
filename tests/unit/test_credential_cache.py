import asyncio

import pytest

from src.backend.credentials import DEFAULT_TTL_SECONDS, CredentialCache
from src.backend.errors import AuthenticationError


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingExchange:
    def __init__(self, tokens: list[str] | None = None, delay: float = 0.0):
        self.calls = 0
        self._tokens = tokens or ["token-1", "token-2", "token-3"]
        self._delay = delay

    async def __call__(self) -> str:
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._tokens[self.calls - 1]


@pytest.mark.asyncio
async def test_token_is_reused_within_validity_window():
    clock = FakeClock()
    exchange = CountingExchange()
    cache = CredentialCache(exchange, clock=clock)

    first = await cache.get_token()
    clock.advance(DEFAULT_TTL_SECONDS - 1)
    second = await cache.get_token()

    assert first == second == "token-1"
    assert exchange.calls == 1


@pytest.mark.asyncio
async def test_expired_token_triggers_exactly_one_new_login():
    clock = FakeClock()
    exchange = CountingExchange()
    cache = CredentialCache(exchange, clock=clock)

    await cache.get_token()
    clock.advance(DEFAULT_TTL_SECONDS)
    refreshed = await cache.get_token()
    again = await cache.get_token()

    assert refreshed == again == "token-2"
    assert exchange.calls == 2


@pytest.mark.asyncio
async def test_expiry_is_login_time_plus_23_hours():
    clock = FakeClock(now=500.0)
    cache = CredentialCache(CountingExchange(), clock=clock)

    await cache.get_token()

    assert cache.credential is not None
    assert cache.credential.expires_at == 500.0 + 23 * 60 * 60


@pytest.mark.asyncio
async def test_failed_login_leaves_state_untouched_and_next_call_retries():
    clock = FakeClock()
    attempts = {"n": 0}

    async def flaky_exchange() -> str:
        attempts["n"] += 1
        if attempts["n"] == 1:
            raise ConnectionError("backend unreachable")
        return "fresh-token"

    cache = CredentialCache(flaky_exchange, clock=clock)

    with pytest.raises(AuthenticationError, match="backend unreachable"):
        await cache.get_token()
    assert cache.credential is None

    assert await cache.get_token() == "fresh-token"
    assert attempts["n"] == 2


@pytest.mark.asyncio
async def test_failed_refresh_does_not_serve_expired_token():
    clock = FakeClock()
    calls = {"n": 0}

    async def exchange() -> str:
        calls["n"] += 1
        if calls["n"] > 1:
            raise AuthenticationError("Failed to authenticate with backend: HTTP 500")
        return "old-token"

    cache = CredentialCache(exchange, clock=clock)
    await cache.get_token()
    clock.advance(DEFAULT_TTL_SECONDS + 1)

    with pytest.raises(AuthenticationError, match="HTTP 500"):
        await cache.get_token()


@pytest.mark.asyncio
async def test_empty_token_is_an_authentication_error():
    async def exchange() -> str:
        return ""

    cache = CredentialCache(exchange, clock=FakeClock())

    with pytest.raises(AuthenticationError):
        await cache.get_token()
    assert cache.credential is None


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_login():
    exchange = CountingExchange(delay=0.01)
    cache = CredentialCache(exchange, clock=FakeClock())

    tokens = await asyncio.gather(*(cache.get_token() for _ in range(5)))

    assert set(tokens) == {"token-1"}
    assert exchange.calls == 1


@pytest.mark.asyncio
async def test_invalidate_only_drops_matching_token():
    exchange = CountingExchange()
    cache = CredentialCache(exchange, clock=FakeClock())
    await cache.get_token()

    cache.invalidate("some-other-token")
    assert await cache.get_token() == "token-1"

    cache.invalidate("token-1")
    assert await cache.get_token() == "token-2"
    assert exchange.calls == 2


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        CredentialCache(CountingExchange(), ttl_seconds=0)
