"""Bearer-token cache for the inventory backend.

One credential per process. A token is served until its local expiry
(login time + ttl); after that the next caller performs a fresh login.
Concurrent callers share a single in-flight login.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from src.backend.errors import AuthenticationError
from src.core.logger import SupplyLogger, logger as default_logger

LoginExchange = Callable[[], Awaitable[str]]

DEFAULT_TTL_SECONDS = 23 * 60 * 60


@dataclass(frozen=True)
class Credential:
    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class CredentialCache:
    def __init__(
        self,
        exchange: LoginExchange,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        source: str = "backend",
        log: SupplyLogger | None = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._exchange = exchange
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._source = source
        self._log = log or default_logger
        self._credential: Credential | None = None
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def _current_token(self) -> str | None:
        cred = self._credential
        if cred is not None and cred.is_valid(self._clock()):
            return cred.token
        return None

    async def get_token(self) -> str:
        """Return a valid bearer token, logging in when none is cached or it expired."""
        token = self._current_token()
        if token is not None:
            return token
        async with self._lock:
            # another caller may have refreshed while we waited
            token = self._current_token()
            if token is not None:
                return token
            return await self._refresh()

    async def _refresh(self) -> str:
        self._log.auth_attempt(self._source)
        try:
            token = await self._exchange()
        except AuthenticationError as e:
            self._log.auth_failure(str(e))
            raise
        except Exception as e:
            self._log.auth_failure(str(e))
            raise AuthenticationError(f"Failed to authenticate with backend: {e}") from e
        if not isinstance(token, str) or not token:
            self._log.auth_failure("login returned no token")
            raise AuthenticationError("Failed to authenticate with backend: no token returned")
        cred = Credential(token=token, expires_at=self._clock() + self._ttl_seconds)
        self._credential = cred
        self._log.auth_success(cred.expires_at)
        return cred.token

    def invalidate(self, token: str | None = None) -> None:
        """Drop the cached credential.

        With ``token`` given, only drop it if it is still the cached one, so a
        stale rejection cannot discard a token another caller just refreshed.
        """
        cred = self._credential
        if cred is None:
            return
        if token is None or cred.token == token:
            self._credential = None
