"""Authenticated HTTP access to the inventory backend."""

from __future__ import annotations

from typing import Any

import httpx

from src.backend.credentials import CredentialCache
from src.backend.errors import AuthenticationError, BackendRequestError
from src.core.config import config
from src.core.logger import SupplyLogger, logger as default_logger

LOGIN_PATH = "/login"


class BackendClient:
    """GET-only JSON client that attaches the cached bearer token to every call.

    The client never retries on its own. With ``reauth_on_unauthorized`` set, a
    401 drops the cached token, logs in again and repeats the request once.
    """

    def __init__(
        self,
        base_url: str | None = None,
        email: str | None = None,
        password: str | None = None,
        *,
        credentials: CredentialCache | None = None,
        timeout: float | None = None,
        reauth_on_unauthorized: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        log: SupplyLogger | None = None,
    ):
        self.base_url = (base_url or config.backend_url).rstrip("/")
        self._email = email if email is not None else config.admin_email
        self._password = password if password is not None else config.admin_password
        self.timeout = timeout if timeout is not None else config.backend_timeout
        self._reauth = (
            config.reauth_on_401 if reauth_on_unauthorized is None else reauth_on_unauthorized
        )
        self._log = log or default_logger
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )
        self.credentials = credentials or CredentialCache(
            self.login,
            ttl_seconds=config.token_ttl_hours * 3600,
            source=self.base_url,
            log=self._log,
        )

    async def login(self) -> str:
        """POST the administrative credentials and return the issued token."""
        try:
            response = await self.client.post(
                LOGIN_PATH,
                json={"email": self._email, "password": self._password},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise AuthenticationError(
                f"Failed to authenticate with backend: HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise AuthenticationError(
                f"Failed to authenticate with backend: timed out after {self.timeout}s"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AuthenticationError(f"Failed to authenticate with backend: {e}") from e
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationError(
                "Failed to authenticate with backend: login response carried no token"
            )
        return token

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        token = await self.credentials.get_token()
        response = await self._send(path, params, token)
        if response.status_code == 401 and self._reauth:
            self._log.warning(f"Backend rejected token on {path}; re-authenticating once")
            self.credentials.invalidate(token)
            token = await self.credentials.get_token()
            response = await self._send(path, params, token)
        return self._decode(response)

    async def _send(
        self, path: str, params: dict[str, Any] | None, token: str
    ) -> httpx.Response:
        self._log.backend_request(path, params)
        try:
            return await self.client.get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TimeoutException as e:
            self._log.error(f"Backend request timed out: {path}")
            raise BackendRequestError(
                f"Backend request failed: timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            self._log.error(f"Backend request failed: {e}")
            raise BackendRequestError(f"Backend request failed: {e}") from e

    def _decode(self, response: httpx.Response) -> Any:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = response.status_code
            body = response.text.strip()[:300]
            message = f"Backend request failed: HTTP {status}"
            if body:
                message = f"{message}: {body}"
            self._log.error(message)
            raise BackendRequestError(message, status_code=status) from e
        try:
            return response.json()
        except ValueError as e:
            raise BackendRequestError(
                f"Backend request failed: invalid JSON body ({e})",
                status_code=response.status_code,
            ) from e

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
