"""Failures raised by the inventory backend layer."""


class BackendError(Exception):
    """Base for every failure talking to the inventory backend."""


class AuthenticationError(BackendError):
    """The login exchange failed: transport error, non-2xx, or no token in the body."""


class BackendRequestError(BackendError):
    """An authenticated request failed after a token was obtained."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
