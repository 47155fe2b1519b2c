"""Inventory backend access: credential lifecycle and authenticated HTTP."""

from src.backend.client import BackendClient
from src.backend.credentials import Credential, CredentialCache
from src.backend.errors import AuthenticationError, BackendError, BackendRequestError

__all__ = [
    "AuthenticationError",
    "BackendClient",
    "BackendError",
    "BackendRequestError",
    "Credential",
    "CredentialCache",
]
