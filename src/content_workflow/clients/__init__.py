"""Network clients for the repository host and translation service."""

from .client import Client
from .credential import Credential, CredentialState
from .exceptions import (
    APIError,
    AuthenticationError,
    ClientError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
    StaleVersionError,
    ValidationError,
)
from .github_client import GitHubClient
from .translate_client import TranslateClient

__all__ = [
    "Client",
    "Credential",
    "CredentialState",
    "GitHubClient",
    "TranslateClient",
    "ClientError",
    "ConnectionError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "StaleVersionError",
    "ValidationError",
]
