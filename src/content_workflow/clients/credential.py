"""Bearer token credential handed to the repository gateway."""

import logging
import os
from enum import Enum

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "GITHUB_TOKEN"


class CredentialState(str, Enum):
    """Lifecycle of a credential within one process."""

    ABSENT = "absent"
    ACQUIRED = "acquired"
    INVALIDATED = "invalidated"
    CLEARED = "cleared"


class Credential:
    """An opaque bearer token with an explicit lifecycle.

    The token is obtained by whoever constructs the credential (direct
    entry, environment, or an interactive device flow run elsewhere) and
    is never inspected here beyond being placed in an Authorization header.

    Transitions:
        absent -> acquired       acquire(token)
        acquired -> invalidated  invalidate(), typically after a 401
        any -> cleared           clear()
        invalidated/cleared -> acquired  acquire(new_token)

    Example:
        credential = Credential.from_env()
        headers = credential.authorization_header()
    """

    def __init__(self, token: str | None = None):
        self._token: str | None = None
        self.state = CredentialState.ABSENT
        if token:
            self.acquire(token)

    def __repr__(self) -> str:
        return f"Credential({self.state.value})"

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "Credential":
        """Build a credential from the GITHUB_TOKEN environment variable."""
        env = os.environ if environ is None else environ
        return cls((env.get(TOKEN_ENV_VAR) or "").strip() or None)

    @property
    def is_usable(self) -> bool:
        return self.state is CredentialState.ACQUIRED and bool(self._token)

    def acquire(self, token: str) -> None:
        if not token or not token.strip():
            raise ValueError("token must be a non-empty string")
        self._token = token.strip()
        self.state = CredentialState.ACQUIRED

    def invalidate(self) -> None:
        """Mark the token as rejected by the provider; it is kept but unusable."""
        if self.state is CredentialState.ACQUIRED:
            logger.warning("Credential rejected by provider; re-authentication required")
            self.state = CredentialState.INVALIDATED

    def clear(self) -> None:
        self._token = None
        self.state = CredentialState.CLEARED

    def authorization_header(self) -> dict[str, str]:
        """Return the Authorization header for the current token.

        Raises:
            AuthenticationError: If the credential is not in the acquired state
        """
        if not self.is_usable:
            raise AuthenticationError(
                f"No usable credential (state: {self.state.value})"
            )
        return {"Authorization": f"Bearer {self._token}"}
