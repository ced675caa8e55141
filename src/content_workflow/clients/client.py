"""Base client for network requests."""

import logging
from time import sleep

import httpx

from .exceptions import (
    APIError,
    AuthenticationError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
    StaleVersionError,
)

logger = logging.getLogger(__name__)


class Client:
    """Base class for network clients.

    Provides lazy-initialized httpx.Client with context manager support,
    configurable timeout, retries, and headers via dict config.

    Config keys:
        base_url (required): Base URL for all requests
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Number of attempts for transport failures (default: 1,
            i.e. a single attempt and no retry)
        retry_delay: Delay between retries in seconds (default: 1)
        headers: Additional headers to include in requests
    """

    def __init__(self, config: dict):
        if "base_url" not in config:
            raise ValueError("config must include 'base_url'")

        self._config = config
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return str(self._config["base_url"])

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return max(1, int(self._config.get("retry_attempts", 1)))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 1))

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._config.get("headers", {}))

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
        return self._client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _request_headers(self) -> dict[str, str]:
        """Per-request headers, resolved at call time.

        Subclasses override this for values that may change over the
        client's lifetime, such as an Authorization header.
        """
        return {}

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Map HTTP errors to exceptions.

        Args:
            response: The HTTP response to check

        Returns:
            The response if successful

        Raises:
            AuthenticationError: For 401 responses
            NotFoundError: For 404 responses
            StaleVersionError: For 409 responses
            RateLimitError: For 429 responses
            APIError: For other non-2xx responses
        """
        if response.is_success:
            return response

        status_code = response.status_code

        if status_code == 401:
            raise AuthenticationError(f"Authentication failed: {response.url}")
        elif status_code == 404:
            raise NotFoundError(f"Resource not found: {response.url}")
        elif status_code == 409:
            raise StaleVersionError(f"Version conflict: {response.url}")
        elif status_code == 429:
            raise RateLimitError(f"Rate limit exceeded: {response.url}")
        else:
            detail = self._error_detail(response)
            raise APIError(
                f"API error {status_code}: {response.url}"
                + (f" ({detail})" if detail else ""),
                status_code=status_code,
            )

    def _error_detail(self, response: httpx.Response) -> str:
        """The "message" field of a JSON error body, if there is one."""
        try:
            data = response.json()
        except ValueError:
            return ""
        message = data.get("message") if isinstance(data, dict) else None
        return message if isinstance(message, str) else ""

    def _request(
        self,
        method: str,
        path: str,
        **kwargs,
    ) -> httpx.Response:
        """Make a request, retrying transport failures if configured.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: URL path (appended to base_url)
            **kwargs: Additional arguments passed to httpx.request

        Returns:
            The HTTP response

        Raises:
            ConnectionError: If all attempts fail due to network issues
            APIError: If the API returns a non-2xx response
        """
        headers = {**self._request_headers(), **kwargs.pop("headers", {})}
        if headers:
            kwargs["headers"] = headers

        last_exception: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = self.client.request(method, path, **kwargs)
                return self._handle_response(response)
            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    f"Timeout (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
                if attempt < self.retry_attempts - 1:
                    sleep(self.retry_delay)
            except httpx.TransportError as e:
                last_exception = e
                logger.warning(
                    f"Connection error (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
                if attempt < self.retry_attempts - 1:
                    sleep(self.retry_delay)

        msg = f"Connection failed after {self.retry_attempts} attempts"
        raise ConnectionError(msg) from last_exception

    def get(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for GET requests."""
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for POST requests."""
        return self._request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for PUT requests."""
        return self._request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for DELETE requests.

        Goes through ``request`` so a JSON body can be sent, which the
        contents API requires for deletes.
        """
        return self._request("DELETE", path, **kwargs)
