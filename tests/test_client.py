"""Tests for the base Client class."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from content_workflow.clients import (
    APIError,
    AuthenticationError,
    Client,
    ConnectionError,
    NotFoundError,
    RateLimitError,
    StaleVersionError,
)


def error_response(status_code):
    response = MagicMock()
    response.is_success = False
    response.status_code = status_code
    response.url = "https://api.example.com/test"
    return response


class TestClientConfiguration:
    """Tests for Client configuration."""

    def test_requires_base_url(self):
        """Client raises ValueError if base_url is missing."""
        with pytest.raises(ValueError, match="base_url"):
            Client({})

    def test_base_url_from_config(self):
        """Client stores base_url from config."""
        client = Client({"base_url": "https://api.example.com"})

        assert client.base_url == "https://api.example.com"

    def test_default_timeout(self):
        """Client has default timeout of 30 seconds."""
        client = Client({"base_url": "https://api.example.com"})

        assert client.timeout == 30

    def test_default_is_single_attempt(self):
        """Client makes one attempt unless retries are configured."""
        client = Client({"base_url": "https://api.example.com"})

        assert client.retry_attempts == 1

    def test_retry_attempts_never_below_one(self):
        """A zero or negative retry_attempts still makes one attempt."""
        client = Client({"base_url": "https://api.example.com", "retry_attempts": 0})

        assert client.retry_attempts == 1

    def test_custom_headers(self):
        """Client accepts custom headers."""
        headers = {"User-Agent": "content-workflow/test"}
        client = Client({"base_url": "https://api.example.com", "headers": headers})

        assert client.headers == headers


class TestClientLifecycle:
    """Tests for Client lifecycle management."""

    def test_lazy_client_initialization(self):
        """httpx.Client is not created until accessed."""
        client = Client({"base_url": "https://api.example.com"})

        assert client._client is None

    def test_context_manager_closes_client(self):
        """Context manager closes the httpx client on exit."""
        with Client({"base_url": "https://api.example.com"}) as client:
            _ = client.client
            assert isinstance(client._client, httpx.Client)

        assert client._client is None


class TestClientErrorHandling:
    """Tests for mapping HTTP statuses to exceptions."""

    @pytest.mark.parametrize(
        "status_code,exc_class",
        [
            (401, AuthenticationError),
            (404, NotFoundError),
            (409, StaleVersionError),
            (429, RateLimitError),
            (500, APIError),
            (422, APIError),
        ],
    )
    def test_status_maps_to_exception(self, status_code, exc_class):
        """Each non-2xx status raises the matching exception with its status."""
        client = Client({"base_url": "https://api.example.com"})

        with pytest.raises(exc_class) as exc_info:
            client._handle_response(error_response(status_code))

        assert exc_info.value.status_code == status_code

    def test_success_returns_response(self):
        """Successful response is returned as-is."""
        client = Client({"base_url": "https://api.example.com"})
        response = MagicMock()
        response.is_success = True

        assert client._handle_response(response) is response

    def test_error_message_includes_body_message(self):
        """The "message" of a JSON error body is appended to the APIError message."""
        client = Client({"base_url": "https://api.example.com"})
        response = error_response(422)
        response.json.return_value = {"message": "Reference already exists"}

        with pytest.raises(APIError) as exc_info:
            client._handle_response(response)

        assert exc_info.value.message.endswith("(Reference already exists)")

    def test_non_json_error_body(self):
        """An error body that is not JSON leaves the message bare."""
        client = Client({"base_url": "https://api.example.com"})
        response = error_response(502)
        response.json.side_effect = ValueError("not json")

        with pytest.raises(APIError) as exc_info:
            client._handle_response(response)

        assert exc_info.value.message == "API error 502: https://api.example.com/test"


class TestClientRequests:
    """Tests for request dispatch."""

    def test_delete_sends_json_body(self):
        """delete() goes through request() so a JSON body can be sent."""
        client = Client({"base_url": "https://api.example.com"})
        success = MagicMock()
        success.is_success = True
        client._client = MagicMock()
        client._client.request.return_value = success

        client.delete("/file", json={"sha": "abc"})

        client._client.request.assert_called_once_with(
            "DELETE", "/file", json={"sha": "abc"}
        )

    def test_request_headers_hook_is_merged(self):
        """Per-request headers from the hook are sent with each call."""

        class HeaderClient(Client):
            def _request_headers(self):
                return {"Authorization": "Bearer t"}

        client = HeaderClient({"base_url": "https://api.example.com"})
        success = MagicMock()
        success.is_success = True
        client._client = MagicMock()
        client._client.request.return_value = success

        client.get("/x", headers={"X-Extra": "1"})

        headers = client._client.request.call_args.kwargs["headers"]
        assert headers == {"Authorization": "Bearer t", "X-Extra": "1"}


class TestClientRetryLogic:
    """Tests for Client retry behavior."""

    def test_single_attempt_by_default(self):
        """A connection error fails immediately without retrying."""
        client = Client({"base_url": "https://api.example.com"})
        client._client = MagicMock()
        client._client.request.side_effect = httpx.ConnectError("Connection refused")

        with pytest.raises(ConnectionError, match="after 1 attempts"):
            client.get("/test")

        assert client._client.request.call_count == 1

    @patch("content_workflow.clients.client.sleep")
    def test_retries_when_configured(self, mock_sleep):
        """Transport failures are retried up to retry_attempts."""
        client = Client({
            "base_url": "https://api.example.com",
            "retry_attempts": 3,
            "retry_delay": 0.1,
        })
        client._client = MagicMock()
        client._client.request.side_effect = httpx.TimeoutException("Request timed out")

        with pytest.raises(ConnectionError):
            client.get("/test")

        assert client._client.request.call_count == 3
        assert mock_sleep.call_count == 2

    def test_no_retry_on_api_error(self):
        """API errors are never retried."""
        client = Client({"base_url": "https://api.example.com", "retry_attempts": 3})
        client._client = MagicMock()
        client._client.request.return_value = error_response(400)

        with pytest.raises(APIError):
            client.get("/test")

        assert client._client.request.call_count == 1

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ReadError("connection reset"),
            httpx.WriteError("broken pipe"),
            httpx.RemoteProtocolError("Server disconnected"),
        ],
    )
    def test_any_transport_error_becomes_connection_error(self, error):
        """Every httpx transport failure surfaces as the client ConnectionError."""
        client = Client({"base_url": "https://api.example.com"})
        client._client = MagicMock()
        client._client.request.side_effect = error

        with pytest.raises(ConnectionError) as exc_info:
            client.get("/test")

        assert exc_info.value.__cause__ is error
