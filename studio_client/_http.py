"""Internal HTTP handling utilities for the studio client.

This module provides the low-level HTTP communication layer used by all
sub-clients. It handles:
- Making HTTP requests (sync and async)
- Decoding JSON or plain-text bodies
- Mapping error statuses and transport failures to client exceptions

This is an internal module and should not be imported directly by users.
"""

import json as jsonlib
from typing import Any, Literal

import httpx

from studio_client.exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
    ResponseFormatError,
    ServerError,
    TimeoutError,
    TunnelAuthError,
)


# HTTP methods supported by the client
HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

# Sent on every request so ngrok tunnels return the API instead of an
# interstitial page
DEFAULT_HEADERS = {"ngrok-skip-browser-warning": "true"}

DEFAULT_TIMEOUT = 30.0


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "json" in content_type.lower()


def _decode_body(response: httpx.Response) -> Any:
    """Decode a successful response body.

    JSON bodies are parsed; anything else is returned as text. Empty bodies
    decode to None.

    Raises:
        ResponseFormatError: If the body claims to be JSON but is not.
    """
    if not response.content:
        return None
    if not _is_json(response):
        return response.text
    try:
        return response.json()
    except (jsonlib.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseFormatError(
            f"Malformed JSON response (HTTP {response.status_code}): {e}",
            payload=response.text,
        ) from e


def _parse_error_message(response: httpx.Response) -> tuple[str, Any]:
    """Extract a message and the decoded body from an error response.

    Looks for "message", "detail" or "error" keys in a JSON body and falls
    back to the raw text, then to a generic status message.

    Returns:
        A tuple of (message, response_body).
    """
    text = response.text.strip()
    try:
        body = response.json()
    except ValueError:
        body = text
    else:
        if isinstance(body, dict):
            for key in ("message", "detail", "error"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value, body

    if text:
        return text, body
    return f"HTTP {response.status_code} error", body


def _raise_for_status(
    response: httpx.Response,
    tunnel_auth_statuses: frozenset[int] = frozenset(),
) -> None:
    """Raise an appropriate exception for error status codes.

    Args:
        response: The HTTP response to check.
        tunnel_auth_statuses: Statuses that mean the tunnel in front of the
            service needs re-authentication.

    Raises:
        TunnelAuthError: For statuses in ``tunnel_auth_statuses``.
        NotFoundError: For HTTP 404 responses.
        ServerError: For HTTP 5xx responses.
        APIError: For other error responses.
    """
    if response.is_success:
        return

    message, body = _parse_error_message(response)
    status_code = response.status_code
    common = {
        "reason_phrase": response.reason_phrase,
        "response_text": response.text,
        "response_body": body,
    }

    if status_code in tunnel_auth_statuses:
        raise TunnelAuthError(status_code=status_code, **common)
    if status_code == 404:
        raise NotFoundError(message=message, **common)
    if status_code >= 500:
        raise ServerError(message=message, status_code=status_code, **common)
    raise APIError(message=message, status_code=status_code, **common)


def _transport_error(error: httpx.HTTPError, url: str, timeout: float) -> Exception:
    if isinstance(error, httpx.DecodingError):
        return ResponseFormatError(f"Could not decode response from {url}: {error}")
    if isinstance(error, httpx.TimeoutException):
        return TimeoutError(message=f"Request to {url} timed out", timeout=timeout, url=url)
    if isinstance(error, httpx.ConnectError):
        return ConnectionError(message=f"Failed to connect to {url}", url=url, cause=error)
    return ConnectionError(message=f"Request to {url} failed: {error}", url=url, cause=error)


class HTTPClient:
    """Synchronous HTTP client shared by the sub-clients.

    Wraps httpx.Client with error mapping and body decoding.

    Attributes:
        base_url: The base URL for all requests.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        tunnel_auth_statuses: frozenset[int] = frozenset(),
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: The base URL for all requests.
            timeout: Request timeout in seconds.
            headers: Extra headers merged over DEFAULT_HEADERS.
            tunnel_auth_statuses: Statuses mapped to TunnelAuthError.
            transport: Custom transport (e.g. MockTransport for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.tunnel_auth_statuses = tunnel_auth_statuses

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Make an HTTP request and return the decoded body.

        Args:
            method: The HTTP method.
            path: The URL path, appended to base_url. Must already be
                percent-encoded.
            params: Query parameters; None values are dropped.
            json: JSON body to send.

        Returns:
            The decoded JSON body, the body text for non-JSON responses, or
            None for empty responses.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error status.
            ResponseFormatError: If the body cannot be decoded or parsed.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self._client.request(method=method, url=path, params=params, json=json)
        except httpx.HTTPError as e:
            raise _transport_error(e, url, self.timeout) from e

        _raise_for_status(response, self.tunnel_auth_statuses)
        return _decode_body(response)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("POST", path, params=params, json=json)


class AsyncHTTPClient:
    """Asynchronous HTTP client shared by the async sub-clients.

    Wraps httpx.AsyncClient with the same error mapping and body decoding
    as HTTPClient.

    Attributes:
        base_url: The base URL for all requests.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        tunnel_auth_statuses: frozenset[int] = frozenset(),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.tunnel_auth_statuses = tunnel_auth_statuses

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Make an async HTTP request and return the decoded body.

        See HTTPClient.request for arguments, return value and errors.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._client.request(
                method=method, url=path, params=params, json=json
            )
        except httpx.HTTPError as e:
            raise _transport_error(e, url, self.timeout) from e

        _raise_for_status(response, self.tunnel_auth_statuses)
        return _decode_body(response)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("POST", path, params=params, json=json)
