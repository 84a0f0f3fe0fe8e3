"""Exception hierarchy for the studio client.

Exception Hierarchy:
    StudioClientError (base)
    ├── ConnectionError - Network/connection failures
    ├── TimeoutError - Request timeout
    ├── ResponseFormatError - Response body has an unexpected shape
    ├── GenerationError - Model output is empty or not a JSON VFS
    └── APIError - Server returned an error response
        ├── NotFoundError (HTTP 404)
        ├── TunnelAuthError (HTTP 404/406 from the bridge tunnel)
        └── ServerError (HTTP 5xx)

ProjectSync and RemoteProjectReconciler never let these escape: sync turns
them into a SyncResult and the reconciler logs them. Generation errors are
the one kind callers are expected to handle.

Example:
    try:
        files = client.generation.generate("A todo list app")
    except GenerationError as e:
        log.error(e.message)
        debug_dump(e.raw_text)
"""

from typing import Any


class StudioClientError(Exception):
    """Base exception for all studio client errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ConnectionError(StudioClientError):
    """Failed to connect to a remote service.

    Attributes:
        message: Human-readable error description.
        url: The URL that failed to connect.
        cause: The underlying exception.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class TimeoutError(StudioClientError):
    """Request timed out.

    Attributes:
        message: Human-readable error description.
        timeout: The timeout value in seconds.
        url: The URL that timed out.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        if self.timeout is not None:
            return f"{self.message} (timeout: {self.timeout}s)"
        return self.message


class ResponseFormatError(StudioClientError):
    """A response body could not be decoded into the expected shape.

    Attributes:
        message: Human-readable error description.
        payload: The decoded (or raw) body that was rejected.
    """

    def __init__(self, message: str, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class GenerationError(StudioClientError):
    """The generation model returned nothing usable.

    Attributes:
        message: Fixed, user-facing error description.
        raw_text: The raw model output, kept for diagnostics.
    """

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        self.raw_text = raw_text
        super().__init__(message)


class APIError(StudioClientError):
    """A server returned an HTTP error status.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code.
        reason_phrase: HTTP reason phrase (e.g. "Internal Server Error").
        response_text: Raw response body text.
        response_body: Decoded JSON body if the body was JSON, else the text.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        reason_phrase: str = "",
        response_text: str = "",
        response_body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.response_text = response_text
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        return f"[HTTP {self.status_code}] {self.message}"


class NotFoundError(APIError):
    """Resource not found (HTTP 404)."""

    def __init__(
        self,
        message: str,
        reason_phrase: str = "Not Found",
        response_text: str = "",
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=404,
            reason_phrase=reason_phrase,
            response_text=response_text,
            response_body=response_body,
        )


class TunnelAuthError(APIError):
    """The ngrok tunnel in front of the bridge wants a browser visit.

    The bridge answers 404 or 406 when the tunnel has not been
    authenticated. Opening the bridge URL in a browser fixes it.
    """

    DEFAULT_MESSAGE = (
        "Ngrok tunnel may need manual re-authentication. "
        "Please open the bridge URL in a new tab."
    )

    def __init__(
        self,
        status_code: int,
        message: str = DEFAULT_MESSAGE,
        reason_phrase: str = "",
        response_text: str = "",
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            reason_phrase=reason_phrase,
            response_text=response_text,
            response_body=response_body,
        )


class ServerError(APIError):
    """Server-side error (HTTP 5xx)."""
