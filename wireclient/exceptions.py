"""WebDriver client exceptions.

Errors reported by the server itself map onto ``queryengine.exceptions``;
these cover the client's own lifecycle and transport failures.
"""

from queryengine.exceptions import WebDriverError


class WireClientError(WebDriverError):
    """Base exception for client-side failures."""


class ConnectionError(WireClientError):
    """Raised when the client cannot connect to the WebDriver server."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        msg = f"Cannot connect to {url}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class RequestTimeoutError(WireClientError):
    """Raised when an HTTP request to the server timed out."""

    def __init__(self, detail: str = "Request timed out") -> None:
        super().__init__(detail)


class SessionError(WireClientError):
    """Raised when a command needs a session that is not running."""
