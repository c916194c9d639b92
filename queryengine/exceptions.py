"""wirequery exception hierarchy."""

from __future__ import annotations

from typing import Any


class WebDriverError(Exception):
    """Base exception for all wirequery errors."""


class RemoteError(WebDriverError):
    """Raised when the WebDriver server reports an error."""

    def __init__(
        self,
        message: str,
        *,
        error: str = "",
        status: int = 0,
        stacktrace: str | None = None,
        data: Any = None,
    ) -> None:
        self.message = message
        self.error = error
        self.status = status
        self.stacktrace = stacktrace
        self.data = data
        super().__init__(message)


class NoSuchElementError(RemoteError):
    """Raised when a locator matched no element where one was required."""

    def __init__(
        self,
        message: str,
        *,
        selectors: list[str] | None = None,
        description: str = "",
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("error", "no such element")
        self.selectors = selectors or []
        self.description = description
        super().__init__(message, **kwargs)

    @classmethod
    def for_selectors(
        cls, selectors: list[str], description: str = ""
    ) -> NoSuchElementError:
        """Build the diagnostic error for a query that found nothing."""
        subject = f"'{description}' element(s)" if description else "Element(s)"
        return cls(
            f"{subject} not found using selectors: [{','.join(selectors)}]",
            selectors=selectors,
            description=description,
        )


class StaleElementReferenceError(RemoteError):
    """Raised when an element handle no longer refers to a live node."""


class ElementClickInterceptedError(RemoteError):
    """Raised when a click landed on a different element."""


class ElementNotInteractableError(RemoteError):
    """Raised when an element cannot be interacted with."""


class InsecureCertificateError(RemoteError):
    """Raised when navigation hit an insecure certificate."""


class InvalidArgumentError(RemoteError):
    """Raised when a command argument is invalid."""


class InvalidCookieDomainError(RemoteError):
    """Raised when a cookie targets a different domain."""


class InvalidElementStateError(RemoteError):
    """Raised when an element is in a state that rejects the command."""


class InvalidSelectorError(RemoteError):
    """Raised when a locator expression is malformed."""


class InvalidSessionIdError(RemoteError):
    """Raised when the session id is unknown or already deleted."""


class JavascriptError(RemoteError):
    """Raised when an executed script throws."""


class MoveTargetOutOfBoundsError(RemoteError):
    """Raised when a pointer target is outside the viewport."""


class NoSuchAlertError(RemoteError):
    """Raised when no alert is open."""


class NoSuchCookieError(RemoteError):
    """Raised when a cookie does not exist."""


class NoSuchFrameError(RemoteError):
    """Raised when a frame does not exist."""


class NoSuchWindowError(RemoteError):
    """Raised when a window does not exist."""


class ScriptTimeoutError(RemoteError):
    """Raised when a script exceeded the session's script timeout."""


class SessionNotCreatedError(RemoteError):
    """Raised when the server refused to create a session."""


class WebDriverTimeoutError(RemoteError):
    """Raised when a server-side operation timed out."""


class UnableToSetCookieError(RemoteError):
    """Raised when the server could not set a cookie."""


class UnableToCaptureScreenError(RemoteError):
    """Raised when the server could not take a screenshot."""


class UnexpectedAlertOpenError(RemoteError):
    """Raised when an alert blocks the command."""


class UnknownCommandError(RemoteError):
    """Raised when the server does not know the command."""


class UnknownError(RemoteError):
    """Raised for server errors without a more specific code."""


class UnknownMethodError(RemoteError):
    """Raised when the HTTP method is not allowed for the endpoint."""


class UnsupportedOperationError(RemoteError):
    """Raised when the server does not support the operation."""


class UnknownResponseError(WebDriverError):
    """Raised when a response does not follow the W3C error format."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"Unrecognised response ({status}): {body[:200]}")


class TimeoutError(WebDriverError):
    """Raised when an explicit wait ran out of time."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message or "Timed out waiting for condition")


# W3C error codes mapped onto exception classes.
ERROR_CODES: dict[str, type[RemoteError]] = {
    "element click intercepted": ElementClickInterceptedError,
    "element not interactable": ElementNotInteractableError,
    "insecure certificate": InsecureCertificateError,
    "invalid argument": InvalidArgumentError,
    "invalid cookie domain": InvalidCookieDomainError,
    "invalid element state": InvalidElementStateError,
    "invalid selector": InvalidSelectorError,
    "invalid session id": InvalidSessionIdError,
    "javascript error": JavascriptError,
    "move target out of bounds": MoveTargetOutOfBoundsError,
    "no such alert": NoSuchAlertError,
    "no such cookie": NoSuchCookieError,
    "no such element": NoSuchElementError,
    "no such frame": NoSuchFrameError,
    "no such window": NoSuchWindowError,
    "script timeout": ScriptTimeoutError,
    "session not created": SessionNotCreatedError,
    "stale element reference": StaleElementReferenceError,
    "timeout": WebDriverTimeoutError,
    "unable to set cookie": UnableToSetCookieError,
    "unable to capture screen": UnableToCaptureScreenError,
    "unexpected alert open": UnexpectedAlertOpenError,
    "unknown command": UnknownCommandError,
    "unknown error": UnknownError,
    "unknown method": UnknownMethodError,
    "unsupported operation": UnsupportedOperationError,
}
