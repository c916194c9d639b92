"""Async W3C WebDriver client."""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import ValidationError

from queryengine.exceptions import (
    ERROR_CODES,
    NoSuchElementError,
    RemoteError,
    StaleElementReferenceError,
    UnknownError,
    UnknownResponseError,
    WebDriverError,
)
from queryengine.handle import ElementSource
from queryengine.logger import get_logger
from queryengine.models import By
from queryengine.poller import ElementPoller
from wireclient.config import WebDriverConfig
from wireclient.element import WebElement
from wireclient.exceptions import ConnectionError, RequestTimeoutError, SessionError
from wireclient.models import ELEMENT_KEY, ErrorPayload, SessionInfo

log = get_logger(__name__)


def parse_error(status: int, body: str) -> WebDriverError:
    """Map a W3C error response onto the exception hierarchy.

    Unknown error codes become ``UnknownError``; a body that is not a W3C
    error object becomes ``UnknownResponseError``.
    """
    try:
        payload = ErrorPayload.model_validate(json.loads(body)["value"])
    except (ValueError, KeyError, TypeError, ValidationError):
        return UnknownResponseError(status, body)

    exc_cls = ERROR_CODES.get(payload.error, UnknownError)
    return exc_cls(
        payload.message or payload.error,
        error=payload.error,
        status=status,
        stacktrace=payload.stacktrace,
        data=payload.data,
    )


class WebDriver(ElementSource):
    """Async WebDriver session.

    Opens an HTTP client and a browser session on ``start()``::

        async with WebDriver("http://localhost:4444", {"browserName": "firefox"}) as driver:
            await driver.goto("https://example.com")
            heading = await driver.query(By.tag("h1")).first()
    """

    def __init__(
        self,
        server_url: str | None = None,
        capabilities: dict[str, Any] | None = None,
        *,
        config: WebDriverConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or WebDriverConfig.from_env()
        self._server = (server_url or self._config.server_url).rstrip("/")
        self._capabilities = capabilities or {}
        self._transport = transport
        self._query_poller = self._config.query_poller()

        self._http: httpx.AsyncClient | None = None
        self._session: SessionInfo | None = None

    # --- Lifecycle ---

    async def start(self) -> None:
        """Open the HTTP client and create a new session."""
        self._http = httpx.AsyncClient(
            base_url=self._server,
            timeout=self._config.request_timeout,
            transport=self._transport,
        )
        value = await self._request(
            "POST", "/session", json={"capabilities": {"alwaysMatch": self._capabilities}}
        )
        self._session = SessionInfo.model_validate(value)
        log.info("session_started", session_id=self._session.session_id, server=self._server)

    async def stop(self) -> None:
        """Delete the session and close the HTTP client."""
        try:
            if self._session and self._http:
                await self._request("DELETE", f"/session/{self._session.session_id}")
                log.info("session_stopped", session_id=self._session.session_id)
        finally:
            self._session = None
            if self._http:
                await self._http.aclose()
                self._http = None

    async def __aenter__(self) -> WebDriver:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    @property
    def session_id(self) -> str:
        if self._session is None:
            raise SessionError("No active session; call start() first")
        return self._session.session_id

    @property
    def capabilities(self) -> dict[str, Any]:
        if self._session is None:
            raise SessionError("No active session; call start() first")
        return self._session.capabilities

    # --- Queries ---

    @property
    def query_poller(self) -> ElementPoller:
        return self._query_poller

    def set_query_poller(self, poller: ElementPoller) -> None:
        """Set the default poller for queries and waits started from this driver."""
        self._query_poller = poller

    async def find_all(self, by: By) -> list[WebElement]:
        using, value = by.w3c_selector()
        refs = await self.command("POST", "/elements", {"using": using, "value": value})
        return [WebElement(self, ref[ELEMENT_KEY]) for ref in refs]

    async def find(self, by: By) -> WebElement:
        """Find a single element without polling.

        Raises:
            NoSuchElementError: If nothing matches.
        """
        using, value = by.w3c_selector()
        ref = await self.command("POST", "/element", {"using": using, "value": value})
        return WebElement(self, ref[ELEMENT_KEY])

    # --- Navigation ---

    async def goto(self, url: str) -> None:
        await self.command("POST", "/url", {"url": url})

    async def current_url(self) -> str:
        return await self.command("GET", "/url")

    async def title(self) -> str:
        return await self.command("GET", "/title")

    async def page_source(self) -> str:
        return await self.command("GET", "/source")

    async def execute(self, script: str, *args: Any) -> Any:
        """Run synchronous JavaScript in the page.

        WebElement arguments and element references in the result are
        converted in both directions.
        """
        value = await self.command(
            "POST", "/execute/sync", {"script": script, "args": [_encode(a) for a in args]}
        )
        return self._decode(value)

    # --- Transport ---

    async def command(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        """Send a command relative to the current session and return its value."""
        if body is None and method == "POST":
            body = {}
        return await self._request(method, f"/session/{self.session_id}{path}", json=body)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an HTTP request and unwrap the W3C ``value``."""
        if self._http is None:
            raise SessionError("WebDriver is not started")
        try:
            resp = await self._http.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise ConnectionError(self._server, str(exc))
        except httpx.TimeoutException:
            raise RequestTimeoutError(f"Request to {self._server}{path} timed out")

        if resp.status_code >= 400:
            error = parse_error(resp.status_code, resp.text)
            if isinstance(error, (NoSuchElementError, StaleElementReferenceError)):
                log.debug("command_failed", method=method, path=path, error=str(error))
            else:
                log.warning(
                    "command_failed",
                    method=method,
                    path=path,
                    status=resp.status_code,
                    error=error.error if isinstance(error, RemoteError) else None,
                    detail=str(error),
                )
            raise error

        try:
            return resp.json()["value"]
        except (ValueError, KeyError, TypeError):
            raise UnknownResponseError(resp.status_code, resp.text)

    def _decode(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self._decode(v) for v in value]
        if isinstance(value, dict):
            if ELEMENT_KEY in value:
                return WebElement(self, value[ELEMENT_KEY])
            return {k: self._decode(v) for k, v in value.items()}
        return value

    def __repr__(self) -> str:
        session = self._session.session_id if self._session else None
        return f"WebDriver(server={self._server!r}, session={session!r})"


def _encode(value: Any) -> Any:
    if isinstance(value, WebElement):
        return value.to_json()
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    return value
