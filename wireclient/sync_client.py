"""Synchronous wrapper around WebDriver for scripts."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar

from queryengine.models import By
from queryengine.poller import ElementPoller
from queryengine.query import ElementQuery
from wireclient.client import WebDriver
from wireclient.element import WebElement

T = TypeVar("T")


class WebDriverSync:
    """Synchronous wrapper around WebDriver for use in scripts.

    Runs each async call on a private event loop. Queries, waiters and
    resolvers are still built with the async API and driven with ``run()``::

        with WebDriverSync("http://localhost:4444") as driver:
            driver.goto("https://example.com")
            heading = driver.run(driver.query(By.tag("h1")).first())
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._loop: asyncio.AbstractEventLoop | None = asyncio.new_event_loop()
        self._driver: WebDriver | None = WebDriver(*args, **kwargs)
        try:
            self.run(self._driver.start())
        except Exception:
            self._loop.close()
            self._loop = None
            raise

    @property
    def driver(self) -> WebDriver:
        assert self._driver is not None
        return self._driver

    def run(self, awaitable: Awaitable[T]) -> T:
        """Run an awaitable on the internal event loop."""
        assert self._loop is not None
        return self._loop.run_until_complete(_await(awaitable))

    def goto(self, url: str) -> None:
        self.run(self.driver.goto(url))

    def current_url(self) -> str:
        return self.run(self.driver.current_url())

    def title(self) -> str:
        return self.run(self.driver.title())

    def page_source(self) -> str:
        return self.run(self.driver.page_source())

    def execute(self, script: str, *args: Any) -> Any:
        return self.run(self.driver.execute(script, *args))

    def find_all(self, by: By) -> list[WebElement]:
        return self.run(self.driver.find_all(by))

    def find(self, by: By) -> WebElement:
        return self.run(self.driver.find(by))

    def query(self, by: By, *alternatives: By) -> ElementQuery:
        return self.driver.query(by, *alternatives)

    def set_query_poller(self, poller: ElementPoller) -> None:
        self.driver.set_query_poller(poller)

    def close(self) -> None:
        """Delete the session and shut down the event loop."""
        if self._driver and self._loop:
            try:
                self._loop.run_until_complete(self._driver.stop())
            finally:
                self._loop.close()
                self._loop = None
                self._driver = None

    def __enter__(self) -> WebDriverSync:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


async def _await(awaitable: Awaitable[T]) -> T:
    return await awaitable
