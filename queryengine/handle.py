"""Element source and element handle interfaces.

The engine never talks to a WebDriver server directly. It needs something
that can run a locator (``ElementSource``) and, for filters and waits, an
element that can answer a small set of state probes (``ElementHandle``).
Concrete implementations live in the transport layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from queryengine.exceptions import NoSuchElementError, StaleElementReferenceError
from queryengine.poller import DEFAULT_POLLER, ElementPoller

if TYPE_CHECKING:
    from queryengine.models import By
    from queryengine.query import ElementQuery
    from queryengine.waiter import ElementWaiter


class ElementSource(ABC):
    """Anything elements can be looked up from (a session or an element)."""

    @abstractmethod
    async def find_all(self, by: By) -> list[ElementHandle]:
        """Return every element matching the locator.

        Zero matches may be reported either as an empty list or by raising
        NoSuchElementError.
        """

    @property
    def query_poller(self) -> ElementPoller:
        """Poller used by queries and waiters created from this source."""
        return DEFAULT_POLLER

    def query(self, by: By, *alternatives: By) -> ElementQuery:
        """Start an element query. Extra locators become ``or_()`` branches."""
        from queryengine.query import ElementQuery

        return ElementQuery(self, by, *alternatives, poller=self.query_poller)


class ElementHandle(ElementSource):
    """Opaque reference to a remote element plus its state probes."""

    @abstractmethod
    async def tag_name(self) -> str: ...

    @abstractmethod
    async def text(self) -> str: ...

    @abstractmethod
    async def is_displayed(self) -> bool: ...

    @abstractmethod
    async def is_enabled(self) -> bool: ...

    @abstractmethod
    async def is_selected(self) -> bool: ...

    @abstractmethod
    async def get_attribute(self, name: str) -> str | None: ...

    @abstractmethod
    async def get_property(self, name: str) -> str | None: ...

    @abstractmethod
    async def get_css_property(self, name: str) -> str: ...

    async def id(self) -> str | None:
        return await self.get_attribute("id")

    async def class_name(self) -> str | None:
        return await self.get_attribute("class")

    async def value(self) -> str | None:
        return await self.get_property("value")

    async def is_clickable(self) -> bool:
        """Return True if the element is both displayed and enabled."""
        return await self.is_displayed() and await self.is_enabled()

    async def is_present(self) -> bool:
        """Return True if the element still refers to a live node.

        Probes the tag name; a stale or missing element reports False and
        any other error propagates.
        """
        try:
            await self.tag_name()
        except (NoSuchElementError, StaleElementReferenceError):
            return False
        return True

    def wait_until(self) -> ElementWaiter:
        """Start an explicit wait on this element."""
        from queryengine.waiter import ElementWaiter

        return ElementWaiter(self, self.query_poller)
