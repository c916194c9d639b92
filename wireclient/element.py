"""Web element handles backed by a WebDriver session."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from queryengine.handle import ElementHandle
from queryengine.models import By
from queryengine.poller import ElementPoller
from wireclient.models import ELEMENT_KEY, ElementRect

if TYPE_CHECKING:
    from wireclient.client import WebDriver


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


class WebElement(ElementHandle):
    """A remote element. Equality is by element reference."""

    def __init__(self, driver: WebDriver, element_id: str) -> None:
        self._driver = driver
        self.element_id = element_id

    @property
    def driver(self) -> WebDriver:
        return self._driver

    @property
    def query_poller(self) -> ElementPoller:
        return self._driver.query_poller

    async def _command(self, method: str, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        return await self._driver.command(method, f"/element/{self.element_id}{endpoint}", body)

    # --- Lookup ---

    async def find_all(self, by: By) -> list[WebElement]:
        using, value = by.w3c_selector()
        refs = await self._command("POST", "/elements", {"using": using, "value": value})
        return [WebElement(self._driver, ref[ELEMENT_KEY]) for ref in refs]

    async def find(self, by: By) -> WebElement:
        using, value = by.w3c_selector()
        ref = await self._command("POST", "/element", {"using": using, "value": value})
        return WebElement(self._driver, ref[ELEMENT_KEY])

    # --- Probes ---

    async def tag_name(self) -> str:
        return await self._command("GET", "/name")

    async def text(self) -> str:
        return await self._command("GET", "/text")

    async def is_displayed(self) -> bool:
        return await self._command("GET", "/displayed")

    async def is_enabled(self) -> bool:
        return await self._command("GET", "/enabled")

    async def is_selected(self) -> bool:
        return await self._command("GET", "/selected")

    async def get_attribute(self, name: str) -> str | None:
        return _as_text(await self._command("GET", f"/attribute/{name}"))

    async def get_property(self, name: str) -> str | None:
        """Return a DOM property. Non-string values come back JSON-encoded."""
        return _as_text(await self._command("GET", f"/property/{name}"))

    async def get_css_property(self, name: str) -> str:
        return await self._command("GET", f"/css/{name}")

    async def rect(self) -> ElementRect:
        return ElementRect.model_validate(await self._command("GET", "/rect"))

    async def inner_html(self) -> str | None:
        return await self.get_property("innerHTML")

    async def outer_html(self) -> str | None:
        return await self.get_property("outerHTML")

    # --- Interaction ---

    async def click(self) -> None:
        await self._command("POST", "/click")

    async def clear(self) -> None:
        await self._command("POST", "/clear")

    async def send_keys(self, text: str) -> None:
        await self._command("POST", "/value", {"text": text})

    # --- Identity ---

    def to_json(self) -> dict[str, str]:
        return {ELEMENT_KEY: self.element_id}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WebElement):
            return NotImplemented
        return self.element_id == other.element_id

    def __hash__(self) -> int:
        return hash(self.element_id)

    def __repr__(self) -> str:
        return f"WebElement({self.element_id!r})"
