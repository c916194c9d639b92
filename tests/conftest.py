"""Shared test fixtures for wirequery."""

from __future__ import annotations

import itertools
import json
import re
from collections import Counter
from typing import Any

import httpx
import pytest

from queryengine.exceptions import StaleElementReferenceError
from queryengine.handle import ElementHandle, ElementSource
from queryengine.models import By
from queryengine.poller import ElementPoller, NoWait

Children = dict[By, Any]


class FakeSource(ElementSource):
    """In-memory element source. ``children`` maps a locator to a list or an exception."""

    def __init__(self, children: Children | None = None, poller: ElementPoller | None = None) -> None:
        self.children: Children = children or {}
        self.poller = poller or NoWait()
        self.find_calls: list[By] = []

    @property
    def query_poller(self) -> ElementPoller:
        return self.poller

    async def find_all(self, by: By) -> list[ElementHandle]:
        self.find_calls.append(by)
        result = self.children.get(by, [])
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return list(result())
        return list(result)


class FakeElement(FakeSource, ElementHandle):
    """In-memory element with settable state and per-probe call counts.

    Set ``errors[probe]`` to make a probe raise, or ``present = False`` to
    make every probe raise StaleElementReferenceError.
    """

    def __init__(
        self,
        tag: str = "div",
        text: str = "",
        *,
        attributes: dict[str, str] | None = None,
        properties: dict[str, Any] | None = None,
        css: dict[str, str] | None = None,
        displayed: bool = True,
        enabled: bool = True,
        selected: bool = False,
        children: Children | None = None,
        poller: ElementPoller | None = None,
    ) -> None:
        super().__init__(children, poller)
        self.tag = tag
        self.inner_text = text
        self.attributes = attributes or {}
        self.properties = properties or {}
        self.css = css or {}
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.present = True
        self.errors: dict[str, Exception] = {}
        self.probes: Counter[str] = Counter()

    def _probe(self, name: str) -> None:
        self.probes[name] += 1
        if not self.present:
            raise StaleElementReferenceError("stale element reference")
        if name in self.errors:
            raise self.errors[name]

    async def tag_name(self) -> str:
        self._probe("tag_name")
        return self.tag

    async def text(self) -> str:
        self._probe("text")
        return self.inner_text

    async def is_displayed(self) -> bool:
        self._probe("is_displayed")
        return self.displayed

    async def is_enabled(self) -> bool:
        self._probe("is_enabled")
        return self.enabled

    async def is_selected(self) -> bool:
        self._probe("is_selected")
        return self.selected

    async def get_attribute(self, name: str) -> str | None:
        self._probe("get_attribute")
        return self.attributes.get(name)

    async def get_property(self, name: str) -> str | None:
        self._probe("get_property")
        value = self.properties.get(name)
        return None if value is None else str(value)

    async def get_css_property(self, name: str) -> str:
        self._probe("get_css_property")
        return self.css.get(name, "")

    def __repr__(self) -> str:
        return f"FakeElement({self.tag!r}, {self.inner_text!r})"


class FakeClock:
    """Monotonic clock whose sleep just advances time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def element_factory() -> type[FakeElement]:
    """The FakeElement class, for building element trees."""
    return FakeElement


@pytest.fixture
def source_factory() -> type[FakeSource]:
    """The FakeSource class, for building root sources."""
    return FakeSource


# --- Simulated W3C WebDriver server ---

ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"

_QUOTED = r"""(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)')"""
_CSS_ATTR = re.compile(rf"^(?P<tag>[a-z0-9]*)\[(?P<attr>[\w-]+)={_QUOTED}\]$")
_CSS_CLASS = re.compile(r"^(?P<tag>[a-z0-9]*)\.(?P<cls>[\w-]+)$")
_CSS_TAG = re.compile(r"^[a-z][a-z0-9]*$")
_XPATH_TEXT = re.compile(rf"^\.//(?P<tag>\w+)\[normalize-space\(\.\) = {_QUOTED}\]$")
_XPATH_CONTAINS = re.compile(rf"^\.//(?P<tag>\w+)\[contains\(\., ?{_QUOTED}\)\]$")


def _quoted(match: re.Match[str]) -> str:
    return match.group("dq") if match.group("dq") is not None else match.group("sq")


class FakeNode:
    """A DOM node served by FakeWebDriverServer."""

    _ids = itertools.count(1)

    def __init__(
        self,
        tag: str,
        text: str = "",
        *children: FakeNode,
        attributes: dict[str, str] | None = None,
        properties: dict[str, Any] | None = None,
        css: dict[str, str] | None = None,
        displayed: bool = True,
        enabled: bool = True,
        selected: bool = False,
    ) -> None:
        self.element_id = f"node-{next(self._ids)}"
        self.tag = tag
        self.text = text
        self.children = list(children)
        self.attributes = attributes or {}
        self.properties = properties or {}
        self.css = css or {}
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.attached = True
        self.clicks = 0
        self.keys: list[str] = []

    def descendants(self) -> list[FakeNode]:
        found: list[FakeNode] = []
        for child in self.children:
            found.append(child)
            found.extend(child.descendants())
        return found

    def matches_css(self, selector: str) -> bool:
        if m := _CSS_ATTR.match(selector):
            return (not m.group("tag") or self.tag == m.group("tag")) and self.attributes.get(
                m.group("attr")
            ) == _quoted(m)
        if m := _CSS_CLASS.match(selector):
            return (not m.group("tag") or self.tag == m.group("tag")) and m.group(
                "cls"
            ) in self.attributes.get("class", "").split()
        if _CSS_TAG.match(selector):
            return self.tag == selector
        raise ValueError(selector)

    def matches_xpath(self, selector: str) -> bool:
        if m := _XPATH_TEXT.match(selector):
            return self.tag == m.group("tag") and " ".join(self.text.split()) == _quoted(m)
        if m := _XPATH_CONTAINS.match(selector):
            return self.tag == m.group("tag") and _quoted(m) in self.text
        raise ValueError(selector)

    def ref(self) -> dict[str, str]:
        return {ELEMENT_KEY: self.element_id}


class FakeWebDriverServer:
    """Just enough of the W3C WebDriver protocol to drive WebDriver in tests."""

    session_id = "session-1"

    def __init__(self, root: FakeNode | None = None) -> None:
        self.root = root or FakeNode("html")
        self.url = "about:blank"
        self.title = ""
        self.source = "<html></html>"
        self.script_result: Any = None
        self.requests: list[tuple[str, str]] = []
        self.sessions_deleted = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def nodes(self) -> dict[str, FakeNode]:
        return {n.element_id: n for n in [self.root, *self.root.descendants()]}

    def find(self, node_id: str) -> FakeNode | None:
        return self.nodes().get(node_id)

    @staticmethod
    def error(status: int, code: str, message: str) -> httpx.Response:
        return httpx.Response(
            status, json={"value": {"error": code, "message": message, "stacktrace": ""}}
        )

    @staticmethod
    def ok(value: Any = None) -> httpx.Response:
        return httpx.Response(200, json={"value": value})

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))
        body = json.loads(request.content) if request.content else {}

        if path == "/session" and method == "POST":
            caps = body.get("capabilities", {}).get("alwaysMatch", {})
            return self.ok({"sessionId": self.session_id, "capabilities": caps})

        prefix = f"/session/{self.session_id}"
        if not path.startswith(prefix):
            return self.error(404, "invalid session id", "unknown session")
        rest = path[len(prefix):]

        if rest == "" and method == "DELETE":
            self.sessions_deleted += 1
            return self.ok()
        if rest == "/url":
            if method == "POST":
                self.url = body["url"]
                return self.ok()
            return self.ok(self.url)
        if rest == "/title":
            return self.ok(self.title)
        if rest == "/source":
            return self.ok(self.source)
        if rest == "/execute/sync":
            return self.ok(self.script_result)
        if rest in ("/element", "/elements"):
            return self.find_from(self.root, rest, body)

        parts = rest.split("/")
        if len(parts) < 4 or parts[1] != "element":
            return self.error(404, "unknown command", rest)
        node = self.find(parts[2])
        if node is None or not node.attached:
            return self.error(404, "stale element reference", "element is not attached")
        command = "/" + parts[3]
        if command in ("/element", "/elements"):
            return self.find_from(node, command, body)
        return self.element_command(node, method, command, parts[4:], body)

    def find_from(self, node: FakeNode, command: str, body: dict[str, Any]) -> httpx.Response:
        using, value = body["using"], body["value"]
        try:
            if using == "css selector":
                node.matches_css(value)
                found = [n for n in node.descendants() if n.matches_css(value)]
            elif using == "xpath":
                node.matches_xpath(value)
                found = [n for n in node.descendants() if n.matches_xpath(value)]
            elif using == "link text":
                found = [n for n in node.descendants() if n.tag == "a" and n.text == value]
            else:
                return self.error(400, "invalid argument", using)
        except ValueError:
            return self.error(400, "invalid selector", value)

        if command == "/elements":
            return self.ok([n.ref() for n in found])
        if not found:
            return self.error(404, "no such element", f"Unable to locate element: {value}")
        return self.ok(found[0].ref())

    def element_command(
        self, node: FakeNode, method: str, command: str, args: list[str], body: dict[str, Any]
    ) -> httpx.Response:
        if command == "/name":
            return self.ok(node.tag)
        if command == "/text":
            return self.ok(node.text)
        if command == "/displayed":
            return self.ok(node.displayed)
        if command == "/enabled":
            return self.ok(node.enabled)
        if command == "/selected":
            return self.ok(node.selected)
        if command == "/attribute":
            return self.ok(node.attributes.get(args[0]))
        if command == "/property":
            return self.ok(node.properties.get(args[0]))
        if command == "/css":
            return self.ok(node.css.get(args[0], ""))
        if command == "/rect":
            return self.ok({"x": 10, "y": 20, "width": 100, "height": 30})
        if command == "/click" and method == "POST":
            if not node.enabled:
                return self.error(400, "element not interactable", "element is disabled")
            node.clicks += 1
            if node.tag == "option":
                node.selected = not node.selected
            return self.ok()
        if command == "/clear" and method == "POST":
            node.properties["value"] = ""
            return self.ok()
        if command == "/value" and method == "POST":
            node.keys.append(body["text"])
            node.properties["value"] = node.properties.get("value", "") + body["text"]
            return self.ok()
        return self.error(404, "unknown command", command)


@pytest.fixture
def node_factory() -> type[FakeNode]:
    return FakeNode


@pytest.fixture
def webdriver_server() -> FakeWebDriverServer:
    return FakeWebDriverServer()


@pytest.fixture
async def driver(webdriver_server: FakeWebDriverServer):
    """A started WebDriver talking to the simulated server, with single-attempt queries."""
    from wireclient.client import WebDriver
    from wireclient.config import WebDriverConfig

    config = WebDriverConfig(server_url="http://webdriver.test", query_timeout=0.0)
    async with WebDriver(config=config, transport=webdriver_server.transport()) as drv:
        yield drv
