"""Pydantic models for locators and query options."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from queryengine.poller import ElementPoller

Strategy = Literal[
    "id",
    "xpath",
    "link text",
    "partial link text",
    "name",
    "tag",
    "class name",
    "css",
]

_LABELS: dict[str, str] = {
    "id": "Id",
    "xpath": "XPath",
    "link text": "Link Text",
    "partial link text": "Partial Link Text",
    "name": "Name",
    "tag": "Tag",
    "class name": "Class",
    "css": "CSS",
}


def css_string(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class By(BaseModel):
    """Immutable description of how to locate element(s)."""

    model_config = ConfigDict(frozen=True)

    strategy: Strategy
    value: str

    @classmethod
    def id(cls, value: str) -> By:
        return cls(strategy="id", value=value)

    @classmethod
    def xpath(cls, value: str) -> By:
        return cls(strategy="xpath", value=value)

    @classmethod
    def link_text(cls, value: str) -> By:
        return cls(strategy="link text", value=value)

    @classmethod
    def partial_link_text(cls, value: str) -> By:
        return cls(strategy="partial link text", value=value)

    @classmethod
    def name(cls, value: str) -> By:
        return cls(strategy="name", value=value)

    @classmethod
    def tag(cls, value: str) -> By:
        return cls(strategy="tag", value=value)

    @classmethod
    def class_name(cls, value: str) -> By:
        return cls(strategy="class name", value=value)

    @classmethod
    def css(cls, value: str) -> By:
        return cls(strategy="css", value=value)

    def w3c_selector(self) -> tuple[str, str]:
        """Return the ``(using, value)`` pair sent to the WebDriver server."""
        if self.strategy == "id":
            return "css selector", f"[id={css_string(self.value)}]"
        if self.strategy == "name":
            return "css selector", f"[name={css_string(self.value)}]"
        if self.strategy == "class name":
            return "css selector", f".{self.value}"
        if self.strategy in ("tag", "css"):
            return "css selector", self.value
        return self.strategy, self.value

    def __str__(self) -> str:
        return f"{_LABELS[self.strategy]}({self.value})"


class ElementQueryOptions(BaseModel):
    """Per-query overrides. Unset fields keep the query's current value."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    poller: ElementPoller | None = None
    ignore_errors: bool | None = None
    description: str | None = None
