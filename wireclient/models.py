"""Wire models for W3C WebDriver responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Key identifying a web element reference in W3C payloads.
ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"


class SessionInfo(BaseModel):
    """Result of creating a new session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    capabilities: dict[str, Any] = {}


class ElementRect(BaseModel):
    """Element position and size, in CSS pixels."""

    x: float
    y: float
    width: float
    height: float


class ErrorPayload(BaseModel):
    """The ``value`` object of a W3C error response."""

    error: str
    message: str = ""
    stacktrace: str | None = None
    data: Any = None
