"""wirequery client: an async W3C WebDriver client built on httpx."""

from wireclient.client import WebDriver, parse_error
from wireclient.config import WebDriverConfig
from wireclient.element import WebElement
from wireclient.exceptions import (
    ConnectionError,
    RequestTimeoutError,
    SessionError,
    WireClientError,
)
from wireclient.models import ELEMENT_KEY, ElementRect, SessionInfo
from wireclient.select import SelectElement
from wireclient.sync_client import WebDriverSync

__version__ = "0.1.0"

__all__ = [
    "ELEMENT_KEY",
    "ConnectionError",
    "ElementRect",
    "RequestTimeoutError",
    "SelectElement",
    "SessionError",
    "SessionInfo",
    "WebDriver",
    "WebDriverConfig",
    "WebDriverSync",
    "WebElement",
    "WireClientError",
    "__version__",
    "parse_error",
]
