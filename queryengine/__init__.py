"""wirequery engine: polling element queries, waits and cached resolvers."""

from queryengine.component import Component
from queryengine.exceptions import (
    NoSuchElementError,
    RemoteError,
    StaleElementReferenceError,
    TimeoutError,
    WebDriverError,
)
from queryengine.handle import ElementHandle, ElementSource
from queryengine.logger import configure_logging
from queryengine.models import By, ElementQueryOptions
from queryengine.needle import Needle, RegexMatch, StringMatch
from queryengine.poller import (
    DEFAULT_POLLER,
    ElementPoller,
    NoWait,
    NumTriesWithInterval,
    PollTicker,
    TimeoutWithInterval,
    TimeoutWithIntervalAndMinTries,
)
from queryengine.query import ElementQuery, ElementSelector, filter_elements
from queryengine.resolver import ElementResolver, elements_present
from queryengine.waiter import ElementWaiter

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_POLLER",
    "By",
    "Component",
    "ElementHandle",
    "ElementPoller",
    "ElementQuery",
    "ElementQueryOptions",
    "ElementResolver",
    "ElementSelector",
    "ElementSource",
    "ElementWaiter",
    "Needle",
    "NoSuchElementError",
    "NoWait",
    "NumTriesWithInterval",
    "PollTicker",
    "RegexMatch",
    "RemoteError",
    "StaleElementReferenceError",
    "StringMatch",
    "TimeoutError",
    "TimeoutWithInterval",
    "TimeoutWithIntervalAndMinTries",
    "WebDriverError",
    "__version__",
    "configure_logging",
    "elements_present",
    "filter_elements",
]
