"""WebDriver client configuration via environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from queryengine.poller import ElementPoller, TimeoutWithInterval


@dataclass
class WebDriverConfig:
    """Client configuration loaded from environment variables."""

    server_url: str = "http://localhost:4444"
    request_timeout: float = 120.0
    query_timeout: float = 20.0
    query_interval: float = 0.5

    @classmethod
    def from_env(cls) -> WebDriverConfig:
        """Load config from environment variables."""
        return cls(
            server_url=os.environ.get("WEBDRIVER_URL", "http://localhost:4444"),
            request_timeout=float(os.environ.get("WEBDRIVER_REQUEST_TIMEOUT", "120")),
            query_timeout=float(os.environ.get("WEBDRIVER_QUERY_TIMEOUT", "20")),
            query_interval=float(os.environ.get("WEBDRIVER_QUERY_INTERVAL", "0.5")),
        )

    def query_poller(self) -> ElementPoller:
        """Default poller for queries and waits started from the driver."""
        return TimeoutWithInterval(self.query_timeout, self.query_interval)
