"""Generic webhook notification channel."""

from typing import Any

import httpx

from host_monitor.config import ApplicationConfig
from host_monitor.models import MetricsReport
from host_monitor.notifiers.base import HttpNotifier


class WebhookNotifier(HttpNotifier):
    """Send reports via generic HTTP webhook."""

    name = "webhook"

    def __init__(
        self,
        url: str,
        method: str = "POST",
        headers: dict | None = None,
        auth: tuple[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize webhook notifier.

        Args:
            url: Webhook URL.
            method: HTTP method (default POST).
            headers: Optional headers to include.
            auth: Optional (username, password) tuple for basic auth.
            client: Optional shared HTTP client.
        """
        super().__init__(client=client)
        self.url = url
        self.method = method.upper()
        self.headers = headers or {}
        self.auth = auth

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebhookNotifier":
        auth = data.get("auth")
        return cls(
            url=data["url"],
            method=data.get("method", "POST"),
            headers=data.get("headers"),
            auth=(auth["username"], auth["password"]) if auth else None,
        )

    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Send report via webhook."""
        payload = {
            "event": "report",
            "application": app.to_dict() if app else None,
            "report": report.to_dict(),
        }
        await self._send_request(
            self.url,
            payload,
            method=self.method,
            headers=self.headers,
            auth=httpx.BasicAuth(*self.auth) if self.auth else None,
        )
