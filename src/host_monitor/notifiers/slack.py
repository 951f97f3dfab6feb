"""Slack notification channel."""

from typing import Any

import httpx

from host_monitor.config import ApplicationConfig
from host_monitor.models import HealthStatus, MetricsReport
from host_monitor.notifiers.base import HttpNotifier, format_bytes


class SlackNotifier(HttpNotifier):
    """Send reports via Slack incoming webhook."""

    name = "slack"

    COLORS = {
        HealthStatus.HEALTHY: "good",
        HealthStatus.DEGRADED: "warning",
        HealthStatus.UNHEALTHY: "danger",
    }

    def __init__(
        self,
        webhook_url: str,
        channel: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Slack notifier.

        Args:
            webhook_url: Slack incoming webhook URL.
            channel: Optional channel override.
            client: Optional shared HTTP client.
        """
        super().__init__(client=client)
        self.webhook_url = webhook_url
        self.channel = channel

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SlackNotifier":
        return cls(webhook_url=data["webhook_url"], channel=data.get("channel"))

    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Send report via Slack."""
        await self._send_request(self.webhook_url, self._build_payload(report, app))

    def _build_payload(self, report: MetricsReport, app: ApplicationConfig | None) -> dict:
        """Build Slack message payload with an attachment."""
        system = report.system
        app_name = app.name if app else "Host Monitor"

        fields = [
            {"title": "CPU", "value": f"{system.cpu.usage:.2f}%", "short": True},
            {"title": "Memory", "value": f"{system.memory.percent:.1f}%", "short": True},
            {"title": "Disk", "value": f"{system.disk.used_percentage}%", "short": True},
            {"title": "Disk Free", "value": format_bytes(system.disk.free), "short": True},
        ]

        if report.errors:
            fields.append({"title": "Errors", "value": "\n".join(report.errors), "short": False})

        payload: dict[str, Any] = {
            "text": f"🚨 System Health Report: {app_name}",
            "attachments": [
                {
                    "color": self.COLORS.get(report.status, "#808080"),
                    "title": f"{app_name} - {report.status.value.upper()}",
                    "fields": fields,
                    "footer": "Host Monitor",
                    "ts": int(report.timestamp.timestamp()),
                }
            ],
        }

        if self.channel:
            payload["channel"] = self.channel

        return payload
