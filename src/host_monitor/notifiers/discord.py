"""Discord notification channel."""

from typing import Any

import httpx

from host_monitor.config import ApplicationConfig
from host_monitor.models import HealthStatus, MetricsReport
from host_monitor.notifiers.base import (
    HttpNotifier,
    format_application_metrics,
    format_bytes,
    format_uptime,
)


class DiscordNotifier(HttpNotifier):
    """Send reports as an embed to a Discord webhook."""

    name = "discord"

    COLORS = {
        HealthStatus.HEALTHY: 0x00FF00,
        HealthStatus.DEGRADED: 0xFFA500,
        HealthStatus.UNHEALTHY: 0xFF0000,
    }

    def __init__(
        self,
        webhook_url: str,
        username: str | None = None,
        avatar_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(client=client)
        self.webhook_url = webhook_url
        self.username = username
        self.avatar_url = avatar_url

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DiscordNotifier":
        return cls(
            webhook_url=data["webhook_url"],
            username=data.get("username"),
            avatar_url=data.get("avatar_url"),
        )

    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Send report via Discord webhook."""
        await self._send_request(self.webhook_url, self._build_payload(report, app))

    def _build_payload(self, report: MetricsReport, app: ApplicationConfig | None) -> dict:
        system = report.system
        app_name = app.name if app else "Host Monitor"

        fields = [
            {
                "name": "💻 CPU",
                "value": "\n".join([
                    f"Usage: {system.cpu.usage:.2f}%",
                    f"Cores: {system.cpu.count}",
                    "Load Average: " + ", ".join(f"{v:.2f}" for v in system.cpu.load_average),
                ]),
                "inline": True,
            },
            {
                "name": "🧠 Memory",
                "value": "\n".join([
                    f"Used: {format_bytes(system.memory.used)}",
                    f"Free: {format_bytes(system.memory.free)}",
                    f"Total: {format_bytes(system.memory.total)}",
                ]),
                "inline": True,
            },
            {
                "name": "💾 Disk",
                "value": "\n".join([
                    f"Used: {system.disk.used_percentage}%",
                    f"Free: {format_bytes(system.disk.free)}",
                    f"Total: {format_bytes(system.disk.total)}",
                ]),
                "inline": True,
            },
        ]

        if app and (app.version or app.metadata):
            info = {"version": app.version, **app.metadata} if app.version else app.metadata
            fields.append({
                "name": "📌 Application Info",
                "value": "\n".join(f"{k}: {v}" for k, v in info.items()),
                "inline": False,
            })

        app_lines = format_application_metrics(report)
        if app_lines:
            fields.append({
                "name": "📊 Application Metrics",
                "value": "\n".join(app_lines),
                "inline": False,
            })

        if report.errors:
            fields.append({
                "name": "⚠️ Errors",
                "value": "\n".join(report.errors),
                "inline": False,
            })

        payload: dict[str, Any] = {
            "username": self.username or "System Monitor",
            "embeds": [
                {
                    "title": f"🔍 System Health Report: {app_name}",
                    "color": self.COLORS[report.status],
                    "description": f"**Status:** {report.status.value.upper()}",
                    "timestamp": report.timestamp.isoformat(),
                    "fields": fields,
                    "footer": {
                        "text": f"Process ID: {system.process.pid} | "
                                f"Uptime: {format_uptime(system.process.uptime)}",
                    },
                }
            ],
        }
        if self.avatar_url:
            payload["avatar_url"] = self.avatar_url

        return payload
