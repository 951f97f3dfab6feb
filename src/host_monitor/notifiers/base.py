"""Base notifier interface and shared report formatting."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from host_monitor.config import ApplicationConfig
from host_monitor.models import HealthStatus, MetricsReport

logger = logging.getLogger(__name__)

STATUS_EMOJI = {
    HealthStatus.HEALTHY: "✅",
    HealthStatus.DEGRADED: "⚠️",
    HealthStatus.UNHEALTHY: "❌",
}

# Application metrics that get a human label in reports
KNOWN_APP_METRICS = {
    "active_connections": "Active Connections",
    "request_count": "Request Count",
    "error_count": "Error Count",
    "average_response_time": "Avg Response Time",
}


class NotificationError(Exception):
    """Raised when a channel fails to deliver a report."""


def format_bytes(num_bytes: float) -> str:
    """Format a byte count with a binary unit, e.g. ``1.50 GB``."""
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(num_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(units) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {units[unit_index]}"


def format_uptime(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


class BaseNotifier(ABC):
    """Abstract base class for alert channels."""

    name = "notifier"

    @abstractmethod
    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Deliver a report.

        Args:
            report: Completed cycle report. Must not be modified.
            app: Identity of the monitored application.

        Raises:
            NotificationError: If delivery failed.
        """
        ...

    def format_report(self, report: MetricsReport, app: ApplicationConfig | None = None) -> str:
        """Format a report as plain text.

        Override this method to customize message formatting.
        """
        system = report.system
        app_name = app.name if app else "Host Monitor"
        emoji = STATUS_EMOJI.get(report.status, "❓")

        lines = [
            f"🔍 System Health Report: {app_name}",
            f"📅 {report.timestamp.strftime('%Y-%m-%d %H:%M:%S %Z')}",
            f"Status: {emoji} {report.status.value.upper()}",
            "",
            "💻 System Metrics:",
            f"CPU: {system.cpu.usage:.2f}%",
            f"Memory: {system.memory.percent:.1f}% ({format_bytes(system.memory.used)} used)",
            f"Process RSS: {format_bytes(system.memory.rss)}",
            f"Disk: {system.disk.used_percentage}%",
        ]

        app_lines = format_application_metrics(report)
        if app_lines:
            lines.append("")
            lines.append("📊 Application Metrics:")
            lines.extend(app_lines)

        if report.errors:
            lines.append("")
            lines.append("⚠️ Errors:")
            lines.extend(report.errors)

        return "\n".join(lines)


def format_application_metrics(report: MetricsReport) -> list[str]:
    """Render application metrics as ``Label: value`` lines, skipping empty values."""
    lines = []
    for key, value in report.application.items():
        if value is None or value == "":
            continue
        label = KNOWN_APP_METRICS.get(key, key)
        suffix = "ms" if key == "average_response_time" else ""
        lines.append(f"{label}: {value}{suffix}")
    return lines


class HttpNotifier(BaseNotifier):
    """Base class for channels delivering over HTTP."""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 10) -> None:
        self.client = client
        self.timeout = timeout

    async def _send_request(
        self,
        url: str,
        payload: dict[str, Any],
        method: str = "POST",
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a JSON payload, raising NotificationError on failure."""
        try:
            if self.client is not None:
                response = await self.client.request(method, url, json=payload, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, json=payload, **kwargs)
        except httpx.HTTPError as e:
            raise NotificationError(f"Failed to send {self.name} notification: {e}") from e

        if not response.is_success:
            raise NotificationError(
                f"Failed to send {self.name} notification: "
                f"HTTP {response.status_code} - {response.text}"
            )

        logger.info(f"{self.name} notification sent")
        return response
