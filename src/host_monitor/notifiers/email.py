"""SMTP email notification channel."""

import asyncio
import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Any

from host_monitor.config import ApplicationConfig
from host_monitor.models import MetricsReport
from host_monitor.notifiers.base import (
    BaseNotifier,
    NotificationError,
    format_application_metrics,
    format_bytes,
)

logger = logging.getLogger(__name__)


class EmailNotifier(BaseNotifier):
    """Send HTML reports by email."""

    name = "email"

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        recipients: list[str],
        username: str | None = None,
        password: str | None = None,
        secure: bool = False,
        timeout: float = 10,
        require_tls: bool = True,
    ) -> None:
        """Initialize email notifier.

        Args:
            host: SMTP server host.
            port: SMTP server port.
            sender: From address.
            recipients: To addresses.
            username: Optional SMTP login.
            password: Optional SMTP password.
            secure: Use implicit TLS (SMTP_SSL) instead of STARTTLS.
            timeout: Socket timeout in seconds.
            require_tls: Refuse to send credentials over an unencrypted connection.
        """
        if not recipients:
            raise ValueError("Email notifier requires at least one recipient")
        self.host = host
        self.port = port
        self.sender = sender
        self.recipients = list(recipients)
        self.username = username
        self.password = password
        self.secure = secure
        self.timeout = timeout
        self.require_tls = require_tls

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmailNotifier":
        return cls(
            host=data["host"],
            port=int(data.get("port", 587)),
            sender=data["sender"],
            recipients=data["recipients"],
            username=data.get("username"),
            password=data.get("password"),
            secure=data.get("secure", False),
            require_tls=data.get("require_tls", True),
        )

    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Send report by email."""
        message = self.build_message(report, app)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email notification: {e}") from e
        logger.info(f"Email notification sent to {', '.join(self.recipients)}")

    def build_message(self, report: MetricsReport, app: ApplicationConfig | None = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = ", ".join(self.recipients)
        message["Subject"] = f"System Health Report - {report.status.value.upper()}"
        message.set_content(self.format_report(report, app))
        message.add_alternative(self.format_html(report, app), subtype="html")
        return message

    def format_html(self, report: MetricsReport, app: ApplicationConfig | None = None) -> str:
        system = report.system
        app_name = html.escape(app.name if app else "Host Monitor")

        parts = [
            f"<h2>System Health Report: {app_name}</h2>",
            f"<p><strong>Time:</strong> {report.timestamp.strftime('%Y-%m-%d %H:%M:%S %Z')}</p>",
            f"<p><strong>Status:</strong> {report.status.value.upper()}</p>",
            "<h3>System Metrics</h3>",
            "<ul>",
            f"<li>CPU: {system.cpu.usage:.2f}%</li>",
            f"<li>Memory: {format_bytes(system.memory.used)} ({system.memory.percent:.1f}%)</li>",
            f"<li>Process RSS: {format_bytes(system.memory.rss)}</li>",
            f"<li>Disk: {system.disk.used_percentage}%</li>",
            "</ul>",
        ]

        app_lines = format_application_metrics(report)
        if app_lines:
            parts.append("<h3>Application Metrics</h3>")
            parts.append("<ul>")
            parts.extend(f"<li>{html.escape(line)}</li>" for line in app_lines)
            parts.append("</ul>")

        if report.errors:
            parts.append("<h3>Errors</h3>")
            parts.append("<ul>")
            parts.extend(f"<li>{html.escape(error)}</li>" for error in report.errors)
            parts.append("</ul>")

        return "\n".join(parts)

    def _deliver(self, message: EmailMessage) -> None:
        """Blocking SMTP delivery."""
        smtp_class = smtplib.SMTP_SSL if self.secure else smtplib.SMTP
        with smtp_class(self.host, self.port, timeout=self.timeout) as smtp:
            encrypted = self.secure
            if not self.secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                    encrypted = True
            if self.username and self.password:
                if self.require_tls and not encrypted:
                    raise smtplib.SMTPNotSupportedError(
                        f"{self.host} does not support STARTTLS, refusing to log in without TLS"
                    )
                smtp.login(self.username, self.password)
            smtp.send_message(message)
