"""Telegram notification channel."""

import html
from typing import Any

import httpx

from host_monitor.config import ApplicationConfig
from host_monitor.models import MetricsReport
from host_monitor.notifiers.base import HttpNotifier


class TelegramNotifier(HttpNotifier):
    """Send reports via Telegram bot."""

    name = "telegram"

    def __init__(
        self,
        bot_token: str,
        chat_id: str | int,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Telegram notifier.

        Args:
            bot_token: Telegram bot API token.
            chat_id: Chat ID to send messages to.
            client: Optional shared HTTP client.
        """
        super().__init__(client=client)
        self.bot_token = bot_token
        self.chat_id = str(chat_id)
        self.api_base = f"https://api.telegram.org/bot{bot_token}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TelegramNotifier":
        return cls(bot_token=data["bot_token"], chat_id=data["chat_id"])

    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Send report via Telegram."""
        text = html.escape(self.format_report(report, app), quote=False)
        await self._send_request(
            f"{self.api_base}/sendMessage",
            {
                "chat_id": self.chat_id,
                "text": text,
                "parse_mode": "HTML",
            },
        )
