"""Alert notification channels."""

import logging
from typing import Any

from host_monitor.notifiers.base import BaseNotifier, NotificationError
from host_monitor.notifiers.discord import DiscordNotifier
from host_monitor.notifiers.dispatcher import NotificationDispatcher
from host_monitor.notifiers.email import EmailNotifier
from host_monitor.notifiers.slack import SlackNotifier
from host_monitor.notifiers.telegram import TelegramNotifier
from host_monitor.notifiers.webhook import WebhookNotifier

logger = logging.getLogger(__name__)

NOTIFIER_TYPES: dict[str, type[BaseNotifier]] = {
    "telegram": TelegramNotifier,
    "discord": DiscordNotifier,
    "slack": SlackNotifier,
    "email": EmailNotifier,
    "webhook": WebhookNotifier,
}


def create_notifiers(providers: list[dict[str, Any]]) -> list[BaseNotifier]:
    """Build channels from provider configs, skipping unknown types."""
    notifiers: list[BaseNotifier] = []
    for provider in providers:
        notifier_cls = NOTIFIER_TYPES.get(provider.get("type", ""))
        if notifier_cls is None:
            logger.warning(f"Unknown notification provider type: {provider.get('type')!r}")
            continue
        notifiers.append(notifier_cls.from_dict(provider))  # type: ignore[attr-defined]
    return notifiers


__all__ = [
    "BaseNotifier",
    "DiscordNotifier",
    "EmailNotifier",
    "NotificationDispatcher",
    "NotificationError",
    "SlackNotifier",
    "TelegramNotifier",
    "WebhookNotifier",
    "create_notifiers",
]
