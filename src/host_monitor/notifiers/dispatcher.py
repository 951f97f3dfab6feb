"""Fan-out of reports to every configured channel."""

import asyncio
import logging
from typing import Sequence

from host_monitor.config import ApplicationConfig
from host_monitor.models import MetricsReport
from host_monitor.notifiers.base import BaseNotifier

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Send a report to all channels concurrently.

    A failing channel is logged and never affects the others.
    """

    def __init__(self, notifiers: Sequence[BaseNotifier]) -> None:
        self.notifiers = list(notifiers)

    async def send_all(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        """Send ``report`` to every channel and wait until all have settled."""
        if not self.notifiers:
            return

        await asyncio.gather(
            *(self._send_one(notifier, report, app) for notifier in self.notifiers)
        )

    async def _send_one(
        self,
        notifier: BaseNotifier,
        report: MetricsReport,
        app: ApplicationConfig | None,
    ) -> None:
        try:
            await notifier.send(report, app)
        except Exception as e:
            logger.error(f"Failed to send notification via {notifier.name}: {e}")
