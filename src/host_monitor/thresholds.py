"""Threshold evaluation with per-metric alert debounce."""

import time
from typing import Callable

from host_monitor.config import NotificationRules


class ThresholdEvaluator:
    """Decide whether a metric reading should raise an alert now.

    A reading above its rule's ``value`` alerts unless the same metric already
    alerted less than ``duration`` minutes ago. Without a duration every
    exceeding reading alerts. The value does not have to drop back under
    the threshold before alerting again.

    ``should_notify`` has no await point, so on a single event loop the
    read-modify-write of the last-alert map cannot interleave.
    """

    def __init__(
        self,
        rules: NotificationRules | None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.rules = rules
        self.clock = clock
        self._last_alert: dict[str, float] = {}

    def should_notify(self, metric: str, value: float) -> bool:
        if self.rules is None:
            return False

        rule = self.rules.get_rule(metric)
        if rule is None or not rule.notify:
            return False

        now = self.clock()
        last_alert = self._last_alert.get(metric)
        window = (rule.duration or 0) * 60

        if value <= rule.value:
            return False

        if last_alert is None or not rule.duration or now - last_alert >= window:
            self._last_alert[metric] = now
            return True

        return False
