"""Core monitoring engine."""

import inspect
import logging
import time
from typing import Awaitable, Callable, Sequence

from host_monitor.collectors import BaseCollector, LocalCollector
from host_monitor.config import (
    Config,
    CustomMetricsCallback,
    NotificationRules,
    ThresholdRule,
)
from host_monitor.models import (
    ApplicationMetrics,
    MetricsReport,
    SystemMetrics,
    classify_status,
)
from host_monitor.notifiers import BaseNotifier, NotificationDispatcher, create_notifiers
from host_monitor.scheduler import IntervalScheduler, Scheduler
from host_monitor.thresholds import ThresholdEvaluator

logger = logging.getLogger(__name__)


def _as_async(callback: CustomMetricsCallback) -> Callable[[], Awaitable[ApplicationMetrics]]:
    """Wrap a sync-or-async metrics callback into a coroutine function."""

    async def call() -> ApplicationMetrics:
        result = callback()
        if inspect.isawaitable(result):
            result = await result
        return dict(result or {})

    return call


class MonitorEngine:
    """Main monitoring orchestrator.

    One ``run_cycle`` samples the host, checks thresholds, classifies health
    and, when warranted, dispatches the report to every channel.
    """

    def __init__(
        self,
        config: Config,
        collector: BaseCollector | None = None,
        notifiers: Sequence[BaseNotifier] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize monitor engine.

        Args:
            config: Configuration object.
            collector: Metric collector, defaults to the local host.
            notifiers: Channels to dispatch to, built from ``config.providers`` if omitted.
            clock: Time source in seconds, used for alert debounce.
        """
        self.config = config
        self.collector = collector or LocalCollector()
        if notifiers is None:
            notifiers = create_notifiers(config.providers)
        self.dispatcher = NotificationDispatcher(notifiers)
        self.rules = config.notifications or NotificationRules()
        self.evaluator = ThresholdEvaluator(self.rules, clock=clock)
        self._custom_metrics = _as_async(config.custom_metrics) if config.custom_metrics else None
        self._last_report: MetricsReport | None = None

    async def run_cycle(self) -> MetricsReport:
        """Run one sample, evaluate, classify and dispatch cycle.

        Returns:
            The finished report, whether or not it was dispatched.
        """
        sample = self.collector.collect()
        disk = await self.collector.collect_disk(self.config.disk_path)
        application = await self._collect_application_metrics()

        system = SystemMetrics(
            cpu=sample.cpu,
            memory=sample.memory,
            disk=disk,
            process=sample.process,
        )

        errors = self._check_thresholds(system)
        errors.extend(self._check_custom_rules(system, errors, application))

        status = classify_status(len(errors))
        report = MetricsReport(
            system=system,
            status=status,
            errors=tuple(errors),
            application=application,
        )
        self._last_report = report

        if errors or status in self.rules.notify_on:
            logger.info(f"Dispatching {status.value} report with {len(errors)} error(s)")
            await self.dispatcher.send_all(report, self.config.application)

        return report

    async def run_scheduled_cycle(self) -> None:
        """Scheduler entry point; a failed cycle never stops later ones."""
        try:
            await self.run_cycle()
        except Exception:
            logger.exception("Monitor cycle failed")

    def start(self, scheduler: Scheduler | None = None) -> Scheduler:
        """Register the monitoring cycle with a scheduler.

        Args:
            scheduler: Scheduler to register with, defaults to an IntervalScheduler.

        Returns:
            The scheduler the cycle was registered with.
        """
        scheduler = scheduler or IntervalScheduler()
        scheduler.schedule(self.config.interval, self.run_scheduled_cycle)
        logger.info(f"Monitor started with interval {self.config.interval!r}")
        return scheduler

    def get_last_report(self) -> MetricsReport | None:
        """Get the report produced by the most recent cycle."""
        return self._last_report

    async def _collect_application_metrics(self) -> ApplicationMetrics:
        if self._custom_metrics is None:
            return {}
        try:
            return await self._custom_metrics()
        except Exception as e:
            logger.error(f"Failed to collect custom metrics: {e}")
            return {}

    def _check_thresholds(self, system: SystemMetrics) -> list[str]:
        rules = self.rules
        errors: list[str] = []

        cpu = system.cpu.usage
        if self.evaluator.should_notify("cpu", cpu):
            errors.append(
                f"CPU usage ({cpu:.1f}%) exceeds threshold of {_threshold(rules.cpu)}% "
                f"(load average {cpu:.2f})"
            )

        memory = system.memory.percent
        if self.evaluator.should_notify("memory", memory):
            errors.append(
                f"Memory usage ({memory:.1f}%) exceeds threshold of {_threshold(rules.memory)}%"
            )

        disk = system.disk.used_percentage
        if self.evaluator.should_notify("disk", disk):
            errors.append(
                f"Disk usage ({disk}%) exceeds threshold of {_threshold(rules.disk)}%"
            )

        return errors

    def _check_custom_rules(
        self,
        system: SystemMetrics,
        errors: list[str],
        application: ApplicationMetrics,
    ) -> list[str]:
        """Evaluate custom rules against a preliminary report.

        The preliminary report carries the built-in errors only, so rules
        never see each other's messages.
        """
        rules = self.rules.custom
        if not rules:
            return []

        preliminary = MetricsReport(
            system=system,
            status=classify_status(len(errors)),
            errors=tuple(errors),
            application=dict(application),
        )

        messages = []
        for rule in rules:
            try:
                triggered = rule.condition(preliminary)
            except Exception:
                logger.exception(f"Custom rule failed: {rule.message}")
                continue
            if triggered:
                messages.append(rule.message)
        return messages


def _threshold(rule: ThresholdRule | None) -> str:
    return f"{rule.value:g}" if rule else "?"
