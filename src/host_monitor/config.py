"""Configuration management for Host Monitor."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Union

import yaml

from host_monitor.models import ApplicationMetrics, HealthStatus, MetricsReport

CustomMetricsCallback = Callable[
    [], Union[ApplicationMetrics, Awaitable[ApplicationMetrics]]
]

THRESHOLD_METRICS = ("cpu", "memory", "disk")


@dataclass(frozen=True)
class ThresholdRule:
    """Alert threshold for a single metric.

    ``value`` is compared against the metric's current reading, ``duration``
    (minutes) is the minimum gap between two alerts for the same metric.
    """

    value: float
    duration: float | None = None
    notify: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ThresholdRule":
        if "value" not in data:
            raise ValueError("Threshold rule requires a 'value'")

        duration = data.get("duration")
        if duration is not None:
            try:
                duration = float(duration)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid threshold duration: {duration!r}") from None
            if duration < 0:
                raise ValueError(f"Threshold duration must not be negative: {duration:g}")

        return cls(
            value=float(data["value"]),
            duration=duration,
            notify=_parse_bool(data.get("notify", False), "notify"),
        )


def _parse_bool(raw: Any, key: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
    raise ValueError(f"Invalid boolean for '{key}': {raw!r}")


@dataclass(frozen=True)
class CustomRule:
    """Alert raised when ``condition`` holds for a report."""

    condition: Callable[[MetricsReport], bool]
    message: str


@dataclass
class NotificationRules:
    """When a cycle should produce alerts."""

    cpu: ThresholdRule | None = None
    memory: ThresholdRule | None = None
    disk: ThresholdRule | None = None
    notify_on: frozenset[HealthStatus] = frozenset()
    custom: list[CustomRule] = field(default_factory=list)

    def get_rule(self, metric: str) -> ThresholdRule | None:
        if metric not in THRESHOLD_METRICS:
            return None
        return getattr(self, metric)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotificationRules":
        rules = {
            metric: ThresholdRule.from_dict(data[metric])
            for metric in THRESHOLD_METRICS
            if data.get(metric)
        }
        status = data.get("status") or {}
        try:
            notify_on = frozenset(HealthStatus(s) for s in status.get("notify_on", []))
        except ValueError as e:
            raise ValueError(f"Invalid status in notify_on: {e}") from e

        return cls(notify_on=notify_on, **rules)


@dataclass
class ApplicationConfig:
    """Identity of the monitored application, passed to every channel."""

    name: str = "Host Monitor"
    version: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ApplicationConfig":
        return cls(
            name=data.get("name", "Host Monitor"),
            version=data.get("version"),
            metadata={str(k): str(v) for k, v in (data.get("metadata") or {}).items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "metadata": dict(self.metadata),
        }


@dataclass
class Config:
    """Main configuration for Host Monitor."""

    interval: str = "60s"
    providers: list[dict[str, Any]] = field(default_factory=list)
    application: ApplicationConfig = field(default_factory=ApplicationConfig)
    notifications: NotificationRules = field(default_factory=NotificationRules)
    custom_metrics: CustomMetricsCallback | None = None
    disk_path: str = "/"
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        providers = data.get("providers") or []
        for provider in providers:
            if not isinstance(provider, dict) or "type" not in provider:
                raise ValueError(f"Provider entry must be a mapping with a 'type': {provider!r}")

        return cls(
            interval=str(data.get("interval", "60s")),
            providers=list(providers),
            application=ApplicationConfig.from_dict(data.get("application") or {}),
            notifications=NotificationRules.from_dict(data.get("notifications") or {}),
            disk_path=data.get("disk_path", "/"),
            log_level=data.get("log_level", "INFO"),
        )

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._to_dict()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Callables (custom metrics, custom rules) are not serialized.
        """
        notifications: dict[str, Any] = {}
        for metric in THRESHOLD_METRICS:
            rule = self.notifications.get_rule(metric)
            if rule is None:
                continue
            rule_data: dict[str, Any] = {"value": rule.value, "notify": rule.notify}
            if rule.duration is not None:
                rule_data["duration"] = rule.duration
            notifications[metric] = rule_data
        if self.notifications.notify_on:
            notifications["status"] = {
                "notify_on": sorted(s.value for s in self.notifications.notify_on),
            }

        return {
            "interval": self.interval,
            "disk_path": self.disk_path,
            "log_level": self.log_level,
            "application": self.application.to_dict(),
            "providers": [dict(p) for p in self.providers],
            "notifications": notifications,
        }


def create_example_config() -> Config:
    """Create an example configuration for documentation."""
    return Config(
        interval="*/5 * * * *",
        application=ApplicationConfig(
            name="my-api",
            version="1.0.0",
            metadata={"environment": "production"},
        ),
        providers=[
            {"type": "telegram", "bot_token": "123456:ABC", "chat_id": "987654321"},
            {"type": "discord", "webhook_url": "https://discord.com/api/webhooks/..."},
            {"type": "slack", "webhook_url": "https://hooks.slack.com/services/..."},
            {
                "type": "email",
                "host": "smtp.example.com",
                "port": 587,
                "secure": False,
                "username": "alerts@example.com",
                "password": "change-me",
                "sender": "alerts@example.com",
                "recipients": ["ops@example.com"],
            },
            {"type": "webhook", "url": "https://example.com/hooks/host-monitor"},
        ],
        notifications=NotificationRules(
            cpu=ThresholdRule(value=4.0, duration=5, notify=True),
            memory=ThresholdRule(value=90.0, notify=True),
            disk=ThresholdRule(value=85.0, duration=60, notify=True),
            notify_on=frozenset({HealthStatus.UNHEALTHY}),
        ),
    )
