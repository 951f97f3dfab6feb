"""
Host Monitor - Lightweight host monitoring with threshold alerts.

Samples CPU, memory, disk and process metrics on a schedule, checks them
against debounced thresholds and fans reports out to Telegram, Discord,
Slack, email and webhook channels.
"""

__version__ = "1.0.0"

from host_monitor.config import (
    ApplicationConfig,
    Config,
    CustomRule,
    NotificationRules,
    ThresholdRule,
)
from host_monitor.models import DiskSnapshot, HealthStatus, MetricsReport, classify_status
from host_monitor.monitor import MonitorEngine

__all__ = [
    "ApplicationConfig",
    "Config",
    "CustomRule",
    "DiskSnapshot",
    "HealthStatus",
    "MetricsReport",
    "MonitorEngine",
    "NotificationRules",
    "ThresholdRule",
    "classify_status",
]
