"""Host metric collectors."""

from host_monitor.collectors.base import BaseCollector
from host_monitor.collectors.disk import get_disk_info
from host_monitor.collectors.local import LocalCollector

__all__ = ["BaseCollector", "LocalCollector", "get_disk_info"]
