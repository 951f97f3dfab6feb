"""Local system metric collector using psutil."""

import logging
import platform
import time

import psutil

from host_monitor.collectors.base import BaseCollector
from host_monitor.collectors.disk import CommandRunner, get_disk_info
from host_monitor.models import (
    CPUMetrics,
    DiskSnapshot,
    HostSample,
    MemoryMetrics,
    ProcessInfo,
)

logger = logging.getLogger(__name__)


class LocalCollector(BaseCollector):
    """Collect metrics from the local host and the current process."""

    def __init__(
        self,
        platform_tag: str | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        """Initialize collector.

        Args:
            platform_tag: Platform used to pick the disk command. Detected if omitted.
            runner: Command runner used for disk acquisition.
        """
        self.platform = platform_tag or platform.system().lower()
        self.runner = runner
        self._process = psutil.Process()

    def collect(self) -> HostSample:
        """Collect CPU, memory and process metrics."""
        load_avg = self._get_load_average()

        mem = psutil.virtual_memory()
        proc_mem = self._process.memory_info()

        return HostSample(
            cpu=CPUMetrics(
                usage=load_avg[0],
                count=psutil.cpu_count() or 1,
                load_average=load_avg,
            ),
            memory=MemoryMetrics(
                total=mem.total,
                free=mem.available,
                used=mem.total - mem.available,
                rss=proc_mem.rss,
                vms=proc_mem.vms,
            ),
            process=ProcessInfo(
                uptime=max(time.time() - self._process.create_time(), 0.0),
                pid=self._process.pid,
                version=platform.python_version(),
            ),
        )

    async def collect_disk(self, path: str) -> DiskSnapshot:
        return await get_disk_info(path, platform=self.platform, runner=self.runner)

    def _get_load_average(self) -> tuple[float, float, float]:
        """Get system load average, zeros where the platform lacks one."""
        try:
            one, five, fifteen = psutil.getloadavg()
        except (AttributeError, OSError) as e:
            logger.debug(f"Load average unavailable: {e}")
            return (0.0, 0.0, 0.0)
        return (float(one or 0.0), float(five or 0.0), float(fifteen or 0.0))
