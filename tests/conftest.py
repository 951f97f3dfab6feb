"""Shared test fixtures."""

import pytest

from host_monitor.collectors.base import BaseCollector
from host_monitor.config import ApplicationConfig
from host_monitor.models import (
    CPUMetrics,
    DiskSnapshot,
    HostSample,
    MemoryMetrics,
    MetricsReport,
    ProcessInfo,
)
from host_monitor.notifiers.base import BaseNotifier, NotificationError

GB = 1_000_000_000


class FakeCollector(BaseCollector):
    """Collector returning fixed readings: load 1.5, memory 50%, disk 50%."""

    def __init__(
        self,
        load: float = 1.5,
        memory_total: int = 16 * GB,
        memory_free: int = 8 * GB,
        disk: DiskSnapshot | None = None,
    ) -> None:
        self.load = load
        self.memory_total = memory_total
        self.memory_free = memory_free
        self.disk = disk if disk is not None else DiskSnapshot(
            total=1000 * GB, free=500 * GB, used=500 * GB, used_percentage=50,
        )
        self.disk_paths: list[str] = []

    def collect(self) -> HostSample:
        return HostSample(
            cpu=CPUMetrics(usage=self.load, count=4, load_average=(self.load, 1.0, 0.5)),
            memory=MemoryMetrics(
                total=self.memory_total,
                free=self.memory_free,
                used=self.memory_total - self.memory_free,
                rss=300_000_000,
                vms=600_000_000,
            ),
            process=ProcessInfo(uptime=3725.0, pid=4242, version="3.12.0"),
        )

    async def collect_disk(self, path: str) -> DiskSnapshot:
        self.disk_paths.append(path)
        return self.disk


class FakeNotifier(BaseNotifier):
    """Channel recording every report it is asked to send."""

    def __init__(self, name: str = "fake", fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.sent: list[tuple[MetricsReport, ApplicationConfig | None]] = []

    async def send(self, report: MetricsReport, app: ApplicationConfig | None = None) -> None:
        self.sent.append((report, app))
        if self.fail:
            raise NotificationError(f"{self.name} is down")


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += minutes * 60


@pytest.fixture
def collector():
    return FakeCollector()


@pytest.fixture
def clock():
    return FakeClock()
