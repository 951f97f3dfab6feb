"""Data models for host monitoring."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

# Values allowed in caller-supplied application metrics
MetricValue = Union[str, int, float, bool, None]
ApplicationMetrics = dict[str, MetricValue]


class HealthStatus(str, Enum):
    """Health status levels."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


def classify_status(error_count: int) -> HealthStatus:
    """Map the number of alert reasons in a cycle to a health status."""
    if error_count <= 0:
        return HealthStatus.HEALTHY
    if error_count == 1:
        return HealthStatus.DEGRADED
    return HealthStatus.UNHEALTHY


@dataclass(frozen=True)
class DiskSnapshot:
    """Disk usage for one filesystem, in bytes and percent.

    All fields are zero when usage could not be determined.
    """

    total: int = 0
    free: int = 0
    used: int = 0
    used_percentage: float = 0

    @classmethod
    def unavailable(cls) -> "DiskSnapshot":
        return cls(total=0, free=0, used=0, used_percentage=0)

    @property
    def available(self) -> bool:
        return self.total > 0


@dataclass(frozen=True)
class CPUMetrics:
    usage: float = 0.0  # 1-minute load average
    count: int = 1
    load_average: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class MemoryMetrics:
    """Host memory plus this process's own footprint (bytes)."""

    total: int = 0
    free: int = 0
    used: int = 0
    rss: int = 0
    vms: int = 0

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return (self.used / self.total) * 100


@dataclass(frozen=True)
class ProcessInfo:
    uptime: float = 0.0
    pid: int = 0
    version: str = ""


@dataclass(frozen=True)
class HostSample:
    """One reading of the host, everything except disk."""

    cpu: CPUMetrics
    memory: MemoryMetrics
    process: ProcessInfo


@dataclass(frozen=True)
class SystemMetrics:
    cpu: CPUMetrics = field(default_factory=CPUMetrics)
    memory: MemoryMetrics = field(default_factory=MemoryMetrics)
    disk: DiskSnapshot = field(default_factory=DiskSnapshot)
    process: ProcessInfo = field(default_factory=ProcessInfo)


@dataclass(frozen=True)
class MetricsReport:
    """Snapshot produced once per monitoring cycle."""

    system: SystemMetrics
    status: HealthStatus = HealthStatus.HEALTHY
    errors: tuple[str, ...] = ()
    application: ApplicationMetrics = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        system = self.system
        return {
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "errors": list(self.errors),
            "system": {
                "cpu": {
                    "usage": system.cpu.usage,
                    "count": system.cpu.count,
                    "load_average": list(system.cpu.load_average),
                },
                "memory": {
                    "total": system.memory.total,
                    "free": system.memory.free,
                    "used": system.memory.used,
                    "percent": system.memory.percent,
                    "rss": system.memory.rss,
                    "vms": system.memory.vms,
                },
                "disk": {
                    "total": system.disk.total,
                    "free": system.disk.free,
                    "used": system.disk.used,
                    "used_percentage": system.disk.used_percentage,
                },
                "process": {
                    "uptime": system.process.uptime,
                    "pid": system.process.pid,
                    "version": system.process.version,
                },
            },
            "application": dict(self.application),
        }
