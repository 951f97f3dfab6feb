"""Base collector interface."""

from abc import ABC, abstractmethod

from host_monitor.models import DiskSnapshot, HostSample


class BaseCollector(ABC):
    """Abstract base class for host metric collectors."""

    @abstractmethod
    def collect(self) -> HostSample:
        """Collect CPU, memory and process metrics.

        Returns:
            HostSample with the current readings.
        """
        ...

    @abstractmethod
    async def collect_disk(self, path: str) -> DiskSnapshot:
        """Collect disk usage for the filesystem containing ``path``.

        Implementations must not raise; failures return
        ``DiskSnapshot.unavailable()``.
        """
        ...
