"""Tests for the local collector."""

import pytest

from host_monitor.collectors.local import LocalCollector
from host_monitor.models import DiskSnapshot

DF_OUTPUT = """Filesystem     1K-blocks    Used Available Use% Mounted on
/dev/sdb1      488555536 366416652 122138884  75% /home"""


class TestLocalCollector:
    """Tests for local system collector."""

    def test_collect(self):
        """Test collecting metrics from the local system."""
        sample = LocalCollector().collect()

        assert sample.cpu.count >= 1
        assert len(sample.cpu.load_average) == 3
        assert all(isinstance(v, float) for v in sample.cpu.load_average)
        assert sample.cpu.usage == sample.cpu.load_average[0]

        assert sample.memory.total > 0
        assert sample.memory.used + sample.memory.free == sample.memory.total
        assert 0 <= sample.memory.percent <= 100
        assert sample.memory.rss > 0

        assert sample.process.pid > 0
        assert sample.process.uptime >= 0
        assert sample.process.version

    def test_load_average_unavailable(self, monkeypatch):
        def no_loadavg():
            raise OSError("not supported")

        monkeypatch.setattr("host_monitor.collectors.local.psutil.getloadavg", no_loadavg)
        sample = LocalCollector().collect()
        assert sample.cpu.usage == 0.0
        assert sample.cpu.load_average == (0.0, 0.0, 0.0)

    @pytest.mark.asyncio
    async def test_collect_disk_uses_runner(self):
        commands = []

        async def runner(args):
            commands.append(list(args))
            return DF_OUTPUT

        collector = LocalCollector(platform_tag="linux", runner=runner)
        snapshot = await collector.collect_disk("/home")

        assert commands == [["df", "-k", "--", "/home"]]
        assert snapshot.used_percentage == 75

    @pytest.mark.asyncio
    async def test_collect_disk_failure(self):
        async def runner(args):
            raise FileNotFoundError("wmic")

        collector = LocalCollector(platform_tag="windows", runner=runner)
        assert await collector.collect_disk("C:\\") == DiskSnapshot.unavailable()
