"""Tests for disk usage acquisition."""

import subprocess

import pytest

from host_monitor.collectors import disk as disk_module
from host_monitor.collectors.disk import get_disk_info, parse_df_output, parse_wmic_output
from host_monitor.models import DiskSnapshot

DF_OUTPUT = """Filesystem     1K-blocks      Used  Available Use% Mounted on
  /dev/sda1      244277768 187088784   44604220  81% /"""

WMIC_OUTPUT = """Caption  FreeSpace    Size
  C:      104074125312 499037585408"""

SENTINEL = DiskSnapshot(total=0, free=0, used=0, used_percentage=0)


def fake_runner(stdout: str):
    commands: list[list[str]] = []

    async def runner(args) -> str:
        commands.append(list(args))
        return stdout

    runner.commands = commands  # type: ignore[attr-defined]
    return runner


async def failing_runner(args) -> str:
    raise RuntimeError("Command failed")


class TestParseDfOutput:
    """Tests for POSIX df parsing."""

    def test_parse_valid_output(self):
        snapshot = parse_df_output(DF_OUTPUT)
        assert snapshot.total == 244277768 * 1024
        assert snapshot.free == 44604220 * 1024
        assert snapshot.used + snapshot.free == snapshot.total
        # Percentage comes from the tool, not recomputed
        assert snapshot.used_percentage == 81

    def test_used_matches_tool_when_no_reserved_blocks(self):
        output = """Filesystem     1K-blocks    Used Available Use% Mounted on
/dev/sdb1      488555536 366416652 122138884  75% /home"""
        snapshot = parse_df_output(output)
        assert snapshot == DiskSnapshot(
            total=488555536 * 1024,
            free=122138884 * 1024,
            used=366416652 * 1024,
            used_percentage=75,
        )

    def test_percent_sign_optional(self):
        output = "Filesystem 1K-blocks Used Available Capacity\n/dev/disk1 1000 400 600 40"
        assert parse_df_output(output).used_percentage == 40

    @pytest.mark.parametrize("output", [
        "",
        "Filesystem     1K-blocks      Used  Available Use% Mounted on",
        "Filesystem 1K-blocks Used\n/dev/sda1 1000 400",
        "Filesystem 1K-blocks Used Available Use%\n/dev/sda1 abc 400 600 40%",
        "Filesystem 1K-blocks Used Available Use%\n/dev/sda1 1000 x 600 40%",
        "Filesystem 1K-blocks Used Available Use%\n/dev/sda1 1000 400 - 40%",
        "Filesystem 1K-blocks Used Available Use%\n/dev/sda1 1000 400 600 -",
        "Filesystem 1K-blocks Used Available Use%\n/dev/sda1 0 0 0 0%",
    ])
    def test_invalid_output_raises(self, output):
        with pytest.raises(ValueError):
            parse_df_output(output)


class TestParseWmicOutput:
    """Tests for Windows wmic parsing."""

    def test_parse_valid_output(self):
        snapshot = parse_wmic_output(WMIC_OUTPUT)
        assert snapshot.total == 499037585408
        assert snapshot.free == 104074125312
        assert snapshot.used == 394963460096
        assert snapshot.used_percentage == (499037585408 - 104074125312) / 499037585408 * 100
        assert snapshot.used_percentage == pytest.approx(79.1447966, rel=1e-6)

    def test_skips_invalid_rows(self):
        output = """Caption  FreeSpace    Size
A:
D:      invalid      notanumber
E:      0            0
F:      250          1000
G:      100          1000"""
        snapshot = parse_wmic_output(output)
        assert snapshot.total == 1000
        assert snapshot.free == 250
        assert snapshot.used_percentage == 75.0

    @pytest.mark.parametrize("output", [
        "",
        "Invalid Output",
        "Caption  FreeSpace    Size\nC:      invalid     notanumber",
        "Caption  FreeSpace    Size\nC:      0     0",
    ])
    def test_no_valid_rows_raises(self, output):
        with pytest.raises(ValueError):
            parse_wmic_output(output)


class TestGetDiskInfo:
    """Tests for get_disk_info platform dispatch and error handling."""

    @pytest.mark.asyncio
    async def test_posix_runs_df_for_path(self):
        runner = fake_runner(DF_OUTPUT)
        snapshot = await get_disk_info("/home", platform="linux", runner=runner)
        assert runner.commands == [["df", "-k", "--", "/home"]]
        assert snapshot.used_percentage == 81

    @pytest.mark.asyncio
    async def test_windows_runs_wmic(self):
        runner = fake_runner(WMIC_OUTPUT)
        snapshot = await get_disk_info(platform="windows", runner=runner)
        assert runner.commands == [list(disk_module.WMIC_COMMAND)]
        assert snapshot.total == 499037585408

    @pytest.mark.asyncio
    @pytest.mark.parametrize("platform", ["linux", "darwin", "windows"])
    async def test_command_failure_returns_sentinel(self, platform):
        snapshot = await get_disk_info(platform=platform, runner=failing_runner)
        assert snapshot == SENTINEL

    @pytest.mark.asyncio
    @pytest.mark.parametrize("platform,stdout", [
        ("linux", "garbage"),
        ("linux", "Filesystem 1K-blocks Used Available Use%\n/dev/sda1 0 0 0 0%"),
        ("windows", "Invalid Output"),
        ("windows", ""),
    ])
    async def test_malformed_output_returns_sentinel(self, platform, stdout):
        snapshot = await get_disk_info(platform=platform, runner=fake_runner(stdout))
        assert snapshot == SENTINEL
        assert not snapshot.available

    @pytest.mark.asyncio
    async def test_nonzero_exit_returns_sentinel(self, monkeypatch):
        def fake_run(*args, **kwargs):
            return subprocess.CompletedProcess(args, returncode=1, stdout="", stderr="df: not found")

        monkeypatch.setattr(disk_module.subprocess, "run", fake_run)
        snapshot = await get_disk_info("/", platform="linux")
        assert snapshot == SENTINEL

    @pytest.mark.asyncio
    async def test_default_runner_returns_stdout(self, monkeypatch):
        def fake_run(*args, **kwargs):
            return subprocess.CompletedProcess(args, returncode=0, stdout=DF_OUTPUT, stderr="")

        monkeypatch.setattr(disk_module.subprocess, "run", fake_run)
        snapshot = await get_disk_info("/", platform="linux")
        assert snapshot.used_percentage == 81

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ['/mnt/$HOME', '/mnt/`id`', '/mnt/$(id)', '/mnt/a"b'])
    async def test_path_reaches_df_unexpanded(self, monkeypatch, path):
        calls = []

        def fake_run(args, **kwargs):
            calls.append((args, kwargs))
            return subprocess.CompletedProcess(args, returncode=0, stdout=DF_OUTPUT, stderr="")

        monkeypatch.setenv("HOME", "/EXPANDED")
        monkeypatch.setattr(disk_module.subprocess, "run", fake_run)
        await get_disk_info(path, platform="linux")

        args, kwargs = calls[0]
        assert args == ["df", "-k", "--", path]
        assert not kwargs.get("shell")
