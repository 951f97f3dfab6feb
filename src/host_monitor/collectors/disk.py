"""Disk usage acquisition via platform tools (df / wmic)."""

import asyncio
import logging
import platform as platform_module
import subprocess
from typing import Awaitable, Callable, Sequence

from host_monitor.models import DiskSnapshot

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], Awaitable[str]]

WMIC_COMMAND = ("wmic", "logicaldisk", "get", "size,freespace,caption")


def parse_df_output(stdout: str) -> DiskSnapshot:
    """Parse ``df -k`` output.

    Expects a header line followed by
    ``Filesystem 1K-blocks Used Available Use% ...``.

    Raises:
        ValueError: If the output does not match the expected layout.
    """
    lines = stdout.strip().splitlines()
    if len(lines) < 2:
        raise ValueError(f"Unexpected df output: got {len(lines)} line(s), expected at least 2")

    stats = lines[1].split()
    if len(stats) < 5:
        raise ValueError(
            f"Invalid df output format: got {len(stats)} columns, expected at least 5"
        )

    total_str, used_str, avail_str, percent_str = stats[1:5]
    try:
        total = int(total_str)
        int(used_str)
        available = int(avail_str)
        used_percentage = int(percent_str.rstrip("%"))
    except ValueError:
        raise ValueError(
            f"Invalid numeric values in df output: total={total_str}, used={used_str}, "
            f"available={avail_str}, percentage={percent_str}"
        ) from None

    if total <= 0:
        raise ValueError("df reported a total size of zero")

    # Reserved blocks are counted as used so that used + free == total
    total_bytes = total * 1024
    free_bytes = available * 1024
    return DiskSnapshot(
        total=total_bytes,
        free=free_bytes,
        used=total_bytes - free_bytes,
        used_percentage=used_percentage,
    )


def parse_wmic_output(stdout: str) -> DiskSnapshot:
    """Parse ``wmic logicaldisk get size,freespace,caption`` output.

    Returns the first drive row with a caption, numeric free space and a
    non-zero size.

    Raises:
        ValueError: If no row qualifies.
    """
    for line in stdout.strip().splitlines()[1:]:
        parts = line.split()
        if len(parts) < 3:
            continue

        caption, free_str, size_str = parts[:3]
        if not (caption and free_str and size_str):
            continue

        try:
            free = int(free_str)
            size = int(size_str)
        except ValueError:
            continue

        if size <= 0:
            continue

        used = size - free
        return DiskSnapshot(
            total=size,
            free=free,
            used=used,
            used_percentage=(used / size) * 100,
        )

    raise ValueError("No valid disk information found in wmic output")


async def run_command(args: Sequence[str]) -> str:
    """Run a command (no shell) in a worker thread and return its stdout.

    Raises:
        RuntimeError: If the command exits with a non-zero status.
    """
    result = await asyncio.to_thread(
        subprocess.run,
        list(args),
        capture_output=True,
        text=True,
        timeout=30,
    )
    if result.returncode != 0:
        raise RuntimeError(
            f"Command failed with exit code {result.returncode}: {result.stderr.strip()}"
        )
    return result.stdout


def _is_windows(platform: str) -> bool:
    return platform.lower() in ("windows", "win32")


async def get_disk_info(
    path: str = "/",
    platform: str | None = None,
    runner: CommandRunner | None = None,
) -> DiskSnapshot:
    """Get disk usage for the filesystem containing ``path``.

    Never raises: any failure is logged and the all-zero snapshot is
    returned instead.

    Args:
        path: Filesystem path to inspect (ignored on Windows).
        platform: Platform tag, defaults to the running system.
        runner: Coroutine function executing an argv list and returning stdout.
    """
    platform = platform or platform_module.system().lower()
    runner = runner or run_command

    try:
        if _is_windows(platform):
            stdout = await runner(WMIC_COMMAND)
            return parse_wmic_output(stdout)

        stdout = await runner(["df", "-k", "--", path])
        return parse_df_output(stdout)
    except Exception as e:
        logger.error(f"Error getting disk info for {path}: {e}")
        return DiskSnapshot.unavailable()
