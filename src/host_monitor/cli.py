"""Command-line interface for Host Monitor."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from host_monitor import __version__
from host_monitor.collectors import get_disk_info
from host_monitor.config import Config, create_example_config
from host_monitor.models import DiskSnapshot, HealthStatus, MetricsReport
from host_monitor.monitor import MonitorEngine
from host_monitor.notifiers.base import format_bytes

console = Console()

DEFAULT_CONFIG_PATHS = ["hmon.yaml", "hmon.yml", "config.yaml", "~/.config/hmon/config.yaml"]


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def status_color(status: HealthStatus) -> str:
    """Get Rich color for health status."""
    colors = {
        HealthStatus.HEALTHY: "green",
        HealthStatus.DEGRADED: "yellow",
        HealthStatus.UNHEALTHY: "red",
    }
    return colors.get(status, "white")


def load_config(config: Optional[str]) -> Config:
    """Load the given config file, or the first default location that exists."""
    if config:
        return Config.from_yaml(config)

    for default_path in DEFAULT_CONFIG_PATHS:
        path = Path(default_path).expanduser()
        if path.exists():
            return Config.from_yaml(path)

    console.print("[red]No configuration file found.[/]")
    console.print("Create one with: [cyan]hmon init[/]")
    sys.exit(1)


def create_metrics_table(report: MetricsReport) -> Table:
    """Create a Rich table displaying report metrics."""
    system = report.system
    table = Table(title="System Metrics", show_header=True, header_style="bold")

    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")

    table.add_row("CPU (load 1m)", f"{system.cpu.usage:.2f} ({system.cpu.count} cores)")
    table.add_row(
        "Load Average",
        ", ".join(f"{v:.2f}" for v in system.cpu.load_average),
    )
    table.add_row(
        "Memory",
        f"{system.memory.percent:.1f}% of {format_bytes(system.memory.total)}",
    )
    if system.disk.available:
        table.add_row(
            "Disk",
            f"{system.disk.used_percentage}% of {format_bytes(system.disk.total)}",
        )
    else:
        table.add_row("Disk", Text("unavailable", style="dim"))
    table.add_row("Process RSS", format_bytes(system.memory.rss))
    table.add_row("PID / Python", f"{system.process.pid} / {system.process.version}")

    for key, value in report.application.items():
        table.add_row(key, str(value))

    return table


def create_summary_panel(report: MetricsReport) -> Panel:
    """Create a summary panel."""
    status = report.status
    parts = [
        f"[bold]Status:[/bold] [{status_color(status)}]{status.value.upper()}[/]",
        f"[bold]Checked:[/bold] {report.timestamp.strftime('%Y-%m-%d %H:%M:%S %Z')}",
    ]
    if report.errors:
        parts.append("")
        parts.append(f"[bold red]Alerts ({len(report.errors)}):[/]")
        for error in report.errors:
            parts.append(f"  • {error}")

    return Panel("\n".join(parts), title="Host Health Summary", border_style=status_color(status))


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Host Monitor - threshold alerts for CPU, memory and disk."""
    pass


@main.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (default: from config)",
)
def run(config: Optional[str], log_level: Optional[str]) -> None:
    """Start scheduled monitoring."""
    cfg = load_config(config)
    setup_logging(log_level or cfg.log_level)

    engine = MonitorEngine(cfg)
    try:
        scheduler = engine.start()
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)

    console.print(f"[dim]Monitoring (interval: {cfg.interval}, Ctrl+C to stop)[/]")
    try:
        asyncio.run(scheduler.run())
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped monitoring.[/]")


@main.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--json", "output_json",
    is_flag=True,
    help="Output in JSON format",
)
@click.option(
    "--notify",
    is_flag=True,
    help="Dispatch the report to configured providers",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
def check(config: Optional[str], output_json: bool, notify: bool, log_level: str) -> None:
    """Run a single monitoring cycle."""
    setup_logging(log_level)
    cfg = load_config(config)

    engine = MonitorEngine(cfg, notifiers=None if notify else [])
    report = asyncio.run(engine.run_cycle())

    if output_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        console.print(create_summary_panel(report))
        console.print(create_metrics_table(report))

    # Exit with error code if not healthy
    if report.status == HealthStatus.UNHEALTHY:
        sys.exit(1)
    elif report.status == HealthStatus.DEGRADED:
        sys.exit(2)


@main.command()
@click.argument("path", default="/")
@click.option("--json", "output_json", is_flag=True, help="Output JSON")
def disk(path: str, output_json: bool) -> None:
    """Show disk usage for PATH."""
    setup_logging("WARNING")

    snapshot: DiskSnapshot = asyncio.run(get_disk_info(path))

    if output_json:
        click.echo(json.dumps({
            "path": path,
            "total": snapshot.total,
            "free": snapshot.free,
            "used": snapshot.used,
            "used_percentage": snapshot.used_percentage,
        }, indent=2))
        return

    if not snapshot.available:
        console.print(f"[red]Disk usage unavailable for {path}[/]")
        sys.exit(1)

    console.print(Panel(
        f"[bold]Used:[/] {snapshot.used_percentage}% ({format_bytes(snapshot.used)})\n"
        f"[bold]Free:[/] {format_bytes(snapshot.free)}\n"
        f"[bold]Total:[/] {format_bytes(snapshot.total)}",
        title=f"Disk: {path}",
        border_style="cyan",
    ))


@main.command()
@click.option(
    "-o", "--output",
    default="hmon.yaml",
    help="Output file path",
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing file",
)
def init(output: str, force: bool) -> None:
    """Create an example configuration file."""
    path = Path(output)

    if path.exists() and not force:
        console.print(f"[red]File already exists: {path}[/]")
        console.print("Use --force to overwrite")
        sys.exit(1)

    example = create_example_config()
    example.to_yaml(path)

    console.print(f"[green]Created example configuration: {path}[/]")
    console.print("Edit this file to add your providers and thresholds.")


if __name__ == "__main__":
    main()
