"""
WiseTracker CLI — command-line interface.

Usage:
    wisetracker serve --port 3000
    wisetracker resync --start 2024-12-01 --end 2024-12-31
    wisetracker report --mock
    wisetracker settings --start 2025-01-01 --end 2025-01-31
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from wisetracker import __version__
from wisetracker.errors import TrackerError

if TYPE_CHECKING:
    from wisetracker.analyzers.dashboard import DashboardAnalytics
    from wisetracker.models.financial import CachedDataset
    from wisetracker.tracker import ExpenseTracker

app = typer.Typer(
    name="wisetracker",
    help="💳 WiseTracker — expense tracking for your Wise account",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_ALERT_STYLES = {"danger": "red", "warning": "yellow", "info": "cyan", "success": "green"}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]WiseTracker[/bold] v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """💳 WiseTracker — fetch, bucket and analyze your card spending."""
    load_dotenv()
    _configure_logging(verbose)


def _build_tracker(config: str, mock: bool) -> ExpenseTracker:
    from wisetracker.tracker import ExpenseTracker

    config_path = config if Path(config).exists() else None
    overrides = {"mock_mode": True} if mock else {}
    return ExpenseTracker.from_config(config_path, **overrides)


async def _refresh_once(tracker: ExpenseTracker, start: str | None, end: str | None) -> CachedDataset:
    try:
        return await tracker.refresh(start, end)
    finally:
        await tracker.close()


def _run_refresh(tracker: ExpenseTracker, start: str | None, end: str | None) -> CachedDataset:
    try:
        with console.status("[bold green]Fetching activities...[/bold green]"):
            return asyncio.run(_refresh_once(tracker, start, end))
    except TrackerError as e:
        console.print(f"[red]Refresh failed:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (defaults to config or $PORT)"),
    config: str = typer.Option("wisetracker.yaml", "--config", "-c", help="Path to config file"),
    mock: bool = typer.Option(False, "--mock", help="Serve generated data instead of calling Wise"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from wisetracker.api.server import create_app

    tracker = _build_tracker(config, mock)
    bind_host = host or tracker.config.host
    bind_port = port or tracker.config.port

    console.print(Panel.fit(
        f"[bold blue]💳 WiseTracker[/bold blue] — http://{bind_host}:{bind_port}\n"
        f"Mode: {tracker.mode}  Environment: {tracker.config.wise.environment}",
        subtitle=f"v{__version__}",
    ))
    uvicorn.run(create_app(tracker), host=bind_host, port=bind_port, log_config=None)


@app.command()
def resync(
    start: str = typer.Option(None, "--start", help="Window start (YYYY-MM-DD)"),
    end: str = typer.Option(None, "--end", help="Window end (YYYY-MM-DD)"),
    config: str = typer.Option("wisetracker.yaml", "--config", "-c", help="Path to config file"),
    mock: bool = typer.Option(False, "--mock", help="Use generated data"),
) -> None:
    """Fetch the data window once and print what was found."""
    tracker = _build_tracker(config, mock)
    dataset = _run_refresh(tracker, start, end)

    table = Table(title="Resync", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Window", f"{dataset.data_window.start} → {dataset.data_window.end}")
    table.add_row("Activities", str(len(dataset.activities)))
    table.add_row("Card transactions", str(dataset.transaction_count))
    table.add_row("Days with spending", str(dataset.day_count))
    if dataset.balance is not None:
        table.add_row("Balance", f"{dataset.balance.current:,} {dataset.currency}")
    console.print(table)


@app.command()
def report(
    start: str = typer.Option(None, "--start", help="Window start (YYYY-MM-DD)"),
    end: str = typer.Option(None, "--end", help="Window end (YYYY-MM-DD)"),
    config: str = typer.Option("wisetracker.yaml", "--config", "-c", help="Path to config file"),
    mock: bool = typer.Option(False, "--mock", help="Use generated data"),
) -> None:
    """Refresh, then print budget, categories, trends, forecast and alerts."""
    from wisetracker.analyzers.alerts import AlertLog

    tracker = _build_tracker(config, mock)
    _run_refresh(tracker, start, end)
    analytics = tracker.analytics()

    _display_budget(analytics)
    _display_categories(analytics)
    _display_trends(analytics)
    _display_forecast(analytics)

    for alert in AlertLog().filter_new(analytics.alerts):
        style = _ALERT_STYLES.get(alert.level.value, "white")
        console.print(Panel(alert.message, title=f"{alert.icon} {alert.title}", border_style=style))
    for insight in analytics.insights:
        console.print(f"{insight.icon} [bold]{insight.title}[/bold] — {insight.description}")


def _display_budget(analytics: DashboardAnalytics) -> None:
    budget = analytics.budget
    table = Table(title="Budget", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total budget", f"{budget.total_budget:,.2f} {budget.currency}")
    table.add_row("Spent", f"{budget.spent:,.2f} ({budget.spent_percentage}%)")
    table.add_row("Remaining", f"{budget.current_balance:,.2f}")
    table.add_row("Days remaining", f"{budget.days_remaining} / {budget.total_days}")
    table.add_row("Per day", f"{budget.budget_per_day:,.2f}")
    console.print(table)


def _display_categories(analytics: DashboardAnalytics) -> None:
    if not analytics.categories:
        console.print("[dim]No card transactions in this window.[/dim]")
        return
    table = Table(title="Spending by Category")
    table.add_column("Category", style="bold cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Count", justify="right")
    for spend in analytics.categories:
        table.add_row(f"{spend.icon} {spend.name}", f"{spend.amount:,.2f}", str(spend.count))
    console.print(table)


def _display_trends(analytics: DashboardAnalytics) -> None:
    if not analytics.trends:
        return
    table = Table(title="Daily Trend")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Count", justify="right")
    for point in analytics.trends:
        table.add_row(point.date, f"{point.amount:,.2f}", str(point.count))
    console.print(table)


def _display_forecast(analytics: DashboardAnalytics) -> None:
    table = Table(title="Daily Spending & Forecast")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Kind")
    for day in analytics.forecast:
        style = "dim" if day.kind.value == "predicted" else ""
        table.add_row(day.date, f"{day.amount:,.2f}", day.kind.value, style=style)
    console.print(table)

    summary = analytics.forecast_summary
    console.print(
        f"Projected total: [bold]{summary.projected_total:,.2f}[/bold] "
        f"({summary.projected_percentage}% of budget) — {summary.health.value}"
    )


@app.command()
def settings(
    start: str = typer.Option(None, "--start", help="New window start (YYYY-MM-DD)"),
    end: str = typer.Option(None, "--end", help="New window end (YYYY-MM-DD)"),
    config: str = typer.Option("wisetracker.yaml", "--config", "-c", help="Path to config file"),
) -> None:
    """Show the persisted data window, or update it with --start and --end."""
    from wisetracker.config import TrackerConfig
    from wisetracker.settings import SettingsStore, validate_window

    tracker_config = TrackerConfig.load(config if Path(config).exists() else None)
    store = SettingsStore(tracker_config.settings_file)

    try:
        if start or end:
            current = validate_window(start, end)
            store.save(current)
            console.print("[green]Settings updated.[/green] Run [bold]wisetracker resync[/bold] to refresh.")
        else:
            current = store.load()
    except TrackerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"Data window: [bold]{current.data_start_date}[/bold] → [bold]{current.data_end_date}[/bold]")


if __name__ == "__main__":
    app()
