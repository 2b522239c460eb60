"""
Rich terminal output helpers for CLI.

Renders weather snapshots, conversion tables, and cache statistics, and
provides the shared error, warning, and status message helpers.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from weatherfx.core.models import CacheStats, ConversionRow, WeatherSnapshot

# Console instance for all output
console = Console()

PREFIX_LABELS = {
    "rates_": "Exchange rates",
    "rateLimit_rates_": "Rate limit markers (rates)",
    "weather_": "Weather",
    "rateLimit_weather_": "Rate limit markers (weather)",
    "other": "Other",
}


def get_temperature_style(temp: float) -> str:
    """Get Rich style string for a temperature in Celsius."""
    if temp <= 0:
        return "bold cyan"
    elif temp < 15:
        return "cyan"
    elif temp < 25:
        return "green"
    elif temp < 32:
        return "yellow"
    return "bold red"


def print_weather(snapshot: WeatherSnapshot) -> None:
    """Print a weather snapshot.

    Args:
        snapshot: WeatherSnapshot to display.
    """
    style = get_temperature_style(snapshot.main_temp)
    updated = snapshot.observed_datetime.strftime("%Y-%m-%d %H:%M:%S")

    console.print()
    console.print(Panel(f"[bold]{snapshot.name}[/]", box=box.ROUNDED))
    console.print(f"  Temperature: [{style}]{snapshot.rounded_temp}°C[/]")
    console.print(f"  Forecast: {snapshot.description}")
    console.print(f"  [dim]Last updated: {updated}[/]")
    console.print()


def print_rates_table(
    base: str,
    rows: list[ConversionRow],
    amount: Optional[float] = None,
) -> None:
    """Print a table of exchange rates and converted amounts.

    Args:
        base: Base currency code.
        rows: Conversion rows, one per target currency.
        amount: Amount converted, if any.
    """
    table = Table(
        title=f"Exchange Rates ({base})",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Currency", style="cyan", no_wrap=True)
    table.add_column("Rate")
    if amount is not None:
        table.add_column("Converted", justify="right")

    for row in rows:
        cells = [row.currency, f"1 {base} = {row.rate:.4f} {row.currency}"]
        if amount is not None:
            cells.append(f"{amount:g} {base} = {row.converted:.2f} {row.currency}")
        table.add_row(*cells)

    console.print()
    console.print(table)

    if not rows:
        print_info(f"No rates available for {base}.")


def print_cache_stats(stats: CacheStats) -> None:
    """Print durable cache statistics."""
    console.print("\n[bold]Cache Statistics:[/]")
    console.print(f"  Database: {stats.db_path}")
    console.print(f"  Size: {stats.db_size_bytes / 1024:.1f} KB")
    console.print(f"  Total entries: {stats.total_entries}")

    if stats.entries_by_prefix:
        console.print("\n  Entries by type:")
        for prefix, count in sorted(stats.entries_by_prefix.items()):
            console.print(f"    {PREFIX_LABELS.get(prefix, prefix)}: {count}")

    console.print("\n  To refresh all data, use: weatherfx cache --clear")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]Info:[/] {message}")
