"""
Main CLI application using Typer.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.in_memory import (
    InMemoryAvailabilityProvider,
    InMemoryOfferCatalog,
    InMemoryReservationStore,
)
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingError
from ..domain.slot_calculator import SlotCalculator
from ..services.availability_finder import AvailabilityFinderService
from ..services.reservation_ledger import ReservationLedger

app = typer.Typer(
    name="salonbooking",
    help="Find bookable appointment slots for salon employees",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DateOption = Annotated[
    Optional[str],
    typer.Option("--date", help="Date (YYYY-MM-DD). Defaults to today.")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Salon booking scheduler.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _parse_date(value: Optional[str], tz: str) -> date:
    if not value:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _build_services(config: AppConfig) -> tuple[AvailabilityFinderService, ReservationLedger]:
    """Wire the in-memory collaborators seeded from the configuration."""
    offers = InMemoryOfferCatalog.from_config(config)
    store = InMemoryReservationStore.from_config(config, offers=offers)
    ledger = ReservationLedger(store=store, offers=offers, timezone=config.timezone)
    finder = AvailabilityFinderService(
        availability_provider=InMemoryAvailabilityProvider.from_config(config),
        slot_calculator=SlotCalculator(grid_step=config.scheduling.grid_step()),
        timezone=config.timezone,
        ledger=ledger,
        offers=offers,
    )
    return finder, ledger


@app.command()
def slots(
    employee_id: Annotated[int, typer.Argument(help="Employee id")],
    day: DateOption = None,
    offer: Annotated[Optional[int], typer.Option("--offer", "-o", help="Offer id whose duration is used")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    config_file: ConfigOption = None,
):
    """
    List free appointment slots for an employee on a date.

    Examples:

        salonbooking slots 1 --date 2026-10-20 --offer 2

        salonbooking slots 1 --duration 45
    """
    try:
        config = _load_config(config_file)
        requested_day = _parse_date(day, config.timezone)
        finder, _ = _build_services(config)

        if duration is not None:
            found = finder.get_available_slots(
                employee_id, requested_day, duration=pendulum.duration(minutes=duration)
            )
        elif offer is not None:
            found = finder.get_available_slots(employee_id, requested_day, offer_id=offer)
        else:
            found = finder.get_available_slots(
                employee_id, requested_day, duration=config.scheduling.default_duration()
            )

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    if not found:
        console.print(
            f"[yellow]⚠ No free slots for employee {employee_id} on "
            f"{requested_day.isoformat()}.[/yellow]"
        )
    else:
        console.print(
            f"[bold green]✓ {len(found)} free slot(s) on {requested_day.isoformat()}:[/bold green]\n"
        )
        for slot in found:
            console.print(f"  {slot}")
    console.print()


@app.command()
def busy(
    employee_id: Annotated[int, typer.Argument(help="Employee id")],
    day: DateOption = None,
    config_file: ConfigOption = None,
):
    """
    Show intervals already booked for an employee on a date.
    """
    try:
        config = _load_config(config_file)
        requested_day = _parse_date(day, config.timezone)
        _, ledger = _build_services(config)
        intervals = ledger.list_busy_intervals(employee_id, requested_day)

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not intervals:
        console.print(f"\n[green]No bookings on {requested_day.isoformat()}.[/green]\n")
        return

    console.print(f"\n[bold]Booked on {requested_day.isoformat()}:[/bold]")
    for interval in intervals:
        console.print(f"  {interval}")
    console.print()


@app.command()
def employees(
    config_file: ConfigOption = None,
):
    """
    List configured employees with their weekly hours.
    """
    try:
        config = _load_config(config_file)
        provider = InMemoryAvailabilityProvider.from_config(config)
        catalog = InMemoryOfferCatalog.from_config(config)
    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.employees:
        console.print("[yellow]No employees defined in the config file.[/yellow]")
        return

    table = Table(
        title="Employees",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Hours", style="dim")
    table.add_column("Offers")

    for employee in config.employees:
        hours = "\n".join(
            f"{window.day_of_week.name.title()} {window.start:%H:%M}-{window.end:%H:%M}"
            for window in provider.schedule_for(employee.id)
        )
        offer_names = ", ".join(offer.name for offer in catalog.offers_for_employee(employee.id))
        table.add_row(str(employee.id), employee.name, hours or "-", offer_names or "-")

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonbooking[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
