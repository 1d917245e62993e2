"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, NoReturn, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.json_store import JsonCoachStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import LessonFinderError
from ..domain.models import (
    BookingStatus,
    DayAvailability,
    DayOfWeek,
    LessonType,
    PreferredTime,
    WaitlistStatus,
)
from ..domain.time_codec import format_time_display
from ..services.coach_service import CoachService

app = typer.Typer(
    name="lessonfinder",
    help="Weekly lesson availability, bookings and waitlists for travelling coaches",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(config_file: Optional[Path]) -> Tuple[AppConfig, CoachService]:
    """Load configuration and wire the store into a CoachService."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    _configure_logging(config.log_level)

    store = JsonCoachStore(config.resolve_data_file(config_path))
    return config, CoachService(store=store)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _render_availability(days: List[DayAvailability]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Available lessons")

    for day in days:
        if day.slots:
            slots = ", ".join(format_time_display(slot.start_time) for slot in day.slots)
        else:
            slots = "[dim]No availability[/dim]"
        table.add_row(day.day_of_week.display_name, slots)

    return table


@app.command()
def availability(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    location: Annotated[str, typer.Option("--location", "-l", help="Location id where the lesson takes place")],
    config_file: ConfigOption = None,
):
    """
    Show the coach's bookable lesson start times for a location.

    Examples:

        lessonfinder availability anna-tennis --location park
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        days = service.get_availability(slug, location)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    console.print(Panel.fit(
        f"[bold]{coach.display_name}[/bold] {coach.service_type}\n"
        f"Lesson: {coach.lesson_duration_minutes} Min. | "
        f"Travel buffer: {coach.travel_buffer_minutes} Min.",
        title="Availability"
    ))

    if not any(day.slots for day in days):
        console.print(
            "[yellow]⚠ No available lessons at this location.[/yellow]\n"
            "Join the waitlist to hear about openings."
        )
    else:
        console.print(_render_availability(days))
    console.print()


@app.command()
def locations(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    config_file: ConfigOption = None,
):
    """
    List the coach's locations.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        items = service.list_locations(coach.id)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not items:
        console.print("[yellow]No locations configured.[/yellow]")
        return

    table = Table(title="Locations", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Address")
    table.add_column("Notes", style="dim")

    for item in items:
        table.add_row(item.id, item.name, item.address or "", item.notes or "")

    console.print()
    console.print(table)
    console.print()


@app.command()
def add_location(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    name: Annotated[str, typer.Option("--name", help="Location name")],
    address: Annotated[str, typer.Option("--address", help="Street address")] = "",
    notes: Annotated[str, typer.Option("--notes", help="Notes for clients")] = "",
    config_file: ConfigOption = None,
):
    """
    Add a location where the coach teaches.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        location = service.add_location(coach.id, name=name, address=address, notes=notes)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Location added:[/green] {location.name} ({location.id})")


@app.command()
def remove_location(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    location_id: Annotated[str, typer.Argument(help="Id of the location to remove")],
    config_file: ConfigOption = None,
):
    """
    Remove one of the coach's locations.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        service.remove_location(coach.id, location_id)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Location removed:[/green] {location_id}")


@app.command()
def bookings(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    status: Annotated[Optional[BookingStatus], typer.Option("--status", help="Only show bookings with this status")] = None,
    config_file: ConfigOption = None,
):
    """
    List the coach's weekly bookings.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        items = service.list_bookings(coach.id, status=status)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not items:
        console.print("[yellow]No bookings found.[/yellow]")
        return

    table = Table(title="Bookings", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Day", style="bold yellow")
    table.add_column("Time")
    table.add_column("Location")
    table.add_column("Client")
    table.add_column("Type")
    table.add_column("Status")

    for booking in sorted(items, key=lambda b: (b.day_of_week, b.start_time)):
        lesson = booking.lesson_type.value
        if booking.lesson_type == LessonType.GROUP:
            lesson = f"{lesson} ({booking.group_size})"
        table.add_row(
            booking.id,
            booking.day_of_week.display_name,
            f"{format_time_display(booking.start_time)} - {format_time_display(booking.end_time)}",
            booking.location_name,
            booking.client_name,
            lesson,
            booking.status.value,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def book(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    location: Annotated[str, typer.Option("--location", "-l", help="Location id")],
    day: Annotated[str, typer.Option("--day", help="Day of week, e.g. monday")],
    start: Annotated[str, typer.Option("--start", help="Start time (HH:MM, 24h)")],
    client: Annotated[str, typer.Option("--client", help="Client name")],
    phone: Annotated[str, typer.Option("--phone", help="Client phone number")] = "",
    lesson_type: Annotated[LessonType, typer.Option("--lesson-type", help="private or group")] = LessonType.PRIVATE,
    group_size: Annotated[int, typer.Option("--group-size", help="Participants for group lessons")] = 1,
    notes: Annotated[str, typer.Option("--notes", help="Notes")] = "",
    config_file: ConfigOption = None,
):
    """
    Book a recurring weekly lesson.

    Examples:

        lessonfinder book anna-tennis -l park --day monday --start 15:00 --client "Max"
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        booking = service.create_booking(
            coach.id,
            location_id=location,
            day_of_week=DayOfWeek.parse(day),
            start_time=start,
            client_name=client,
            client_phone=phone,
            lesson_type=lesson_type,
            group_size=group_size,
            notes=notes,
        )
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(
        f"[green]✓ Booking created:[/green] {booking.day_of_week.display_name} "
        f"{format_time_display(booking.start_time)} - {format_time_display(booking.end_time)} "
        f"at {booking.location_name} ({booking.id})"
    )


@app.command()
def cancel(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    booking_id: Annotated[str, typer.Argument(help="Id of the booking to cancel")],
    config_file: ConfigOption = None,
):
    """
    Cancel a booking. Its time becomes available again.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        service.cancel_booking(coach.id, booking_id)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print("[green]✓ Booking cancelled.[/green]")


@app.command()
def waitlist(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    status: Annotated[Optional[WaitlistStatus], typer.Option("--status", help="Only show entries with this status")] = None,
    config_file: ConfigOption = None,
):
    """
    List the coach's waitlist.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        entries = service.list_waitlist(coach.id, status=status)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not entries:
        console.print("[yellow]The waitlist is empty.[/yellow]")
        return

    table = Table(title="Waitlist", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Client", style="bold yellow")
    table.add_column("Phone")
    table.add_column("Day")
    table.add_column("Preferred")
    table.add_column("Location")
    table.add_column("Status")

    for entry in entries:
        table.add_row(
            entry.id,
            entry.client_name,
            entry.client_phone,
            entry.day_of_week.display_name,
            entry.preferred_time.value,
            entry.location_name,
            entry.status.value,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def join_waitlist(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    location: Annotated[str, typer.Option("--location", "-l", help="Location id")],
    day: Annotated[str, typer.Option("--day", help="Day of week, e.g. monday")],
    client: Annotated[str, typer.Option("--client", help="Client name")],
    phone: Annotated[str, typer.Option("--phone", help="Client phone number")],
    preferred_time: Annotated[PreferredTime, typer.Option("--preferred-time", help="morning, afternoon, evening or any")] = PreferredTime.ANY,
    notes: Annotated[str, typer.Option("--notes", help="Notes")] = "",
    config_file: ConfigOption = None,
):
    """
    Put a client on the coach's waitlist.
    """
    try:
        _, service = _load(config_file)
        entry = service.join_waitlist(
            slug,
            location_id=location,
            day_of_week=DayOfWeek.parse(day),
            client_name=client,
            client_phone=phone,
            preferred_time=preferred_time,
            notes=notes,
        )
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Added to the waitlist[/green] ({entry.id})")


@app.command()
def waitlist_status(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    entry_id: Annotated[str, typer.Argument(help="Waitlist entry id")],
    status: Annotated[WaitlistStatus, typer.Argument(help="waiting, contacted or booked")],
    config_file: ConfigOption = None,
):
    """
    Update the status of a waitlist entry.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        entry = service.update_waitlist_status(coach.id, entry_id, status)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Status updated to {entry.status.value}[/green]")


@app.command()
def remove_waitlist(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    entry_id: Annotated[str, typer.Argument(help="Waitlist entry id")],
    config_file: ConfigOption = None,
):
    """
    Remove an entry from the coach's waitlist.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        service.remove_waitlist_entry(coach.id, entry_id)
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Waitlist entry removed:[/green] {entry_id}")


@app.command()
def hours(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    day: Annotated[str, typer.Argument(help="Day of week, e.g. monday")],
    start: Annotated[Optional[str], typer.Option("--start", help="Start time (HH:MM, 24h). Keeps the stored time if omitted")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End time (HH:MM, 24h). Keeps the stored time if omitted")] = None,
    disable: Annotated[bool, typer.Option("--disable", help="Mark the day as not working")] = False,
    config_file: ConfigOption = None,
):
    """
    Set the working hours for one day of the week.

    Examples:

        lessonfinder hours anna-tennis monday --start 08:00 --end 14:00

        lessonfinder hours anna-tennis saturday --disable
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        working_day = service.set_working_day(
            coach.id,
            DayOfWeek.parse(day),
            enabled=not disable,
            start_time=start,
            end_time=end,
        )
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if working_day.enabled:
        console.print(
            f"[green]✓ {working_day.day.display_name}: "
            f"{working_day.start_time} - {working_day.end_time}[/green]"
        )
    else:
        console.print(f"[green]✓ {working_day.day.display_name} disabled.[/green]")


@app.command()
def settings(
    slug: Annotated[str, typer.Argument(help="Public slug of the coach")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Lesson duration in minutes")] = None,
    buffer: Annotated[Optional[int], typer.Option("--buffer", "-b", help="Travel buffer in minutes")] = None,
    whatsapp: Annotated[Optional[str], typer.Option("--whatsapp", help="WhatsApp number")] = None,
    config_file: ConfigOption = None,
):
    """
    Update lesson duration, travel buffer or contact number.
    """
    try:
        _, service = _load(config_file)
        coach = service.resolve_coach(slug)
        coach = service.update_settings(
            coach.id,
            lesson_duration_minutes=duration,
            travel_buffer_minutes=buffer,
            whatsapp_number=whatsapp,
        )
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(
        f"[green]✓ Settings saved:[/green] lesson {coach.lesson_duration_minutes} Min., "
        f"buffer {coach.travel_buffer_minutes} Min."
    )


@app.command()
def register(
    name: Annotated[str, typer.Option("--name", help="Display name")],
    email: Annotated[str, typer.Option("--email", help="Contact email")] = "",
    service_type: Annotated[str, typer.Option("--service", help="What the coach teaches, e.g. Tennis")] = "",
    whatsapp: Annotated[str, typer.Option("--whatsapp", help="WhatsApp number")] = "",
    slug: Annotated[Optional[str], typer.Option("--slug", help="Public slug. Derived from the name by default")] = None,
    config_file: ConfigOption = None,
):
    """
    Register a new coach with the configured default week.
    """
    try:
        config, service = _load(config_file)
        coach = service.register_coach(
            display_name=name,
            email=email,
            service_type=service_type,
            whatsapp_number=whatsapp,
            slug=slug,
            lesson_duration_minutes=config.defaults.lesson_duration_minutes,
            travel_buffer_minutes=config.defaults.travel_buffer_minutes,
            working_hours=config.defaults.get_working_hours(),
        )
    except (LessonFinderError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[green]✓ Coach registered:[/green] {coach.display_name} (/{coach.slug})")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]lessonfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
