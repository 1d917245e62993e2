"""
Application services for coach availability, bookings and waitlists.

The service loads snapshots from a record store and delegates the actual
availability calculation to the domain-level ``SlotCalculator``. Keeping the
store behind a simple protocol lets tests swap in any object with the same
methods.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional, Protocol, Sequence

from ..domain.exceptions import (
    CoachNotFoundError,
    InvalidTimeError,
    SlugUnavailableError,
    ValidationError,
)
from ..domain.models import (
    DEFAULT_LESSON_DURATION_MINUTES,
    DEFAULT_TRAVEL_BUFFER_MINUTES,
    AvailabilityRequest,
    Booking,
    BookingStatus,
    CoachProfile,
    DayAvailability,
    DayOfWeek,
    LessonType,
    Location,
    PreferredTime,
    WaitlistEntry,
    WaitlistStatus,
    WorkingHours,
    default_week,
)
from ..domain.slot_calculator import SlotCalculator
from ..domain.time_codec import add_minutes, is_valid_time, time_to_minutes

logger = logging.getLogger(__name__)

MIN_SLUG_LENGTH = 3


class CoachStoreProtocol(Protocol):
    """Protocol describing the record store behaviour needed by the service."""

    def slug_exists(self, slug: str) -> bool: ...

    def get_coach_id_by_slug(self, slug: str) -> Optional[str]: ...

    def get_coach(self, coach_id: str) -> CoachProfile: ...

    def create_coach(self, profile: CoachProfile, working_hours: Sequence[WorkingHours]) -> CoachProfile: ...

    def update_coach_settings(
        self,
        coach_id: str,
        *,
        lesson_duration_minutes: Optional[int] = None,
        travel_buffer_minutes: Optional[int] = None,
        whatsapp_number: Optional[str] = None,
    ) -> CoachProfile: ...

    def get_working_hours(self, coach_id: str) -> List[WorkingHours]: ...

    def save_working_hours(self, coach_id: str, working_hours: Sequence[WorkingHours]) -> None: ...

    def list_locations(self, coach_id: str) -> List[Location]: ...

    def get_location(self, coach_id: str, location_id: str) -> Location: ...

    def add_location(self, coach_id: str, location: Location) -> Location: ...

    def delete_location(self, coach_id: str, location_id: str) -> None: ...

    def list_bookings(self, coach_id: str, status: Optional[BookingStatus] = None) -> List[Booking]: ...

    def add_booking(self, coach_id: str, booking: Booking) -> Booking: ...

    def set_booking_status(self, coach_id: str, booking_id: str, status: BookingStatus) -> Booking: ...

    def list_waitlist(self, coach_id: str, status: Optional[WaitlistStatus] = None) -> List[WaitlistEntry]: ...

    def add_waitlist_entry(self, coach_id: str, entry: WaitlistEntry) -> WaitlistEntry: ...

    def set_waitlist_status(self, coach_id: str, entry_id: str, status: WaitlistStatus) -> WaitlistEntry: ...

    def delete_waitlist_entry(self, coach_id: str, entry_id: str) -> None: ...


def slugify(display_name: str) -> str:
    """
    Derive a public slug from a display name.

    Example: "Anna's Tennis Club" -> "anna-s-tennis-club"
    """
    return re.sub(r"[^a-z0-9]+", "-", display_name.lower()).strip("-")


def _require_time(value: str, label: str) -> str:
    if not is_valid_time(value):
        raise InvalidTimeError(f"{label} must be a 24-hour HH:MM time, got {value!r}")
    return value


def _require_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationError(f"{label} must not be empty")
    return value


class CoachService:
    """
    Orchestrates record retrieval, availability calculation and writes.

    Dependency inversion toward a protocol makes it easy to plug in the
    JSON file store or a stub in tests.
    """

    def __init__(
        self,
        store: CoachStoreProtocol,
        slot_calculator: Optional[SlotCalculator] = None,
    ) -> None:
        self._store = store
        self._slot_calculator = slot_calculator or SlotCalculator()

    # Coaches

    def resolve_coach(self, slug: str) -> CoachProfile:
        """Resolve a public slug to the coach profile."""
        coach_id = self._store.get_coach_id_by_slug(slug)
        if coach_id is None:
            raise CoachNotFoundError(f"Coach not found: {slug}")
        return self._store.get_coach(coach_id)

    def register_coach(
        self,
        *,
        display_name: str,
        email: str = "",
        service_type: str = "",
        whatsapp_number: str = "",
        slug: Optional[str] = None,
        lesson_duration_minutes: int = DEFAULT_LESSON_DURATION_MINUTES,
        travel_buffer_minutes: int = DEFAULT_TRAVEL_BUFFER_MINUTES,
        working_hours: Optional[Sequence[WorkingHours]] = None,
    ) -> CoachProfile:
        """
        Create a coach with a public slug and an initial week of working hours.

        The slug defaults to one derived from the display name.
        """
        display_name = _require_text(display_name, "Display name")
        slug = slugify(slug) if slug else slugify(display_name)

        if len(slug) < MIN_SLUG_LENGTH:
            raise SlugUnavailableError(
                f"Slug must be at least {MIN_SLUG_LENGTH} characters, got {slug!r}"
            )
        if self._store.slug_exists(slug):
            raise SlugUnavailableError(f"Slug already taken: {slug}")

        week = list(working_hours) if working_hours is not None else default_week()
        self._validate_settings(lesson_duration_minutes, travel_buffer_minutes, week)

        profile = CoachProfile(
            id="",
            display_name=display_name,
            slug=slug,
            email=email.strip(),
            service_type=service_type.strip(),
            whatsapp_number=whatsapp_number.strip(),
            lesson_duration_minutes=lesson_duration_minutes,
            travel_buffer_minutes=travel_buffer_minutes,
        )
        return self._store.create_coach(profile, week)

    def update_settings(
        self,
        coach_id: str,
        *,
        lesson_duration_minutes: Optional[int] = None,
        travel_buffer_minutes: Optional[int] = None,
        whatsapp_number: Optional[str] = None,
        working_hours: Optional[Sequence[WorkingHours]] = None,
    ) -> CoachProfile:
        """Update lesson settings and, optionally, working hours for some days."""
        current = self._store.get_coach(coach_id)
        self._validate_settings(
            lesson_duration_minutes if lesson_duration_minutes is not None else current.lesson_duration_minutes,
            travel_buffer_minutes if travel_buffer_minutes is not None else current.travel_buffer_minutes,
            working_hours or [],
        )

        profile = self._store.update_coach_settings(
            coach_id,
            lesson_duration_minutes=lesson_duration_minutes,
            travel_buffer_minutes=travel_buffer_minutes,
            whatsapp_number=whatsapp_number,
        )
        if working_hours:
            self._store.save_working_hours(coach_id, working_hours)
        return profile

    def set_working_day(
        self,
        coach_id: str,
        day: DayOfWeek,
        *,
        enabled: bool,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> WorkingHours:
        """
        Change one day's working hours.

        Times that are not given keep their stored value, so disabling a day
        leaves its window in place for when it is enabled again.
        """
        stored = {wh.day: wh for wh in self._store.get_working_hours(coach_id)}
        current = stored.get(day) or default_week()[day]

        updated = replace(
            current,
            enabled=enabled,
            start_time=start_time if start_time is not None else current.start_time,
            end_time=end_time if end_time is not None else current.end_time,
        )
        self.update_settings(coach_id, working_hours=[updated])
        return updated

    @staticmethod
    def _validate_settings(
        lesson_duration_minutes: int,
        travel_buffer_minutes: int,
        working_hours: Sequence[WorkingHours],
    ) -> None:
        if lesson_duration_minutes <= 0:
            raise ValidationError("Lesson duration must be greater than zero")
        if travel_buffer_minutes < 0:
            raise ValidationError("Travel buffer must not be negative")

        for hours in working_hours:
            if not hours.enabled:
                continue
            _require_time(hours.start_time, f"{hours.day.display_name} start time")
            _require_time(hours.end_time, f"{hours.day.display_name} end time")
            if time_to_minutes(hours.start_time) >= time_to_minutes(hours.end_time):
                raise ValidationError(
                    f"{hours.day.display_name}: start time {hours.start_time} "
                    f"must be before end time {hours.end_time}"
                )

    # Availability

    def get_availability(self, slug: str, location_id: str) -> List[DayAvailability]:
        """
        Calculate the coach's weekly availability for a client at a location.
        """
        coach = self.resolve_coach(slug)
        # Raises LocationNotFoundError for foreign locations
        self._store.get_location(coach.id, location_id)

        request = AvailabilityRequest(
            working_hours=self._store.get_working_hours(coach.id),
            lesson_duration_minutes=coach.lesson_duration_minutes,
            travel_buffer_minutes=coach.travel_buffer_minutes,
            confirmed_bookings=self._store.list_bookings(coach.id, status=BookingStatus.CONFIRMED),
            client_location_id=location_id,
        )

        logger.debug(
            "Calculating availability for %s at %s (%d bookings)",
            coach.slug, location_id, len(request.confirmed_bookings),
        )
        return self._slot_calculator.calculate_availability(request)

    # Locations

    def list_locations(self, coach_id: str) -> List[Location]:
        return self._store.list_locations(coach_id)

    def add_location(
        self,
        coach_id: str,
        *,
        name: str,
        address: str = "",
        notes: str = "",
    ) -> Location:
        location = Location(
            id="",
            name=_require_text(name, "Location name"),
            address=address.strip() or None,
            notes=notes.strip() or None,
        )
        return self._store.add_location(coach_id, location)

    def remove_location(self, coach_id: str, location_id: str) -> None:
        self._store.delete_location(coach_id, location_id)

    # Bookings

    def list_bookings(self, coach_id: str, status: Optional[BookingStatus] = None) -> List[Booking]:
        return self._store.list_bookings(coach_id, status=status)

    def create_booking(
        self,
        coach_id: str,
        *,
        location_id: str,
        day_of_week: DayOfWeek,
        start_time: str,
        client_name: str,
        client_phone: str = "",
        lesson_type: LessonType = LessonType.PRIVATE,
        group_size: int = 1,
        notes: str = "",
    ) -> Booking:
        """
        Create a confirmed weekly booking.

        The end time is the start time plus the coach's lesson duration.
        Private lessons always have a group size of one.
        """
        coach = self._store.get_coach(coach_id)
        location = self._store.get_location(coach_id, location_id)
        _require_time(start_time, "Start time")

        if lesson_type == LessonType.GROUP and group_size < 1:
            raise ValidationError("Group size must be at least 1")

        booking = Booking(
            id="",
            location_id=location.id,
            location_name=location.name,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=add_minutes(start_time, coach.lesson_duration_minutes),
            status=BookingStatus.CONFIRMED,
            client_name=_require_text(client_name, "Client name"),
            client_phone=client_phone.strip(),
            lesson_type=lesson_type,
            group_size=group_size if lesson_type == LessonType.GROUP else 1,
            notes=notes.strip(),
        )
        return self._store.add_booking(coach_id, booking)

    def cancel_booking(self, coach_id: str, booking_id: str) -> Booking:
        return self._store.set_booking_status(coach_id, booking_id, BookingStatus.CANCELLED)

    # Waitlist

    def list_waitlist(
        self,
        coach_id: str,
        status: Optional[WaitlistStatus] = None,
    ) -> List[WaitlistEntry]:
        return self._store.list_waitlist(coach_id, status=status)

    def join_waitlist(
        self,
        slug: str,
        *,
        location_id: str,
        day_of_week: DayOfWeek,
        client_name: str,
        client_phone: str,
        preferred_time: PreferredTime = PreferredTime.ANY,
        notes: str = "",
    ) -> WaitlistEntry:
        """Add a client to a coach's waitlist from the public page."""
        coach = self.resolve_coach(slug)
        location = self._store.get_location(coach.id, location_id)

        entry = WaitlistEntry(
            id="",
            location_id=location.id,
            location_name=location.name,
            day_of_week=day_of_week,
            preferred_time=preferred_time,
            client_name=_require_text(client_name, "Client name"),
            client_phone=_require_text(client_phone, "Client phone"),
            notes=notes.strip(),
            status=WaitlistStatus.WAITING,
        )
        return self._store.add_waitlist_entry(coach.id, entry)

    def update_waitlist_status(
        self,
        coach_id: str,
        entry_id: str,
        status: WaitlistStatus,
    ) -> WaitlistEntry:
        return self._store.set_waitlist_status(coach_id, entry_id, status)

    def remove_waitlist_entry(self, coach_id: str, entry_id: str) -> None:
        self._store.delete_waitlist_entry(coach_id, entry_id)
