"""
Domain models for weekly availability calculations.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple

from pendulum import DateTime

from .time_codec import format_time_display, time_to_minutes

# Settings given to a newly registered coach
DEFAULT_LESSON_DURATION_MINUTES = 60
DEFAULT_TRAVEL_BUFFER_MINUTES = 30


class DayOfWeek(IntEnum):
    """
    Day of the week, ordered Monday (0) to Sunday (6).

    The ordering drives canonical iteration and index-based lookups.
    Stored records use the lower-case English name as tag ("monday").
    """
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: "str | int | DayOfWeek") -> "DayOfWeek":
        """Accept a day tag ("monday"), a 0-6 index or a DayOfWeek."""
        if isinstance(value, DayOfWeek):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown day of week: {value!r}") from None

    @property
    def tag(self) -> str:
        """Lower-case tag used in stored records."""
        return self.name.lower()

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class LessonType(str, Enum):
    PRIVATE = "private"
    GROUP = "group"


class WaitlistStatus(str, Enum):
    WAITING = "waiting"
    CONTACTED = "contacted"
    BOOKED = "booked"


class PreferredTime(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANY = "any"


@dataclass(frozen=True)
class WorkingHours:
    """
    Recurring working window for one day of the week.

    Invariant when enabled: start_time < end_time.
    """
    day: DayOfWeek
    enabled: bool
    start_time: str  # "HH:MM" (24h)
    end_time: str

    def window_minutes(self) -> Tuple[int, int]:
        """Return the working window as (start, end) minutes from midnight."""
        return time_to_minutes(self.start_time), time_to_minutes(self.end_time)


@dataclass(frozen=True)
class Booking:
    """
    A recurring weekly lesson at a location.

    Only location_id, day_of_week, start_time, end_time and status are read
    by the availability engine; the rest is bookkeeping for the coach.
    """
    id: str
    location_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    status: BookingStatus = BookingStatus.CONFIRMED
    location_name: str = ""
    client_name: str = ""
    client_phone: str = ""
    lesson_type: LessonType = LessonType.PRIVATE
    group_size: int = 1
    notes: str = ""
    created_at: Optional[DateTime] = None
    cancelled_at: Optional[DateTime] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED


@dataclass(frozen=True)
class TimeSlot:
    """A bookable interval of exactly one lesson."""
    start_time: str
    end_time: str

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: 9:00 AM - 10:00 AM
        """
        return f"{format_time_display(self.start_time)} - {format_time_display(self.end_time)}"


@dataclass(frozen=True)
class DayAvailability:
    """Bookable slots for one day of the week."""
    day_of_week: DayOfWeek
    slots: Tuple[TimeSlot, ...] = ()


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[DateTime] = None


@dataclass(frozen=True)
class WaitlistEntry:
    """A client waiting for an opening at a location on a given day."""
    id: str
    location_id: str
    day_of_week: DayOfWeek
    client_name: str
    client_phone: str
    location_name: str = ""
    preferred_time: PreferredTime = PreferredTime.ANY
    notes: str = ""
    status: WaitlistStatus = WaitlistStatus.WAITING
    created_at: Optional[DateTime] = None
    contacted_at: Optional[DateTime] = None
    booked_at: Optional[DateTime] = None


@dataclass(frozen=True)
class CoachProfile:
    """Provider settings that parameterise the availability engine."""
    id: str
    display_name: str
    slug: str
    lesson_duration_minutes: int = DEFAULT_LESSON_DURATION_MINUTES
    travel_buffer_minutes: int = DEFAULT_TRAVEL_BUFFER_MINUTES
    service_type: str = ""
    whatsapp_number: str = ""
    email: str = ""


@dataclass(frozen=True)
class AvailabilityRequest:
    """
    Input bundle for one availability computation.

    working_hours holds at most one record per day; days without a record
    have no availability.
    """
    working_hours: List[WorkingHours]
    lesson_duration_minutes: int
    travel_buffer_minutes: int
    client_location_id: str
    confirmed_bookings: List[Booking] = field(default_factory=list)


def default_week(
    start_time: str = "09:00",
    end_time: str = "17:00",
    working_days: Sequence[int] = (0, 1, 2, 3, 4),
) -> List[WorkingHours]:
    """Build a full week of working hours, enabled on ``working_days``."""
    return [
        WorkingHours(
            day=day,
            enabled=int(day) in working_days,
            start_time=start_time,
            end_time=end_time,
        )
        for day in DayOfWeek
    ]
