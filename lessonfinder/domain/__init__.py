"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
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
    TimeSlot,
    WaitlistEntry,
    WaitlistStatus,
    WorkingHours,
    default_week,
)
from .slot_calculator import SLOT_INCREMENT_MINUTES, SlotCalculator, calculate_availability

__all__ = [
    "AvailabilityRequest",
    "Booking",
    "BookingStatus",
    "CoachProfile",
    "DayAvailability",
    "DayOfWeek",
    "LessonType",
    "Location",
    "PreferredTime",
    "TimeSlot",
    "WaitlistEntry",
    "WaitlistStatus",
    "WorkingHours",
    "default_week",
    "DEFAULT_LESSON_DURATION_MINUTES",
    "DEFAULT_TRAVEL_BUFFER_MINUTES",
    "SLOT_INCREMENT_MINUTES",
    "SlotCalculator",
    "calculate_availability",
]
