"""
Core business logic for calculating bookable lesson slots.

This is the heart of the application - pure domain logic without any
external dependencies (no file access, no network, no I/O).
"""

from typing import List, Optional, Sequence

from .models import (
    AvailabilityRequest,
    Booking,
    DayAvailability,
    DayOfWeek,
    TimeSlot,
    WorkingHours,
)
from .time_codec import minutes_to_time, time_to_minutes

# Candidate start times are offered every 30 minutes regardless of the
# lesson duration, so slots longer than the increment overlap.
SLOT_INCREMENT_MINUTES = 30


class SlotCalculator:
    """
    Calculates weekly availability for a coach at one client location.

    Algorithm per day:
    1. Skip disabled days
    2. Sort the day's confirmed bookings by start time
    3. Walk the gaps before, between and after the bookings
    4. Shrink each gap by the travel buffer on every side that borders a
       booking at another location
    5. Generate fixed-length slots at 30-minute steps inside what remains

    The calculator holds no state between calls.
    """

    def calculate_availability(self, request: AvailabilityRequest) -> List[DayAvailability]:
        """
        Calculate availability for all seven days, Monday first.

        Args:
            request: Working hours, bookings and coach settings

        Returns:
            One DayAvailability per day of the week
        """
        hours_by_day: List[Optional[WorkingHours]] = [None] * len(DayOfWeek)
        for hours in request.working_hours:
            hours_by_day[hours.day] = hours

        availability: List[DayAvailability] = []

        for day in DayOfWeek:
            day_hours = hours_by_day[day]
            if day_hours is None:
                availability.append(DayAvailability(day_of_week=day))
                continue

            day_bookings = [
                booking for booking in request.confirmed_bookings
                if booking.day_of_week == day
            ]

            slots = self.calculate_day_availability(
                day_hours=day_hours,
                bookings=day_bookings,
                lesson_duration=request.lesson_duration_minutes,
                travel_buffer=request.travel_buffer_minutes,
                client_location_id=request.client_location_id,
            )
            availability.append(DayAvailability(day_of_week=day, slots=tuple(slots)))

        return availability

    def calculate_day_availability(
        self,
        day_hours: WorkingHours,
        bookings: Sequence[Booking],
        lesson_duration: int,
        travel_buffer: int,
        client_location_id: str,
    ) -> List[TimeSlot]:
        """
        Calculate the bookable slots of a single day.

        Example (buffer 30, booking 10:00-11:00 at another location):
        Working: 09:00 - 17:00
        Gaps:    [09:00-09:30], [11:30-17:00]
        """
        if not day_hours.enabled:
            return []

        work_start, work_end = day_hours.window_minutes()

        # Sort confirmed bookings by start time
        day_bookings = sorted(
            (booking for booking in bookings if booking.is_confirmed),
            key=lambda b: time_to_minutes(b.start_time),
        )

        if not day_bookings:
            # Entire working window is free
            return self.generate_slots(work_start, work_end, lesson_duration)

        all_slots: List[TimeSlot] = []

        # N bookings leave N + 1 gaps, including before the first and after the last
        for index in range(len(day_bookings) + 1):
            previous = day_bookings[index - 1] if index > 0 else None
            following = day_bookings[index] if index < len(day_bookings) else None

            gap_start = time_to_minutes(previous.end_time) if previous else work_start
            gap_end = time_to_minutes(following.start_time) if following else work_end

            buffer_before = 0
            buffer_after = 0

            if previous is not None and previous.location_id != client_location_id:
                buffer_before = travel_buffer
            if following is not None and following.location_id != client_location_id:
                buffer_after = travel_buffer

            usable_start = gap_start + buffer_before
            usable_end = gap_end - buffer_after

            if usable_end - usable_start >= lesson_duration:
                all_slots.extend(
                    self.generate_slots(usable_start, usable_end, lesson_duration)
                )

        return all_slots

    def generate_slots(
        self,
        window_start: int,
        window_end: int,
        lesson_duration: int,
    ) -> List[TimeSlot]:
        """
        Generate lesson slots inside [window_start, window_end).

        Starts are spaced SLOT_INCREMENT_MINUTES apart; every slot lasts
        exactly lesson_duration minutes and ends at or before window_end.
        """
        slots: List[TimeSlot] = []
        start = window_start

        while start + lesson_duration <= window_end:
            slots.append(
                TimeSlot(
                    start_time=minutes_to_time(start),
                    end_time=minutes_to_time(start + lesson_duration),
                )
            )
            start += SLOT_INCREMENT_MINUTES

        return slots


def calculate_availability(request: AvailabilityRequest) -> List[DayAvailability]:
    """Calculate weekly availability with a fresh SlotCalculator."""
    return SlotCalculator().calculate_availability(request)
