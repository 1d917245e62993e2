"""
Tests for domain models.
"""

import pytest

from lessonfinder.domain.models import (
    Booking,
    BookingStatus,
    DayOfWeek,
    TimeSlot,
    WorkingHours,
    default_week,
)


class TestDayOfWeek:
    """Tests for the DayOfWeek enumeration."""

    def test_canonical_order(self):
        """Test that iteration runs Monday to Sunday."""
        assert [day.tag for day in DayOfWeek] == [
            "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        ]
        assert DayOfWeek.MONDAY == 0
        assert DayOfWeek.SUNDAY == 6

    def test_parse_tags_indexes_and_members(self):
        """Test the accepted input forms."""
        assert DayOfWeek.parse("monday") is DayOfWeek.MONDAY
        assert DayOfWeek.parse(" Friday ") is DayOfWeek.FRIDAY
        assert DayOfWeek.parse(6) is DayOfWeek.SUNDAY
        assert DayOfWeek.parse(DayOfWeek.TUESDAY) is DayOfWeek.TUESDAY

    def test_parse_unknown_day_raises(self):
        """Test that unknown tags raise ValueError."""
        with pytest.raises(ValueError, match="Unknown day of week"):
            DayOfWeek.parse("funday")

    def test_display_name(self):
        assert DayOfWeek.WEDNESDAY.display_name == "Wednesday"


class TestWorkingHours:
    """Tests for WorkingHours model."""

    def test_window_minutes(self):
        """Test converting the window to minute offsets."""
        hours = WorkingHours(day=DayOfWeek.MONDAY, enabled=True, start_time="09:30", end_time="17:00")

        assert hours.window_minutes() == (570, 1020)


class TestBooking:
    """Tests for Booking model."""

    def test_defaults_to_confirmed_private_lesson(self):
        booking = Booking(
            id="b1", location_id="park", day_of_week=DayOfWeek.MONDAY,
            start_time="10:00", end_time="11:00",
        )

        assert booking.is_confirmed
        assert booking.group_size == 1

    def test_cancelled_booking_is_not_confirmed(self):
        booking = Booking(
            id="b1", location_id="park", day_of_week=DayOfWeek.MONDAY,
            start_time="10:00", end_time="11:00", status=BookingStatus.CANCELLED,
        )

        assert not booking.is_confirmed


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_format_display(self):
        """Test 12-hour rendering of a slot."""
        assert TimeSlot("11:30", "12:30").format_display() == "11:30 AM - 12:30 PM"

    def test_slots_compare_by_value(self):
        assert TimeSlot("09:00", "10:00") == TimeSlot("09:00", "10:00")


class TestDefaultWeek:
    """Tests for the default_week helper."""

    def test_full_week_with_given_working_days(self):
        week = default_week("08:00", "12:00", working_days=[5])

        assert [wh.day for wh in week] == list(DayOfWeek)
        assert [wh.enabled for wh in week] == [False] * 5 + [True, False]
        assert all(wh.start_time == "08:00" for wh in week)

    def test_defaults_to_weekdays_nine_to_five(self):
        week = default_week()

        assert [wh.enabled for wh in week] == [True] * 5 + [False] * 2
        assert (week[0].start_time, week[0].end_time) == ("09:00", "17:00")
