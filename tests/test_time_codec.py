"""
Tests for HH:MM conversions.
"""

import pytest

from lessonfinder.domain.time_codec import (
    add_minutes,
    format_time_display,
    is_valid_time,
    minutes_to_time,
    time_to_minutes,
)


class TestConversions:
    """Tests for minutes <-> HH:MM conversion."""

    def test_time_to_minutes(self):
        """Test parsing wall-clock strings."""
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("23:59") == 1439

    def test_minutes_to_time_is_zero_padded(self):
        """Test formatting minute offsets."""
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(545) == "09:05"
        assert minutes_to_time(1439) == "23:59"

    def test_every_minute_of_the_day_converts_back(self):
        """Test that conversion is lossless over a whole day."""
        for minutes in range(0, 1440, 7):
            assert time_to_minutes(minutes_to_time(minutes)) == minutes

    def test_malformed_time_raises_value_error(self):
        """Test that garbage input surfaces as ValueError."""
        with pytest.raises(ValueError):
            time_to_minutes("nine:thirty")

    def test_add_minutes_wraps_past_midnight(self):
        """Test shifting a time across midnight."""
        assert add_minutes("14:00", 60) == "15:00"
        assert add_minutes("23:30", 60) == "00:30"


class TestValidation:
    """Tests for strict HH:MM validation."""

    @pytest.mark.parametrize("value", ["00:00", "09:05", "23:59"])
    def test_valid_times(self, value):
        assert is_valid_time(value)

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "12-30", "", "noon", " 09:00", "09:00:00"])
    def test_invalid_times(self, value):
        assert not is_valid_time(value)

    def test_trailing_newline_is_rejected(self):
        """Test that the whole string must match, including the end."""
        assert not is_valid_time("09:00\n")


class TestDisplayFormat:
    """Tests for 12-hour display formatting."""

    def test_morning_and_afternoon(self):
        """Test AM/PM suffixes."""
        assert format_time_display("09:00") == "9:00 AM"
        assert format_time_display("14:05") == "2:05 PM"

    def test_midnight_and_noon_render_as_twelve(self):
        """Test that hour 0 and hour 12 both display as 12."""
        assert format_time_display("00:30") == "12:30 AM"
        assert format_time_display("12:00") == "12:00 PM"
