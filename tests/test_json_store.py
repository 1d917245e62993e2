"""
Tests for the JSON file record store.
"""

import json

import pytest

from lessonfinder.adapters.json_store import JsonCoachStore
from lessonfinder.domain.exceptions import (
    CoachNotFoundError,
    DataStoreError,
    LocationNotFoundError,
    RecordNotFoundError,
    SlugUnavailableError,
)
from lessonfinder.domain.models import (
    Booking,
    BookingStatus,
    CoachProfile,
    DayOfWeek,
    Location,
    WaitlistEntry,
    WaitlistStatus,
    WorkingHours,
)


class TestLoading:
    """Tests for reading the data file."""

    def test_missing_file_starts_empty(self, tmp_path):
        """Test that a missing file is not an error until used."""
        store = JsonCoachStore(tmp_path / "missing.json")

        assert store.get_coach_id_by_slug("anyone") is None

    def test_invalid_json_raises_data_store_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DataStoreError, match="Could not read"):
            JsonCoachStore(path)

    def test_non_object_root_raises_data_store_error(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(DataStoreError, match="JSON object"):
            JsonCoachStore(path)

    def test_unknown_coach_raises(self, store):
        with pytest.raises(CoachNotFoundError):
            store.get_coach("nobody")


class TestReads:
    """Tests for converting stored records to domain objects."""

    def test_get_coach(self, store):
        coach = store.get_coach(store.get_coach_id_by_slug("anna-tennis"))

        assert coach.id == "c1"
        assert coach.display_name == "Anna"
        assert coach.lesson_duration_minutes == 60
        assert coach.travel_buffer_minutes == 30

    def test_working_hours_sorted_by_day(self, store):
        hours = store.get_working_hours("c1")

        assert [wh.day for wh in hours] == [DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.SATURDAY]
        assert hours[2].enabled is False

    def test_locations_newest_first(self, store):
        assert [loc.id for loc in store.list_locations("c1")] == ["club", "park"]

    def test_bookings_filtered_by_status(self, store):
        confirmed = store.list_bookings("c1", status=BookingStatus.CONFIRMED)
        everything = store.list_bookings("c1")

        assert [b.id for b in confirmed] == ["b1"]
        assert [b.id for b in everything] == ["b2", "b1"]
        assert everything[0].cancelled_at is not None

    def test_invalid_records_are_skipped(self, data_file):
        """Test that a record with an unknown day is skipped, not fatal."""
        data = json.loads(data_file.read_text(encoding="utf-8"))
        data["coaches"]["c1"]["bookings"][0]["dayOfWeek"] = "funday"
        data_file.write_text(json.dumps(data), encoding="utf-8")

        bookings = JsonCoachStore(data_file).list_bookings("c1")

        assert [b.id for b in bookings] == ["b2"]

    def test_get_location_for_unknown_id(self, store):
        with pytest.raises(LocationNotFoundError):
            store.get_location("c1", "beach")


class TestWrites:
    """Tests for writes and their persistence."""

    def test_add_booking_assigns_id_and_persists(self, store, data_file):
        booking = Booking(
            id="", location_id="park", location_name="City Park",
            day_of_week=DayOfWeek.TUESDAY, start_time="15:00", end_time="16:00",
            client_name="Ben",
        )

        stored = store.add_booking("c1", booking)

        assert stored.id
        assert stored.created_at is not None
        reloaded = JsonCoachStore(data_file).list_bookings("c1")
        assert stored.id in {b.id for b in reloaded}

    def test_cancel_booking_stamps_cancelled_at(self, store):
        cancelled = store.set_booking_status("c1", "b1", BookingStatus.CANCELLED)

        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.cancelled_at is not None
        assert store.list_bookings("c1", status=BookingStatus.CONFIRMED) == []

    def test_unknown_booking_raises(self, store):
        with pytest.raises(RecordNotFoundError):
            store.set_booking_status("c1", "nope", BookingStatus.CANCELLED)

    def test_waitlist_status_stamps(self, store):
        contacted = store.set_waitlist_status("c1", "w1", WaitlistStatus.CONTACTED)
        booked = store.set_waitlist_status("c1", "w1", WaitlistStatus.BOOKED)

        assert contacted.contacted_at is not None
        assert booked.status == WaitlistStatus.BOOKED
        assert booked.booked_at is not None

    def test_add_and_delete_waitlist_entry(self, store):
        entry = store.add_waitlist_entry(
            "c1",
            WaitlistEntry(
                id="", location_id="park", day_of_week=DayOfWeek.FRIDAY,
                client_name="Ida", client_phone="0170 555",
            ),
        )
        assert entry.id in {e.id for e in store.list_waitlist("c1")}

        store.delete_waitlist_entry("c1", entry.id)

        assert entry.id not in {e.id for e in store.list_waitlist("c1")}

    def test_add_and_delete_location(self, store):
        location = store.add_location("c1", Location(id="", name="Beach"))

        assert store.get_location("c1", location.id).name == "Beach"

        store.delete_location("c1", location.id)

        with pytest.raises(LocationNotFoundError):
            store.delete_location("c1", location.id)

    def test_save_working_hours_replaces_only_given_days(self, store):
        store.save_working_hours(
            "c1",
            [WorkingHours(day=DayOfWeek.MONDAY, enabled=False, start_time="09:00", end_time="17:00")],
        )

        hours = {wh.day: wh for wh in store.get_working_hours("c1")}

        assert hours[DayOfWeek.MONDAY].enabled is False
        assert hours[DayOfWeek.TUESDAY].start_time == "15:00"

    def test_update_coach_settings(self, store):
        coach = store.update_coach_settings("c1", travel_buffer_minutes=45)

        assert coach.travel_buffer_minutes == 45
        assert coach.lesson_duration_minutes == 60

    def test_create_coach_claims_slug(self, tmp_path):
        store = JsonCoachStore(tmp_path / "new.json")
        profile = CoachProfile(id="", display_name="Ben", slug="ben-golf")

        created = store.create_coach(profile, [])

        assert store.get_coach_id_by_slug("ben-golf") == created.id
        assert (tmp_path / "new.json").exists()
        with pytest.raises(SlugUnavailableError):
            store.create_coach(profile, [])


class TestFailedWrites:
    """Tests that a failed save leaves the store unchanged."""

    @pytest.fixture
    def failing_save(self, store, monkeypatch):
        def _save():
            raise DataStoreError("disk full")

        monkeypatch.setattr(store, "_save", _save)
        return store

    def test_status_change_is_rolled_back(self, failing_save, data_file):
        with pytest.raises(DataStoreError, match="disk full"):
            failing_save.set_booking_status("c1", "b1", BookingStatus.CANCELLED)

        assert [b.id for b in failing_save.list_bookings("c1", status=BookingStatus.CONFIRMED)] == ["b1"]
        on_disk = JsonCoachStore(data_file).list_bookings("c1", status=BookingStatus.CONFIRMED)
        assert [b.id for b in on_disk] == ["b1"]

    def test_added_booking_is_rolled_back(self, failing_save):
        booking = Booking(
            id="", location_id="park", day_of_week=DayOfWeek.TUESDAY,
            start_time="15:00", end_time="16:00", client_name="Ben",
        )

        with pytest.raises(DataStoreError):
            failing_save.add_booking("c1", booking)

        assert {b.id for b in failing_save.list_bookings("c1")} == {"b1", "b2"}

    def test_new_coach_does_not_claim_slug(self, failing_save):
        with pytest.raises(DataStoreError):
            failing_save.create_coach(CoachProfile(id="", display_name="Ben", slug="ben-golf"), [])

        assert failing_save.get_coach_id_by_slug("ben-golf") is None
        assert not failing_save.slug_exists("ben-golf")

    def test_settings_change_is_rolled_back(self, failing_save):
        with pytest.raises(DataStoreError):
            failing_save.update_coach_settings("c1", travel_buffer_minutes=45)

        assert failing_save.get_coach("c1").travel_buffer_minutes == 30


class TestAtomicSave:
    """Tests for writing the data file through a temporary file."""

    def test_no_temporary_files_left_behind(self, store, data_file):
        store.set_booking_status("c1", "b1", BookingStatus.CANCELLED)

        assert [p.name for p in data_file.parent.iterdir()] == [data_file.name]

    def test_unwritable_file_keeps_old_content(self, store, data_file, monkeypatch):
        """Test that a failed replace leaves the previous file and no leftovers."""
        before = data_file.read_text(encoding="utf-8")

        def _replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr("lessonfinder.adapters.json_store.os.replace", _replace)

        with pytest.raises(DataStoreError, match="Could not write"):
            store.set_booking_status("c1", "b1", BookingStatus.CANCELLED)

        assert data_file.read_text(encoding="utf-8") == before
        assert [p.name for p in data_file.parent.iterdir()] == [data_file.name]
        assert store.list_bookings("c1", status=BookingStatus.CONFIRMED)[0].id == "b1"


class TestDefaults:
    """Tests for settings missing from stored records."""

    def test_missing_settings_fall_back_to_defaults(self, data_file):
        data = json.loads(data_file.read_text(encoding="utf-8"))
        del data["coaches"]["c1"]["lessonDurationMinutes"]
        del data["coaches"]["c1"]["travelBufferMinutes"]
        data_file.write_text(json.dumps(data), encoding="utf-8")

        coach = JsonCoachStore(data_file).get_coach("c1")

        assert coach.lesson_duration_minutes == 60
        assert coach.travel_buffer_minutes == 30
