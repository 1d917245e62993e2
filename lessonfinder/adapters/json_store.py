"""
File-backed record store for coach profiles, locations, bookings and waitlists.

The whole document lives in one JSON file and is rewritten on every change.
Record keys keep the camelCase field names used by the hosted data store,
so exports from it can be dropped in as-is:

    {
      "coachSlugs": {"anna-tennis": "c1"},
      "coaches": {
        "c1": {
          "displayName": "Anna", "slug": "anna-tennis",
          "lessonDurationMinutes": 60, "travelBufferMinutes": 30,
          "workingHours": {"monday": {"enabled": true, "startTime": "09:00", "endTime": "17:00"}},
          "locations": [...], "bookings": [...], "waitlist": [...]
        }
      }
    }
"""

from __future__ import annotations

import copy
import dataclasses
import json
import logging
import os
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, TypeVar

import pendulum
from pendulum import DateTime

from ..domain.exceptions import (
    CoachNotFoundError,
    DataStoreError,
    LocationNotFoundError,
    RecordNotFoundError,
    SlugUnavailableError,
)
from ..domain.models import (
    DEFAULT_LESSON_DURATION_MINUTES,
    DEFAULT_TRAVEL_BUFFER_MINUTES,
    Booking,
    BookingStatus,
    CoachProfile,
    DayOfWeek,
    LessonType,
    Location,
    PreferredTime,
    WaitlistEntry,
    WaitlistStatus,
    WorkingHours,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EPOCH = pendulum.datetime(1970, 1, 1)


def _new_id() -> str:
    return uuid.uuid4().hex


def _dump_datetime(value: Optional[DateTime]) -> Optional[str]:
    return value.to_iso8601_string() if value is not None else None


def _load_datetime(value: Optional[str]) -> Optional[DateTime]:
    return pendulum.parse(value) if value else None


def _booking_from_record(record: Dict[str, Any]) -> Booking:
    return Booking(
        id=record["id"],
        location_id=record["locationId"],
        location_name=record.get("locationName", ""),
        day_of_week=DayOfWeek.parse(record["dayOfWeek"]),
        start_time=record["startTime"],
        end_time=record["endTime"],
        status=BookingStatus(record.get("status", BookingStatus.CONFIRMED.value)),
        client_name=record.get("clientName", ""),
        client_phone=record.get("clientPhone", ""),
        lesson_type=LessonType(record.get("lessonType", LessonType.PRIVATE.value)),
        group_size=record.get("groupSize", 1),
        notes=record.get("notes", ""),
        created_at=_load_datetime(record.get("createdAt")),
        cancelled_at=_load_datetime(record.get("cancelledAt")),
    )


def _booking_to_record(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "locationId": booking.location_id,
        "locationName": booking.location_name,
        "dayOfWeek": booking.day_of_week.tag,
        "startTime": booking.start_time,
        "endTime": booking.end_time,
        "status": booking.status.value,
        "clientName": booking.client_name,
        "clientPhone": booking.client_phone,
        "lessonType": booking.lesson_type.value,
        "groupSize": booking.group_size,
        "notes": booking.notes,
        "createdAt": _dump_datetime(booking.created_at),
        "cancelledAt": _dump_datetime(booking.cancelled_at),
    }


def _location_from_record(record: Dict[str, Any]) -> Location:
    return Location(
        id=record["id"],
        name=record["name"],
        address=record.get("address"),
        notes=record.get("notes"),
        created_at=_load_datetime(record.get("createdAt")),
    )


def _location_to_record(location: Location) -> Dict[str, Any]:
    return {
        "id": location.id,
        "name": location.name,
        "address": location.address,
        "notes": location.notes,
        "createdAt": _dump_datetime(location.created_at),
    }


def _waitlist_from_record(record: Dict[str, Any]) -> WaitlistEntry:
    return WaitlistEntry(
        id=record["id"],
        location_id=record["locationId"],
        location_name=record.get("locationName", ""),
        day_of_week=DayOfWeek.parse(record["dayOfWeek"]),
        preferred_time=PreferredTime(record.get("preferredTime", PreferredTime.ANY.value)),
        client_name=record.get("clientName", ""),
        client_phone=record.get("clientPhone", ""),
        notes=record.get("notes", ""),
        status=WaitlistStatus(record.get("status", WaitlistStatus.WAITING.value)),
        created_at=_load_datetime(record.get("createdAt")),
        contacted_at=_load_datetime(record.get("contactedAt")),
        booked_at=_load_datetime(record.get("bookedAt")),
    )


def _waitlist_to_record(entry: WaitlistEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "locationId": entry.location_id,
        "locationName": entry.location_name,
        "dayOfWeek": entry.day_of_week.tag,
        "preferredTime": entry.preferred_time.value,
        "clientName": entry.client_name,
        "clientPhone": entry.client_phone,
        "notes": entry.notes,
        "status": entry.status.value,
        "createdAt": _dump_datetime(entry.created_at),
        "contactedAt": _dump_datetime(entry.contacted_at),
        "bookedAt": _dump_datetime(entry.booked_at),
    }


class JsonCoachStore:
    """
    Record store keyed by coach, persisted to a single JSON file.

    Reads return immutable domain objects; writes stamp server-side
    timestamps (created/cancelled/contacted/booked) and persist immediately.
    """

    def __init__(self, data_file: Path):
        """
        Initialize the store.

        Args:
            data_file: Path to the JSON document. A missing file starts an
                empty store and is created on the first write.
        """
        self.data_file = Path(data_file)
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load the JSON document from disk."""
        if not self.data_file.exists():
            logger.info("Data file %s does not exist yet, starting empty", self.data_file)
            return {"coachSlugs": {}, "coaches": {}}

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise DataStoreError(f"Could not read data file {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataStoreError(f"Data file {self.data_file} must contain a JSON object.")

        data.setdefault("coachSlugs", {})
        data.setdefault("coaches", {})
        return data

    def _save(self) -> None:
        """
        Write the whole document back to disk.

        The document is written to a temporary file next to the data file
        and moved into place, so an interrupted write leaves the old file.
        """
        tmp_path: Optional[str] = None
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_file.parent,
                prefix=f".{self.data_file.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.data_file)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise DataStoreError(f"Could not write data file {self.data_file}: {exc}") from exc

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """
        Apply changes to the document and persist them as one unit.

        If the block or the save fails, the in-memory document is rolled
        back, so a failed write is never persisted by a later one.
        """
        snapshot = copy.deepcopy(self._data)
        try:
            yield
            self._save()
        except Exception:
            self._data = snapshot
            raise

    def _coach_document(self, coach_id: str) -> Dict[str, Any]:
        coach = self._data["coaches"].get(coach_id)
        if coach is None:
            raise CoachNotFoundError(f"Coach not found: {coach_id}")
        return coach

    def _read_records(
        self,
        records: Sequence[Dict[str, Any]],
        converter: Callable[[Dict[str, Any]], T],
        kind: str,
    ) -> List[T]:
        """Convert stored records, skipping the ones that cannot be parsed."""
        items: List[T] = []
        for record in records:
            try:
                items.append(converter(record))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid %s record %s: %s", kind, record.get("id"), exc)
        return items

    @staticmethod
    def _find_record(records: List[Dict[str, Any]], record_id: str, kind: str) -> Dict[str, Any]:
        for record in records:
            if record.get("id") == record_id:
                return record
        raise RecordNotFoundError(f"{kind.capitalize()} not found: {record_id}")

    # Coaches

    def slug_exists(self, slug: str) -> bool:
        return slug in self._data["coachSlugs"]

    def get_coach_id_by_slug(self, slug: str) -> Optional[str]:
        """Resolve a public slug to a coach id, or None when unknown."""
        return self._data["coachSlugs"].get(slug)

    def get_coach(self, coach_id: str) -> CoachProfile:
        coach = self._coach_document(coach_id)
        return CoachProfile(
            id=coach_id,
            display_name=coach.get("displayName", ""),
            slug=coach.get("slug", ""),
            lesson_duration_minutes=coach.get("lessonDurationMinutes", DEFAULT_LESSON_DURATION_MINUTES),
            travel_buffer_minutes=coach.get("travelBufferMinutes", DEFAULT_TRAVEL_BUFFER_MINUTES),
            service_type=coach.get("serviceType", ""),
            whatsapp_number=coach.get("whatsappNumber", ""),
            email=coach.get("email", ""),
        )

    def create_coach(
        self,
        profile: CoachProfile,
        working_hours: Sequence[WorkingHours],
    ) -> CoachProfile:
        """
        Create a coach document and claim its slug.

        Raises:
            SlugUnavailableError: If the slug is already claimed
        """
        if self.slug_exists(profile.slug):
            raise SlugUnavailableError(f"Slug already taken: {profile.slug}")

        coach_id = profile.id or _new_id()
        now = _dump_datetime(pendulum.now("UTC"))

        with self._transaction():
            self._data["coaches"][coach_id] = {
                "displayName": profile.display_name,
                "slug": profile.slug,
                "email": profile.email,
                "serviceType": profile.service_type,
                "whatsappNumber": profile.whatsapp_number,
                "lessonDurationMinutes": profile.lesson_duration_minutes,
                "travelBufferMinutes": profile.travel_buffer_minutes,
                "createdAt": now,
                "updatedAt": now,
                "workingHours": {},
                "locations": [],
                "bookings": [],
                "waitlist": [],
            }
            self._data["coachSlugs"][profile.slug] = coach_id
            self._write_working_hours(coach_id, working_hours)

        logger.info("Created coach %s with slug %s", coach_id, profile.slug)
        return self.get_coach(coach_id)

    def update_coach_settings(
        self,
        coach_id: str,
        *,
        lesson_duration_minutes: Optional[int] = None,
        travel_buffer_minutes: Optional[int] = None,
        whatsapp_number: Optional[str] = None,
    ) -> CoachProfile:
        """Update the coach's scheduling settings; None leaves a value unchanged."""
        with self._transaction():
            coach = self._coach_document(coach_id)
            if lesson_duration_minutes is not None:
                coach["lessonDurationMinutes"] = lesson_duration_minutes
            if travel_buffer_minutes is not None:
                coach["travelBufferMinutes"] = travel_buffer_minutes
            if whatsapp_number is not None:
                coach["whatsappNumber"] = whatsapp_number
            coach["updatedAt"] = _dump_datetime(pendulum.now("UTC"))

        return self.get_coach(coach_id)

    # Working hours

    def get_working_hours(self, coach_id: str) -> List[WorkingHours]:
        """Return the stored working hours, Monday first."""
        coach = self._coach_document(coach_id)
        hours: List[WorkingHours] = []

        for tag, record in coach.get("workingHours", {}).items():
            try:
                hours.append(
                    WorkingHours(
                        day=DayOfWeek.parse(tag),
                        enabled=bool(record.get("enabled", False)),
                        start_time=record["startTime"],
                        end_time=record["endTime"],
                    )
                )
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid working hours for %s: %s", tag, exc)

        return sorted(hours, key=lambda wh: wh.day)

    def save_working_hours(self, coach_id: str, working_hours: Sequence[WorkingHours]) -> None:
        """Replace the records of the given days; other days stay untouched."""
        with self._transaction():
            self._write_working_hours(coach_id, working_hours)

    def _write_working_hours(self, coach_id: str, working_hours: Sequence[WorkingHours]) -> None:
        stored = self._coach_document(coach_id).setdefault("workingHours", {})
        for hours in working_hours:
            stored[hours.day.tag] = {
                "enabled": hours.enabled,
                "startTime": hours.start_time,
                "endTime": hours.end_time,
            }

    # Locations

    def list_locations(self, coach_id: str) -> List[Location]:
        """Return the coach's locations, newest first."""
        records = self._coach_document(coach_id).get("locations", [])
        locations = self._read_records(records, _location_from_record, "location")
        return sorted(locations, key=lambda loc: loc.created_at or _EPOCH, reverse=True)

    def get_location(self, coach_id: str, location_id: str) -> Location:
        for location in self.list_locations(coach_id):
            if location.id == location_id:
                return location
        raise LocationNotFoundError(f"Location not found: {location_id}")

    def add_location(self, coach_id: str, location: Location) -> Location:
        stored = dataclasses.replace(
            location,
            id=location.id or _new_id(),
            created_at=pendulum.now("UTC"),
        )
        with self._transaction():
            self._coach_document(coach_id).setdefault("locations", []).append(
                _location_to_record(stored)
            )
        logger.info("Added location %s for coach %s", stored.id, coach_id)
        return stored

    def delete_location(self, coach_id: str, location_id: str) -> None:
        with self._transaction():
            records = self._coach_document(coach_id).get("locations", [])
            try:
                record = self._find_record(records, location_id, "location")
            except RecordNotFoundError:
                raise LocationNotFoundError(f"Location not found: {location_id}") from None
            records.remove(record)
        logger.info("Deleted location %s for coach %s", location_id, coach_id)

    # Bookings

    def list_bookings(self, coach_id: str, status: Optional[BookingStatus] = None) -> List[Booking]:
        """Return bookings, optionally filtered by status, newest first."""
        records = self._coach_document(coach_id).get("bookings", [])
        bookings = self._read_records(records, _booking_from_record, "booking")
        if status is not None:
            bookings = [booking for booking in bookings if booking.status == status]
        return sorted(bookings, key=lambda b: b.created_at or _EPOCH, reverse=True)

    def add_booking(self, coach_id: str, booking: Booking) -> Booking:
        stored = dataclasses.replace(
            booking,
            id=booking.id or _new_id(),
            created_at=pendulum.now("UTC"),
        )
        with self._transaction():
            self._coach_document(coach_id).setdefault("bookings", []).append(
                _booking_to_record(stored)
            )
        logger.info(
            "Added booking %s for coach %s on %s %s-%s",
            stored.id, coach_id, stored.day_of_week.tag, stored.start_time, stored.end_time,
        )
        return stored

    def set_booking_status(self, coach_id: str, booking_id: str, status: BookingStatus) -> Booking:
        """Change a booking's status, stamping cancelledAt on cancellation."""
        with self._transaction():
            records = self._coach_document(coach_id).get("bookings", [])
            record = self._find_record(records, booking_id, "booking")
            record["status"] = status.value
            if status == BookingStatus.CANCELLED:
                record["cancelledAt"] = _dump_datetime(pendulum.now("UTC"))

        logger.info("Booking %s of coach %s is now %s", booking_id, coach_id, status.value)
        return _booking_from_record(record)

    # Waitlist

    def list_waitlist(
        self,
        coach_id: str,
        status: Optional[WaitlistStatus] = None,
    ) -> List[WaitlistEntry]:
        """Return waitlist entries, optionally filtered by status, newest first."""
        records = self._coach_document(coach_id).get("waitlist", [])
        entries = self._read_records(records, _waitlist_from_record, "waitlist")
        if status is not None:
            entries = [entry for entry in entries if entry.status == status]
        return sorted(entries, key=lambda e: e.created_at or _EPOCH, reverse=True)

    def add_waitlist_entry(self, coach_id: str, entry: WaitlistEntry) -> WaitlistEntry:
        stored = dataclasses.replace(
            entry,
            id=entry.id or _new_id(),
            created_at=pendulum.now("UTC"),
        )
        with self._transaction():
            self._coach_document(coach_id).setdefault("waitlist", []).append(
                _waitlist_to_record(stored)
            )
        logger.info("Added waitlist entry %s for coach %s", stored.id, coach_id)
        return stored

    def set_waitlist_status(
        self,
        coach_id: str,
        entry_id: str,
        status: WaitlistStatus,
    ) -> WaitlistEntry:
        """Change a waitlist entry's status, stamping contactedAt / bookedAt."""
        with self._transaction():
            records = self._coach_document(coach_id).get("waitlist", [])
            record = self._find_record(records, entry_id, "waitlist entry")
            record["status"] = status.value
            now = _dump_datetime(pendulum.now("UTC"))
            if status == WaitlistStatus.CONTACTED:
                record["contactedAt"] = now
            elif status == WaitlistStatus.BOOKED:
                record["bookedAt"] = now

        logger.info("Waitlist entry %s of coach %s is now %s", entry_id, coach_id, status.value)
        return _waitlist_from_record(record)

    def delete_waitlist_entry(self, coach_id: str, entry_id: str) -> None:
        with self._transaction():
            records = self._coach_document(coach_id).get("waitlist", [])
            record = self._find_record(records, entry_id, "waitlist entry")
            records.remove(record)
        logger.info("Deleted waitlist entry %s for coach %s", entry_id, coach_id)
