"""
Shared fixtures: a small coach data file on disk.
"""

import json
from pathlib import Path

import pytest

from lessonfinder.adapters.json_store import JsonCoachStore
from lessonfinder.services.coach_service import CoachService


SAMPLE_DATA = {
    "coachSlugs": {"anna-tennis": "c1"},
    "coaches": {
        "c1": {
            "displayName": "Anna",
            "slug": "anna-tennis",
            "email": "anna@example.com",
            "serviceType": "Tennis",
            "whatsappNumber": "+49 170 1234567",
            "lessonDurationMinutes": 60,
            "travelBufferMinutes": 30,
            "workingHours": {
                "monday": {"enabled": True, "startTime": "09:00", "endTime": "17:00"},
                "tuesday": {"enabled": True, "startTime": "15:00", "endTime": "18:00"},
                "saturday": {"enabled": False, "startTime": "09:00", "endTime": "17:00"},
            },
            "locations": [
                {"id": "park", "name": "City Park", "address": "Parkweg 1", "notes": None,
                 "createdAt": "2024-01-01T10:00:00+00:00"},
                {"id": "club", "name": "Tennis Club", "address": None, "notes": "Court 3",
                 "createdAt": "2024-02-01T10:00:00+00:00"},
            ],
            "bookings": [
                {"id": "b1", "locationId": "club", "locationName": "Tennis Club",
                 "dayOfWeek": "monday", "startTime": "10:00", "endTime": "11:00",
                 "status": "confirmed", "clientName": "Max", "clientPhone": "0170 111",
                 "lessonType": "private", "groupSize": 1, "notes": "",
                 "createdAt": "2024-03-01T10:00:00+00:00"},
                {"id": "b2", "locationId": "park", "locationName": "City Park",
                 "dayOfWeek": "monday", "startTime": "13:00", "endTime": "14:00",
                 "status": "cancelled", "clientName": "Eva", "clientPhone": "0170 222",
                 "lessonType": "group", "groupSize": 3, "notes": "",
                 "createdAt": "2024-03-02T10:00:00+00:00",
                 "cancelledAt": "2024-03-05T10:00:00+00:00"},
            ],
            "waitlist": [
                {"id": "w1", "locationId": "park", "locationName": "City Park",
                 "dayOfWeek": "tuesday", "preferredTime": "afternoon",
                 "clientName": "Tom", "clientPhone": "0170 333", "notes": "",
                 "status": "waiting", "createdAt": "2024-04-01T10:00:00+00:00"},
                {"id": "w2", "locationId": "club", "locationName": "Tennis Club",
                 "dayOfWeek": "monday", "preferredTime": "any",
                 "clientName": "Lea", "clientPhone": "0170 444", "notes": "",
                 "status": "contacted", "createdAt": "2024-04-02T10:00:00+00:00",
                 "contactedAt": "2024-04-03T10:00:00+00:00"},
            ],
        }
    },
}


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "coach_data.json"
    path.write_text(json.dumps(SAMPLE_DATA), encoding="utf-8")
    return path


@pytest.fixture
def store(data_file: Path) -> JsonCoachStore:
    return JsonCoachStore(data_file)


@pytest.fixture
def service(store: JsonCoachStore) -> CoachService:
    return CoachService(store=store)
