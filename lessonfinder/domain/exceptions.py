"""
Domain-specific exception hierarchy for the lessonfinder application.
"""


class LessonFinderError(Exception):
    """Base class for all application-level errors."""


class DataStoreError(LessonFinderError):
    """Raised when coach data cannot be read from or written to the store."""


class CoachNotFoundError(LessonFinderError):
    """Raised when a coach id or public slug does not resolve to a coach."""


class RecordNotFoundError(LessonFinderError):
    """Raised when a booking, location or waitlist entry does not exist."""


class LocationNotFoundError(RecordNotFoundError):
    """Raised when a location does not belong to the coach."""


class ValidationError(LessonFinderError):
    """Raised when user supplied values are rejected before being stored."""


class InvalidTimeError(ValidationError):
    """Raised when a wall-clock value is not a valid 24-hour HH:MM string."""


class SlugUnavailableError(ValidationError):
    """Raised when a public slug is too short or already taken."""
