"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .coach_service import CoachService, CoachStoreProtocol, slugify

__all__ = ["CoachService", "CoachStoreProtocol", "slugify"]
