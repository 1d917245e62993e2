"""
Adapters layer - Persistence of coach records.
"""

from .json_store import JsonCoachStore

__all__ = ["JsonCoachStore"]
