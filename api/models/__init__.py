"""
API data models. Single import surface for DB entities.

DB entities (api.models.models):
- User, ProgressLedger

Class sessions (api.models.class_session):
- ClassSession
"""

from api.models.models import User, ProgressLedger
from api.models.class_session import ClassSession

__all__ = [
    "User",
    "ProgressLedger",
    "ClassSession",
]
