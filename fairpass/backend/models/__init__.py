"""
Database models.

Every model module is imported here so string-based relationships resolve
no matter which model a caller imports first.
"""

from fairpass.backend.models.admin_user import AdminUser
from fairpass.backend.models.base import Base
from fairpass.backend.models.event import Event, EventSession
from fairpass.backend.models.geo import City, Country
from fairpass.backend.models.messaging import MessageLog, MessageTemplate
from fairpass.backend.models.registration import CheckIn, Registrant, Registration
from fairpass.backend.models.university import (
    EventParticipating,
    FavoriteStudent,
    University,
    UniversityUser,
)

__all__ = [
    "AdminUser",
    "Base",
    "CheckIn",
    "City",
    "Country",
    "Event",
    "EventParticipating",
    "EventSession",
    "FavoriteStudent",
    "MessageLog",
    "MessageTemplate",
    "Registrant",
    "Registration",
    "University",
    "UniversityUser",
]
