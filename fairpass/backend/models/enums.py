"""String enumerations stored in the database as plain strings."""

from enum import StrEnum


class EventStatus(StrEnum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    FINISHED = "FINISHED"


class AdminRole(StrEnum):
    SUPER_ADMIN = "SUPER_ADMIN"
    EVENT_MANAGER = "EVENT_MANAGER"
    EVENT_STAFF = "EVENT_STAFF"
    USHER = "USHER"


class CheckInMethod(StrEnum):
    QR = "QR"
    MANUAL = "MANUAL"


class ParticipationStatus(StrEnum):
    INVITED = "INVITED"
    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"


class MessageChannel(StrEnum):
    EMAIL = "EMAIL"
    WHATSAPP = "WHATSAPP"


class MessageStatus(StrEnum):
    QUEUED = "QUEUED"
    SENT = "SENT"
    FAILED = "FAILED"


class PrincipalType(StrEnum):
    ADMIN = "ADMIN"
    UNIVERSITY = "UNIVERSITY"
