from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored in the Flask session by the login service."""

    ORGANIZER = "organizer"
    WORKER = "worker"


class SessionStatus(str, Enum):
    """Lifecycle of a work session row."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class ApplicationStatus(str, Enum):
    """Status of a worker's application to a job. Only ACCEPTED grants clock-in rights."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class TokenHorizon(str, Enum):
    """How far a freshly issued work token stays valid."""

    FIXED_DURATION = "fixed"
    EVENT_END = "event_end"
