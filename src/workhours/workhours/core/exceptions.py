from __future__ import annotations

from enum import Enum
from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class EventNotFoundError(DomainError):
    """Raised when an event id does not resolve to an event."""

    def __init__(self, event_id: int) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class ScheduleNotFoundError(DomainError):
    def __init__(self, event_id: int) -> None:
        super().__init__(f"No work schedule for event {event_id}")
        self.event_id = event_id


class ErrorKind(str, Enum):
    """Stable tags returned to callers of the tracking engine."""

    TOKEN_MALFORMED = "TokenMalformed"
    TOKEN_EXPIRED = "TokenExpired"
    NOT_ASSIGNED = "NotAssigned"
    SESSION_ALREADY_ACTIVE = "SessionAlreadyActive"
    NO_ACTIVE_SESSION = "NoActiveSession"
    INVALID_INTERVAL = "InvalidInterval"
    AMBIGUOUS_JOB_SELECTION = "AmbiguousJobSelection"


class WorkHoursError(DomainError):
    """Base for tracking-engine failures; every subclass carries a fixed ``kind``."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class TokenMalformedError(WorkHoursError):
    kind = ErrorKind.TOKEN_MALFORMED

    def __init__(self, message: str = "Invalid work-hours QR code") -> None:
        super().__init__(message)


class TokenExpiredError(WorkHoursError):
    kind = ErrorKind.TOKEN_EXPIRED

    def __init__(self, message: str = "Work-hours QR code has expired") -> None:
        super().__init__(message)


class NotAssignedError(WorkHoursError):
    kind = ErrorKind.NOT_ASSIGNED

    def __init__(self, *, event_id: int, worker_id: int, job_id: int | None = None) -> None:
        if job_id is None:
            message = "You are not assigned to any job in this event"
        else:
            message = "You are not assigned to this job"
        super().__init__(message)
        self.event_id = event_id
        self.worker_id = worker_id
        self.job_id = job_id


class SessionAlreadyActiveError(WorkHoursError):
    kind = ErrorKind.SESSION_ALREADY_ACTIVE

    def __init__(self, *, worker_id: int, job_id: int) -> None:
        super().__init__("Already checked in for this job")
        self.worker_id = worker_id
        self.job_id = job_id


class NoActiveSessionError(WorkHoursError):
    kind = ErrorKind.NO_ACTIVE_SESSION

    def __init__(self, *, worker_id: int, job_id: int) -> None:
        super().__init__("No active check-in found for this job")
        self.worker_id = worker_id
        self.job_id = job_id


class InvalidIntervalError(WorkHoursError):
    kind = ErrorKind.INVALID_INTERVAL

    def __init__(self, message: str = "Check-out time must be after check-in time") -> None:
        super().__init__(message)


class AmbiguousJobSelectionError(WorkHoursError):
    """Several jobs are eligible; the caller must pick one from ``jobs``."""

    kind = ErrorKind.AMBIGUOUS_JOB_SELECTION

    def __init__(self, jobs: Sequence) -> None:
        super().__init__("You hold several jobs at this event, choose one")
        self.jobs = list(jobs)
