from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from ..common.datetime_utils import isoformat_ms

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class DayWindow:
    """Working hours for one weekday as ``HH:MM`` wall-clock strings."""

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_active: bool = False

    def to_dict(self) -> dict:
        return {"startTime": self.start_time, "endTime": self.end_time, "isActive": self.is_active}


@dataclass(frozen=True)
class WorkSchedule:
    """Weekly working pattern an organizer publishes for an event.

    ``weekly`` always holds all seven ``WEEKDAYS``.
    """

    schedule_id: int
    event_id: int
    organizer_id: int
    weekly: Mapping[str, DayWindow]
    created_at: datetime
    updated_at: datetime

    def weekly_to_dict(self) -> dict:
        return {day: self.weekly[day].to_dict() for day in WEEKDAYS}

    def to_dict(self) -> dict:
        return {
            "scheduleId": self.schedule_id,
            "eventId": self.event_id,
            "organizerId": self.organizer_id,
            "weeklySchedule": self.weekly_to_dict(),
            "createdAt": isoformat_ms(self.created_at),
            "updatedAt": isoformat_ms(self.updated_at),
        }
