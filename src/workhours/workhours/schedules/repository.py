from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol

from .model import DayWindow, WorkSchedule


class WorkScheduleRepository(Protocol):
    """One weekly schedule per event."""

    def get_for_event(self, event_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        event_id: int,
        organizer_id: int,
        weekly: Mapping[str, DayWindow],
        now: datetime,
    ) -> WorkSchedule:
        """Create the event's schedule or replace the existing one."""

        raise NotImplementedError

    def update_weekly(
        self,
        *,
        event_id: int,
        organizer_id: int,
        weekly: Mapping[str, DayWindow],
        now: datetime,
    ) -> Optional[WorkSchedule]:
        """Replace the weekly pattern of an existing schedule owned by ``organizer_id``.

        Returns None when there is no such schedule.
        """

        raise NotImplementedError
