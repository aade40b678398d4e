from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_hhmm
from ..core.exceptions import ScheduleNotFoundError, ValidationError
from ..events.model import Event
from .model import WEEKDAYS, DayWindow, WorkSchedule
from .repository import WorkScheduleRepository

logger = logging.getLogger(__name__)


def parse_weekly(data: Any) -> dict[str, DayWindow]:
    """Validate a ``weeklySchedule`` body; missing weekdays are inactive.

    An active day needs both times. ``endTime`` earlier than ``startTime``
    is an overnight shift; equal times are rejected.
    """

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("weeklySchedule must be an object keyed by weekday")

    unknown = sorted(set(data) - set(WEEKDAYS))
    if unknown:
        raise ValidationError(f"Unknown weekday(s): {', '.join(map(str, unknown))}")

    weekly = {}
    for day in WEEKDAYS:
        raw = data.get(day)
        if raw is None:
            weekly[day] = DayWindow()
            continue
        if not isinstance(raw, dict):
            raise ValidationError(f"{day} must be an object")

        is_active = raw.get("isActive", False)
        if not isinstance(is_active, bool):
            raise ValidationError(f"{day}.isActive must be true or false")

        start = raw.get("startTime") or None
        end = raw.get("endTime") or None
        start = require_hhmm(start, f"{day}.startTime") if start is not None else None
        end = require_hhmm(end, f"{day}.endTime") if end is not None else None

        if is_active:
            if start is None or end is None:
                raise ValidationError(f"{day} is active but has no start/end time")
            if start == end:
                raise ValidationError(f"{day} start and end time must differ")
        weekly[day] = DayWindow(start_time=start, end_time=end, is_active=is_active)
    return weekly


class WeeklyScheduleService:
    """Weekly working pattern of an event. Organizer ownership is checked by callers."""

    def __init__(self, schedules: WorkScheduleRepository):
        self._schedules = schedules

    def get(self, event_id: int) -> WorkSchedule:
        schedule = self._schedules.get_for_event(int(event_id))
        if not schedule:
            raise ScheduleNotFoundError(event_id)
        return schedule

    def create(self, *, event: Event, weekly_data: Any, now: Optional[datetime] = None) -> WorkSchedule:
        weekly = parse_weekly(weekly_data)
        schedule = self._schedules.upsert(
            event_id=event.event_id,
            organizer_id=event.organizer_id,
            weekly=weekly,
            now=now or now_utc(),
        )
        logger.info("Saved work schedule %s for event %s", schedule.schedule_id, event.event_id)
        return schedule

    def update(self, *, event: Event, weekly_data: Any, now: Optional[datetime] = None) -> WorkSchedule:
        weekly = parse_weekly(weekly_data)
        schedule = self._schedules.update_weekly(
            event_id=event.event_id,
            organizer_id=event.organizer_id,
            weekly=weekly,
            now=now or now_utc(),
        )
        if not schedule:
            raise ScheduleNotFoundError(event.event_id)
        return schedule
