from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Mapping, Optional

from .model import DayWindow, WorkSchedule
from .repository import WorkScheduleRepository


class InMemoryWorkScheduleRepository(WorkScheduleRepository):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_event: dict[int, WorkSchedule] = {}
        self._next_id = 0

    def get_for_event(self, event_id: int) -> Optional[WorkSchedule]:
        with self._lock:
            return self._by_event.get(int(event_id))

    def upsert(
        self,
        *,
        event_id: int,
        organizer_id: int,
        weekly: Mapping[str, DayWindow],
        now: datetime,
    ) -> WorkSchedule:
        with self._lock:
            existing = self._by_event.get(int(event_id))
            if existing:
                row = replace(existing, organizer_id=int(organizer_id), weekly=dict(weekly), updated_at=now)
            else:
                self._next_id += 1
                row = WorkSchedule(
                    schedule_id=self._next_id,
                    event_id=int(event_id),
                    organizer_id=int(organizer_id),
                    weekly=dict(weekly),
                    created_at=now,
                    updated_at=now,
                )
            self._by_event[row.event_id] = row
            return row

    def update_weekly(
        self,
        *,
        event_id: int,
        organizer_id: int,
        weekly: Mapping[str, DayWindow],
        now: datetime,
    ) -> Optional[WorkSchedule]:
        with self._lock:
            existing = self._by_event.get(int(event_id))
            if existing is None or existing.organizer_id != int(organizer_id):
                return None
            row = replace(existing, weekly=dict(weekly), updated_at=now)
            self._by_event[row.event_id] = row
            return row
