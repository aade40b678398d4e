from __future__ import annotations

import json
from datetime import datetime
from typing import Mapping, Optional

from ..common.datetime_utils import ensure_utc, to_mysql_datetime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import WEEKDAYS, DayWindow, WorkSchedule
from .repository import WorkScheduleRepository

_COLUMNS = "schedule_id, event_id, organizer_id, weekly_schedule, created_at, updated_at"


def _dump_weekly(weekly: Mapping[str, DayWindow]) -> str:
    return json.dumps({day: weekly[day].to_dict() for day in WEEKDAYS}, separators=(",", ":"))


def _load_weekly(raw) -> dict[str, DayWindow]:
    # JSON columns arrive as str, or bytes with the C extension.
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw) if isinstance(raw, str) else dict(raw or {})
    weekly = {}
    for day in WEEKDAYS:
        d = data.get(day) or {}
        weekly[day] = DayWindow(
            start_time=d.get("startTime"),
            end_time=d.get("endTime"),
            is_active=bool(d.get("isActive", False)),
        )
    return weekly


def _to_schedule(r: dict) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(r["schedule_id"]),
        event_id=int(r["event_id"]),
        organizer_id=int(r["organizer_id"]),
        weekly=_load_weekly(r["weekly_schedule"]),
        created_at=ensure_utc(r["created_at"]),
        updated_at=ensure_utc(r["updated_at"]),
    )


class MySQLWorkScheduleRepository(WorkScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_event(self, event_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_schedules WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def upsert(
        self,
        *,
        event_id: int,
        organizer_id: int,
        weekly: Mapping[str, DayWindow],
        now: datetime,
    ) -> WorkSchedule:
        stamp = to_mysql_datetime(now)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_schedules(event_id, organizer_id, weekly_schedule, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    organizer_id=VALUES(organizer_id),
                    weekly_schedule=VALUES(weekly_schedule),
                    updated_at=VALUES(updated_at)
                """,
                (int(event_id), int(organizer_id), _dump_weekly(weekly), stamp, stamp),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM work_schedules WHERE event_id=%s", (int(event_id),))
            return _to_schedule(fetchone(cur))

    def update_weekly(
        self,
        *,
        event_id: int,
        organizer_id: int,
        weekly: Mapping[str, DayWindow],
        now: datetime,
    ) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_schedules
                SET weekly_schedule=%s, updated_at=%s
                WHERE event_id=%s AND organizer_id=%s
                """,
                (_dump_weekly(weekly), to_mysql_datetime(now), int(event_id), int(organizer_id)),
            )
            # rowcount is 0 for a no-op update too, so look the row up instead.
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_schedules WHERE event_id=%s AND organizer_id=%s",
                (int(event_id), int(organizer_id)),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None
