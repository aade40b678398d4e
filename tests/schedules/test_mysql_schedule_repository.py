from __future__ import annotations

import json
from datetime import datetime, timezone

from src.workhours.workhours.schedules.model import WEEKDAYS
from src.workhours.workhours.schedules.mysql_schedule_repository import MySQLWorkScheduleRepository
from src.workhours.workhours.schedules.service import parse_weekly

T0 = datetime(2026, 7, 1, 10, 0, 0, tzinfo=timezone.utc)


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=None):
        self._conn.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self._conn.row

    def fetchall(self):
        return [self._conn.row] if self._conn.row else []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, row=None):
        self.row = row
        self.executed = []

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn):
        self._conn = conn

    def connect(self):
        return self._conn


def _row(weekly_json):
    return {
        "schedule_id": 3,
        "event_id": 1,
        "organizer_id": 1,
        "weekly_schedule": weekly_json,
        "created_at": datetime(2026, 7, 1, 10, 0, 0),
        "updated_at": datetime(2026, 7, 1, 10, 0, 0),
    }


def test_upsert_writes_all_weekdays_as_json():
    weekly = parse_weekly({"monday": {"startTime": "08:00", "endTime": "17:00", "isActive": True}})
    conn = FakeConnection(row=_row(b'{"monday": {"startTime": "08:00", "endTime": "17:00", "isActive": true}}'))
    repo = MySQLWorkScheduleRepository(FakeConnFactory(conn))

    schedule = repo.upsert(event_id=1, organizer_id=1, weekly=weekly, now=T0)

    insert_sql, params = conn.executed[0]
    assert insert_sql.startswith("INSERT INTO work_schedules")
    assert "ON DUPLICATE KEY UPDATE" in insert_sql
    assert list(json.loads(params[2])) == list(WEEKDAYS)
    assert params[3] == datetime(2026, 7, 1, 10, 0, 0)

    assert schedule.schedule_id == 3
    assert schedule.created_at == T0
    assert schedule.weekly["monday"].is_active
    assert not schedule.weekly["sunday"].is_active


def test_update_of_missing_schedule_returns_none():
    repo = MySQLWorkScheduleRepository(FakeConnFactory(FakeConnection(row=None)))

    assert repo.update_weekly(event_id=1, organizer_id=2, weekly=parse_weekly({}), now=T0) is None


def test_get_for_event_reads_text_json():
    repo = MySQLWorkScheduleRepository(FakeConnFactory(FakeConnection(row=_row('{"friday": {"isActive": false}}'))))

    schedule = repo.get_for_event(1)

    assert set(schedule.weekly) == set(WEEKDAYS)
    assert schedule.weekly["friday"].start_time is None
