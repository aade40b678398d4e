from __future__ import annotations

from datetime import timedelta

import pytest

from src.workhours.workhours.core.exceptions import ScheduleNotFoundError, ValidationError
from src.workhours.workhours.schedules.model import WEEKDAYS, DayWindow
from src.workhours.workhours.schedules.service import WeeklyScheduleService, parse_weekly

WEEKDAY_SHIFTS = {
    "monday": {"startTime": "08:00", "endTime": "17:00", "isActive": True},
    "saturday": {"startTime": "22:00", "endTime": "04:00", "isActive": True},
    "sunday": {"isActive": False},
}


def test_parse_fills_missing_days_as_inactive():
    weekly = parse_weekly(WEEKDAY_SHIFTS)

    assert set(weekly) == set(WEEKDAYS)
    assert weekly["monday"] == DayWindow("08:00", "17:00", True)
    assert weekly["tuesday"] == DayWindow()
    # Overnight shift.
    assert weekly["saturday"].end_time == "04:00"


@pytest.mark.parametrize(
    "data",
    [
        ["monday"],
        {"funday": {"isActive": True}},
        {"monday": "08:00-17:00"},
        {"monday": {"isActive": True, "startTime": "08:00"}},
        {"monday": {"isActive": True, "startTime": "08:00", "endTime": "08:00"}},
        {"monday": {"isActive": "yes", "startTime": "08:00", "endTime": "17:00"}},
        {"monday": {"isActive": True, "startTime": "8am", "endTime": "17:00"}},
    ],
)
def test_parse_rejects_bad_shapes(data):
    with pytest.raises(ValidationError):
        parse_weekly(data)


def test_create_then_update(schedules_repo, event, fixed_now):
    svc = WeeklyScheduleService(schedules_repo)

    created = svc.create(event=event, weekly_data=WEEKDAY_SHIFTS, now=fixed_now)
    updated = svc.update(
        event=event,
        weekly_data={"friday": {"startTime": "10:00", "endTime": "14:00", "isActive": True}},
        now=fixed_now + timedelta(hours=1),
    )

    assert updated.schedule_id == created.schedule_id
    assert updated.created_at == fixed_now
    assert updated.updated_at == fixed_now + timedelta(hours=1)
    assert updated.weekly["friday"].is_active
    assert not updated.weekly["monday"].is_active
    assert svc.get(event.event_id) == updated


def test_create_again_replaces_the_pattern(schedules_repo, event, fixed_now):
    svc = WeeklyScheduleService(schedules_repo)
    first = svc.create(event=event, weekly_data=WEEKDAY_SHIFTS, now=fixed_now)

    second = svc.create(event=event, weekly_data={}, now=fixed_now + timedelta(days=1))

    assert second.schedule_id == first.schedule_id
    assert not any(w.is_active for w in second.weekly.values())


def test_missing_schedule(schedules_repo, event, fixed_now):
    svc = WeeklyScheduleService(schedules_repo)

    with pytest.raises(ScheduleNotFoundError):
        svc.get(event.event_id)
    with pytest.raises(ScheduleNotFoundError):
        svc.update(event=event, weekly_data={}, now=fixed_now)


def test_to_dict_lists_every_weekday(schedules_repo, event, fixed_now):
    schedule = WeeklyScheduleService(schedules_repo).create(event=event, weekly_data=WEEKDAY_SHIFTS, now=fixed_now)

    body = schedule.to_dict()

    assert list(body["weeklySchedule"]) == list(WEEKDAYS)
    assert body["weeklySchedule"]["monday"] == {"startTime": "08:00", "endTime": "17:00", "isActive": True}
    assert body["createdAt"] == "2026-07-01T10:00:00.000Z"
