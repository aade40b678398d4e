from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.workhours.workhours.assignments.service import AssignmentLookup
from src.workhours.workhours.events.memory_event_repository import InMemoryEventRepository
from src.workhours.workhours.events.model import Event, Job
from src.workhours.workhours.payroll.service import WorkSummaryService
from src.workhours.workhours.schedules.memory_schedule_repository import InMemoryWorkScheduleRepository
from src.workhours.workhours.schedules.service import WeeklyScheduleService
from src.workhours.workhours.tokens.issuer import WorkTokenIssuer
from src.workhours.workhours.tokens.provider import CurrentTokenProvider
from src.workhours.workhours.tokens.validator import WorkTokenValidator
from src.workhours.workhours.work_schedule.service import WorkScheduleService
from src.workhours.workhours.work_sessions.memory_session_repository import InMemoryWorkSessionRepository
from src.workhours.workhours.work_sessions.service import WorkSessionService
from tests.helpers import ORGANIZER_ID, SECRET, WORKER_ONE_JOB, WORKER_TWO_JOBS, RecordingNotifier


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 7, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def event(fixed_now) -> Event:
    return Event(
        event_id=1,
        organizer_id=ORGANIZER_ID,
        title="Summer Festival",
        start_time=fixed_now - timedelta(hours=2),
        end_time=fixed_now + timedelta(days=2),
    )


@pytest.fixture
def stage_job() -> Job:
    return Job(
        job_id=1,
        event_id=1,
        title="Stage crew",
        pay_per_person=Decimal("20"),
        total_positions=4,
        hired_workers=frozenset({WORKER_ONE_JOB, WORKER_TWO_JOBS}),
    )


@pytest.fixture
def desk_job() -> Job:
    return Job(
        job_id=2,
        event_id=1,
        title="Ticket desk",
        pay_per_person=Decimal("18.50"),
        total_positions=2,
        hired_workers=frozenset({WORKER_TWO_JOBS}),
    )


@pytest.fixture
def events_repo(event, stage_job, desk_job) -> InMemoryEventRepository:
    repo = InMemoryEventRepository()
    repo.add_event(event)
    repo.add_job(stage_job)
    repo.add_job(desk_job)
    # Job of another event that must never leak into event 1 lookups.
    repo.add_job(Job(job_id=3, event_id=2, title="Other", pay_per_person=Decimal("30"), hired_workers=frozenset({WORKER_ONE_JOB})))
    return repo


@pytest.fixture
def sessions_repo() -> InMemoryWorkSessionRepository:
    return InMemoryWorkSessionRepository()


@pytest.fixture
def issuer() -> WorkTokenIssuer:
    return WorkTokenIssuer(SECRET, ttl=timedelta(hours=8))


@pytest.fixture
def validator() -> WorkTokenValidator:
    return WorkTokenValidator(SECRET)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def schedules_repo() -> InMemoryWorkScheduleRepository:
    return InMemoryWorkScheduleRepository()


@pytest.fixture
def schedule_service(events_repo, sessions_repo, schedules_repo, issuer, validator, notifier) -> WorkScheduleService:
    return WorkScheduleService(
        events_repo,
        CurrentTokenProvider(issuer),
        validator,
        AssignmentLookup(events_repo),
        WorkSessionService(sessions_repo),
        WorkSummaryService(sessions_repo),
        notifier,
        WeeklyScheduleService(schedules_repo),
    )
