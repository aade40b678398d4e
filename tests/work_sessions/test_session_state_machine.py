from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal

import pytest

from src.workhours.workhours.core.enums import SessionStatus
from src.workhours.workhours.core.exceptions import (
    InvalidIntervalError,
    NoActiveSessionError,
    SessionAlreadyActiveError,
)
from src.workhours.workhours.work_sessions.service import WorkSessionService

from tests.helpers import WORKER_ONE_JOB, WORKER_TWO_JOBS


def _open_rows(repo, worker_id, job_id):
    return [r for r in repo.all_rows() if r.worker_id == worker_id and r.job_id == job_id and r.is_open]


def test_check_in_creates_open_session(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)

    session = svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)

    assert session.status == SessionStatus.CHECKED_IN
    assert session.check_in_time == fixed_now
    assert session.check_out_time is None
    assert session.total_hours is None
    assert session.earnings is None


def test_second_check_in_for_same_pair_is_rejected(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)

    with pytest.raises(SessionAlreadyActiveError):
        svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(minutes=1))

    assert len(sessions_repo.all_rows()) == 1


def test_check_out_computes_earnings(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)

    closed = svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=4, minutes=30))

    assert closed.status == SessionStatus.CHECKED_OUT
    assert closed.total_hours == Decimal("4.50")
    assert closed.earnings == Decimal("90.00")
    assert sessions_repo.get_by_id(closed.session_id) == closed


def test_check_out_twice_fails_second_time(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)
    first = svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=1))

    with pytest.raises(NoActiveSessionError):
        svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=2))

    # The closed row was not recomputed.
    assert sessions_repo.get_by_id(first.session_id) == first


def test_check_out_without_check_in(sessions_repo, stage_job, fixed_now):
    with pytest.raises(NoActiveSessionError):
        WorkSessionService(sessions_repo).check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)


def test_new_cycle_after_check_out_is_a_new_row(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    first = svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)
    svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=1))

    second = svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=2))

    assert second.session_id != first.session_id
    assert len(sessions_repo.all_rows()) == 2


def test_one_open_session_per_job_not_per_event(sessions_repo, stage_job, desk_job, fixed_now):
    svc = WorkSessionService(sessions_repo)

    svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_TWO_JOBS, now=fixed_now)
    svc.check_in(event_id=1, job=desk_job, worker_id=WORKER_TWO_JOBS, now=fixed_now)

    active = svc.active_sessions_for_worker(WORKER_TWO_JOBS)
    assert sorted(s.job_id for s in active) == [1, 2]


def test_check_out_before_check_in_leaves_row_untouched(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    opened = svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)

    with pytest.raises(InvalidIntervalError):
        svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now - timedelta(minutes=5))

    assert sessions_repo.get_by_id(opened.session_id) == opened
    assert svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=1)).earnings == Decimal("20.00")


def test_concurrent_check_ins_yield_exactly_one_session(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    barrier = threading.Barrier(10)
    outcomes = []
    lock = threading.Lock()

    def attempt():
        barrier.wait(timeout=5)
        try:
            svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)
            result = "ok"
        except SessionAlreadyActiveError:
            result = "already-active"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert outcomes.count("ok") == 1
    assert outcomes.count("already-active") == 9
    assert len(_open_rows(sessions_repo, WORKER_ONE_JOB, stage_job.job_id)) == 1


def test_concurrent_check_outs_close_once(sessions_repo, stage_job, fixed_now):
    svc = WorkSessionService(sessions_repo)
    svc.check_in(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now)
    barrier = threading.Barrier(6)
    outcomes = []
    lock = threading.Lock()

    def attempt():
        barrier.wait(timeout=5)
        try:
            svc.check_out(event_id=1, job=stage_job, worker_id=WORKER_ONE_JOB, now=fixed_now + timedelta(hours=2))
            result = "ok"
        except NoActiveSessionError:
            result = "none"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert outcomes.count("ok") == 1
    assert outcomes.count("none") == 5
