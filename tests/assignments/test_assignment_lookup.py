from __future__ import annotations

import pytest

from src.workhours.workhours.assignments.service import AssignmentLookup
from src.workhours.workhours.core.exceptions import AmbiguousJobSelectionError, NotAssignedError

from tests.helpers import OUTSIDER, WORKER_ONE_JOB, WORKER_TWO_JOBS


def test_jobs_for_only_returns_accepted_jobs_of_the_event(events_repo):
    lookup = AssignmentLookup(events_repo)

    assert [j.job_id for j in lookup.jobs_for(1, WORKER_ONE_JOB)] == [1]
    assert [j.job_id for j in lookup.jobs_for(1, WORKER_TWO_JOBS)] == [1, 2]


def test_jobs_for_raises_when_worker_holds_nothing(events_repo):
    with pytest.raises(NotAssignedError):
        AssignmentLookup(events_repo).jobs_for(1, OUTSIDER)


def test_single_job_is_resolved_without_selection(events_repo):
    job = AssignmentLookup(events_repo).resolve_job(1, WORKER_ONE_JOB)
    assert job.job_id == 1


def test_several_jobs_need_explicit_choice(events_repo):
    lookup = AssignmentLookup(events_repo)

    with pytest.raises(AmbiguousJobSelectionError) as exc:
        lookup.resolve_job(1, WORKER_TWO_JOBS)
    assert [j.job_id for j in exc.value.jobs] == [1, 2]

    assert lookup.resolve_job(1, WORKER_TWO_JOBS, 2).job_id == 2


def test_job_of_another_event_is_not_assigned(events_repo):
    # Worker 10 is hired on job 3, but job 3 belongs to event 2.
    with pytest.raises(NotAssignedError):
        AssignmentLookup(events_repo).resolve_job(1, WORKER_ONE_JOB, 3)
