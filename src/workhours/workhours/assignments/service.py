from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import AmbiguousJobSelectionError, NotAssignedError
from ..events.model import Job
from ..events.repository import EventRepository


class AssignmentLookup:
    """Use case: which jobs may this worker clock into for this event."""

    def __init__(self, events: EventRepository):
        self._events = events

    def jobs_for(self, event_id: int, worker_id: int) -> Sequence[Job]:
        jobs = list(self._events.list_jobs_for_worker(event_id=int(event_id), worker_id=int(worker_id)))
        if not jobs:
            raise NotAssignedError(event_id=event_id, worker_id=worker_id)
        return jobs

    def resolve_job(self, event_id: int, worker_id: int, job_id: Optional[int] = None) -> Job:
        """Pick the job for a check-in/out. The engine never guesses between several jobs."""

        jobs = self.jobs_for(event_id, worker_id)
        if job_id is None:
            if len(jobs) == 1:
                return jobs[0]
            raise AmbiguousJobSelectionError(jobs)

        for job in jobs:
            if job.job_id == int(job_id):
                return job
        raise NotAssignedError(event_id=event_id, worker_id=worker_id, job_id=job_id)
