from __future__ import annotations

import threading
from typing import Optional, Sequence

from .model import Event, Job
from .repository import EventRepository


class InMemoryEventRepository(EventRepository):
    """Dict-backed event catalog used by the ``memory`` backend and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: dict[int, Event] = {}
        self._jobs: dict[int, Job] = {}

    def add_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.event_id] = event
        return event

    def add_job(self, job: Job) -> Job:
        with self._lock:
            self._jobs[job.job_id] = job
        return job

    def get_event(self, event_id: int) -> Optional[Event]:
        with self._lock:
            return self._events.get(int(event_id))

    def list_jobs(self, event_id: int) -> Sequence[Job]:
        with self._lock:
            jobs = [j for j in self._jobs.values() if j.event_id == int(event_id)]
        return sorted(jobs, key=lambda j: j.job_id)

    def list_jobs_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[Job]:
        return [j for j in self.list_jobs(event_id) if j.has_worker(worker_id)]
