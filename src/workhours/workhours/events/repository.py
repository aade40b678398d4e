from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Event, Job


class EventRepository(Protocol):
    """Read-only access to events and their jobs.

    Note (DIP): the tracking engine never mutates events or jobs.
    """

    def get_event(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list_jobs(self, event_id: int) -> Sequence[Job]:
        raise NotImplementedError

    def list_jobs_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[Job]:
        """Jobs under the event whose accepted-worker set contains the worker."""

        raise NotImplementedError
