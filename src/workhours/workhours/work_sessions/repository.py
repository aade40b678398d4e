from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import WorkSession


class WorkSessionRepository(Protocol):
    """Session Store: the only mutable shared resource of the tracking engine.

    Implementations must make ``create_checked_in`` and ``close_session``
    single atomic writes keyed on ``(worker_id, job_id)``.
    """

    def get_open(self, *, worker_id: int, job_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def create_checked_in(self, *, event_id: int, job_id: int, worker_id: int, check_in_time: datetime) -> WorkSession:
        """Insert a CHECKED_IN row.

        Raises SessionAlreadyActiveError when the pair already has an open row,
        including when a concurrent caller won the race.
        """

        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        total_hours: Decimal,
        earnings: Decimal,
    ) -> bool:
        """Compare-and-set CHECKED_IN -> CHECKED_OUT. Returns False if the row was not open."""

        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def list_for_event(self, event_id: int) -> Sequence[WorkSession]:
        raise NotImplementedError

    def list_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[WorkSession]:
        raise NotImplementedError

    def list_open_for_worker(self, worker_id: int) -> Sequence[WorkSession]:
        raise NotImplementedError
