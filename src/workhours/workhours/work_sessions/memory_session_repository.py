from __future__ import annotations

import threading
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import SessionStatus
from ..core.exceptions import SessionAlreadyActiveError
from .model import WorkSession
from .repository import WorkSessionRepository


class InMemoryWorkSessionRepository(WorkSessionRepository):
    """Process-local session store.

    One lock guards every read-modify-write, which gives the same
    single-writer-per-pair guarantee as the MySQL unique key.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: dict[int, WorkSession] = {}
        self._open: dict[tuple[int, int], int] = {}
        self._next_id = 0

    def get_open(self, *, worker_id: int, job_id: int) -> Optional[WorkSession]:
        with self._lock:
            session_id = self._open.get((int(worker_id), int(job_id)))
            return self._rows.get(session_id) if session_id is not None else None

    def create_checked_in(self, *, event_id: int, job_id: int, worker_id: int, check_in_time: datetime) -> WorkSession:
        key = (int(worker_id), int(job_id))
        with self._lock:
            if key in self._open:
                raise SessionAlreadyActiveError(worker_id=worker_id, job_id=job_id)
            self._next_id += 1
            row = WorkSession(
                session_id=self._next_id,
                event_id=int(event_id),
                job_id=int(job_id),
                worker_id=int(worker_id),
                status=SessionStatus.CHECKED_IN,
                check_in_time=check_in_time,
            )
            self._rows[row.session_id] = row
            self._open[key] = row.session_id
            return row

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        total_hours: Decimal,
        earnings: Decimal,
    ) -> bool:
        with self._lock:
            row = self._rows.get(int(session_id))
            if row is None or not row.is_open:
                return False
            self._rows[row.session_id] = row.closed(
                check_out_time=check_out_time,
                total_hours=total_hours,
                earnings=earnings,
            )
            self._open.pop((row.worker_id, row.job_id), None)
            return True

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        with self._lock:
            return self._rows.get(int(session_id))

    def list_for_event(self, event_id: int) -> Sequence[WorkSession]:
        with self._lock:
            rows = [r for r in self._rows.values() if r.event_id == int(event_id)]
        return _newest_first(rows)

    def list_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[WorkSession]:
        with self._lock:
            rows = [r for r in self._rows.values() if r.event_id == int(event_id) and r.worker_id == int(worker_id)]
        return _newest_first(rows)

    def list_open_for_worker(self, worker_id: int) -> Sequence[WorkSession]:
        with self._lock:
            rows = [self._rows[sid] for (wid, _), sid in self._open.items() if wid == int(worker_id)]
        return _newest_first(rows)

    def all_rows(self) -> list[WorkSession]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda r: r.session_id)


def _newest_first(rows: list[WorkSession]) -> list[WorkSession]:
    return sorted(rows, key=lambda r: (r.check_in_time, r.session_id), reverse=True)
