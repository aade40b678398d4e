from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..common.datetime_utils import ensure_utc
from ..core.enums import ApplicationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Event, Job
from .repository import EventRepository


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_event(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, organizer_id, title, start_time, end_time
                FROM events
                WHERE event_id=%s
                """,
                (int(event_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Event(
                event_id=int(r["event_id"]),
                organizer_id=int(r["organizer_id"]),
                title=r["title"],
                start_time=ensure_utc(r["start_time"]),
                end_time=ensure_utc(r["end_time"]),
            )

    def list_jobs(self, event_id: int) -> Sequence[Job]:
        return self._load_jobs(event_id=int(event_id), worker_id=None)

    def list_jobs_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[Job]:
        return self._load_jobs(event_id=int(event_id), worker_id=int(worker_id))

    def _load_jobs(self, *, event_id: int, worker_id: Optional[int]) -> list[Job]:
        clauses = ["j.event_id=%s"]
        params: list[object] = [event_id]
        if worker_id is not None:
            clauses.append(
                "EXISTS (SELECT 1 FROM job_applications x WHERE x.job_id=j.job_id AND x.worker_id=%s AND x.status=%s)"
            )
            params.extend([worker_id, ApplicationStatus.ACCEPTED.value])
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT j.job_id, j.event_id, j.title, j.pay_per_person, j.total_positions
                FROM jobs j
                WHERE {where}
                ORDER BY j.job_id
                """,
                tuple(params),
            )
            job_rows = fetchall(cur)
            if not job_rows:
                return []

            job_ids = [int(r["job_id"]) for r in job_rows]
            placeholders = ",".join(["%s"] * len(job_ids))
            cur.execute(
                f"""
                SELECT job_id, worker_id
                FROM job_applications
                WHERE status=%s AND job_id IN ({placeholders})
                """,
                (ApplicationStatus.ACCEPTED.value, *job_ids),
            )
            hired: dict[int, set[int]] = defaultdict(set)
            for r in fetchall(cur):
                hired[int(r["job_id"])].add(int(r["worker_id"]))

            return [
                Job(
                    job_id=int(r["job_id"]),
                    event_id=int(r["event_id"]),
                    title=r["title"],
                    pay_per_person=as_decimal(r["pay_per_person"]),
                    total_positions=int(r.get("total_positions") or 1),
                    hired_workers=frozenset(hired.get(int(r["job_id"]), ())),
                )
                for r in job_rows
            ]
