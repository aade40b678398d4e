from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import ensure_utc, to_mysql_datetime
from ..core.enums import SessionStatus
from ..core.exceptions import SessionAlreadyActiveError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import WorkSession
from .repository import WorkSessionRepository

_COLUMNS = """
    session_id, event_id, job_id, worker_id, status,
    check_in_time, check_out_time, total_hours, earnings
"""


def _to_session(r: dict) -> WorkSession:
    check_out = r.get("check_out_time")
    return WorkSession(
        session_id=int(r["session_id"]),
        event_id=int(r["event_id"]),
        job_id=int(r["job_id"]),
        worker_id=int(r["worker_id"]),
        status=SessionStatus(r["status"]),
        check_in_time=ensure_utc(r["check_in_time"]),
        check_out_time=ensure_utc(check_out) if check_out else None,
        total_hours=as_decimal(r.get("total_hours")),
        earnings=as_decimal(r.get("earnings")),
    )


class MySQLWorkSessionRepository(WorkSessionRepository):
    """Relies on the ``uq_open_session`` unique key for the one-open-row-per-pair rule."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_open(self, *, worker_id: int, job_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE worker_id=%s AND job_id=%s AND status=%s
                """,
                (int(worker_id), int(job_id), SessionStatus.CHECKED_IN.value),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_checked_in(self, *, event_id: int, job_id: int, worker_id: int, check_in_time: datetime) -> WorkSession:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO work_sessions(event_id, job_id, worker_id, status, check_in_time)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        int(event_id),
                        int(job_id),
                        int(worker_id),
                        SessionStatus.CHECKED_IN.value,
                        to_mysql_datetime(check_in_time),
                    ),
                )
                session_id = int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise SessionAlreadyActiveError(worker_id=worker_id, job_id=job_id) from None
            raise

        return WorkSession(
            session_id=session_id,
            event_id=int(event_id),
            job_id=int(job_id),
            worker_id=int(worker_id),
            status=SessionStatus.CHECKED_IN,
            check_in_time=ensure_utc(check_in_time),
        )

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        total_hours: Decimal,
        earnings: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_sessions
                SET status=%s, check_out_time=%s, total_hours=%s, earnings=%s
                WHERE session_id=%s AND status=%s
                """,
                (
                    SessionStatus.CHECKED_OUT.value,
                    to_mysql_datetime(check_out_time),
                    total_hours,
                    earnings,
                    int(session_id),
                    SessionStatus.CHECKED_IN.value,
                ),
            )
            return cur.rowcount > 0

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_for_event(self, event_id: int) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE event_id=%s
                ORDER BY check_in_time DESC, session_id DESC
                """,
                (int(event_id),),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE event_id=%s AND worker_id=%s
                ORDER BY check_in_time DESC, session_id DESC
                """,
                (int(event_id), int(worker_id)),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_open_for_worker(self, worker_id: int) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE worker_id=%s AND status=%s
                ORDER BY check_in_time DESC
                """,
                (int(worker_id), SessionStatus.CHECKED_IN.value),
            )
            return [_to_session(r) for r in fetchall(cur)]
