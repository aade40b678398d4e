from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.exceptions import InvalidIntervalError, NoActiveSessionError
from ..events.model import Job
from ..payroll.calculator.base import EarningsCalculator
from ..payroll.calculator.hourly_calculator import HourlyEarningsCalculator
from .model import WorkSession
from .repository import WorkSessionRepository

logger = logging.getLogger(__name__)


class WorkSessionService:
    """Check-in/check-out state machine for one (worker, job) pair.

    NONE -> CHECKED_IN -> CHECKED_OUT. A closed row is terminal; the next
    check-in creates a new row. Callers resolve ``job`` through
    AssignmentLookup before calling in here.
    """

    def __init__(self, sessions: WorkSessionRepository, *, calculator: Optional[EarningsCalculator] = None):
        self._sessions = sessions
        self._calculator = calculator or HourlyEarningsCalculator()

    def check_in(self, *, event_id: int, job: Job, worker_id: int, now: Optional[datetime] = None) -> WorkSession:
        now = now or now_utc()
        # The store enforces uniqueness atomically and raises SessionAlreadyActiveError.
        session = self._sessions.create_checked_in(
            event_id=event_id,
            job_id=job.job_id,
            worker_id=worker_id,
            check_in_time=now,
        )
        logger.info("Worker %s checked in to job %s (session %s)", worker_id, job.job_id, session.session_id)
        return session

    def check_out(self, *, event_id: int, job: Job, worker_id: int, now: Optional[datetime] = None) -> WorkSession:
        now = now or now_utc()

        session = self._sessions.get_open(worker_id=worker_id, job_id=job.job_id)
        if session is None or session.event_id != int(event_id):
            raise NoActiveSessionError(worker_id=worker_id, job_id=job.job_id)

        try:
            result = self._calculator.compute(job, session.check_in_time, now)
        except InvalidIntervalError:
            logger.warning(
                "Invalid interval on session %s: check-in %s, check-out %s",
                session.session_id,
                session.check_in_time.isoformat(),
                now.isoformat(),
            )
            raise

        closed = self._sessions.close_session(
            session_id=session.session_id,
            check_out_time=now,
            total_hours=result.total_hours,
            earnings=result.earnings,
        )
        if not closed:
            # Another request closed the row between our read and write.
            raise NoActiveSessionError(worker_id=worker_id, job_id=job.job_id)

        logger.info(
            "Worker %s checked out of job %s (session %s, %s h, %s)",
            worker_id,
            job.job_id,
            session.session_id,
            result.total_hours,
            result.earnings,
        )
        return session.closed(check_out_time=now, total_hours=result.total_hours, earnings=result.earnings)

    def list_for_worker(self, *, event_id: int, worker_id: int) -> Sequence[WorkSession]:
        return self._sessions.list_for_worker(event_id=int(event_id), worker_id=int(worker_id))

    def active_sessions_for_worker(self, worker_id: int) -> Sequence[WorkSession]:
        """Open sessions across all of the worker's jobs (for coarse UI views)."""

        return self._sessions.list_open_for_worker(int(worker_id))
