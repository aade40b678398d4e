from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from ..common.datetime_utils import isoformat_ms
from ..core.enums import SessionStatus
from ..work_sessions.model import WorkSession
from ..work_sessions.repository import WorkSessionRepository

_ZERO = Decimal("0.00")


@dataclass(frozen=True)
class SessionTotals:
    total_hours: Decimal = _ZERO
    total_earnings: Decimal = _ZERO
    total_sessions: int = 0

    def to_dict(self) -> dict:
        return {
            "totalHours": float(self.total_hours),
            "totalEarnings": float(self.total_earnings),
            "totalSessions": self.total_sessions,
        }


@dataclass(frozen=True)
class WorkerSummary:
    worker_id: int
    total_hours: Decimal
    total_earnings: Decimal
    sessions: list[WorkSession] = field(default_factory=list)

    @property
    def totals(self) -> SessionTotals:
        return SessionTotals(
            total_hours=self.total_hours,
            total_earnings=self.total_earnings,
            total_sessions=len(self.sessions),
        )

    def to_dict(self) -> dict:
        return {
            "worker": {"workerId": self.worker_id},
            "totalHours": float(self.total_hours),
            "totalEarnings": float(self.total_earnings),
            "totalSessions": len(self.sessions),
            "sessions": [s.to_dict() for s in self.sessions],
        }


@dataclass(frozen=True)
class EventSummary:
    event_id: int
    total_workers: int
    total_hours: Decimal
    total_earnings: Decimal
    total_sessions: int
    workers: list[WorkerSummary]

    def to_dict(self) -> dict:
        return {
            "overall": {
                "totalWorkers": self.total_workers,
                "totalHours": float(self.total_hours),
                "totalEarnings": float(self.total_earnings),
                "totalSessions": self.total_sessions,
            },
            "workers": [w.to_dict() for w in self.workers],
        }


def totals_of(sessions: Iterable[WorkSession]) -> SessionTotals:
    """Fold sessions; only CHECKED_OUT rows contribute hours and earnings."""

    hours = _ZERO
    earnings = _ZERO
    count = 0
    for s in sessions:
        count += 1
        if s.status == SessionStatus.CHECKED_OUT:
            hours += s.total_hours or _ZERO
            earnings += s.earnings or _ZERO
    return SessionTotals(total_hours=hours, total_earnings=earnings, total_sessions=count)


class WorkSummaryService:
    """Read-side roll-ups of the session ledger. Never writes."""

    def __init__(self, sessions: WorkSessionRepository):
        self._sessions = sessions

    def summary_for_worker(self, *, event_id: int, worker_id: int) -> WorkerSummary:
        rows = list(self._sessions.list_for_worker(event_id=int(event_id), worker_id=int(worker_id)))
        t = totals_of(rows)
        return WorkerSummary(
            worker_id=int(worker_id),
            total_hours=t.total_hours,
            total_earnings=t.total_earnings,
            sessions=rows,
        )

    def summary_for_event(self, event_id: int) -> EventSummary:
        rows = list(self._sessions.list_for_event(int(event_id)))

        by_worker: dict[int, list[WorkSession]] = {}
        for s in rows:
            by_worker.setdefault(s.worker_id, []).append(s)

        workers = []
        for worker_id, worker_rows in by_worker.items():
            t = totals_of(worker_rows)
            workers.append(
                WorkerSummary(
                    worker_id=worker_id,
                    total_hours=t.total_hours,
                    total_earnings=t.total_earnings,
                    sessions=worker_rows,
                )
            )
        workers.sort(key=lambda w: (-w.total_hours, w.worker_id))

        return EventSummary(
            event_id=int(event_id),
            total_workers=len(workers),
            total_hours=sum((w.total_hours for w in workers), _ZERO),
            total_earnings=sum((w.total_earnings for w in workers), _ZERO),
            total_sessions=len(rows),
            workers=workers,
        )

    @staticmethod
    def export_rows(summary: EventSummary) -> Sequence[dict]:
        """Flatten an event summary into one row per session for CSV export."""

        out: list[dict] = []
        for w in summary.workers:
            for s in w.sessions:
                out.append(
                    {
                        "event_id": s.event_id,
                        "worker_id": s.worker_id,
                        "job_id": s.job_id,
                        "session_id": s.session_id,
                        "status": s.status.value,
                        "check_in": isoformat_ms(s.check_in_time),
                        "check_out": isoformat_ms(s.check_out_time) or "-",
                        "total_hours": f"{s.total_hours:.2f}" if s.total_hours is not None else "",
                        "earnings": f"{s.earnings:.2f}" if s.earnings is not None else "",
                    }
                )
        return out
