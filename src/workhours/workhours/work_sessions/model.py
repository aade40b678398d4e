from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import isoformat_ms
from ..core.enums import SessionStatus


@dataclass(frozen=True)
class WorkSession:
    """Ledger unit: one check-in/check-out cycle of a worker on a job.

    Created CHECKED_IN, closed once to CHECKED_OUT, never deleted.
    """

    session_id: int
    event_id: int
    job_id: int
    worker_id: int
    status: SessionStatus
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    earnings: Optional[Decimal] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.CHECKED_IN

    def closed(self, *, check_out_time: datetime, total_hours: Decimal, earnings: Decimal) -> "WorkSession":
        return replace(
            self,
            status=SessionStatus.CHECKED_OUT,
            check_out_time=check_out_time,
            total_hours=total_hours,
            earnings=earnings,
        )

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "eventId": self.event_id,
            "jobId": self.job_id,
            "workerId": self.worker_id,
            "status": self.status.value,
            "checkInTime": isoformat_ms(self.check_in_time),
            "checkOutTime": isoformat_ms(self.check_out_time),
            "totalHours": float(self.total_hours) if self.total_hours is not None else None,
            "earnings": float(self.earnings) if self.earnings is not None else None,
        }
