from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import FrozenSet


@dataclass(frozen=True)
class Event:
    """Domain entity: a staffing engagement owned by an organizer."""

    event_id: int
    organizer_id: int
    title: str
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class Job:
    """Domain entity: a staffable position within an event.

    ``pay_per_person`` is an hourly rate. ``hired_workers`` holds the workers
    whose application was accepted.
    """

    job_id: int
    event_id: int
    title: str
    pay_per_person: Decimal
    total_positions: int = 1
    hired_workers: FrozenSet[int] = field(default_factory=frozenset)

    def has_worker(self, worker_id: int) -> bool:
        return int(worker_id) in self.hired_workers

    def to_dict(self) -> dict:
        return {"jobId": self.job_id, "title": self.title, "payPerPerson": float(self.pay_per_person)}
