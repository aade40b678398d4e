from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ...events.model import Job


@dataclass(frozen=True)
class Earnings:
    total_hours: Decimal
    earnings: Decimal


class EarningsCalculator(ABC):
    """Calculator interface (Strategy Pattern for pay rules)."""

    @abstractmethod
    def compute(self, job: Job, check_in_time: datetime, check_out_time: datetime) -> Earnings:
        raise NotImplementedError
