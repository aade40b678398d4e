from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ...common.datetime_utils import to_epoch_ms
from ...core.constants import HOURS_PRECISION, MONEY_PRECISION, MS_PER_HOUR
from ...core.exceptions import InvalidIntervalError
from ...events.model import Job
from .base import EarningsCalculator, Earnings


def round2(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


class HourlyEarningsCalculator(EarningsCalculator):
    """Hourly rule: hours = elapsed ms / 3,600,000 rounded half-up to 2 places,
    earnings = rounded hours * pay_per_person rounded half-up to 2 places.
    """

    def compute(self, job: Job, check_in_time: datetime, check_out_time: datetime) -> Earnings:
        elapsed_ms = to_epoch_ms(check_out_time) - to_epoch_ms(check_in_time)
        if elapsed_ms <= 0:
            raise InvalidIntervalError()

        hours = (Decimal(elapsed_ms) / Decimal(MS_PER_HOUR)).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)
        return Earnings(total_hours=hours, earnings=round2(hours * Decimal(job.pay_per_person)))
