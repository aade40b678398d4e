"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

TOKEN_TYPE = "work-hours"
DEFAULT_TOKEN_TTL_HOURS = 7 * 24
DEFAULT_TOKEN_REFRESH_MARGIN_MINUTES = 10

MS_PER_HOUR = 3_600_000
HOURS_PRECISION = Decimal("0.01")
MONEY_PRECISION = Decimal("0.01")

DEFAULT_HISTORY_LIMIT = 200
