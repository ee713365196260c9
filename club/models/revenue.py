# club/models/revenue.py
"""
Per-table revenue: income is billed in whole started hours, usage is kept exact.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class RevenueStats:
    income: int = 0
    usage: timedelta = timedelta(0)

    @property
    def usage_text(self) -> str:
        """Unrounded usage as HH:MM; hours are not wrapped at 24."""
        minutes = int(self.usage.total_seconds()) // 60
        return f"{minutes // 60:02d}:{minutes % 60:02d}"

    def __str__(self):
        return f"{self.income} {self.usage_text}"


def billed_hours(seated_at: datetime, released_at: datetime) -> int:
    """Usage rounded up to the next whole hour."""
    return math.ceil((released_at - seated_at) / ONE_HOUR)


def accrue(stats: RevenueStats, seated_at: datetime, released_at: datetime, price_per_hour: int) -> RevenueStats:
    """Return `stats` with one finished occupancy added. Never decreases either field."""
    return RevenueStats(
        income=stats.income + billed_hours(seated_at, released_at) * price_per_hour,
        usage=stats.usage + (released_at - seated_at),
    )
