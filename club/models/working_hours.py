# club/models/working_hours.py
"""
Club-wide, run-constant values: opening hours, table count, price.
Times are datetimes on strptime's reference day (1900-01-01); only their
differences and clock part matter.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class WorkingHours:
    start: datetime
    end: datetime

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "WorkingHours":
        """Build the interval; a closing time not after opening means the next day."""
        if end <= start:
            end = end + ONE_DAY
        return cls(start=start, end=end)

    @property
    def wraps_midnight(self) -> bool:
        return self.end.date() != self.start.date()

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class ClubConfig:
    table_count: int
    price_per_hour: int
    hours: WorkingHours

    def __post_init__(self):
        if self.table_count < 1:
            raise ValueError("table_count must be at least 1")
        if self.price_per_hour < 1:
            raise ValueError("price_per_hour must be at least 1")
