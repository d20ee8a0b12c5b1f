"""
Report Parameters

Every report entry point takes the same filter set. The inclusive date range
is applied by the query layer before records reach the engine.
"""

from datetime import date, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ReportParams(BaseModel):
    """Filters for one report request"""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    route_id: Optional[str] = None
    customer_id: Optional[str] = None
    as_of_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_range(self) -> "ReportParams":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @classmethod
    def current_month(cls, today: Optional[date] = None, **filters) -> "ReportParams":
        """First to last day of the month containing today"""
        today = today or date.today()
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return cls(start_date=start, end_date=next_month - timedelta(days=1), **filters)

    @classmethod
    def last_days(cls, days: int = 30, today: Optional[date] = None, **filters) -> "ReportParams":
        """The trailing window ending today"""
        today = today or date.today()
        return cls(start_date=today - timedelta(days=days), end_date=today, **filters)

    def as_of(self, today: Optional[date] = None) -> date:
        """Reference date for aging and compliance, defaulting to today"""
        return self.as_of_date or today or date.today()

    def contains(self, day: Optional[date]) -> bool:
        return day is not None and self.start_date <= day <= self.end_date

    def days(self) -> List[date]:
        """Every day of the window, in order"""
        span = (self.end_date - self.start_date).days
        return [self.start_date + timedelta(days=offset) for offset in range(span + 1)]
