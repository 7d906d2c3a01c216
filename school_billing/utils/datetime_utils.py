"""
Date and time helpers for the billing engine.

Stored timestamps are naive UTC; "today" for eligibility is the calendar
date in the school's configured timezone.
"""

from datetime import datetime, date, timedelta
from typing import Optional

import pytz


class DateTimeHelper:
    """Timezone-aware clock helpers"""

    @staticmethod
    def utc_now() -> datetime:
        """Current UTC time as a naive datetime, matching stored columns."""
        return datetime.now(pytz.UTC).replace(tzinfo=None)

    @staticmethod
    def today(timezone: str = 'UTC') -> date:
        """Get current date in specified timezone"""
        tz_obj = pytz.timezone(timezone)
        return datetime.now(tz_obj).date()

    @staticmethod
    def to_naive_utc(dt: datetime) -> datetime:
        """Normalise an aware datetime to naive UTC; naive values pass through."""
        if dt.tzinfo is None:
            return dt
        return dt.astimezone(pytz.UTC).replace(tzinfo=None)

    @staticmethod
    def minutes_ago(minutes: int, now: Optional[datetime] = None) -> datetime:
        now = DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utc_now()
        return now - timedelta(minutes=minutes)

    @staticmethod
    def days_before(day: date, days: int) -> date:
        return day - timedelta(days=days)


__all__ = ["DateTimeHelper"]
