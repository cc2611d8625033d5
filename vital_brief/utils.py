"""Utility functions for calendar-day handling."""

import datetime as dt
from typing import List, Optional

import dateutil.tz


def local_today() -> dt.date:
    """Return today's date in the local timezone."""
    return dt.datetime.now(dateutil.tz.tzlocal()).date()


def trailing_days(days: int, end_date: Optional[dt.date] = None) -> List[dt.date]:
    """
    Return the last `days` calendar days ending on end_date, newest first.

    Args:
        days: Number of days to include.
        end_date: The most recent day (optional, defaults to today in the local timezone).

    Returns:
        List of dates, starting with end_date.
    """
    end_date = end_date or local_today()
    return [end_date - dt.timedelta(days=i) for i in range(days)]
