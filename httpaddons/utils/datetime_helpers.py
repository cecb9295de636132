"""Timestamp and duration formatting for access log lines.

Wall-clock time is only used for the displayed start timestamp; durations
come from the monotonic performance counter so clock adjustments never
produce a negative elapsed time.
"""

import datetime
import time
from typing import Optional

LOG_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


def now_local() -> datetime.datetime:
    """Return the current local time as a timezone-aware datetime."""
    return datetime.datetime.now().astimezone()


def format_log_timestamp(dt: datetime.datetime) -> str:
    """Format a datetime as ``YYYY/MM/DD HH:MM:SS``."""
    return dt.strftime(LOG_TIME_FORMAT)


def elapsed_ms(start: float, end: Optional[float] = None) -> str:
    """Milliseconds between two ``perf_counter`` readings, three decimals."""
    if end is None:
        end = time.perf_counter()
    return "%.3f" % (max(end - start, 0.0) * 1000)
