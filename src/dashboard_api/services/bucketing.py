"""Bucket planning for dashboard trend charts.

Turns an optional start/end date pair and a granularity into a UTC range
snapped outward to bucket edges, plus the ordered list of contiguous buckets
covering it. Everything here is pure; "today" can be injected for tests.

All datetimes are naive and expressed in UTC, matching how the database
stores them. A bucket's end is the last millisecond of its period.
"""

import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)

RESOLUTION = timedelta(milliseconds=1)
END_OF_DAY = time(23, 59, 59, 999000)

# Default window lengths when the caller omits the start date
DEFAULT_DAYS = 7
DEFAULT_WEEKS = 12
DEFAULT_MONTHS = 6

# Dates whose period edges and default windows stay within date.min..date.max
MIN_SUPPORTED_DATE = date(2, 1, 1)
MAX_SUPPORTED_DATE = date(9998, 12, 31)

_DATE_PARAM_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class Granularity(str, Enum):
    """Bucket width options."""

    DAY = "day"
    WEEK = "week"  # ISO week, Monday to Sunday
    MONTH = "month"


@dataclass(frozen=True)
class TimeRange:
    """Inclusive UTC range covered by a bucket plan."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class Bucket:
    """Inclusive UTC interval aligned to a granularity's natural edges."""

    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= to_naive_utc(timestamp) <= self.end


@dataclass(frozen=True)
class BucketPlan:
    """Snapped range plus the buckets that exactly cover it."""

    range: TimeRange
    buckets: list[Bucket] = field(default_factory=list)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return to_naive_utc(value).date()
    return value


def clamp_date(value: date) -> date:
    """Pull a date into the range the planner can snap and enumerate."""
    return min(max(value, MIN_SUPPORTED_DATE), MAX_SUPPORTED_DATE)


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day to the target month."""
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def period_first_day(value: date | datetime, granularity: Granularity) -> date:
    """First calendar day of the period containing `value`."""
    day = _as_date(value)
    if granularity == Granularity.WEEK:
        return day - timedelta(days=day.weekday())
    if granularity == Granularity.MONTH:
        return day.replace(day=1)
    return day


def period_last_day(value: date | datetime, granularity: Granularity) -> date:
    """Last calendar day of the period containing `value`."""
    day = _as_date(value)
    if granularity == Granularity.WEEK:
        return period_first_day(day, granularity) + timedelta(days=6)
    if granularity == Granularity.MONTH:
        return day.replace(day=calendar.monthrange(day.year, day.month)[1])
    return day


def period_start(value: date | datetime, granularity: Granularity) -> datetime:
    """Snap to 00:00:00.000 UTC of the first day of the containing period."""
    return datetime.combine(period_first_day(value, granularity), time.min)


def period_end(value: date | datetime, granularity: Granularity) -> datetime:
    """Snap to 23:59:59.999 UTC of the last day of the containing period."""
    return datetime.combine(period_last_day(value, granularity), END_OF_DAY)


def advance(value: date, granularity: Granularity) -> date:
    """Move a period's first day forward by exactly one period."""
    if granularity == Granularity.WEEK:
        return value + timedelta(days=7)
    if granularity == Granularity.MONTH:
        return add_months(value.replace(day=1), 1)
    return value + timedelta(days=1)


def snap_range(start: date | datetime, end: date | datetime, granularity: Granularity) -> TimeRange:
    """Round a range outward to the edges of its first and last periods."""
    return TimeRange(
        start=period_start(start, granularity),
        end=period_end(end, granularity),
    )


def default_range(
    start_date: date | None,
    end_date: date | None,
    granularity: Granularity,
    today: date | None = None,
) -> tuple[date, date]:
    """Fill in missing range boundaries.

    A missing end is today (UTC). A missing start is derived from the
    effective end: 7 days for day buckets, 12 ISO weeks for week buckets and
    6 calendar months for month buckets, counting the end's own period.
    """
    end = end_date if end_date is not None else (today or utc_today())
    if start_date is not None:
        return start_date, end

    if granularity == Granularity.MONTH:
        start = add_months(end.replace(day=1), -(DEFAULT_MONTHS - 1))
    elif granularity == Granularity.WEEK:
        start = period_first_day(end - timedelta(weeks=DEFAULT_WEEKS - 1), granularity)
    else:
        start = end - timedelta(days=DEFAULT_DAYS - 1)
    return start, end


def plan_buckets(
    start_date: date | None = None,
    end_date: date | None = None,
    granularity: Granularity = Granularity.DAY,
    today: date | None = None,
) -> BucketPlan:
    """Build the snapped range and the ordered buckets covering it.

    Dates outside MIN_SUPPORTED_DATE..MAX_SUPPORTED_DATE are clamped to it.
    An end date before the start date is not corrected: when the snapped
    start still lies after the snapped end the plan has no buckets.
    """
    if start_date is not None:
        start_date = clamp_date(start_date)
    if end_date is not None:
        end_date = clamp_date(end_date)
    start, end = default_range(start_date, end_date, granularity, clamp_date(today or utc_today()))
    time_range = snap_range(start, end, granularity)

    if time_range.start > time_range.end:
        logger.warning(
            f"Reversed date range {start.isoformat()}..{end.isoformat()} "
            f"({granularity.value}), no buckets planned"
        )

    buckets: list[Bucket] = []
    cursor = time_range.start.date()
    while period_start(cursor, granularity) <= time_range.end:
        buckets.append(
            Bucket(start=period_start(cursor, granularity), end=period_end(cursor, granularity))
        )
        cursor = advance(cursor, granularity)

    return BucketPlan(range=time_range, buckets=buckets)


def parse_date_param(value: str | None) -> date | None:
    """Parse a literal YYYY-MM-DD calendar date.

    Anything else, including impossible dates like 2025-02-30, values with
    a time component, or years outside the supported range, yields None so
    the caller falls back to its default.
    """
    if not value or not _DATE_PARAM_RE.fullmatch(value):
        return None
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return None
    if not MIN_SUPPORTED_DATE <= parsed <= MAX_SUPPORTED_DATE:
        return None
    return parsed


def parse_granularity(value: str | None) -> Granularity:
    """Parse a granularity name; missing or unknown values mean day."""
    if value is None:
        return Granularity.DAY
    try:
        return Granularity(value)
    except ValueError:
        return Granularity.DAY


def format_date(value: date | datetime) -> str:
    """Render the UTC calendar date as YYYY-MM-DD."""
    return _as_date(value).isoformat()
