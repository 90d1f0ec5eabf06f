"""Week window helpers.

Silverware is queried with UTC instants, while the week itself is defined in
the restaurant's local calendar. This module turns an ISO week-start date
(a Monday) plus a timezone offset into the ``[start, end)`` UTC pair used for
the order listing.

Examples:
    >>> w = week_window("2025-10-06", tz_offset_minutes=-240)
    >>> w.start_iso, w.end_iso
    ('2025-10-06T04:00:00.000Z', '2025-10-13T04:00:00.000Z')

"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

DAYS_IN_WEEK = 7


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2025-10-06")
        datetime.date(2025, 10, 6)

    """
    return datetime.strptime(s, "%Y-%m-%d").date()


def format_instant(dt: datetime) -> str:
    """Render an aware datetime as UTC ISO-8601 with milliseconds and ``Z``."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class WeekWindow:
    """A reporting week expressed as UTC instants.

    Attributes:
        week_of: ISO date of the local Monday that opens the week.
        start: Inclusive UTC start instant.
        end: Exclusive UTC end instant (``start`` + 7 days).
    """

    week_of: str
    start: datetime
    end: datetime

    @property
    def start_iso(self) -> str:
        return format_instant(self.start)

    @property
    def end_iso(self) -> str:
        return format_instant(self.end)


def current_week_start(now: datetime | None = None) -> str:
    """Return the Monday of the week containing ``now`` as YYYY-MM-DD.

    Only the UTC calendar date of ``now`` is used; time of day is ignored.

    Args:
        now: Reference instant. Defaults to the current UTC time. Naive
            datetimes are taken as already being UTC.

    Returns:
        ISO date string of that week's Monday.

    Examples:
        >>> current_week_start(datetime(2025, 10, 9, 23, 0, tzinfo=timezone.utc))
        '2025-10-06'
        >>> current_week_start(datetime(2025, 10, 12, tzinfo=timezone.utc))
        '2025-10-06'

    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    today = now.date()
    monday = today - timedelta(days=today.isoweekday() - 1)
    return monday.isoformat()


def week_window(week_start: str, tz_offset_minutes: int = 0) -> WeekWindow:
    """Compute the UTC ``[start, end)`` pair for a local week.

    ``start`` is local midnight of ``week_start`` converted to UTC, i.e.
    midnight UTC shifted by ``-tz_offset_minutes``. For EDT (offset -240)
    the week opens at 04:00Z.

    Args:
        week_start: ISO date (YYYY-MM-DD) of the week's Monday.
        tz_offset_minutes: Local offset from UTC in minutes.

    Returns:
        WeekWindow spanning exactly seven days.

    Raises:
        ValueError: If ``week_start`` is not a YYYY-MM-DD date.

    """
    day = parse_date(week_start)
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    start = midnight - timedelta(minutes=tz_offset_minutes)
    end = start + timedelta(days=DAYS_IN_WEEK)
    return WeekWindow(week_of=week_start, start=start, end=end)
