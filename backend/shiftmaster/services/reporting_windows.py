"""
ShiftMaster Backend — Reporting Window Calculator
===================================================

What:  Derives the "today" and "this week" time windows for dashboard reports.
How:   Converts `now` into the reporting timezone, truncates to local
       midnight, converts that instant to UTC, then adds fixed durations.
Who:   Called by DashboardService once per /api/dashboard/stats request.

Timezone policy:
    Every window is expressed in UTC. The reporting timezone only decides
    where midnight falls, using the UTC offset that zone has at `now`.
    Windows are exactly 24h and 7×24h long and always contain `now`, even
    on a DST changeover day. The week start is that same fixed offset
    stepped back whole days, so when a DST change falls between the week
    start and `now` the week begins one DST delta away from wall-clock
    midnight (e.g. 23:00 the evening before) for the rest of that week.

    Example (REPORT_TIMEZONE=UTC, week starts Monday):
        now       = 2024-06-12T09:00:00+00:00   (Wednesday)
        today     = [2024-06-12T00:00:00+00:00, 2024-06-13T00:00:00+00:00)
        this_week = [2024-06-10T00:00:00+00:00, 2024-06-17T00:00:00+00:00)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from shiftmaster.exceptions import InvalidInputError

MONDAY = 0
SUNDAY = 6

DAY = timedelta(hours=24)
WEEK = timedelta(days=7)


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end) of aware UTC datetimes."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidInputError("TimeWindow bounds must be timezone-aware")
        if not self.start < self.end:
            raise InvalidInputError(
                "TimeWindow start must be before end",
                context={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    def __contains__(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def isoformat(self) -> tuple[str, str]:
        """Both bounds as ISO-8601 strings with an explicit +00:00 offset."""
        return (
            self.start.astimezone(timezone.utc).isoformat(),
            self.end.astimezone(timezone.utc).isoformat(),
        )


@dataclass(frozen=True)
class ReportingBoundaries:
    today: TimeWindow
    this_week: TimeWindow


def _local_midnight_utc(local: datetime) -> datetime:
    """UTC instant of midnight on `local`'s calendar date, in `local`'s zone."""
    midnight = datetime(local.year, local.month, local.day, tzinfo=local.tzinfo)
    return midnight.astimezone(timezone.utc)


def compute_boundaries(
    now: datetime,
    week_start_day: int = MONDAY,
    tz: tzinfo = timezone.utc,
) -> ReportingBoundaries:
    """
    Compute the today / this-week windows containing `now`.

    Args:
        now:            Aware timestamp; no clock is read here.
        week_start_day: 0=Monday ... 6=Sunday.
        tz:             Zone whose midnight the windows start on.

    Returns:
        ReportingBoundaries with UTC windows where
        today.start <= now < today.end and this_week.start <= now < this_week.end.

    Raises:
        InvalidInputError: `now` is not an aware datetime, lies too close to
                           datetime.min or datetime.max for its windows to
                           exist, or `week_start_day` is outside 0..6.
    """
    if not isinstance(now, datetime):
        raise InvalidInputError(
            f"now must be a datetime, got {type(now).__name__}", field="now"
        )
    if now.tzinfo is None or now.utcoffset() is None:
        raise InvalidInputError("now must be timezone-aware", field="now")
    if isinstance(week_start_day, bool) or not isinstance(week_start_day, int) \
            or not MONDAY <= week_start_day <= SUNDAY:
        raise InvalidInputError(
            f"week_start_day must be an integer 0-6, got {week_start_day!r}",
            field="week_start_day",
        )

    try:
        # Midnight at the zone offset in effect at `now`.
        offset = now.astimezone(tz).utcoffset()
        local_now = now.astimezone(timezone(offset))
        today_start = _local_midnight_utc(local_now)

        days_into_week = (local_now.weekday() - week_start_day) % 7
        week_start = today_start - timedelta(days=days_into_week)

        return ReportingBoundaries(
            today=TimeWindow(start=today_start, end=today_start + DAY),
            this_week=TimeWindow(start=week_start, end=week_start + WEEK),
        )
    except OverflowError:
        raise InvalidInputError(
            "now is outside the supported date range",
            field="now",
            context={"now": now.isoformat()},
        ) from None
