"""
Report date ranges (UTC).

Named ranges are relative to "now": daily/yesterday, weekly (previous
Sunday-start week), monthly (previous calendar month), last7days and
last30days. Unknown names fall back to daily. Custom ranges accept a few
explicit formats and ISO 8601.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

from backend_txreport.core.exceptions import InvalidDateError

REPORT_TYPES = ("daily", "yesterday", "weekly", "monthly", "last7days", "last30days", "custom")

CUSTOM_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
)
DATE_ONLY_FORMAT = "%Y-%m-%d"

_END_OF_DAY = time(23, 59, 59, 999000)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), _END_OF_DAY, tzinfo=moment.tzinfo)


def to_iso(moment: datetime) -> str:
    """UTC ISO 8601 with milliseconds and Z suffix (2024-01-15T00:00:00.000Z)."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def to_dict(self) -> dict[str, str]:
        return {"start": to_iso(self.start), "end": to_iso(self.end)}

    def label(self) -> str:
        """YYYY-MM-DD_to_YYYY-MM-DD, used in file names."""
        return f"{self.start:%Y-%m-%d}_to_{self.end:%Y-%m-%d}"


def get_date_range(report_type: str, now: datetime | None = None) -> DateRange:
    """Return the UTC range a named report covers."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    yesterday = now - timedelta(days=1)

    if report_type == "weekly":
        last_week = now - timedelta(weeks=1)
        week_start = _start_of_day(last_week - timedelta(days=(last_week.weekday() + 1) % 7))
        return DateRange(week_start, _end_of_day(week_start + timedelta(days=6)))
    if report_type == "monthly":
        first_of_this_month = _start_of_day(now.replace(day=1))
        last_of_previous = first_of_this_month - timedelta(days=1)
        return DateRange(_start_of_day(last_of_previous.replace(day=1)), _end_of_day(last_of_previous))
    if report_type == "last7days":
        return DateRange(_start_of_day(now - timedelta(days=7)), _end_of_day(yesterday))
    if report_type == "last30days":
        return DateRange(_start_of_day(now - timedelta(days=30)), _end_of_day(yesterday))
    # daily, yesterday and anything unrecognised
    return DateRange(_start_of_day(yesterday), _end_of_day(yesterday))


def _parse(text: str) -> tuple[datetime, bool]:
    """Parse text; returns (UTC datetime, date_only)."""
    clean = text.replace('"', "").replace("'", "").strip()
    try:
        return datetime.strptime(clean, DATE_ONLY_FORMAT).replace(tzinfo=timezone.utc), True
    except ValueError:
        pass
    for fmt in CUSTOM_DATE_FORMATS:
        try:
            return datetime.strptime(clean, fmt).replace(tzinfo=timezone.utc), False
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(clean.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidDateError(text) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc), False


def parse_custom_date(text: str) -> datetime:
    """
    Parse a user-supplied date.

    Accepts YYYY-MM-DD, YYYY-MM-DD HH:mm, YYYY-MM-DD HH:mm:ss and ISO 8601
    (with optional fraction and Z/offset). Naive values are UTC. Surrounding
    quotes are ignored. Raises InvalidDateError otherwise.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidDateError(str(text))
    return _parse(text)[0]


def custom_date_range(start: str, end: str) -> DateRange:
    """Range from two custom dates; a date-only end covers the whole day."""
    if not isinstance(start, str) or not isinstance(end, str) or not start.strip() or not end.strip():
        raise InvalidDateError(f"{start!r} / {end!r}")
    start_at, _ = _parse(start)
    end_at, end_date_only = _parse(end)
    if end_date_only:
        end_at = _end_of_day(end_at)
    return DateRange(start_at, end_at)


def resolve_date_range(
    report_type: str,
    start: str | None = None,
    end: str | None = None,
    now: datetime | None = None,
) -> DateRange:
    """custom with both dates gives a custom range; everything else a named one."""
    if report_type == "custom" and start and end:
        return custom_date_range(start, end)
    return get_date_range(report_type, now=now)
