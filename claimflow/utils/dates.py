"""Date parsing and range helpers shared by the claim and analytics services."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from claimflow.errors import ValidationError


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how the store persists DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_date(value, field: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid '{field}' format. Use YYYY-MM-DD.") from None


def week_start(day: date) -> date:
    """Sunday that opens the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` window over a claim's calendar date."""

    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def parse(cls, start_date: Optional[str] = None, end_date: Optional[str] = None) -> "DateRange":
        start = parse_iso_date(start_date, "startDate") if start_date else None
        end = parse_iso_date(end_date, "endDate") if end_date else None
        if start and end and start > end:
            raise ValidationError("'startDate' must not be after 'endDate'.")
        return cls(start, end)

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


ALL_TIME = DateRange()


def parse_iso_timestamp(value, field: str = "timestamp") -> datetime:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into naive UTC."""
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid '{field}' timestamp '{value}'.") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
