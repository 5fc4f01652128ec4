"""Timestamp parsing and staleness checks for forecast periods."""

from collections.abc import Iterable
from datetime import UTC, datetime

from frostwatch.models.forecast import ForecastPeriod


def parse_timestamp(iso_str: str | None) -> datetime | None:
    """Parse an ISO timestamp; naive values are treated as UTC."""
    if not iso_str:
        return None
    try:
        dt = datetime.fromisoformat(iso_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt
    except (ValueError, TypeError):
        return None


def period_end(period: ForecastPeriod) -> datetime | None:
    """End of a period, falling back to its start when endTime is missing."""
    return parse_timestamp(period.end_time or period.start_time)


def is_period_current(period: ForecastPeriod, now: datetime | None = None) -> bool:
    """True when the period ends strictly after now. Unparseable periods are not current."""
    if now is None:
        now = datetime.now(UTC)
    end = period_end(period)
    if end is None:
        return False
    return end > now


def current_periods(
    periods: Iterable[ForecastPeriod], now: datetime | None = None
) -> list[ForecastPeriod]:
    if now is None:
        now = datetime.now(UTC)
    return [p for p in periods if is_period_current(p, now)]
