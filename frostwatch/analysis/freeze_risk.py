"""Freeze-risk signal from upcoming night periods."""

from collections.abc import Iterable
from datetime import UTC, datetime

from frostwatch.ingest.staleness import is_period_current
from frostwatch.models.forecast import ForecastPeriod, FreezeRisk

DEFAULT_THRESHOLD_F = 36.0
DEFAULT_LOOKAHEAD_NIGHTS = 5


def upcoming_nights(
    periods: Iterable[ForecastPeriod] | None,
    now: datetime | None = None,
    limit: int = DEFAULT_LOOKAHEAD_NIGHTS,
) -> list[ForecastPeriod]:
    if now is None:
        now = datetime.now(UTC)
    nights = [p for p in periods or [] if not p.is_daytime and is_period_current(p, now)]
    return nights[:limit]


def evaluate(
    periods: Iterable[ForecastPeriod] | None,
    now: datetime | None = None,
    threshold_f: float = DEFAULT_THRESHOLD_F,
    lookahead: int = DEFAULT_LOOKAHEAD_NIGHTS,
) -> FreezeRisk:
    """Flag the first upcoming night at or below threshold_f.

    This is a first-match rule, not the coldest night. No data yields
    risky=False; callers must keep "no forecast" separate from "no risk".
    """
    for night in upcoming_nights(periods, now, lookahead):
        reading = night.reading
        if reading is not None and reading.to_fahrenheit() <= threshold_f:
            return FreezeRisk(risky=True, period=night)
    return FreezeRisk(risky=False)


def format_freeze_warning(risk: FreezeRisk) -> str | None:
    return risk.warning
