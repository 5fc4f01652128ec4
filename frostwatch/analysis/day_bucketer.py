"""Fold half-day forecast periods into calendar-day highs and lows."""

from collections.abc import Iterable
from datetime import date, datetime

from frostwatch.models.forecast import DayForecast, ForecastPeriod

MAX_DAYS = 7
DEFAULT_ICON = "🌤️"

# Checked in order; more specific phrases must come before broader ones.
ICON_RULES: list[tuple[tuple[str, ...], str]] = [
    (("thunderstorm", "thunder", "t-storm"), "⛈️"),
    (("snow", "sleet", "flurries", "blizzard", "freezing rain"), "❄️"),
    (("rain", "shower", "drizzle"), "🌧️"),
    (("fog", "mist", "haze", "smoke"), "🌫️"),
    (("partly cloudy", "partly sunny", "mostly sunny"), "⛅"),
    (("mostly cloudy",), "🌥️"),
    (("cloudy", "overcast"), "☁️"),
    (("sunny", "clear"), "☀️"),
]


def forecast_icon(short_forecast: str | None) -> str:
    text = (short_forecast or "").lower()
    for keywords, icon in ICON_RULES:
        if any(k in text for k in keywords):
            return icon
    return DEFAULT_ICON


def _period_date(period: ForecastPeriod) -> date | None:
    # Date in the period's own UTC offset, i.e. the forecast location's local day
    try:
        return datetime.fromisoformat(period.start_time).date()
    except (ValueError, TypeError):
        return None


class _DayBucket:
    def __init__(self, day: date, first: ForecastPeriod):
        self.day = day
        self.high: int | None = None
        self.low: int | None = None
        self.icon = forecast_icon(first.short_forecast)
        self.unit = first.temperature_unit
        self.has_daytime_icon = False

    def add(self, period: ForecastPeriod) -> None:
        if period.is_daytime and not self.has_daytime_icon:
            self.icon = forecast_icon(period.short_forecast)
            self.has_daytime_icon = True
        if period.temperature is None:
            return
        if period.is_daytime:
            if self.high is None or period.temperature > self.high:
                self.high = period.temperature
        elif self.low is None or period.temperature < self.low:
            self.low = period.temperature

    def to_forecast(self) -> DayForecast:
        return DayForecast(
            day_name=self.day.strftime("%a"),
            date=self.day,
            high=self.high,
            low=self.low,
            icon=self.icon,
            unit=self.unit,
        )


def group_by_day(periods: Iterable[ForecastPeriod] | None) -> list[DayForecast]:
    """Group periods by start date; at most MAX_DAYS days, ascending."""
    buckets: dict[date, _DayBucket] = {}
    for period in periods or []:
        day = _period_date(period)
        if day is None:
            continue
        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = _DayBucket(day, period)
        bucket.add(period)

    ordered = sorted(buckets.values(), key=lambda b: b.day)
    return [b.to_forecast() for b in ordered[:MAX_DAYS]]
