"""NWS forecast and advisory models."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any

from frostwatch.models.climate import ClimateSummary
from frostwatch.models.common import Temperature, parse_unit
from frostwatch.models.station import StationRecord


@dataclass(frozen=True)
class ForecastPeriod:
    name: str
    start_time: str
    end_time: str
    temperature: int | None
    temperature_unit: str
    is_daytime: bool
    short_forecast: str
    wind_speed: str = ""
    wind_direction: str = ""
    detailed_forecast: str | None = None

    @property
    def reading(self) -> Temperature | None:
        if self.temperature is None:
            return None
        return Temperature(self.temperature, parse_unit(self.temperature_unit))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "isDaytime": self.is_daytime,
            "temperature": self.temperature,
            "temperatureUnit": self.temperature_unit,
            "windSpeed": self.wind_speed,
            "windDirection": self.wind_direction,
            "shortForecast": self.short_forecast,
            "detailedForecast": self.detailed_forecast,
        }


@dataclass(frozen=True)
class ForecastResult:
    periods: list[ForecastPeriod]
    raw_count: int
    used_stale_fallback: bool = False
    raw_periods: list[ForecastPeriod] | None = None
    raw_properties: dict[str, Any] | None = None


@dataclass(frozen=True)
class DayForecast:
    day_name: str  # "Mon", "Tue", ...
    date: date
    high: int | None
    low: int | None
    icon: str
    unit: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "dayName": self.day_name,
            "date": self.date.isoformat(),
            "high": self.high,
            "low": self.low,
            "icon": self.icon,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class FreezeRisk:
    risky: bool
    period: ForecastPeriod | None = None

    @property
    def warning(self) -> str | None:
        if not self.risky or self.period is None:
            return None
        return (
            f"Freeze risk soon: {self.period.name} "
            f"{self.period.temperature}°{self.period.temperature_unit}"
        )


class ForecastStatus(StrEnum):
    AVAILABLE = "available"
    EMPTY = "empty"  # upstream answered with no periods
    UNAVAILABLE = "unavailable"  # upstream failed


@dataclass(frozen=True)
class Advisory:
    zip: str
    station: StationRecord | None
    climate: ClimateSummary | None
    days: list[DayForecast] = field(default_factory=list)
    freeze_warning: str | None = None
    forecast_status: ForecastStatus = ForecastStatus.EMPTY
    # every period had already ended; days show the last forecast issued
    stale_forecast: bool = False
    forecast_error: str | None = None
    climate_error: str | None = None
    fetched_at: str = ""

    @classmethod
    def empty(cls, zip_code: str, fetched_at: str = "") -> "Advisory":
        """Advisory for a ZIP code with no station record."""
        return cls(zip=zip_code, station=None, climate=None, fetched_at=fetched_at)
