"""Output formatters for advisories."""

import json
from datetime import date, timedelta

from frostwatch.models.climate import ClimateSummary
from frostwatch.models.forecast import Advisory, ForecastStatus


def day_of_year_label(day: int | None, year: int = 2021) -> str:
    """'Apr 12' for a day-of-year; a non-leap year is used for normals."""
    if day is None:
        return "n/a"
    return (date(year, 1, 1) + timedelta(days=day - 1)).strftime("%b %d")


def advisory_to_dict(a: Advisory) -> dict:
    return {
        "zip": a.zip,
        "station": a.station.to_dict() if a.station else None,
        "climate": a.climate.to_dict() if a.climate else None,
        "days": [d.to_dict() for d in a.days],
        "freezeWarning": a.freeze_warning,
        "forecastStatus": a.forecast_status.value,
        "staleForecast": a.stale_forecast,
        "forecastError": a.forecast_error,
        "climateError": a.climate_error,
        "fetchedAt": a.fetched_at,
    }


def format_advisory_json(a: Advisory) -> str:
    return json.dumps(advisory_to_dict(a), indent=2, ensure_ascii=False)


def format_climate_text(c: ClimateSummary) -> str:
    winter = f"{c.avg_winter_temp_f:.1f}°F" if c.avg_winter_temp_f is not None else "n/a"
    return (
        f"Last spring frost: {day_of_year_label(c.spring_frost_day)} | "
        f"First fall frost: {day_of_year_label(c.winter_frost_day)} | "
        f"Winter low normal: {winter} "
        f"({len(c.used_stations)} stations)"
    )


def format_advisory_text(a: Advisory) -> str:
    """Plain text advisory for the terminal."""
    if a.station is None:
        return f"No weather station data for ZIP {a.zip or '(empty)'}"

    lines = [f"=== {a.station.location} ({a.zip}) | {a.station.primary_station.name} ==="]
    if a.climate is not None:
        lines.append(format_climate_text(a.climate))
    elif a.climate_error:
        lines.append(f"Climate normals unavailable: {a.climate_error}")

    if a.forecast_status == ForecastStatus.UNAVAILABLE:
        lines.append(f"Forecast unavailable: {a.forecast_error}")
    elif a.forecast_status == ForecastStatus.EMPTY:
        lines.append("No forecast data yet")
    else:
        for d in a.days:
            high = f"{d.high}°" if d.high is not None else "--"
            low = f"{d.low}°" if d.low is not None else "--"
            lines.append(f"  {d.day_name} {d.date.isoformat()} {d.icon} {high} / {low}")
        if a.stale_forecast:
            lines.append("Forecast is out of date; freeze risk unknown")
        else:
            lines.append(a.freeze_warning or "No freeze risk in the next 5 nights")
    return "\n".join(lines)
