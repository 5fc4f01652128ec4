"""Common types and helpers shared across models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class TemperatureUnit(StrEnum):
    FAHRENHEIT = "F"
    CELSIUS = "C"


@dataclass(frozen=True)
class Temperature:
    """A temperature value tagged with its unit."""

    value: float
    unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT

    def to_fahrenheit(self) -> float:
        if self.unit == TemperatureUnit.CELSIUS:
            return self.value * 9 / 5 + 32
        return float(self.value)

    def __str__(self) -> str:
        value = int(self.value) if float(self.value).is_integer() else self.value
        return f"{value}°{self.unit.value}"


def parse_unit(raw: str | None) -> TemperatureUnit:
    """Map an upstream unit label ("F", "C", "wmoUnit:degC") to a TemperatureUnit."""
    if raw and raw.strip().upper().endswith("C"):
        return TemperatureUnit.CELSIUS
    return TemperatureUnit.FAHRENHEIT


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
