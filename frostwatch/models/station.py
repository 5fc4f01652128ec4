"""ZIP code to weather station records."""

import re
from dataclasses import dataclass
from typing import Any

_NON_DIGITS = re.compile(r"\D")


def normalize_zip(raw: str | int | None) -> str:
    """Strip non-digits, zero-pad and truncate to 5 characters.

    Returns an empty string when the input has no digits at all.
    """
    digits = _NON_DIGITS.sub("", str(raw) if raw is not None else "")
    if not digits:
        return ""
    return digits.zfill(5)[:5]


@dataclass(frozen=True)
class PrimaryStation:
    id: str
    name: str
    distance_meters: float


@dataclass(frozen=True)
class StationRecord:
    zip: str  # always 5 digits, zero-padded
    location: str
    latitude: float
    longitude: float
    elevation_meters: float
    primary_station: PrimaryStation
    alternate_stations: tuple[str, ...] = ()

    @property
    def station_ids(self) -> list[str]:
        """Primary station first, then alternates."""
        return [self.primary_station.id, *self.alternate_stations]

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "StationRecord":
        """Build a record from the camelCase dataset format."""
        primary = raw["primaryStation"]
        zip_code = normalize_zip(raw["zip"])
        if not zip_code:
            raise ValueError(f"ZIP has no digits: {raw['zip']!r}")
        return cls(
            zip=zip_code,
            location=raw.get("location", ""),
            latitude=float(raw["latitude"]),
            longitude=float(raw["longitude"]),
            elevation_meters=float(raw.get("elevationMeters") or 0.0),
            primary_station=PrimaryStation(
                id=primary["id"],
                name=primary.get("name", ""),
                distance_meters=float(primary.get("distanceMeters") or 0.0),
            ),
            alternate_stations=tuple(raw.get("alternateStations") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "zip": self.zip,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevationMeters": self.elevation_meters,
            "primaryStation": {
                "id": self.primary_station.id,
                "name": self.primary_station.name,
                "distanceMeters": self.primary_station.distance_meters,
            },
            "alternateStations": list(self.alternate_stations),
        }
