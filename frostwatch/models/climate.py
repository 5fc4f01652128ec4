"""NOAA climate normals models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ClimateSummary:
    spring_frost_day: int | None  # day of year of last spring frost
    winter_frost_day: int | None  # day of year of first fall frost
    avg_winter_temp_f: float | None
    used_stations: list[str] = field(default_factory=list)
    fetched_at: str = ""

    def to_dict(self) -> dict:
        return {
            "springFrostDay": self.spring_frost_day,
            "winterFrostDay": self.winter_frost_day,
            "avgWinterTempF": self.avg_winter_temp_f,
            "usedStations": list(self.used_stations),
            "fetchedAt": self.fetched_at,
        }
