"""In-memory cache of climate normals keyed by station set."""

from collections.abc import Iterable

from frostwatch.models.climate import ClimateSummary


def cache_key(station_ids: Iterable[str]) -> str:
    """Order-independent key: sorted station IDs joined by commas."""
    return ",".join(sorted(station_ids))


class NormalsCache:
    """Process-lifetime cache with no expiry.

    Not locked. Safe on a single event loop; two concurrent misses for the
    same key both fetch and the later write wins.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ClimateSummary] = {}

    def get(self, station_ids: Iterable[str]) -> ClimateSummary | None:
        return self._entries.get(cache_key(station_ids))

    def put(self, station_ids: Iterable[str], summary: ClimateSummary) -> None:
        self._entries[cache_key(station_ids)] = summary

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, station_ids: object) -> bool:
        if isinstance(station_ids, str):
            return station_ids in self._entries
        return cache_key(station_ids) in self._entries  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._entries)
