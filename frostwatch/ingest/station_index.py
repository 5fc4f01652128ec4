"""ZIP code to NOAA weather station lookup backed by a static dataset."""

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from frostwatch.ingest.errors import StationDataError
from frostwatch.models.station import StationRecord, normalize_zip

logger = logging.getLogger(__name__)

DEFAULT_DATASET = Path(__file__).parent.parent / "data" / "zip-stations.json"

_NON_DIGITS = re.compile(r"\D")


class StationIndex:
    def __init__(self, records: Iterable[StationRecord]):
        self._records: list[StationRecord] = list(records)
        self._by_zip: dict[str, StationRecord] = {}
        for record in self._records:
            self._by_zip[record.zip] = record

    @classmethod
    def from_file(cls, path: str | Path) -> "StationIndex":
        """Load an index from a JSON list or a {"zips": [...]} wrapper."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StationDataError(f"Cannot read station dataset {path}: {e}") from e

        rows = data.get("zips") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise StationDataError(
                f"Station dataset {path} is not a list of ZIP records"
            )

        try:
            records = [StationRecord.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise StationDataError(f"Malformed record in {path}: {e}") from e

        index = cls(records)
        logger.info("Loaded %d ZIP station records from %s", len(index), path)
        return index

    @classmethod
    def load_default(cls) -> "StationIndex":
        return cls.from_file(DEFAULT_DATASET)

    def __len__(self) -> int:
        return len(self._by_zip)

    def lookup(self, raw_zip: str) -> StationRecord | None:
        normalized = normalize_zip(raw_zip)
        if not normalized:
            return None
        record = self._by_zip.get(normalized)
        if record is None:
            logger.debug("ZIP %s not in station index", normalized)
        return record

    def search(self, query: str, limit: int = 10) -> list[StationRecord]:
        """Match by ZIP prefix or location substring, in dataset order."""
        if not query or not query.strip() or limit <= 0:
            return []

        query = query.strip()
        prefix = _NON_DIGITS.sub("", query)[:5]
        lower_query = query.lower()

        matches: list[StationRecord] = []
        for record in self._records:
            if len(matches) >= limit:
                break
            if (prefix and record.zip.startswith(prefix)) or (
                lower_query in record.location.lower()
            ):
                matches.append(record)
        return matches

    def all_records(self) -> list[StationRecord]:
        return list(self._records)
