"""NOAA Climate Data Online client for 30-year climate normals."""

import logging
import math
import os
from collections.abc import Iterable

import httpx

from frostwatch.config.defaults import (
    DEFAULT_DATATYPES,
    FALL_FROST_DATATYPE,
    SPRING_FROST_DATATYPE,
    WINTER_TMIN_DATATYPE,
)
from frostwatch.config.schema import NormalsConfig
from frostwatch.ingest.errors import NormalsConfigError, UpstreamError
from frostwatch.ingest.normals_cache import NormalsCache
from frostwatch.models.climate import ClimateSummary
from frostwatch.models.common import utc_now_iso
from frostwatch.models.station import StationRecord

logger = logging.getLogger(__name__)


class ClimateNormalsClient:
    """Fetches spring/fall frost days and winter minimum normals for a station set.

    Results are cached per sorted station set for the life of the cache
    object. Errors are raised to the caller and never cached, so the next
    call tries again.
    """

    def __init__(
        self,
        config: NormalsConfig | None = None,
        cache: NormalsCache | None = None,
        token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or NormalsConfig()
        self.cache = cache if cache is not None else NormalsCache()
        self._token = token
        self._http = http_client

    def resolve_token(self) -> str:
        """Explicit token first, then the first non-empty configured env var."""
        if self._token:
            return self._token
        for name in self.config.token_env_vars:
            value = os.environ.get(name, "").strip()
            if value:
                return value
        raise NormalsConfigError(
            "NOAA API token not found. Set one of: "
            + ", ".join(self.config.token_env_vars)
        )

    async def get_normals_for_stations(
        self, station_ids: Iterable[str], force_refresh: bool = False
    ) -> ClimateSummary:
        stations = [s.strip() for s in station_ids if s and s.strip()]
        if not stations:
            raise ValueError("At least one station ID is required")

        if not force_refresh:
            cached = self.cache.get(stations)
            if cached is not None:
                logger.debug("Normals cache hit for %s", ",".join(stations))
                return cached

        token = self.resolve_token()
        results = await self._fetch_results(stations, token)
        summary = summarize_results(results, stations)
        self.cache.put(stations, summary)
        logger.info(
            "Fetched normals for %d stations: spring=%s fall=%s winter=%s",
            len(stations),
            summary.spring_frost_day,
            summary.winter_frost_day,
            summary.avg_winter_temp_f,
        )
        return summary

    async def get_normals_for_record(
        self, record: StationRecord, force_refresh: bool = False
    ) -> ClimateSummary:
        return await self.get_normals_for_stations(
            record.station_ids, force_refresh=force_refresh
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def _params(self, stations: list[str]) -> list[tuple[str, str]]:
        params = [
            ("datasetid", self.config.dataset_id),
            ("startdate", self.config.anchor_date),
            ("enddate", self.config.anchor_date),
            ("limit", str(self.config.result_limit)),
        ]
        params.extend(("datatypeid", d) for d in DEFAULT_DATATYPES)
        params.extend(("stationid", s) for s in stations)
        return params

    async def _fetch_results(self, stations: list[str], token: str) -> list[dict]:
        url = f"{self.config.base_url}/data"
        headers = {"token": token, "Accept": "application/json"}
        try:
            if self._http is not None:
                resp = await self._http.get(
                    url, params=self._params(stations), headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                    resp = await client.get(
                        url, params=self._params(stations), headers=headers
                    )
        except httpx.RequestError as e:
            logger.error("NOAA normals request failed for %s: %s", stations, e)
            raise UpstreamError(f"NOAA normals request failed: {e}") from e

        if not resp.is_success:
            body = resp.text
            logger.error("NOAA normals API %d for %s: %s", resp.status_code, stations, body)
            raise UpstreamError(
                f"NOAA normals request failed: HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )

        # CDO answers an empty JSON object when nothing matches
        if not resp.content:
            return []
        try:
            payload = resp.json()
        except ValueError as e:
            payload = None
            logger.error("NOAA normals returned non-JSON body for %s: %s", stations, e)
        if not isinstance(payload, dict):
            raise UpstreamError(
                "NOAA normals returned an unreadable body",
                status_code=resp.status_code,
                body=resp.text,
            )
        return payload.get("results") or []


def summarize_results(results: list[dict], stations: list[str]) -> ClimateSummary:
    """Average each data type across all reporting stations."""
    spring = _average(_values_for(results, SPRING_FROST_DATATYPE))
    fall = _average(_values_for(results, FALL_FROST_DATATYPE))
    winter = _average(_values_for(results, WINTER_TMIN_DATATYPE))

    return ClimateSummary(
        spring_frost_day=_round_half_up(spring) if spring is not None else None,
        winter_frost_day=_round_half_up(fall) if fall is not None else None,
        # normals temperatures come back in tenths of a degree F
        avg_winter_temp_f=round(winter / 10, 1) if winter is not None else None,
        used_stations=list(stations),
        fetched_at=utc_now_iso(),
    )


def _values_for(results: list[dict], datatype: str) -> list[float]:
    values = []
    for entry in results:
        if entry.get("datatype") != datatype:
            continue
        value = entry.get("value")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if math.isfinite(value):
            values.append(float(value))
    return values


def _average(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
