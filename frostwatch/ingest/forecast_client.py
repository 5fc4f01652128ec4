"""NWS forecast client: points lookup followed by the gridpoint forecast."""

import logging
from datetime import datetime
from typing import Any

import httpx

from frostwatch.config.schema import ForecastConfig
from frostwatch.ingest.errors import UpstreamError
from frostwatch.ingest.staleness import current_periods
from frostwatch.models.forecast import ForecastPeriod, ForecastResult

logger = logging.getLogger(__name__)


class ForecastClient:
    """Two-step NWS forecast retrieval.

    /points/{lat},{lon} resolves the forecast grid for a coordinate and
    returns its forecast URL; that URL returns the half-day periods. NWS
    rejects requests without a descriptive User-Agent. Errors are not
    retried here.
    """

    def __init__(
        self,
        config: ForecastConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ForecastConfig()
        self._http = http_client

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.config.user_agent, "Accept": "application/geo+json"}

    async def get_forecast(
        self,
        lat: float,
        lon: float,
        include_raw: bool = False,
        now: datetime | None = None,
    ) -> ForecastResult:
        if self._http is not None:
            return await self._get_forecast(self._http, lat, lon, include_raw, now)
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            return await self._get_forecast(client, lat, lon, include_raw, now)

    async def _get_forecast(
        self,
        client: httpx.AsyncClient,
        lat: float,
        lon: float,
        include_raw: bool,
        now: datetime | None,
    ) -> ForecastResult:
        # NWS redirects coordinates with more than 4 decimals
        points_url = f"{self.config.base_url}/points/{lat:.4f},{lon:.4f}"
        points = await self._get_json(client, points_url, "points")
        forecast_url = (points.get("properties") or {}).get("forecast")
        if not forecast_url:
            logger.error("NWS points response for %s,%s has no forecast URL", lat, lon)
            raise UpstreamError(f"No forecast URL from NWS points for {lat},{lon}")

        forecast = await self._get_json(client, forecast_url, "forecast")
        properties = forecast.get("properties") or {}
        raw_periods = [
            parse_period(p) for p in properties.get("periods") or [] if isinstance(p, dict)
        ]

        periods = current_periods(raw_periods, now)
        used_fallback = False
        if not periods and raw_periods:
            logger.warning(
                "All %d NWS periods for %s,%s have ended; serving them unfiltered",
                len(raw_periods), lat, lon,
            )
            periods = list(raw_periods)
            used_fallback = True

        return ForecastResult(
            periods=periods,
            raw_count=len(raw_periods),
            used_stale_fallback=used_fallback,
            raw_periods=raw_periods if include_raw else None,
            raw_properties={"points": points.get("properties"), "forecast": properties}
            if include_raw
            else None,
        )

    async def _get_json(
        self, client: httpx.AsyncClient, url: str, step: str
    ) -> dict[str, Any]:
        try:
            resp = await client.get(url, headers=self.headers)
        except httpx.RequestError as e:
            logger.error("NWS %s request failed: %s -> %s", step, url, e)
            raise UpstreamError(f"NWS {step} request failed: {e}") from e
        if not resp.is_success:
            body = resp.text
            logger.error("NWS %s error %d: %s -> %s", step, resp.status_code, url, body)
            raise UpstreamError(
                f"NWS {step} error {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        try:
            payload = resp.json()
        except ValueError as e:
            payload = None
            logger.error("NWS %s returned non-JSON body: %s -> %s", step, url, e)
        if not isinstance(payload, dict):
            raise UpstreamError(
                f"NWS {step} returned an unreadable body",
                status_code=resp.status_code,
                body=resp.text,
            )
        return payload


def parse_period(raw: dict[str, Any]) -> ForecastPeriod:
    """Build a ForecastPeriod from an NWS period object.

    Accepts both the plain integer temperature and the quantitative
    {"unitCode": "wmoUnit:degF", "value": 41} form.
    """
    temperature = raw.get("temperature")
    unit = raw.get("temperatureUnit") or "F"
    if isinstance(temperature, dict):
        unit_code = temperature.get("unitCode") or ""
        unit = "C" if unit_code.endswith("degC") else "F"
        temperature = temperature.get("value")
    if isinstance(temperature, (int, float)) and not isinstance(temperature, bool):
        temperature = round(temperature)
    else:
        temperature = None

    return ForecastPeriod(
        name=raw.get("name", ""),
        start_time=raw.get("startTime", ""),
        end_time=raw.get("endTime", ""),
        temperature=temperature,
        temperature_unit=unit,
        is_daytime=bool(raw.get("isDaytime", False)),
        short_forecast=raw.get("shortForecast") or "",
        wind_speed=raw.get("windSpeed") or "",
        wind_direction=raw.get("windDirection") or "",
        detailed_forecast=raw.get("detailedForecast"),
    )
