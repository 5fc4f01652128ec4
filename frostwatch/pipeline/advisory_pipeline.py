"""Advisory pipeline: ZIP -> stations -> normals + forecast -> days + freeze warning."""

import asyncio
import logging
from datetime import datetime

from frostwatch.analysis.day_bucketer import group_by_day
from frostwatch.analysis.freeze_risk import evaluate
from frostwatch.config.schema import AdvisoryConfig
from frostwatch.ingest.errors import NormalsConfigError, UpstreamError
from frostwatch.ingest.forecast_client import ForecastClient
from frostwatch.ingest.normals_cache import NormalsCache
from frostwatch.ingest.normals_client import ClimateNormalsClient
from frostwatch.ingest.station_index import StationIndex, normalize_zip
from frostwatch.models.climate import ClimateSummary
from frostwatch.models.common import utc_now_iso
from frostwatch.models.forecast import (
    Advisory,
    ForecastResult,
    ForecastStatus,
)
from frostwatch.models.station import StationRecord

logger = logging.getLogger(__name__)


class AdvisoryOrchestrator:
    def __init__(
        self,
        stations: StationIndex,
        normals: ClimateNormalsClient,
        forecasts: ForecastClient,
        config: AdvisoryConfig | None = None,
    ):
        self.config = config or AdvisoryConfig()
        self.stations = stations
        self.normals = normals
        self.forecasts = forecasts

    @classmethod
    def from_config(cls, config: AdvisoryConfig | None = None) -> "AdvisoryOrchestrator":
        """Wire up the default collaborators; the normals cache lives with this instance."""
        config = config or AdvisoryConfig()
        if config.stations.dataset_path:
            stations = StationIndex.from_file(config.stations.dataset_path)
        else:
            stations = StationIndex.load_default()
        return cls(
            stations=stations,
            normals=ClimateNormalsClient(config.normals, cache=NormalsCache()),
            forecasts=ForecastClient(config.forecast),
            config=config,
        )

    async def get_advisory(
        self,
        zip_code: str,
        force_refresh: bool = False,
        now: datetime | None = None,
    ) -> Advisory:
        normalized = normalize_zip(zip_code)
        record = self.stations.lookup(zip_code)
        if record is None:
            logger.info("No station record for ZIP %r", zip_code)
            return Advisory.empty(normalized, fetched_at=utc_now_iso())

        climate_result, forecast_result = await asyncio.gather(
            self.normals.get_normals_for_record(record, force_refresh=force_refresh),
            self.forecasts.get_forecast(record.latitude, record.longitude, now=now),
            return_exceptions=True,
        )

        climate, climate_error = self._climate_outcome(record, climate_result)
        return self._build(record, climate, climate_error, forecast_result, now)

    async def refresh_forecast(
        self, zip_code: str, now: datetime | None = None
    ) -> Advisory:
        """Re-fetch only the forecast; normals come from the cache when present."""
        return await self.get_advisory(zip_code, force_refresh=False, now=now)

    def _climate_outcome(
        self, record: StationRecord, result: ClimateSummary | BaseException
    ) -> tuple[ClimateSummary | None, str | None]:
        if isinstance(result, NormalsConfigError):
            raise result
        if isinstance(result, (UpstreamError, ValueError)):
            logger.warning("Climate normals unavailable for %s: %s", record.zip, result)
            return None, str(result)
        if isinstance(result, BaseException):
            raise result
        return result, None

    def _build(
        self,
        record: StationRecord,
        climate: ClimateSummary | None,
        climate_error: str | None,
        forecast: ForecastResult | BaseException,
        now: datetime | None,
    ) -> Advisory:
        if isinstance(forecast, UpstreamError):
            logger.warning("Forecast unavailable for %s: %s", record.zip, forecast)
            return Advisory(
                zip=record.zip,
                station=record,
                climate=climate,
                forecast_status=ForecastStatus.UNAVAILABLE,
                forecast_error=str(forecast),
                climate_error=climate_error,
                fetched_at=utc_now_iso(),
            )
        if isinstance(forecast, BaseException):
            raise forecast

        # days and freeze warning must see the same period list
        periods = forecast.periods
        if forecast.used_stale_fallback:
            logger.warning("Advisory for %s built from an expired forecast", record.zip)
        risk = evaluate(
            periods,
            now=now,
            threshold_f=self.config.freeze.threshold_f,
            lookahead=self.config.freeze.lookahead_nights,
        )
        return Advisory(
            zip=record.zip,
            station=record,
            climate=climate,
            days=group_by_day(periods),
            freeze_warning=risk.warning,
            forecast_status=ForecastStatus.AVAILABLE if periods else ForecastStatus.EMPTY,
            stale_forecast=forecast.used_stale_fallback,
            climate_error=climate_error,
            fetched_at=utc_now_iso(),
        )
