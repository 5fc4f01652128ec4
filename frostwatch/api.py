"""Frost advisory HTTP API: ZIP lookup, climate normals, forecast and advisory."""

import logging

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from frostwatch.config.schema import AdvisoryConfig
from frostwatch.ingest.errors import NormalsConfigError, UpstreamError
from frostwatch.pipeline.advisory_pipeline import AdvisoryOrchestrator
from frostwatch.reporting.formatters import advisory_to_dict

logger = logging.getLogger(__name__)


def create_app(
    orchestrator: AdvisoryOrchestrator | None = None,
    config: AdvisoryConfig | None = None,
) -> FastAPI:
    """Build the app. Without an orchestrator one is wired from config on first use."""
    app = FastAPI(title="Frostwatch Advisory API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.state.orchestrator = orchestrator
    app.state.config = config or AdvisoryConfig()
    _register_routes(app)
    return app


def _orchestrator(request: Request) -> AdvisoryOrchestrator:
    state = request.app.state
    if state.orchestrator is None:
        state.orchestrator = AdvisoryOrchestrator.from_config(state.config)
    return state.orchestrator


def _upstream_status(error: UpstreamError) -> int:
    """Mirror upstream 4xx/5xx; anything else (network, bad body) is a 502."""
    if error.status_code and error.status_code >= 400:
        return error.status_code
    return 502


def _register_routes(app: FastAPI) -> None:
    # ── Station index ───────────────────────────────────────────

    @app.get("/api/zip-lookup")
    async def zip_lookup(request: Request, zip: str | None = None):
        """Station record for a ZIP code."""
        if not zip:
            raise HTTPException(400, "ZIP code required")
        record = _orchestrator(request).stations.lookup(zip)
        if record is None:
            logger.warning("ZIP lookup: ZIP code not found: %s", zip)
            raise HTTPException(404, "ZIP code not found")
        return record.to_dict()

    @app.get("/api/zip-search")
    async def zip_search(
        request: Request, q: str = "", limit: int = Query(default=10, ge=1, le=100)
    ):
        """ZIP prefix or location-name search."""
        records = _orchestrator(request).stations.search(q, limit=limit)
        return [r.to_dict() for r in records]

    # ── Upstream data ───────────────────────────────────────────

    @app.get("/api/noaa-climate")
    async def noaa_climate(
        request: Request,
        stations: str | None = None,
        force_refresh: bool = Query(default=False, alias="forceRefresh"),
    ):
        """30-year normals for a comma-separated station list."""
        station_ids = [s for s in (stations or "").split(",") if s.strip()]
        if not station_ids:
            raise HTTPException(400, "Stations parameter required")
        try:
            summary = await _orchestrator(request).normals.get_normals_for_stations(
                station_ids, force_refresh=force_refresh
            )
        except NormalsConfigError as e:
            raise HTTPException(500, str(e)) from e
        except UpstreamError as e:
            raise HTTPException(_upstream_status(e), str(e)) from e
        return summary.to_dict()

    @app.get("/api/forecast")
    async def forecast(
        request: Request,
        zip: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
        include_raw: bool = Query(default=False, alias="includeRaw"),
    ):
        """Current forecast periods for a ZIP code or coordinate."""
        orchestrator = _orchestrator(request)
        if lat is None or lon is None:
            if not zip:
                raise HTTPException(400, "Provide zip or lat/lon")
            record = orchestrator.stations.lookup(zip)
            if record is None:
                raise HTTPException(404, "ZIP not found")
            lat, lon = record.latitude, record.longitude

        try:
            result = await orchestrator.forecasts.get_forecast(
                lat, lon, include_raw=include_raw
            )
        except UpstreamError as e:
            logger.error("Forecast API error for %s,%s: %s", lat, lon, e)
            raise HTTPException(502, "Failed to fetch forecast") from e

        body = {
            "periods": [p.to_dict() for p in result.periods],
            "rawCount": result.raw_count,
            "staleFallback": result.used_stale_fallback,
        }
        if include_raw:
            body["rawPeriods"] = [p.to_dict() for p in result.raw_periods or []]
            body["rawProperties"] = result.raw_properties
        return body

    @app.get("/api/advisory")
    async def advisory(
        request: Request,
        zip: str | None = None,
        force_refresh: bool = Query(default=False, alias="forceRefresh"),
    ):
        """Climate normals, 7-day summary and freeze warning for a ZIP code."""
        if not zip:
            raise HTTPException(400, "ZIP code required")
        try:
            result = await _orchestrator(request).get_advisory(
                zip, force_refresh=force_refresh
            )
        except NormalsConfigError as e:
            raise HTTPException(500, str(e)) from e
        return advisory_to_dict(result)

    @app.get("/api/health")
    async def health(request: Request):
        """Quick health check."""
        return {
            "ok": True,
            "stations_loaded": len(_orchestrator(request).stations),
        }


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8777)
