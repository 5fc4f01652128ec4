"""CLI entry point for the frost advisory engine."""

import argparse
import asyncio
import json
import logging
import signal

from frostwatch.config.loader import get_config_value, load_config, set_config_value
from frostwatch.config.schema import AdvisoryConfig
from frostwatch.ingest.errors import FrostwatchError, UpstreamError
from frostwatch.models.forecast import Advisory
from frostwatch.pipeline.advisory_pipeline import AdvisoryOrchestrator
from frostwatch.refresh import AdvisoryRefresher
from frostwatch.reporting.formatters import (
    format_advisory_json,
    format_advisory_text,
    format_climate_text,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="frostwatch",
        description="Climate normals and frost advisories by ZIP code",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    lookup_p = sub.add_parser("lookup", help="Show the station record for a ZIP")
    lookup_p.add_argument("zip")

    search_p = sub.add_parser("search", help="Search ZIPs by prefix or place name")
    search_p.add_argument("query")
    search_p.add_argument("--limit", type=int, default=10)

    normals_p = sub.add_parser("normals", help="Fetch climate normals for stations")
    normals_p.add_argument("stations", nargs="+")
    normals_p.add_argument("--force", action="store_true", help="Bypass the cache")

    forecast_p = sub.add_parser("forecast", help="Fetch NWS forecast periods")
    forecast_p.add_argument("--zip")
    forecast_p.add_argument("--lat", type=float)
    forecast_p.add_argument("--lon", type=float)
    forecast_p.add_argument("--raw", action="store_true", help="Include unfiltered periods")

    advisory_p = sub.add_parser("advisory", help="Full advisory for a ZIP")
    advisory_p.add_argument("zip")
    advisory_p.add_argument("--json", action="store_true", help="JSON output")
    advisory_p.add_argument("--force", action="store_true", help="Re-fetch normals")

    watch_p = sub.add_parser("watch", help="Keep an advisory refreshed")
    watch_p.add_argument("zip")
    watch_p.add_argument(
        "--interval", type=int, default=None, help="Refresh interval in seconds"
    )

    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8777)

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Validate a config override")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "config":
        return _cmd_config(config, args)
    if args.command == "serve":
        return _cmd_serve(config, args)

    orchestrator = AdvisoryOrchestrator.from_config(config)
    try:
        if args.command == "lookup":
            return _cmd_lookup(orchestrator, args)
        elif args.command == "search":
            return _cmd_search(orchestrator, args)
        elif args.command == "normals":
            return asyncio.run(_cmd_normals(orchestrator, args))
        elif args.command == "forecast":
            return asyncio.run(_cmd_forecast(orchestrator, args))
        elif args.command == "advisory":
            return asyncio.run(_cmd_advisory(orchestrator, args))
        elif args.command == "watch":
            return asyncio.run(_cmd_watch(orchestrator, config, args))
    except (FrostwatchError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    parser.print_help()
    return 1


def _cmd_lookup(orchestrator: AdvisoryOrchestrator, args) -> int:
    record = orchestrator.stations.lookup(args.zip)
    if record is None:
        print(f"ZIP {args.zip} not found")
        return 1
    print(json.dumps(record.to_dict(), indent=2))
    return 0


def _cmd_search(orchestrator: AdvisoryOrchestrator, args) -> int:
    records = orchestrator.stations.search(args.query, limit=args.limit)
    for r in records:
        print(f"{r.zip}  {r.location}  ({r.primary_station.id})")
    if not records:
        print("No matches")
    return 0


async def _cmd_normals(orchestrator: AdvisoryOrchestrator, args) -> int:
    summary = await orchestrator.normals.get_normals_for_stations(
        args.stations, force_refresh=args.force
    )
    print(format_climate_text(summary))
    return 0


async def _cmd_forecast(orchestrator: AdvisoryOrchestrator, args) -> int:
    if args.lat is not None and args.lon is not None:
        lat, lon = args.lat, args.lon
    elif args.zip:
        record = orchestrator.stations.lookup(args.zip)
        if record is None:
            print(f"ZIP {args.zip} not found")
            return 1
        lat, lon = record.latitude, record.longitude
    else:
        print("Error: provide --zip or --lat/--lon")
        return 1

    try:
        result = await orchestrator.forecasts.get_forecast(lat, lon, include_raw=args.raw)
    except UpstreamError as e:
        print(f"Forecast unavailable: {e}")
        return 1

    if result.used_stale_fallback:
        print("WARNING: all periods have ended; showing the last forecast issued")
    for p in result.periods:
        print(f"{p.name:<18} {p.temperature}°{p.temperature_unit}  {p.short_forecast}")
    print(f"{len(result.periods)} of {result.raw_count} periods")
    if args.raw and result.raw_periods is not None:
        print(json.dumps([p.to_dict() for p in result.raw_periods], indent=2))
    return 0


async def _cmd_advisory(orchestrator: AdvisoryOrchestrator, args) -> int:
    advisory = await orchestrator.get_advisory(args.zip, force_refresh=args.force)
    if args.json:
        print(format_advisory_json(advisory))
    else:
        print(format_advisory_text(advisory))
    return 0 if advisory.station is not None else 1


async def _cmd_watch(orchestrator: AdvisoryOrchestrator, config: AdvisoryConfig, args) -> int:
    if orchestrator.stations.lookup(args.zip) is None:
        print(f"ZIP {args.zip} not found")
        return 1

    interval = args.interval or config.refresh.forecast_interval_minutes * 60
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    def _show(advisory: Advisory) -> None:
        print(format_advisory_text(advisory))
        print()

    async with AdvisoryRefresher(orchestrator, args.zip, interval, on_update=_show):
        print(f"Refreshing every {interval}s. Ctrl-C to stop.")
        await stop.wait()
    return 0


def _cmd_serve(config: AdvisoryConfig, args) -> int:
    import uvicorn

    from frostwatch.api import create_app

    uvicorn.run(create_app(config=config), host=args.host, port=args.port)
    return 0


def _cmd_config(config: AdvisoryConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except (KeyError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        print(f"Set {key} = {get_config_value(new_config, key.strip())}")
        return 0
    print("Use: config show | config set key=value")
    return 1
