"""Shared test fixtures."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml

from frostwatch.config.schema import AdvisoryConfig, ForecastConfig, NormalsConfig
from frostwatch.ingest.forecast_client import parse_period
from frostwatch.ingest.station_index import StationIndex
from frostwatch.models.forecast import ForecastPeriod

FIXTURE_DIR = Path(__file__).parent / "fixtures"

TEST_CDO_URL = "https://test-cdo.example.com/api/v2"
TEST_NWS_URL = "https://test-nws.example.com"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def station_index() -> StationIndex:
    return StationIndex.from_file(FIXTURE_DIR / "zip_stations.json")


@pytest.fixture
def forecast_now() -> datetime:
    """Monday 2026-10-19, noon in Branson; every fixture period is still current."""
    return datetime(2026, 10, 19, 17, 0, 0, tzinfo=UTC)


@pytest.fixture
def branson_forecast() -> dict:
    with open(FIXTURE_DIR / "nws_forecast_branson.json") as f:
        return json.load(f)


@pytest.fixture
def branson_points() -> dict:
    with open(FIXTURE_DIR / "nws_points_branson.json") as f:
        return json.load(f)


@pytest.fixture
def branson_normals() -> dict:
    with open(FIXTURE_DIR / "cdo_normals_branson.json") as f:
        return json.load(f)


@pytest.fixture
def branson_periods(branson_forecast: dict) -> list[ForecastPeriod]:
    return [parse_period(p) for p in branson_forecast["properties"]["periods"]]


@pytest.fixture
def test_config() -> AdvisoryConfig:
    """Config pointing at test hosts and the fixture station dataset."""
    return AdvisoryConfig(
        normals=NormalsConfig(base_url=TEST_CDO_URL),
        forecast=ForecastConfig(base_url=TEST_NWS_URL, user_agent="frostwatch-tests/0.1"),
        stations={"dataset_path": str(FIXTURE_DIR / "zip_stations.json")},
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "freeze": {"threshold_f": 34},
        "refresh": {"forecast_interval_minutes": 30},
        "stations": {"dataset_path": str(FIXTURE_DIR / "zip_stations.json")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
