"""Tests for CLI commands."""

import json
from pathlib import Path

import httpx
import pytest
import respx
import yaml

from frostwatch.cli import main

FIXTURE_DIR = Path(__file__).parent.parent / "fixtures"
TEST_CDO_URL = "https://test-cdo.example.com/api/v2"
TEST_NWS_URL = "https://test-nws.example.com"

POINTS_URL = f"{TEST_NWS_URL}/points/36.6437,-93.2185"
FORECAST_URL = f"{TEST_NWS_URL}/gridpoints/SGF/63,27/forecast"


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "test.yaml"
    path.write_text(
        yaml.dump(
            {
                "normals": {"base_url": TEST_CDO_URL},
                "forecast": {"base_url": TEST_NWS_URL},
                "stations": {"dataset_path": str(FIXTURE_DIR / "zip_stations.json")},
            }
        )
    )
    return path


@pytest.fixture(autouse=True)
def clear_token_env(monkeypatch):
    for name in ("NOAA_TOKEN", "NOAA_API_TOKEN", "NOAA_CDO_TOKEN"):
        monkeypatch.delenv(name, raising=False)


class TestCLI:
    def test_no_command_returns_1(self, capsys):
        result = main([])
        assert result == 1

    def test_config_show(self, tmp_path: Path, capsys):
        config_path = tmp_path / "test.yaml"
        config_path.write_text("")
        result = main(["--config", str(config_path), "config", "show"])
        assert result == 0
        captured = capsys.readouterr()
        assert "threshold_f" in captured.out
        assert "NOAA_TOKEN" in captured.out

    def test_config_set(self, tmp_path: Path, capsys):
        config_path = tmp_path / "test.yaml"
        config_path.write_text("")
        result = main([
            "--config", str(config_path),
            "config", "set", "freeze.threshold_f=32",
        ])
        assert result == 0
        captured = capsys.readouterr()
        assert "32.0" in captured.out

    def test_config_set_unknown_key(self, tmp_path: Path, capsys):
        config_path = tmp_path / "test.yaml"
        config_path.write_text("")
        result = main([
            "--config", str(config_path),
            "config", "set", "freeze.nope=1",
        ])
        assert result == 1
        assert "Error" in capsys.readouterr().out

    def test_config_set_key_below_scalar(self, tmp_path: Path, capsys):
        config_path = tmp_path / "test.yaml"
        config_path.write_text("")
        result = main([
            "--config", str(config_path),
            "config", "set", "freeze.threshold_f.x=1",
        ])
        assert result == 1
        assert "Error" in capsys.readouterr().out

    def test_config_set_out_of_range(self, tmp_path: Path, capsys):
        config_path = tmp_path / "test.yaml"
        config_path.write_text("")
        result = main([
            "--config", str(config_path),
            "config", "set", "freeze.lookahead_nights=0",
        ])
        assert result == 1

    def test_lookup(self, config_path: Path, capsys):
        result = main(["--config", str(config_path), "lookup", "65616"])
        assert result == 0
        record = json.loads(capsys.readouterr().out)
        assert record["location"] == "Branson, MO"

    def test_lookup_unknown(self, config_path: Path, capsys):
        result = main(["--config", str(config_path), "lookup", "00000"])
        assert result == 1
        assert "not found" in capsys.readouterr().out

    def test_search(self, config_path: Path, capsys):
        result = main(["--config", str(config_path), "search", "branson", "--limit", "5"])
        assert result == 0
        out = capsys.readouterr().out
        assert "65616" in out
        assert "65737" in out

    def test_search_no_matches(self, config_path: Path, capsys):
        main(["--config", str(config_path), "search", "atlantis"])
        assert "No matches" in capsys.readouterr().out

    def test_normals_without_token(self, config_path: Path, capsys):
        result = main(["--config", str(config_path), "normals", "GHCND:USC00231037"])
        assert result == 1
        assert "Error" in capsys.readouterr().out

    @respx.mock
    def test_normals(self, config_path: Path, branson_normals: dict, monkeypatch, capsys):
        monkeypatch.setenv("NOAA_TOKEN", "test-token")
        respx.get(f"{TEST_CDO_URL}/data").mock(
            return_value=httpx.Response(200, json=branson_normals)
        )

        result = main(["--config", str(config_path), "normals", "A", "B"])
        assert result == 0
        out = capsys.readouterr().out
        assert "Apr 04" in out  # day 94
        assert "Oct 29" in out  # day 302
        assert "23.6°F" in out

    @respx.mock
    def test_forecast_by_zip(
        self, config_path: Path, branson_points: dict, branson_forecast: dict, capsys
    ):
        respx.get(POINTS_URL).mock(return_value=httpx.Response(200, json=branson_points))
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=branson_forecast))

        result = main(["--config", str(config_path), "forecast", "--zip", "65616"])
        assert result == 0
        assert "of 14 periods" in capsys.readouterr().out

    def test_forecast_requires_location(self, config_path: Path, capsys):
        assert main(["--config", str(config_path), "forecast"]) == 1

    @respx.mock
    def test_forecast_upstream_error(self, config_path: Path, capsys):
        respx.get(POINTS_URL).mock(return_value=httpx.Response(500))

        result = main(["--config", str(config_path), "forecast", "--zip", "65616"])
        assert result == 1
        assert "Forecast unavailable" in capsys.readouterr().out

    def test_advisory_unknown_zip(self, config_path: Path, capsys):
        result = main(["--config", str(config_path), "advisory", "00000"])
        assert result == 1
        assert "No weather station data for ZIP 00000" in capsys.readouterr().out

    @respx.mock
    def test_advisory_json(
        self,
        config_path: Path,
        branson_normals: dict,
        branson_points: dict,
        branson_forecast: dict,
        monkeypatch,
        capsys,
    ):
        monkeypatch.setenv("NOAA_API_TOKEN", "test-token")
        respx.get(f"{TEST_CDO_URL}/data").mock(
            return_value=httpx.Response(200, json=branson_normals)
        )
        respx.get(POINTS_URL).mock(return_value=httpx.Response(200, json=branson_points))
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=branson_forecast))

        result = main(["--config", str(config_path), "advisory", "65616", "--json"])
        assert result == 0
        body = json.loads(capsys.readouterr().out)
        assert body["zip"] == "65616"
        assert body["climate"]["springFrostDay"] == 94
        assert body["forecastStatus"] == "available"
        assert body["days"]

    @respx.mock
    def test_advisory_without_token(self, config_path: Path, branson_points: dict, capsys):
        respx.get(POINTS_URL).mock(return_value=httpx.Response(200, json=branson_points))
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json={"properties": {"periods": []}})
        )

        result = main(["--config", str(config_path), "advisory", "65616"])
        assert result == 1
        assert "Error" in capsys.readouterr().out

    def test_watch_unknown_zip(self, config_path: Path, capsys):
        assert main(["--config", str(config_path), "watch", "00000"]) == 1
