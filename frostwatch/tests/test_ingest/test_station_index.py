"""Tests for ZIP normalization, lookup and search."""

import json
from pathlib import Path

import pytest

from frostwatch.ingest.errors import StationDataError
from frostwatch.ingest.station_index import StationIndex, normalize_zip


class TestNormalizeZip:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("98765-4321", "98765"),
            ("1", "00001"),
            ("65616", "65616"),
            (" 65616 ", "65616"),
            ("ZIP: 1001", "01001"),
            ("123456789", "12345"),
        ],
    )
    def test_normalizes(self, raw: str, expected: str):
        assert normalize_zip(raw) == expected
        assert len(normalize_zip(raw)) == 5

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "--", None])
    def test_no_digits_is_empty(self, raw):
        assert normalize_zip(raw) == ""


class TestLookup:
    def test_found(self, station_index: StationIndex):
        record = station_index.lookup("65616")
        assert record is not None
        assert record.location == "Branson, MO"
        assert record.primary_station.id == "GHCND:USC00231037"
        assert record.station_ids == [
            "GHCND:USC00231037",
            "GHCND:USW00013995",
            "GHCND:USC00237963",
        ]

    def test_zip_plus_four(self, station_index: StationIndex):
        record = station_index.lookup("98765-4321")
        assert record is not None
        assert record.zip == "98765"

    def test_dataset_zip_zero_padded(self, station_index: StationIndex):
        record = station_index.lookup("1001")
        assert record is not None
        assert record.zip == "01001"
        assert station_index.lookup("01001") is record

    def test_not_found(self, station_index: StationIndex):
        assert station_index.lookup("99999") is None

    def test_empty_input(self, station_index: StationIndex):
        assert station_index.lookup("") is None
        assert station_index.lookup("no digits") is None


class TestSearch:
    def test_location_substring_in_dataset_order(self, station_index: StationIndex):
        results = station_index.search("Branson")
        assert [r.zip for r in results] == ["65616", "65737"]

    def test_case_insensitive(self, station_index: StationIndex):
        results = station_index.search("branson west")
        assert [r.zip for r in results] == ["65737"]

    def test_zip_match(self, station_index: StationIndex):
        results = station_index.search("65616")
        assert [r.zip for r in results] == ["65616"]

    def test_partial_zip_prefix(self, station_index: StationIndex):
        assert [r.zip for r in station_index.search("656")] == ["65616"]
        assert [r.zip for r in station_index.search("6561")] == ["65616"]
        assert [r.zip for r in station_index.search("6")] == ["65616", "65737"]

    def test_surrounding_whitespace(self, station_index: StationIndex):
        assert [r.zip for r in station_index.search(" branson ")] == ["65616", "65737"]
        assert [r.zip for r in station_index.search("  656 ")] == ["65616"]

    def test_prefix_not_zero_padded(self, station_index: StationIndex):
        # "1001" is stored as 01001 and is not a prefix of it
        assert station_index.search("1001") == []
        assert [r.zip for r in station_index.search("0100")] == ["01001"]

    def test_limit(self, station_index: StationIndex):
        assert len(station_index.search("MO", limit=1)) == 1

    def test_blank_query(self, station_index: StationIndex):
        assert station_index.search("") == []
        assert station_index.search("   ") == []

    def test_no_match(self, station_index: StationIndex):
        assert station_index.search("Atlantis") == []


class TestLoading:
    def test_fixture_size(self, station_index: StationIndex):
        assert len(station_index) == 4
        assert len(station_index.all_records()) == 4

    def test_wrapped_dataset(self, tmp_path: Path, fixtures_dir: Path):
        rows = json.loads((fixtures_dir / "zip_stations.json").read_text())
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"recordCount": len(rows), "zips": rows}))
        index = StationIndex.from_file(path)
        assert len(index) == 4
        assert index.lookup("65737") is not None

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(StationDataError):
            StationIndex.from_file(tmp_path / "missing.json")

    def test_not_a_list(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"recordCount": 0}))
        with pytest.raises(StationDataError):
            StationIndex.from_file(path)

    def test_malformed_record(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"zip": "65616", "location": "Nowhere"}]))
        with pytest.raises(StationDataError):
            StationIndex.from_file(path)

    def test_bundled_dataset(self):
        index = StationIndex.load_default()
        record = index.lookup("65616")
        assert record is not None
        assert record.location == "Branson, MO"
        assert index.lookup("01001") is not None
