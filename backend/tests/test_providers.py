"""Provider clients with requests.get patched; no network access."""
from types import SimpleNamespace

import pytest
import requests

from enrichment import demographics, flood, geocoding, program_flags
from enrichment.demographics import DemographicsService
from enrichment.flood import FloodService
from enrichment.geocoding import GeocodingService
from enrichment.program_flags import ProgramFlagsService


def _response(payload, status=200):
    return SimpleNamespace(
        ok=200 <= status < 300,
        status_code=status,
        reason="OK" if status < 300 else "Error",
        json=lambda: payload,
    )


def _offline(*args, **kwargs):
    raise requests.ConnectionError("network down")


# ---- geocoding ----

def test_geocode_uses_mapbox_center(monkeypatch):
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout)
        return _response({"features": [{"center": [-95.29, 30.14]}]})

    monkeypatch.setattr(geocoding.requests, "get", fake_get)
    result = GeocodingService(api_key="pk.test", timeout=3).geocode_address("123 FM 1314", "Porter", "TX")

    assert (result.lat, result.lon) == (30.14, -95.29)
    assert result.source == "Mapbox Geocoding"
    assert result.is_fallback is False
    assert seen["params"]["access_token"] == "pk.test"
    assert seen["timeout"] == 3
    assert "123%20FM%201314" in seen["url"]


def test_geocode_without_key_uses_city_center(monkeypatch):
    monkeypatch.setattr(geocoding.requests, "get", _offline)
    result = GeocodingService(api_key="").geocode_address("1 Main", "Houston", "TX")
    assert (result.lat, result.lon) == (29.7604, -95.3698)
    assert result.is_fallback is True


def test_geocode_unknown_texas_city_gets_point_in_bounds(monkeypatch):
    monkeypatch.setattr(geocoding.requests, "get", _offline)
    result = GeocodingService(api_key="pk.test").geocode_address("1 Main", "Nowhere", "TX")
    min_lat, max_lat, min_lon, max_lon = geocoding.TEXAS_BOUNDS
    assert min_lat <= result.lat <= max_lat
    assert min_lon <= result.lon <= max_lon
    assert result.source == geocoding.RANDOM_FALLBACK_SOURCE


def test_geocode_empty_result_outside_texas_is_none(monkeypatch):
    monkeypatch.setattr(geocoding.requests, "get", lambda *a, **k: _response({"features": []}))
    assert GeocodingService(api_key="pk.test").geocode_address("1 Main", "Wichita", "KS") is None


# ---- demographics ----

def test_demographics_from_census(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        if url == demographics.CENSUS_GEOCODER_URL:
            return _response({"result": {"geographies": {"Census Tracts": [{"GEOID": "48339690100"}]}}})
        assert params["for"] == "tract:690100"
        assert params["in"] == "state:48 county:339"
        return _response(
            [
                ["NAME", "B19013_001E", "B01003_001E", "state", "county", "tract"],
                ["Census Tract 6901", "84250", "7312", "48", "339", "690100"],
            ]
        )

    monkeypatch.setattr(demographics.requests, "get", fake_get)
    data = DemographicsService().get_demographics(30.14, -95.29, 1)

    assert data.median_household_income == 84250
    assert data.population == 7312
    assert data.source == demographics.ACS_SOURCE
    assert data.is_fallback is False


def test_demographics_missing_sentinel_is_none(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        if url == demographics.CENSUS_GEOCODER_URL:
            return _response({"result": {"geographies": {"Census Tracts": [{"GEOID": "48339690100"}]}}})
        return _response([["NAME", "B19013_001E", "B01003_001E"], ["Tract", "-666666666", "120"]])

    monkeypatch.setattr(demographics.requests, "get", fake_get)
    data = DemographicsService().get_demographics(30.14, -95.29, 1)
    assert data.median_household_income is None
    assert data.population == 120


@pytest.mark.parametrize("radius,low,high", [(1, 67500, 82500), (3, 101250, 123750)])
def test_demographics_fallback_when_offline(monkeypatch, radius, low, high):
    monkeypatch.setattr(demographics.requests, "get", _offline)
    data = DemographicsService().get_demographics(30.14, -95.29, radius)
    assert data.is_fallback is True
    assert data.source == "Fallback Data (Census API unavailable)"
    assert data.as_of_year == 2022
    assert low <= data.median_household_income <= high


# ---- program flags ----

def test_program_flags_from_arcgis(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        hit = url == program_flags.QCT_URL
        return _response({"features": [{"attributes": {}}] if hit else []})

    monkeypatch.setattr(program_flags.requests, "get", fake_get)
    data = ProgramFlagsService().get_program_flags(30.14, -95.29)
    assert (data.is_qct, data.is_dda, data.is_opportunity_zone) == (True, False, False)
    assert data.source == program_flags.HUD_SOURCE
    assert data.is_fallback is False


def test_program_flags_single_failed_check_reads_false(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        if url == program_flags.DDA_URL:
            raise requests.Timeout("slow")
        return _response({"features": [{"attributes": {}}]})

    monkeypatch.setattr(program_flags.requests, "get", fake_get)
    data = ProgramFlagsService().get_program_flags(30.14, -95.29)
    assert (data.is_qct, data.is_dda, data.is_opportunity_zone) == (True, False, True)


def test_program_flags_aggregate_fault_falls_back(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("executor broke")

    monkeypatch.setattr(ProgramFlagsService, "_point_in_layer", broken)
    data = ProgramFlagsService().get_program_flags(30.14, -95.29)
    assert data.is_fallback is True
    assert data.source == "Fallback Data (HUD APIs unavailable)"


# ---- flood ----

def test_flood_zone_with_subtype(monkeypatch):
    monkeypatch.setattr(
        flood.requests,
        "get",
        lambda *a, **k: _response({"features": [{"attributes": {"FLD_ZONE": "A", "ZONE_SUBTY": "O", "SFHA_TF": "T"}}]}),
    )
    data = FloodService().get_flood_zone(30.14, -95.29)
    assert data.flood_zone_code == "AO"
    assert data.flood_source == flood.FEMA_SOURCE


def test_flood_zone_no_features_is_x(monkeypatch):
    monkeypatch.setattr(flood.requests, "get", lambda *a, **k: _response({"features": []}))
    data = FloodService().get_flood_zone(30.14, -95.29)
    assert data.flood_zone_code == "X"
    assert data.is_fallback is False


def test_flood_fallback_when_offline(monkeypatch):
    monkeypatch.setattr(flood.requests, "get", _offline)
    data = FloodService().get_flood_zone(30.14, -95.29)
    assert data.is_fallback is True
    assert data.flood_zone_code in {"X", "AE", "A", "D"}


def test_flood_zone_route_is_lookup_only(client, site_payload, monkeypatch):
    monkeypatch.setattr(flood.requests, "get", lambda *a, **k: _response({"features": []}))
    site_id = client.post("/sites", json={**site_payload, "latitude": 30.14, "longitude": -95.29}).json()["id"]

    res = client.get(f"/sites/{site_id}/flood-zone")
    assert res.status_code == 200
    assert res.json()["floodZoneCode"] == "X"
    assert client.get(f"/sites/{site_id}").json()["constraints"] is None


def test_flood_zone_route_requires_coordinates(client, site_payload):
    site_id = client.post("/sites", json=site_payload).json()["id"]
    assert client.get(f"/sites/{site_id}/flood-zone").status_code == 400
