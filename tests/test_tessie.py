#!/usr/bin/env python3
"""Tests for the Tessie API client."""

import pytest
import requests

from lease import TessieClient, TessieError
from lease.tessie import parse_state

STATE = {
    "state": "online",
    "vehicle_state": {"odometer": 5034.7, "locked": True, "sentry_mode": False},
    "charge_state": {
        "battery_level": 64,
        "charging_state": "Charging",
        "ideal_battery_range": 180.5,
    },
    "climate_state": {"outside_temp": 10.0, "inside_temp": 20.5},
    "drive_state": {"latitude": 47.6, "longitude": -122.3},
}

VEHICLES = {
    "results": [
        {"vin": "VIN-ONE", "display_name": "Daily"},
        {"vin": "VIN-TWO", "display_name": "Road Trip"},
    ]
}


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def calls(monkeypatch):
    """Route requests.get to canned responses keyed by URL path."""
    routes = {
        "/vehicles": FakeResponse(200, VEHICLES),
        "/VIN-ONE/state": FakeResponse(200, STATE),
        "/VIN-TWO/state": FakeResponse(200, STATE),
    }
    seen = []

    def fake_get(url, headers=None, timeout=None):
        path = url.replace("https://api.tessie.com", "")
        seen.append((path, headers, timeout))
        return routes[path]

    monkeypatch.setattr("lease.tessie.requests.get", fake_get)
    return {"routes": routes, "seen": seen}


class TestParseState:
    """Tests for parse_state."""

    def test_flattens_nested_state(self):
        vehicle = parse_state({"vin": "VIN-ONE", "display_name": "Daily"}, STATE)
        assert vehicle.name == "Daily"
        assert vehicle.vin == "VIN-ONE"
        assert vehicle.odometer == 5034.7
        assert vehicle.battery_level == 64
        assert vehicle.is_charging is True
        assert vehicle.ideal_range == 180.5
        assert vehicle.is_locked is True
        assert vehicle.sentry_mode is False
        assert vehicle.latitude == 47.6
        assert vehicle.longitude == -122.3
        assert vehicle.state == "online"
        assert vehicle.outside_temp == 10.0
        assert vehicle.inside_temp == 20.5

    def test_defaults_for_missing_sections(self):
        vehicle = parse_state({"vin": "VIN-ONE"}, {})
        assert vehicle.name == "My Tesla"
        assert vehicle.odometer == 0
        assert vehicle.charging_state == "Disconnected"
        assert vehicle.battery_level is None


class TestFetchSnapshot:
    """Tests for TessieClient.fetch_snapshot."""

    def test_first_vehicle_without_vin(self, calls):
        vehicle = TessieClient("tok").fetch_snapshot()
        assert vehicle.vin == "VIN-ONE"
        assert vehicle.odometer == 5034.7
        assert [path for path, _, _ in calls["seen"]] == ["/vehicles", "/VIN-ONE/state"]

    def test_sends_bearer_token(self, calls):
        TessieClient("tok").fetch_snapshot()
        assert all(headers == {"Authorization": "Bearer tok"} for _, headers, _ in calls["seen"])

    def test_no_timeout_by_default(self, calls):
        TessieClient("tok").fetch_snapshot()
        assert all(timeout is None for _, _, timeout in calls["seen"])

    def test_selects_configured_vin(self, calls):
        client = TessieClient("tok", vin="VIN-TWO")
        vehicle = client.fetch_snapshot()
        assert vehicle.name == "Road Trip"
        assert client.warning is None

    def test_unknown_vin_falls_back_with_warning(self, calls):
        client = TessieClient("tok", vin="VIN-NINE")
        vehicle = client.fetch_snapshot()
        assert vehicle.vin == "VIN-ONE"
        assert client.warning == "VIN VIN-NINE not found. Defaulting to first vehicle found."

    def test_bare_list_response(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(200, VEHICLES["results"])
        assert TessieClient("tok").fetch_snapshot().vin == "VIN-ONE"

    def test_missing_token(self, calls):
        with pytest.raises(TessieError, match="API Token"):
            TessieClient("").fetch_snapshot()
        assert calls["seen"] == []

    def test_bad_token(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(401, {})
        with pytest.raises(TessieError, match=r"Failed to connect \(401\)"):
            TessieClient("tok").fetch_snapshot()

    def test_no_vehicles(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(200, {"results": []})
        with pytest.raises(TessieError, match="No vehicles"):
            TessieClient("tok").fetch_snapshot()

    def test_error_body_instead_of_vehicle_list(self, calls):
        """A 200 carrying an error object is a sync failure, not a crash."""
        calls["routes"]["/vehicles"] = FakeResponse(200, {"error": "rate limited"})
        with pytest.raises(TessieError, match="Unexpected vehicle list"):
            TessieClient("tok").fetch_snapshot()

    def test_vehicle_list_of_strings(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(200, {"results": ["VIN-ONE"]})
        with pytest.raises(TessieError, match="Unexpected vehicle list"):
            TessieClient("tok").fetch_snapshot()

    def test_vehicle_without_vin(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(200, {"results": [{"display_name": "Daily"}]})
        with pytest.raises(TessieError, match="VIN"):
            TessieClient("tok").fetch_snapshot()
        assert [path for path, _, _ in calls["seen"]] == ["/vehicles"]

    def test_body_is_not_json(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(200, ValueError("Expecting value"))
        with pytest.raises(TessieError, match="not JSON"):
            TessieClient("tok").fetch_snapshot()

    def test_state_is_not_an_object(self, calls):
        calls["routes"]["/VIN-ONE/state"] = FakeResponse(200, ["online"])
        with pytest.raises(TessieError, match="Unexpected vehicle state"):
            TessieClient("tok").fetch_snapshot()

    def test_state_failure(self, calls):
        calls["routes"]["/VIN-ONE/state"] = FakeResponse(500, {})
        with pytest.raises(TessieError, match="vehicle state"):
            TessieClient("tok").fetch_snapshot()

    def test_network_error(self, monkeypatch):
        def fake_get(url, headers=None, timeout=None):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr("lease.tessie.requests.get", fake_get)
        with pytest.raises(TessieError, match="Network error"):
            TessieClient("tok").fetch_snapshot()

    def test_refuses_concurrent_sync(self, calls):
        client = TessieClient("tok")
        client._busy.acquire()
        try:
            with pytest.raises(TessieError, match="already in progress"):
                client.fetch_snapshot()
        finally:
            client._busy.release()
        assert calls["seen"] == []

    def test_busy_flag_released_after_failure(self, calls):
        calls["routes"]["/vehicles"] = FakeResponse(401, {})
        client = TessieClient("tok")
        with pytest.raises(TessieError):
            client.fetch_snapshot()

        calls["routes"]["/vehicles"] = FakeResponse(200, VEHICLES)
        assert client.fetch_snapshot().vin == "VIN-ONE"
