"""Tessie API client for reading odometer and vehicle telemetry."""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from .vehicle_snapshot import VehicleSnapshot

logger = logging.getLogger(__name__)

TESSIE_BASE_URL = "https://api.tessie.com"


class TessieError(Exception):
    """A sync failed; the message is meant to be shown to the user."""


def parse_state(vehicle: Dict[str, Any], state: Dict[str, Any]) -> VehicleSnapshot:
    """Flatten the nested Tessie state payload into a VehicleSnapshot."""
    vehicle_state = state.get("vehicle_state") or {}
    charge_state = state.get("charge_state") or {}
    climate_state = state.get("climate_state") or {}
    drive_state = state.get("drive_state") or {}

    return VehicleSnapshot(
        name=vehicle.get("display_name") or "My Tesla",
        vin=vehicle.get("vin"),
        odometer=vehicle_state.get("odometer") or 0,
        battery_level=charge_state.get("battery_level"),
        charging_state=charge_state.get("charging_state") or "Disconnected",
        ideal_range=charge_state.get("ideal_battery_range"),
        is_locked=vehicle_state.get("locked"),
        sentry_mode=vehicle_state.get("sentry_mode"),
        latitude=drive_state.get("latitude"),
        longitude=drive_state.get("longitude"),
        state=state.get("state"),
        outside_temp=climate_state.get("outside_temp"),
        inside_temp=climate_state.get("inside_temp"),
    )


class TessieClient:
    """
    Single-shot client for the Tessie vehicle API.

    Each sync is one vehicles request followed by one state request. There is
    no retry and, unless given, no timeout. A second sync started on the same
    client while one is running is refused.
    """

    def __init__(
        self,
        api_token: str,
        vin: str = "",
        base_url: str = TESSIE_BASE_URL,
        timeout: Optional[float] = None,
    ):
        self.api_token = api_token
        self.vin = vin
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.warning: Optional[str] = None
        self._busy = threading.Lock()

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    def list_vehicles(self) -> List[Dict[str, Any]]:
        """Get all vehicles on the account."""
        response = requests.get(
            f"{self.base_url}/vehicles", headers=self.headers, timeout=self.timeout
        )
        if not response.ok:
            raise TessieError(f"Failed to connect ({response.status_code}). Check token.")

        data = self._json(response)
        results = data.get("results", data) if isinstance(data, dict) else data
        if not results:
            raise TessieError("No vehicles found on this Tessie account.")
        if not isinstance(results, list) or not all(isinstance(v, dict) for v in results):
            raise TessieError("Unexpected vehicle list from Tessie.")
        return results

    def select_vehicle(self, results: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Pick the configured VIN, or the first vehicle when no VIN is set.

        An unknown VIN falls back to the first vehicle and leaves a warning.
        """
        if not self.vin:
            return results[0]
        for vehicle in results:
            if vehicle.get("vin") == self.vin:
                return vehicle
        self.warning = f"VIN {self.vin} not found. Defaulting to first vehicle found."
        logger.warning(self.warning)
        return results[0]

    def get_state(self, vin: str) -> Dict[str, Any]:
        """Get the full state payload for one vehicle."""
        response = requests.get(
            f"{self.base_url}/{vin}/state", headers=self.headers, timeout=self.timeout
        )
        if not response.ok:
            raise TessieError("Failed to fetch vehicle state.")
        state = self._json(response)
        if not isinstance(state, dict):
            raise TessieError("Unexpected vehicle state from Tessie.")
        return state

    @staticmethod
    def _json(response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TessieError("Tessie sent a response that is not JSON.") from e

    def fetch_snapshot(self) -> VehicleSnapshot:
        """Run a full sync and return the selected vehicle's snapshot."""
        if not self.api_token:
            raise TessieError("Please enter a Tessie API Token first.")
        if not self._busy.acquire(blocking=False):
            raise TessieError("A sync is already in progress.")

        self.warning = None
        try:
            results = self.list_vehicles()
            vehicle = self.select_vehicle(results)
            if not vehicle.get("vin"):
                raise TessieError("Tessie did not report a VIN for this vehicle.")
            logger.info("Fetching state for %s", vehicle.get("vin"))
            state = self.get_state(vehicle["vin"])
        except requests.RequestException as e:
            logger.error("Tessie request failed: %s", e)
            raise TessieError(f"Network error: could not reach Tessie ({e}).") from e
        finally:
            self._busy.release()

        snapshot = parse_state(vehicle, state)
        logger.info("Synced %s at %s mi", snapshot.name, snapshot.odometer)
        return snapshot
