"""Static demo data: a 24 month, 30,000 mile lease six months in."""

from dataclasses import replace
from datetime import date

from .lease_config import LeaseConfig
from .vehicle_snapshot import VehicleSnapshot

DEMO_CONFIG = LeaseConfig(
    start_date=date(2025, 7, 1),
    lease_months=24,
    total_miles=30000,
    start_odometer=0,
)


def apply_demo_terms(config: LeaseConfig) -> LeaseConfig:
    """Swap in the demo lease terms, keeping the connection settings."""
    return replace(
        config,
        start_date=DEMO_CONFIG.start_date,
        lease_months=DEMO_CONFIG.lease_months,
        total_miles=DEMO_CONFIG.total_miles,
        start_odometer=DEMO_CONFIG.start_odometer,
    )


def demo_snapshot() -> VehicleSnapshot:
    """Telemetry for the demo vehicle (1,250 mi/mo lease, 5,034 mi driven)."""
    return VehicleSnapshot(
        name="Demo Tesla (6 Months In)",
        vin="5YJ...DEMO",
        odometer=5034,
        battery_level=78,
        charging_state="Disconnected",
        ideal_range=215,
        is_locked=True,
        sentry_mode=True,
        latitude=40.7128,
        longitude=-74.0060,
        state="online",
        outside_temp=18.0,
        inside_temp=22.0,
    )
