"""
Vehicle lease mileage tracking.

This package turns lease terms and an odometer reading into lease standing:
- LeaseConfig: Contract terms (start date, months, miles, starting odometer)
- LeaseStats: Calculated time elapsed, allowance, variance and projection
- Pace: AHEAD or BEHIND the accrued allowance
- VehicleSnapshot: Odometer and telemetry read from the car
- compute_lease_stats: The pure calculation engine
- TessieClient: Live odometer source
- load_config / save_config: YAML config store
"""

from .pace import Pace
from .lease_config import LeaseConfig, LeaseConfigError
from .lease_stats import LeaseStats
from .vehicle_snapshot import VehicleSnapshot, to_fahrenheit
from .calculations import add_months, days_between, full_month_cycles, compute_lease_stats
from .loader import (
    DEFAULT_CONFIG,
    load_config,
    load_config_or_default,
    save_config,
    merge_config,
    update_config,
)
from .tessie import TessieClient, TessieError
from .demo import DEMO_CONFIG, apply_demo_terms, demo_snapshot

__all__ = [
    "Pace",
    "LeaseConfig",
    "LeaseConfigError",
    "LeaseStats",
    "VehicleSnapshot",
    "to_fahrenheit",
    "add_months",
    "days_between",
    "full_month_cycles",
    "compute_lease_stats",
    "DEFAULT_CONFIG",
    "load_config",
    "load_config_or_default",
    "save_config",
    "merge_config",
    "update_config",
    "TessieClient",
    "TessieError",
    "DEMO_CONFIG",
    "apply_demo_terms",
    "demo_snapshot",
]
