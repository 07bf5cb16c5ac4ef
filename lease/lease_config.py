"""LeaseConfig class for contract terms."""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union


class LeaseConfigError(ValueError):
    """Raised when lease terms cannot produce meaningful stats."""


def parse_start_date(value: Union[str, date]) -> date:
    """Accept an ISO 'YYYY-MM-DD' string or a date (YAML may load either)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise LeaseConfigError(f"Invalid start date '{value}' (expected YYYY-MM-DD)") from e


def _require_finite(label: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise LeaseConfigError(f"{label} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class LeaseConfig:
    """
    Lease terms plus the Tessie connection settings stored alongside them.

    Invalid terms are rejected here, so every LeaseConfig that exists is safe
    to hand to compute_lease_stats.
    """

    start_date: date
    lease_months: int
    total_miles: float
    start_odometer: float = 0
    api_token: str = ""
    vin: str = ""

    def __post_init__(self):
        object.__setattr__(self, "start_date", parse_start_date(self.start_date))
        if isinstance(self.lease_months, bool) or not isinstance(self.lease_months, int):
            raise LeaseConfigError(
                f"Lease months must be a whole number, got {self.lease_months!r}"
            )
        if self.lease_months <= 0:
            raise LeaseConfigError(f"Lease months must be positive, got {self.lease_months}")
        _require_finite("Total miles", self.total_miles)
        if self.total_miles <= 0:
            raise LeaseConfigError(f"Total miles must be positive, got {self.total_miles}")
        _require_finite("Starting odometer", self.start_odometer)
        if self.start_odometer < 0:
            raise LeaseConfigError(
                f"Starting odometer cannot be negative, got {self.start_odometer}"
            )
