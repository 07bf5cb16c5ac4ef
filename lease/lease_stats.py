"""LeaseStats dataclass for calculated lease mileage metrics."""

from dataclasses import dataclass
from typing import Any, Dict

from .pace import Pace

# Output contract key names, in display order
_CONTRACT_KEYS = {
    "total_days": "totalDays",
    "days_elapsed": "daysElapsed",
    "days_remaining": "daysRemaining",
    "pct_time_elapsed": "pctTimeElapsed",
    "total_months_allowed": "totalMonthsAllowed",
    "current_odo": "currentOdo",
    "actual_driven": "actualDriven",
    "monthly_allowance": "monthlyAllowance",
    "daily_allowance": "dailyAllowance",
    "expected_mileage": "expectedMileage",
    "variance": "variance",
    "is_over": "isOver",
    "projected_total": "projectedTotal",
    "projected_variance": "projectedVariance",
}


@dataclass(frozen=True)
class LeaseStats:
    """Calculated lease standing at one reference date and odometer reading."""

    total_days: float
    days_elapsed: float
    days_remaining: float
    pct_time_elapsed: float
    total_months_allowed: int
    current_odo: float
    actual_driven: float
    monthly_allowance: float
    daily_allowance: float
    expected_mileage: float
    variance: float
    is_over: bool
    projected_total: float
    projected_variance: float

    @property
    def pace(self) -> Pace:
        return Pace.BEHIND if self.is_over else Pace.AHEAD

    @property
    def is_projected_over(self) -> bool:
        return self.projected_variance > 0

    def pct_miles_used(self, total_miles: float) -> float:
        """Share of the whole-term allowance already driven, capped at 100."""
        return min(100.0, self.actual_driven / total_miles * 100)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys for JSON consumers."""
        return {camel: getattr(self, attr) for attr, camel in _CONTRACT_KEYS.items()}
