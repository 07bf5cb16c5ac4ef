"""Pace enum for lease mileage standing."""

from enum import Enum


class Pace(Enum):
    """Where the driven miles sit against the accrued allowance."""

    AHEAD = 1  # at or under the allowance
    BEHIND = 2  # over the allowance

    @property
    def label(self) -> str:
        return "BEHIND SCHEDULE" if self is Pace.BEHIND else "AHEAD OF SCHEDULE"
