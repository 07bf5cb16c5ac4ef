"""Lease mileage calculations: calendar helpers and the stats engine."""

from datetime import date, datetime, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

from .lease_config import LeaseConfig
from .lease_stats import LeaseStats

Moment = Union[date, datetime]

SECONDS_PER_DAY = 24 * 60 * 60

# Projection divisor floor while no full cycle has elapsed
MIN_PACE_MONTHS = 0.1


def add_months(start: date, months: int) -> date:
    """
    Add calendar months, rolling day-of-month overflow into the next month.

    The day is counted forward from the first of the target month, so
    Jan 31 + 1 month lands on Mar 3 (Mar 2 in a leap year) rather than
    being clamped to Feb 28.
    """
    first = start.replace(day=1) + relativedelta(months=months)
    return first + timedelta(days=start.day - 1)


def _as_datetime(moment: Moment) -> datetime:
    """Naive local datetime; aware values are converted to local time."""
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            return moment.astimezone().replace(tzinfo=None)
        return moment
    return datetime(moment.year, moment.month, moment.day)


def _as_date(moment: Moment) -> date:
    if isinstance(moment, datetime):
        return _as_datetime(moment).date()
    return moment


def days_between(start: Moment, end: Moment) -> float:
    """Real-valued days from start to end (negative if end is earlier)."""
    delta = _as_datetime(end) - _as_datetime(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def full_month_cycles(start: date, reference: Moment, lease_months: int) -> int:
    """
    Count monthly allowance cycles that have opened by the reference date.

    A cycle opens on each monthly anniversary of the start date, including
    the start date itself, so the count steps up on the anniversary day
    rather than growing continuously. Anniversaries follow add_months, which
    keeps day 29-31 starts consistent with the lease end date.

    Clamped to [0, lease_months].
    """
    ref = _as_date(reference)
    months_difference = (ref.year * 12 + ref.month) - (start.year * 12 + start.month)
    if months_difference < 0:
        return 0
    cycles = months_difference + 1
    # Rolled-over anniversaries can land past the reference date
    while cycles > 0 and add_months(start, cycles - 1) > ref:
        cycles -= 1
    return min(lease_months, max(0, cycles))


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def compute_lease_stats(
    config: LeaseConfig, current_odometer: float, reference: Moment
) -> LeaseStats:
    """
    Calculate the lease standing for an odometer reading at a reference time.

    Logic:
    - Term length runs from start date to start + lease_months (rollover)
    - Percent of time elapsed is continuous and clamped to [0, 100]
    - Allowance accrues per full month cycle (a staircase, not a ramp)
    - Driven miles below the starting odometer are floored at zero
    - Projection extrapolates miles per completed cycle to the full term

    Pure function: the reference time is passed in, nothing is read from the
    clock, and out-of-range dates or odometer values are clamped rather than
    raised.
    """
    start = config.start_date
    end = add_months(start, config.lease_months)

    # Time calculations
    total_days = days_between(start, end)
    days_elapsed = days_between(start, reference)
    days_remaining = total_days - days_elapsed
    pct_time_elapsed = clamp(days_elapsed / total_days * 100, 0, 100)

    # Allowances
    total_months_allowed = full_month_cycles(start, reference, config.lease_months)
    monthly_allowance = config.total_miles / config.lease_months
    daily_allowance = config.total_miles / total_days

    # Mileage
    actual_driven = max(0, current_odometer - config.start_odometer)
    expected_mileage = monthly_allowance * total_months_allowed
    variance = actual_driven - expected_mileage

    # Projection from completed cycles
    safe_months = max(MIN_PACE_MONTHS, total_months_allowed)
    projected_total = (actual_driven / safe_months) * config.lease_months
    projected_variance = projected_total - config.total_miles

    return LeaseStats(
        total_days=total_days,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        pct_time_elapsed=pct_time_elapsed,
        total_months_allowed=total_months_allowed,
        current_odo=current_odometer,
        actual_driven=actual_driven,
        monthly_allowance=monthly_allowance,
        daily_allowance=daily_allowance,
        expected_mileage=expected_mileage,
        variance=variance,
        is_over=variance > 0,
        projected_total=projected_total,
        projected_variance=projected_variance,
    )
