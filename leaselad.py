#!/usr/bin/env python3
"""
Unified CLI for lease mileage tracking.

Commands:
  status    - Show lease standing for an odometer reading
  sync      - Read the odometer from Tessie and show lease standing
  demo      - Show lease standing for the built-in demo vehicle
  configure - Create or update the lease config file
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from lease import (
    LeaseConfig,
    LeaseStats,
    TessieClient,
    TessieError,
    VehicleSnapshot,
    apply_demo_terms,
    compute_lease_stats,
    demo_snapshot,
    load_config_or_default,
    merge_config,
    update_config,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_signed_miles(miles: float, over: bool) -> str:
    """Format a variance as '1,234 mi over' / '1,234 mi under'."""
    word = "over" if over else "under"
    return f"{abs(round(miles)):,} mi {word}"


def format_pct(pct: float) -> str:
    return f"{round(pct)}%"


def format_temp(fahrenheit: Optional[int]) -> str:
    return f"{fahrenheit}°F" if fahrenheit is not None else "--"


def format_flag(value: Optional[bool], on: str, off: str) -> str:
    if value is None:
        return "-"
    return on if value else off


def progress_bar(pct: float, width: int = 40, fill: str = "#") -> str:
    """Fixed-width text bar for a 0-100 percentage."""
    filled = int(round(min(100, max(0, pct)) / 100 * width))
    return "[" + fill * filled + "." * (width - filled) + "]"


def parse_as_of(value: Optional[str]) -> datetime:
    """
    Parse --as-of (YYYY-MM-DD or ISO datetime); default is now.

    Values with a UTC offset are converted to naive local time.
    """
    if not value:
        return datetime.now()
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


# =============================================================================
# Tables
# =============================================================================

LOW_BATTERY_PCT = 20


def make_lease_table(stats: LeaseStats) -> List[List[str]]:
    """Convert lease stats to label/value/detail rows."""
    return [
        ["Current Odometer", format_miles(stats.current_odo), "Total vehicle miles"],
        ["Driven", format_miles(stats.actual_driven), "Since lease start"],
        [
            "Allowed to Date",
            format_miles(stats.expected_mileage),
            f"@ {round(stats.monthly_allowance)} mi/month",
        ],
        [
            "Lease Consumed",
            format_pct(stats.pct_time_elapsed),
            f"{round(stats.days_remaining)} days left",
        ],
        [
            "Projected End",
            format_miles(stats.projected_total),
            format_signed_miles(stats.projected_variance, stats.is_projected_over),
        ],
    ]


def make_vehicle_table(vehicle: VehicleSnapshot) -> List[List[str]]:
    """Convert vehicle telemetry to label/value/detail rows."""
    battery = f"{vehicle.battery_level}%" if vehicle.battery_level is not None else "--%"
    battery_detail = vehicle.charging_state
    low = vehicle.battery_level is not None and vehicle.battery_level < LOW_BATTERY_PCT
    if low and not vehicle.is_charging:
        battery_detail = f"{vehicle.charging_state} - Plug In Soon"
    ideal_range = f"{vehicle.ideal_range} mi" if vehicle.ideal_range is not None else "-- mi"
    location = (
        f"{vehicle.latitude:.4f}, {vehicle.longitude:.4f}"
        if vehicle.has_location
        else "Location data is currently unavailable."
    )
    return [
        ["Outside Temp", format_temp(vehicle.outside_temp_f), "Local Weather"],
        ["Inside Temp", format_temp(vehicle.inside_temp_f), "Cabin Climate"],
        ["Battery Level", battery, battery_detail],
        ["Ideal Range", ideal_range, "Estimated Distance"],
        [
            "Car Status",
            format_flag(vehicle.is_locked, "Locked", "UNLOCKED"),
            format_flag(vehicle.is_locked, "Secure", "Check Doors!"),
        ],
        [
            "Sentry Mode",
            format_flag(vehicle.sentry_mode, "ACTIVE", "Inactive"),
            format_flag(vehicle.sentry_mode, "Monitoring", "Needs Activation"),
        ],
        ["Location", location, ""],
    ]


# =============================================================================
# Report
# =============================================================================


def print_report(
    config: LeaseConfig,
    stats: LeaseStats,
    vehicle: Optional[VehicleSnapshot] = None,
    as_json: bool = False,
) -> None:
    """Print the lease standing, with the vehicle panel when one is given."""
    if as_json:
        print(json.dumps(stats.to_dict(), indent=2))
        return

    if vehicle is not None:
        print(f"Vehicle: {vehicle.name}")
        print(f"VIN: {vehicle.masked_vin}")
        print()

    headline = "Mileage Deficit (Over Limit)" if stats.is_over else "Mileage Buffer (Savings)"
    print(f"{stats.pace.label}: {headline}")
    print(
        f"  {abs(round(stats.variance)):,} mi {'more' if stats.is_over else 'less'} "
        f"than expected for {stats.total_months_allowed} full months of your lease."
    )
    print()

    print(tabulate(make_lease_table(stats), tablefmt="simple"))
    print()

    if vehicle is not None:
        print(tabulate(make_vehicle_table(vehicle), tablefmt="simple"))
        print()

    print(f"Target: {config.total_miles:,.0f} mi / {config.lease_months} mo")
    print(f"  Time   {progress_bar(stats.pct_time_elapsed)}")
    print(f"  Miles  {progress_bar(stats.pct_miles_used(config.total_miles))}")


# =============================================================================
# Commands
# =============================================================================


def cmd_status(args):
    """Show lease standing for an odometer reading."""
    config = load_config_or_default(args.config_file)
    odometer = args.odometer if args.odometer is not None else config.start_odometer
    stats = compute_lease_stats(config, odometer, parse_as_of(args.as_of))
    print_report(config, stats, as_json=args.json)
    return 0


def cmd_sync(args):
    """Read the odometer from Tessie and show lease standing."""
    config = load_config_or_default(args.config_file)
    client = TessieClient(config.api_token, config.vin)
    try:
        vehicle = client.fetch_snapshot()
    except TessieError as e:
        print(f"Error: {e}")
        return 1
    if client.warning:
        print(f"Warning: {client.warning}", file=sys.stderr)

    stats = compute_lease_stats(config, vehicle.odometer, parse_as_of(args.as_of))
    print_report(config, stats, vehicle, as_json=args.json)
    return 0


def cmd_demo(args):
    """Show lease standing for the built-in demo vehicle."""
    config = apply_demo_terms(load_config_or_default(args.config_file))
    vehicle = demo_snapshot()
    stats = compute_lease_stats(config, vehicle.odometer, parse_as_of(args.as_of))
    print_report(config, stats, vehicle, as_json=args.json)
    return 0


def cmd_configure(args):
    """Create or update the lease config file."""
    changes = dict(
        start_date=args.start_date,
        lease_months=args.months,
        total_miles=args.miles,
        start_odometer=args.start_odometer,
        api_token=args.token,
        vin=args.vin,
    )
    if args.dry_run:
        updated = merge_config(load_config_or_default(args.config_file), **changes)
    else:
        updated = update_config(args.config_file, **changes)

    print(f"Lease config for {args.config_file}:")
    print(f"  Start date:     {updated.start_date.isoformat()}")
    print(f"  Duration:       {updated.lease_months} months")
    print(f"  Mile limit:     {updated.total_miles:,.0f}")
    print(f"  Start odometer: {updated.start_odometer:,.0f}")
    print(f"  VIN:            {updated.vin or '-'}")
    print(f"  API token:      {'set' if updated.api_token else 'not set'}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
    else:
        print("Config saved.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lease mileage tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s lease.yaml configure --start-date 2025-07-01 --months 24 --miles 30000
  %(prog)s lease.yaml status --odometer 5034
  %(prog)s lease.yaml status --odometer 5034 --as-of 2025-12-31 --json
  %(prog)s lease.yaml sync
  %(prog)s lease.yaml demo
""",
    )
    parser.add_argument(
        "config_file",
        type=Path,
        help="Path to lease YAML file (defaults are used if it does not exist)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log sync and config activity",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show lease standing for an odometer reading"
    )
    status_parser.add_argument(
        "--odometer",
        type=float,
        help="Current odometer (default: starting odometer)",
    )

    # Sync subcommand
    sync_parser = subparsers.add_parser(
        "sync", help="Read the odometer from Tessie and show lease standing"
    )

    # Demo subcommand
    demo_parser = subparsers.add_parser(
        "demo", help="Show lease standing for the built-in demo vehicle"
    )

    for report_parser in (status_parser, sync_parser, demo_parser):
        report_parser.add_argument(
            "--as-of",
            type=str,
            help="Reference date in YYYY-MM-DD format (default: now)",
        )
        report_parser.add_argument(
            "--json",
            action="store_true",
            help="Print the lease stats as JSON",
        )

    # Configure subcommand
    configure_parser = subparsers.add_parser(
        "configure", help="Create or update the lease config file"
    )
    configure_parser.add_argument(
        "--start-date",
        type=date.fromisoformat,
        help="Lease start date in YYYY-MM-DD format",
    )
    configure_parser.add_argument(
        "--months",
        type=int,
        help="Lease duration in months",
    )
    configure_parser.add_argument(
        "--miles",
        type=float,
        help="Total mile limit for the lease",
    )
    configure_parser.add_argument(
        "--start-odometer",
        type=float,
        help="Odometer reading at lease start",
    )
    configure_parser.add_argument(
        "--token",
        type=str,
        help="Tessie API token",
    )
    configure_parser.add_argument(
        "--vin",
        type=str,
        help="VIN to sync (default: first vehicle on the account)",
    )
    configure_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the resulting config without saving",
    )

    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    handlers = {
        "status": cmd_status,
        "sync": cmd_sync,
        "demo": cmd_demo,
        "configure": cmd_configure,
    }
    try:
        return handlers[args.command](args)
    except ValueError as e:
        # LeaseConfigError, or an unparsable --as-of
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
