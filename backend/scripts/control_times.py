#!/usr/bin/env python3
"""CLI script for printing control opening and closing times.

Usage:
    # 200 km brevet starting 08:00 with three controls
    python backend/scripts/control_times.py --distance 200 \
        --start "2026-05-01 08:00" \
        --control "Start:0" --control "Uxbridge:62.4" --control "Finish:202.3"

    # Overall limit only
    python backend/scripts/control_times.py --distance 600 --type brevet
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add backend directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from randonneurs.features.brevets import (
    compute_control_times,
    nominal_distance,
    total_allowable_time,
)
from randonneurs.features.control_cards.generator import order_controls
from randonneurs.features.events.schemas import ControlInput
from randonneurs.shared.constants import EventType
from randonneurs.shared.errors import DomainError
from randonneurs.shared.formatters import format_control_time, format_hm


def parse_control(value: str) -> ControlInput:
    """'Uxbridge:62.4' -> ControlInput(name='Uxbridge', distance_km=62.4)"""
    name, sep, km = value.rpartition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected NAME:KM, got {value!r}")
    try:
        return ControlInput(name=name.strip() or "Control", distance_km=float(km))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid control {value!r}: {e}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Brevet control times")
    parser.add_argument("--distance", type=float, required=True, help="Route distance in km")
    parser.add_argument(
        "--type",
        default=EventType.BREVET.value,
        choices=[t.value for t in EventType],
        help="Event type",
    )
    parser.add_argument(
        "--start",
        default=None,
        help='Start as "YYYY-MM-DD HH:MM" (default: today 08:00)',
    )
    parser.add_argument(
        "--control",
        action="append",
        type=parse_control,
        default=[],
        help="Control as NAME:KM (repeatable)",
    )

    args = parser.parse_args()

    if args.start:
        try:
            start = datetime.strptime(args.start, "%Y-%m-%d %H:%M")
        except ValueError:
            parser.error(f"Invalid --start: {args.start!r}")
    else:
        start = datetime.combine(datetime.now().date(), datetime.strptime("08:00", "%H:%M").time())

    try:
        total = total_allowable_time(args.distance, args.type)
        controls = order_controls(args.control)
    except DomainError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(f"\n=== {args.distance:g} km {args.type} (nominal {nominal_distance(args.distance)}) ===")
    print(f"Start:      {format_control_time(start)}")
    print(f"Time limit: {format_hm(total.total_minutes)}")

    if not controls:
        return

    print()
    print(f"  {'Control':<28s} {'km':>7s}  {'Opens':>9s}  {'Closes':>9s}")
    for control in controls:
        times = compute_control_times(start, control.distance_km, args.distance, args.type)
        print(
            f"  {control.name[:28]:<28s} {control.distance_km:7.1f}  "
            f"{format_control_time(times.open_at):>9s}  {format_control_time(times.close_at):>9s}"
        )


if __name__ == "__main__":
    main()
