#!/usr/bin/env python3
"""CLI script for running one event lifecycle check.

Completes scheduled events past their closing time and creates pending
results, exactly like the scheduled HTTP trigger.

Usage:
    python backend/scripts/run_lifecycle_check.py

    # Pretend it is a given club-local time
    python backend/scripts/run_lifecycle_check.py --now "2026-05-01 22:00"

Exit code is 1 if any event or rider failed.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add backend directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from randonneurs.config import settings
from randonneurs.db.session import AsyncSessionLocal, init_db
from randonneurs.features.events.lifecycle import LifecycleService
from randonneurs.shared.errors import DomainError, PartialBatchFailure


async def run(now: datetime | None) -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        report = await LifecycleService(db).run_periodic_check(now)

    print(f"Checked:   {report.checked}")
    print(f"Completed: {report.completed}")
    for event in report.completed_events:
        print(
            f"  {event.name}: {event.results_created} result(s), "
            f"{event.emails_sent} email(s)"
        )
    if report.errors:
        raise PartialBatchFailure(report.error_messages)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one event lifecycle check")
    parser.add_argument("--now", help='Club-local time "YYYY-MM-DD HH:MM" (default: now)')
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    now = None
    if args.now:
        try:
            now = datetime.strptime(args.now, "%Y-%m-%d %H:%M")
        except ValueError:
            parser.error(f"Invalid --now: {args.now!r}")

    try:
        asyncio.run(run(now))
    except PartialBatchFailure as e:
        print(f"\n{e.message}:")
        for error in e.errors:
            print(f"  {error}")
        sys.exit(1)
    except DomainError as e:
        print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
