#!/usr/bin/env python3
"""
Mark booked/confirmed shifts whose date has passed as completed.
Meant to run once a day from cron or a scheduler.

Usage:
    python complete_past_bookings.py [YYYY-MM-DD]

The optional date is "today"; bookings strictly before it are completed.
"""

import logging
import sys
from datetime import date
from pathlib import Path

api_dir = Path(__file__).parent / "apps" / "api"
sys.path.insert(0, str(api_dir))

from shiftbook.core.config import settings
from shiftbook.core.database import SessionLocal
from shiftbook.core.errors import TransientStoreError
from shiftbook.services.booking_ledger import complete_past_bookings


def main(argv) -> int:
    logging.basicConfig(level=settings.log_level.upper())

    try:
        today = date.fromisoformat(argv[1]) if len(argv) > 1 else date.today()
    except ValueError:
        print("❌ Date must be YYYY-MM-DD")
        return 1

    db = SessionLocal()
    try:
        count = complete_past_bookings(db, today=today)
    except TransientStoreError as e:
        # safe to rerun
        print(f"❌ {e.detail}")
        return 2
    finally:
        db.close()

    print(f"✅ {count} booking(s) marked completed (before {today.isoformat()})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
