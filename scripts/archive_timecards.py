"""Archive approved/rejected timecards older than the retention window.

Meant for a nightly cron job. Archived groups stay in the database for export.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timecard_ledger.timecard_ledger.common.datetime_utils import parse_iso_date
from src.timecard_ledger.timecard_ledger.container import build_container


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--as-of", default=None, help="YYYY-MM-DD, defaults to today")
    parser.add_argument("--retention-days", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        week_start=getattr(settings, "WEEK_START", "monday"),
        worker_timezone=getattr(settings, "WORKER_TIMEZONE", "UTC"),
        retention_days=int(getattr(settings, "RETENTION_DAYS", 90)),
    )

    as_of = parse_iso_date(args.as_of) if args.as_of else date.today()
    retention = args.retention_days if args.retention_days is not None else container.retention_days
    archived = container.approval_service.archive(as_of, retention)
    print(f"OK: Archived {len(archived)} timecard groups (as_of={as_of}, retention={retention}d)")


if __name__ == "__main__":
    main()
