"""Run one reconciliation pass outside the scheduler.

Usage: python scripts/sync_once.py [YYYY-MM-DD]
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.canteen_attendance.canteen_attendance.common.validators import optional_iso_date
from src.canteen_attendance.canteen_attendance.container import build_container
from src.canteen_attendance.canteen_attendance.main import configure_logging


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=settings.DB_CONFIG,
        essl_config=settings.ESSL_CONFIG,
        timezone=getattr(settings, "TIMEZONE", "Asia/Kolkata"),
    )
    day = optional_iso_date(sys.argv[1] if len(sys.argv) > 1 else None)
    report = container.sync_service.run(day)
    print(json.dumps(report.as_dict(), indent=2))
    if report.failed_sites:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
