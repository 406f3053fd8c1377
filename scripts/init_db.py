"""Create the canteen database and apply database/schema.sql.

Usage: python scripts/init_db.py
Safe to re-run: every table is CREATE TABLE IF NOT EXISTS.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.canteen_attendance.canteen_attendance.database.bootstrap import apply_schema, list_tables

# Directory tables first (foreign-key targets), then the registry and entries.
CANTEEN_TABLES = ("plants", "employees", "employee_photos", "device_locations", "canteen_entries")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    statements = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    present = set(list_tables(db_config))

    for table in CANTEEN_TABLES:
        print(f"  {'ok' if table in present else 'MISSING':7} {table}")

    missing = [t for t in CANTEEN_TABLES if t not in present]
    if missing:
        raise SystemExit(f"Schema incomplete on {target}: missing {', '.join(missing)}")
    print(f"OK: canteen schema ready on {target} ({statements} statements applied)")


if __name__ == "__main__":
    main()
